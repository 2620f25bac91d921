"""
MERGE_SEGMENTS processor - coalesce collinear segments of one orientation.

Two segments merge when their cross-axis coordinates and thicknesses are
within tolerance and their along-axis extents overlap or leave a gap no
larger than merge_gap_tol_px. The merged segment spans the union of both
extents, keeps the first segment's cross-axis coordinate, and averages the
two thicknesses.

A single greedy pass can leave mergeable pairs behind (an extended segment
may now reach one it was already compared against), so passes repeat until
one completes without a merge. The result is closed under merging: feeding
it back in returns it unchanged.
"""

import time
from typing import Dict, Any, List, Tuple

from .base_processor import BaseProcessor
from ...config import DetectionConfig
from ...models import Orientation, WallSegment


def _along_gap(a: WallSegment, b: WallSegment) -> int:
    """Gap between along-axis extents; negative when they overlap."""
    return max(a.start, b.start) - min(a.end, b.end)


def can_merge(a: WallSegment, b: WallSegment, config: DetectionConfig) -> bool:
    if a.orientation != b.orientation:
        return False
    if abs(a.cross - b.cross) > config.merge_cross_axis_tol_px:
        return False
    if abs(a.thickness_px - b.thickness_px) > config.merge_thickness_tol_px:
        return False
    return _along_gap(a, b) <= config.merge_gap_tol_px


def combine(a: WallSegment, b: WallSegment) -> WallSegment:
    start = min(a.start, b.start)
    end = max(a.end, b.end)
    thickness = (a.thickness_px + b.thickness_px) / 2
    if a.orientation == Orientation.HORIZONTAL:
        return WallSegment(
            orientation=a.orientation,
            x1=start, y1=a.y1, x2=end, y2=a.y1,
            thickness_px=thickness,
        )
    return WallSegment(
        orientation=a.orientation,
        x1=a.x1, y1=start, x2=a.x1, y2=end,
        thickness_px=thickness,
    )


def _merge_pass(segments: List[WallSegment], config: DetectionConfig) -> Tuple[List[WallSegment], int]:
    merged: List[WallSegment] = []
    used = [False] * len(segments)
    merges = 0
    for i, segment in enumerate(segments):
        if used[i]:
            continue
        current = segment
        for j in range(i + 1, len(segments)):
            if used[j]:
                continue
            if can_merge(current, segments[j], config):
                current = combine(current, segments[j])
                used[j] = True
                merges += 1
        merged.append(current)
    return merged, merges


def merge(segments: List[WallSegment], orientation: Orientation, config: DetectionConfig) -> List[WallSegment]:
    """Merge segments of the given orientation to a fixed point. Others are ignored."""
    result = [s for s in segments if s.orientation == orientation]
    while True:
        result, merges = _merge_pass(result, config)
        if merges == 0:
            return result


class SegmentMergeProcessor(BaseProcessor):
    """MERGE_SEGMENTS: per-orientation fixed-point merge."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting segment merge")
        start_time = time.time()

        segments = pipeline_data["scan_segments_results"]["segments"]
        horizontal = merge(segments, Orientation.HORIZONTAL, self.config)
        vertical = merge(segments, Orientation.VERTICAL, self.config)
        merged = horizontal + vertical

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            input_segments=len(segments),
            merged_segments=len(merged),
        )
        self.log_info(
            "Segment merge completed",
            input_segments=len(segments),
            horizontal_segments=len(horizontal),
            vertical_segments=len(vertical),
            duration_ms=duration_ms,
        )
        return {
            "segments": merged,
            "algorithm_config": {
                "cross_axis_tol_px": self.config.merge_cross_axis_tol_px,
                "thickness_tol_px": self.config.merge_thickness_tol_px,
                "gap_tol_px": self.config.merge_gap_tol_px,
            },
            "totals": {
                "input_segments": len(segments),
                "horizontal_segments": len(horizontal),
                "vertical_segments": len(vertical),
                "merged_segments": len(merged),
            },
        }
