"""
SCAN_SEGMENTS processor - candidate wall segments from row/column scans.

Horizontal pass: every scan_step_px-th row is split into dark runs; runs of at
least min_run_length_px are probed downward/upward to measure the stroke's
thickness. Vertical pass is the transpose (columns, probed left/right).

The probe measures the whole dark cross-section through the run pixel,
looking at most max_thickness_px either side, and anchors the segment on the
stroke's leading edge (top or left). Parallel sample lines through one thick
stroke therefore yield identical segments, which are deduplicated. A
cross-section longer than max_thickness_px runs along a wall, not across it.
The midpoint is probed first; when a perpendicular wall meets the run there,
the quartile and eighth points are tried as well, and the thinnest valid
cross-section wins. A run is rejected only when no probe point is valid.
The probe stops at the buffer boundary.
"""

import time
from typing import Callable, Dict, Any, List, Optional, Tuple

import numpy as np

from .base_processor import BaseProcessor
from .detection_constants import PROBE_FRACTIONS
from .raster_utils import find_dark_runs
from ...config import DetectionConfig
from ...models import Orientation, PixelBuffer, WallSegment


def probe_thickness(line: np.ndarray, index: int, max_thickness: int) -> Tuple[int, int]:
    """
    Dark stroke cross-section through line[index].

    Returns (edge, thickness) where edge is the first dark index of the
    stroke. Only max_thickness pixels either side are inspected, so a stroke
    longer than that reports thickness > max_thickness.
    """
    if not line[index]:
        return index, 0
    lo = max(0, index - max_thickness)
    hi = min(line.size, index + max_thickness + 1)
    window = line[lo:hi]
    i = index - lo

    light_before = np.flatnonzero(~window[:i])
    edge = lo + (int(light_before[-1]) + 1 if light_before.size else 0)
    light_after = np.flatnonzero(~window[i:])
    stop = lo + i + (int(light_after[0]) if light_after.size else window.size - i)
    return edge, stop - edge


def probe_positions(start: int, end: int) -> List[int]:
    """Points along [start, end) to probe: midpoint, quartiles, then eighths."""
    length = end - start
    return list(dict.fromkeys(start + length * num // den for num, den in PROBE_FRACTIONS))


def _accept(run_length: int, thickness: int, config: DetectionConfig) -> bool:
    if not config.min_thickness_px <= thickness <= config.max_thickness_px:
        return False
    # A block shorter than it is thick belongs to the other scan direction
    if config.require_elongation and run_length < thickness:
        return False
    return True


def measure_run(start: int, end: int, config: DetectionConfig,
                cross_line: Callable[[int], Tuple[np.ndarray, int]]) -> Optional[Tuple[int, int]]:
    """
    Thinnest accepted (edge, thickness) over the probe points of one run.

    cross_line(position) returns the perpendicular line through the run at
    that position together with the run's index on it. Ties keep the
    earlier probe point.
    """
    best = None
    for position in probe_positions(start, end):
        line, index = cross_line(position)
        edge, thickness = probe_thickness(line, index, config.max_thickness_px)
        if not _accept(end - start, thickness, config):
            continue
        if best is None or thickness < best[1]:
            best = (edge, thickness)
    return best


def _dedupe(segments: List[WallSegment]) -> List[WallSegment]:
    return list(dict.fromkeys(segments))


def scan_horizontal(buffer: PixelBuffer, config: DetectionConfig) -> List[WallSegment]:
    """Row pass: horizontal segments, thickness measured vertically."""
    mask = buffer.mask
    segments = []
    for y in range(0, buffer.height, config.scan_step_px):
        for start, end in find_dark_runs(mask[y, :]):
            if end - start < config.min_run_length_px:
                continue
            measured = measure_run(start, end, config, lambda x, y=y: (mask[:, x], y))
            if measured is None:
                continue
            edge, thickness = measured
            segments.append(WallSegment(
                orientation=Orientation.HORIZONTAL,
                x1=start, y1=edge, x2=end, y2=edge,
                thickness_px=float(thickness),
            ))
    return _dedupe(segments)


def scan_vertical(buffer: PixelBuffer, config: DetectionConfig) -> List[WallSegment]:
    """Column pass: vertical segments, thickness measured horizontally."""
    mask = buffer.mask
    segments = []
    for x in range(0, buffer.width, config.scan_step_px):
        for start, end in find_dark_runs(mask[:, x]):
            if end - start < config.min_run_length_px:
                continue
            measured = measure_run(start, end, config, lambda y, x=x: (mask[y, :], x))
            if measured is None:
                continue
            edge, thickness = measured
            segments.append(WallSegment(
                orientation=Orientation.VERTICAL,
                x1=edge, y1=start, x2=edge, y2=end,
                thickness_px=float(thickness),
            ))
    return _dedupe(segments)


def scan(buffer: PixelBuffer, config: DetectionConfig) -> List[WallSegment]:
    """Both passes, horizontal segments first."""
    return scan_horizontal(buffer, config) + scan_vertical(buffer, config)


class SegmentScanProcessor(BaseProcessor):
    """SCAN_SEGMENTS: independent row and column passes over the binary mask."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting segment scan")
        start_time = time.time()

        buffer = pipeline_data["binarize_results"]["buffer"]
        horizontal = scan_horizontal(buffer, self.config)
        vertical = scan_vertical(buffer, self.config)

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            horizontal_segments=len(horizontal),
            vertical_segments=len(vertical),
        )
        self.log_info(
            "Segment scan completed",
            horizontal_segments=len(horizontal),
            vertical_segments=len(vertical),
            duration_ms=duration_ms,
        )
        return {
            "segments": horizontal + vertical,
            "algorithm_config": {
                "scan_step_px": self.config.scan_step_px,
                "min_run_length_px": self.config.min_run_length_px,
                "min_thickness_px": self.config.min_thickness_px,
                "max_thickness_px": self.config.max_thickness_px,
                "require_elongation": self.config.require_elongation,
            },
            "totals": {
                "horizontal_segments": len(horizontal),
                "vertical_segments": len(vertical),
                "segments": len(horizontal) + len(vertical),
            },
        }
