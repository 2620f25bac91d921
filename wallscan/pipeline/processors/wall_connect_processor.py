"""
CONNECT_WALLS processor - group segments into connected walls.

Two segments are connected when any of their four end pairings lies within
connect_endpoint_gap_px. An end is the cap across the stroke at that end of
the segment (the anchor point for a zero-thickness segment), so a corner
joins whichever side of the plan it sits on. Walls are the connected
components of that relation over horizontal and vertical segments together.
Uses Shapely 2.x STRtree (dwithin) to find candidate end pairs; each
candidate is confirmed with an exact distance.
"""

import time
from typing import Dict, Any, List

from shapely.geometry import LineString, Point
from shapely.strtree import STRtree

from .base_processor import BaseProcessor
from .detection_constants import CONNECT_ENDPOINT_GAP_PX, CONNECT_QUERY_EPS_PX
from ...models import ConnectedWall, Orientation, WallSegment


def _find(parent: List[int], i: int) -> int:
    root = i
    while parent[root] != root:
        root = parent[root]
    while parent[i] != root:
        parent[i], i = root, parent[i]
    return root


def _union(parent: List[int], a: int, b: int) -> None:
    root_a, root_b = _find(parent, a), _find(parent, b)
    if root_a == root_b:
        return
    # Lower index stays root so component order follows input order
    if root_a < root_b:
        parent[root_b] = root_a
    else:
        parent[root_a] = root_b


def end_caps(segment: WallSegment) -> List[Any]:
    """Start and end cap of the stroke as Shapely geometries."""
    caps = []
    for x, y in segment.endpoints():
        if segment.thickness_px == 0:
            caps.append(Point(x, y))
        elif segment.orientation == Orientation.HORIZONTAL:
            caps.append(LineString([(x, y), (x, y + segment.thickness_px)]))
        else:
            caps.append(LineString([(x, y), (x + segment.thickness_px, y)]))
    return caps


def connect(segments: List[WallSegment], max_gap: float = CONNECT_ENDPOINT_GAP_PX) -> List[ConnectedWall]:
    """
    Connected components of the end-proximity relation.

    Every segment lands in exactly one wall; walls are ordered by their first
    segment and keep input order internally.
    """
    if not segments:
        return []

    # Cap k belongs to segment k // 2
    caps = []
    for segment in segments:
        caps.extend(end_caps(segment))

    tree = STRtree(caps)
    query_idx, tree_idx = tree.query(
        caps, predicate="dwithin", distance=max_gap + CONNECT_QUERY_EPS_PX
    )

    parent = list(range(len(segments)))
    for a, b in zip(query_idx.tolist(), tree_idx.tolist()):
        seg_a, seg_b = a // 2, b // 2
        if seg_a == seg_b:
            continue
        if caps[a].distance(caps[b]) <= max_gap:
            _union(parent, seg_a, seg_b)

    groups: Dict[int, List[WallSegment]] = {}
    for i, segment in enumerate(segments):
        groups.setdefault(_find(parent, i), []).append(segment)
    return [ConnectedWall(segments=tuple(group)) for group in groups.values()]


class WallConnectProcessor(BaseProcessor):
    """CONNECT_WALLS: union-find over stroke end proximity."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting wall connection")
        start_time = time.time()

        segments = pipeline_data["merge_segments_results"]["segments"]
        walls = connect(segments, self.config.connect_endpoint_gap_px)

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            input_segments=len(segments),
            connected_walls=len(walls),
        )
        self.log_info(
            "Wall connection completed",
            input_segments=len(segments),
            connected_walls=len(walls),
            duration_ms=duration_ms,
        )
        return {
            "walls": walls,
            "algorithm_config": {"endpoint_gap_px": self.config.connect_endpoint_gap_px},
            "totals": {"input_segments": len(segments), "connected_walls": len(walls)},
        }
