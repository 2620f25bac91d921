"""
CLASSIFY_WALLS processor - assign a construction type to each wall.

The decision uses only the wall's mean segment thickness and whether it lies
near the image border (the proxy for an exterior wall). First match wins:

    on perimeter and thickness >= exterior_min_px   -> exterior
    thickness >= insulated_min_px                   -> insulated
    thickness >= load_bearing_min_px                -> load_bearing
    thickness <= drywall_max_px                     -> drywall
    otherwise                                       -> partition
"""

import time
from collections import Counter
from typing import Dict, Any, Optional

from .base_processor import BaseProcessor
from ...config import ClassificationThresholds, DetectionConfig
from ...models import ClassifiedWall, ConnectedWall
from ...wall_types import WallType


def is_on_perimeter(wall: ConnectedWall, width: int, height: int, margin: int) -> bool:
    """True if any segment's stroke lies within margin px of a buffer edge."""
    for segment in wall.segments:
        left, top, right, bottom = segment.footprint()
        if (
            left <= margin
            or top <= margin
            or right >= width - margin
            or bottom >= height - margin
        ):
            return True
    return False


def classify_thickness(
    avg_thickness: float,
    on_perimeter: bool,
    thresholds: Optional[ClassificationThresholds] = None,
) -> WallType:
    thresholds = thresholds or ClassificationThresholds()
    if on_perimeter and avg_thickness >= thresholds.exterior_min_px:
        return WallType.EXTERIOR
    if avg_thickness >= thresholds.insulated_min_px:
        return WallType.INSULATED
    if avg_thickness >= thresholds.load_bearing_min_px:
        return WallType.LOAD_BEARING
    if avg_thickness <= thresholds.drywall_max_px:
        return WallType.DRYWALL
    return WallType.PARTITION


def classify(wall: ConnectedWall, width: int, height: int, config: Optional[DetectionConfig] = None) -> WallType:
    thresholds = (config or DetectionConfig()).classification
    on_perimeter = is_on_perimeter(wall, width, height, thresholds.perimeter_margin_px)
    return classify_thickness(wall.mean_segment_thickness_px(), on_perimeter, thresholds)


def to_classified(wall: ConnectedWall, width: int, height: int, config: DetectionConfig) -> ClassifiedWall:
    return ClassifiedWall(
        segments=wall.segments,
        wall_type=classify(wall, width, height, config),
        avg_thickness_px=wall.mean_segment_thickness_px(),
    )


class WallClassifyProcessor(BaseProcessor):
    """CLASSIFY_WALLS: thickness and perimeter heuristics."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting wall classification")
        start_time = time.time()

        buffer = pipeline_data["binarize_results"]["buffer"]
        walls = pipeline_data["connect_walls_results"]["walls"]
        classified = [to_classified(w, buffer.width, buffer.height, self.config) for w in walls]
        type_counts = Counter(w.wall_type.value for w in classified)

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            classified_walls=len(classified),
            type_counts=dict(type_counts),
        )
        self.log_info(
            "Wall classification completed",
            classified_walls=len(classified),
            type_counts=dict(type_counts),
            duration_ms=duration_ms,
        )
        return {
            "walls": classified,
            "algorithm_config": self.config.classification.model_dump(),
            "totals": {"classified_walls": len(classified), "type_counts": dict(type_counts)},
        }
