"""
MEASURE_WALLS processor - pixel geometry to meters.
"""

import time
from typing import Dict, Any

from .base_processor import BaseProcessor
from ...models import ClassifiedWall, MeasuredWall, ScaleInfo


def measure(wall: ClassifiedWall, scale: ScaleInfo) -> MeasuredWall:
    """Length is the sum of segment extents; area is length x mean thickness."""
    length_px = wall.total_segment_length_px()
    length_m = length_px / scale.pixels_per_meter
    thickness_m = wall.avg_thickness_px / scale.pixels_per_meter
    return MeasuredWall(
        segments=wall.segments,
        wall_type=wall.wall_type,
        avg_thickness_px=wall.avg_thickness_px,
        length_px=length_px,
        length_meters=length_m,
        thickness_meters=thickness_m,
        area_square_meters=length_m * thickness_m,
    )


class WallMeasureProcessor(BaseProcessor):
    """MEASURE_WALLS: apply the calibrated scale to every classified wall."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting wall measurement")
        start_time = time.time()

        scale = pipeline_data["calibrate_scale_results"]["scale"]
        walls = pipeline_data["classify_walls_results"]["walls"]
        measured = [measure(w, scale) for w in walls]
        total_length = sum(w.length_meters for w in measured)
        total_area = sum(w.area_square_meters for w in measured)

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            measured_walls=len(measured),
            total_length_m=total_length,
            total_area_m2=total_area,
        )
        self.log_info(
            "Wall measurement completed",
            measured_walls=len(measured),
            total_length_m=round(total_length, 3),
            total_area_m2=round(total_area, 3),
            duration_ms=duration_ms,
        )
        return {
            "walls": measured,
            "algorithm_config": {"pixels_per_meter": scale.pixels_per_meter},
            "totals": {
                "measured_walls": len(measured),
                "total_length_m": total_length,
                "total_area_m2": total_area,
            },
        }
