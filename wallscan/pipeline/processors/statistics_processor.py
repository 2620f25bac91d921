"""
AGGREGATE_STATISTICS processor - per wall type totals for the tender report.
"""

import time
from typing import Dict, Any, List

from .base_processor import BaseProcessor
from ...models import MeasuredWall, WallTypeStatistics
from ...wall_types import WallType


def aggregate(walls: List[MeasuredWall]) -> Dict[WallType, WallTypeStatistics]:
    """
    Count, total length, total area and mean thickness per wall type.

    Every WallType is present in the result; types without walls are zeroed.
    """
    grouped: Dict[WallType, List[MeasuredWall]] = {wall_type: [] for wall_type in WallType}
    for wall in walls:
        grouped[wall.wall_type].append(wall)

    statistics = {}
    for wall_type, members in grouped.items():
        count = len(members)
        statistics[wall_type] = WallTypeStatistics(
            wall_type=wall_type,
            count=count,
            total_length_meters=sum(w.length_meters for w in members),
            total_area_square_meters=sum(w.area_square_meters for w in members),
            avg_thickness_meters=sum(w.thickness_meters for w in members) / count if count else 0.0,
        )
    return statistics


def total_area(statistics: Dict[WallType, WallTypeStatistics]) -> float:
    return sum(stats.total_area_square_meters for stats in statistics.values())


class StatisticsProcessor(BaseProcessor):
    """AGGREGATE_STATISTICS: roll measured walls up by type."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting statistics aggregation")
        start_time = time.time()

        walls = pipeline_data["measure_walls_results"]["walls"]
        statistics = aggregate(walls)
        area = total_area(statistics)

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            wall_count=len(walls),
            total_area_m2=area,
        )
        self.log_info(
            "Statistics aggregation completed",
            wall_count=len(walls),
            counts={t.value: s.count for t, s in statistics.items()},
            total_area_m2=round(area, 3),
            duration_ms=duration_ms,
        )
        return {
            "statistics": statistics,
            "totals": {"wall_count": len(walls), "total_area_m2": area},
        }
