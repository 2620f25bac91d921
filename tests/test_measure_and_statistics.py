"""
Unit tests for MEASURE_WALLS and AGGREGATE_STATISTICS.
"""

import unittest
from unittest.mock import Mock

from wallscan.config import DetectionConfig
from wallscan.models import ClassifiedWall, Orientation, ScaleInfo, WallSegment
from wallscan.pipeline.processors.statistics_processor import StatisticsProcessor, aggregate, total_area
from wallscan.pipeline.processors.wall_measure_processor import measure
from wallscan.wall_types import WallType


def v_seg(y1, y2, x, thickness):
    return WallSegment(orientation=Orientation.VERTICAL, x1=x, y1=y1, x2=x, y2=y2, thickness_px=thickness)


def h_seg(x1, x2, y, thickness):
    return WallSegment(orientation=Orientation.HORIZONTAL, x1=x1, y1=y, x2=x2, y2=y, thickness_px=thickness)


def classified(wall_type, *segments):
    avg = sum(s.thickness_px for s in segments) / len(segments)
    return ClassifiedWall(segments=tuple(segments), wall_type=wall_type, avg_thickness_px=avg)


SCALE_1_100 = ScaleInfo(ratio_label="1:100", pixels_per_meter=300)
SCALE_1_200 = ScaleInfo(ratio_label="1:200", pixels_per_meter=150)


class TestMeasure(unittest.TestCase):

    def test_single_segment(self):
        result = measure(classified(WallType.INSULATED, v_seg(100, 500, 100, 30)), SCALE_1_100)
        self.assertAlmostEqual(result.length_meters, 400 / 300)
        self.assertAlmostEqual(result.thickness_meters, 0.1)
        self.assertAlmostEqual(result.area_square_meters, 400 / 300 * 0.1)
        self.assertEqual(result.length_px, 400)
        self.assertEqual(result.wall_type, WallType.INSULATED)

    def test_length_sums_segments_of_both_orientations(self):
        wall = classified(WallType.EXTERIOR, h_seg(0, 300, 10, 20), v_seg(0, 150, 10, 20))
        result = measure(wall, SCALE_1_100)
        self.assertAlmostEqual(result.length_meters, 1.5)
        self.assertAlmostEqual(result.area_square_meters, 1.5 * 20 / 300)

    def test_halving_scale_quadruples_area(self):
        wall = classified(WallType.LOAD_BEARING, h_seg(0, 600, 10, 18))
        fine = measure(wall, SCALE_1_100)
        coarse = measure(wall, SCALE_1_200)
        self.assertAlmostEqual(coarse.length_meters, 2 * fine.length_meters)
        self.assertAlmostEqual(coarse.thickness_meters, 2 * fine.thickness_meters)
        self.assertAlmostEqual(coarse.area_square_meters, 4 * fine.area_square_meters)

    def test_segments_are_retained_for_rendering(self):
        seg = v_seg(100, 500, 100, 30)
        self.assertEqual(measure(classified(WallType.INSULATED, seg), SCALE_1_100).segments, (seg,))


class TestAggregate(unittest.TestCase):

    def setUp(self):
        self.walls = [
            measure(classified(WallType.INSULATED, v_seg(100, 500, 100, 30)), SCALE_1_100),
            measure(classified(WallType.INSULATED, v_seg(100, 400, 300, 27)), SCALE_1_100),
            measure(classified(WallType.PARTITION, h_seg(0, 300, 200, 10)), SCALE_1_100),
        ]

    def test_empty_input_yields_zeroed_entry_per_type(self):
        statistics = aggregate([])
        self.assertEqual(set(statistics), set(WallType))
        for stats in statistics.values():
            self.assertEqual(stats.count, 0)
            self.assertEqual(stats.total_length_meters, 0)
            self.assertEqual(stats.total_area_square_meters, 0)
            self.assertEqual(stats.avg_thickness_meters, 0)

    def test_groups_by_type(self):
        statistics = aggregate(self.walls)
        insulated = statistics[WallType.INSULATED]
        self.assertEqual(insulated.count, 2)
        self.assertAlmostEqual(insulated.total_length_meters, 700 / 300)
        self.assertAlmostEqual(insulated.avg_thickness_meters, (0.1 + 0.09) / 2)
        self.assertEqual(statistics[WallType.PARTITION].count, 1)
        self.assertEqual(statistics[WallType.EXTERIOR].count, 0)

    def test_area_totals_match_walls(self):
        statistics = aggregate(self.walls)
        self.assertAlmostEqual(total_area(statistics), sum(w.area_square_meters for w in self.walls))
        insulated_area = sum(w.area_square_meters for w in self.walls if w.wall_type == WallType.INSULATED)
        self.assertAlmostEqual(statistics[WallType.INSULATED].total_area_square_meters, insulated_area)

    def test_catalog_metadata(self):
        stats = aggregate([])[WallType.LOAD_BEARING]
        self.assertEqual(stats.din_code, "341")
        self.assertIn("Load-bearing", stats.display_name)

    def test_processor(self):
        processor = StatisticsProcessor(job_id="test", config=DetectionConfig())
        processor.log_info = Mock()
        result = processor.process({"measure_walls_results": {"walls": self.walls}})
        self.assertEqual(result["totals"]["wall_count"], 3)
        self.assertEqual(result["statistics"][WallType.INSULATED].count, 2)


if __name__ == "__main__":
    unittest.main()
