"""
Integration tests for the complete wall detection pipeline.
"""

import unittest

import numpy as np

from wallscan.errors import InvalidInputError
from wallscan.pipeline.pipeline_executor import PipelineExecutor, detect_walls, detect_walls_batch
from wallscan.wall_types import WallType


def white_plan(width, height):
    return np.full((height, width, 3), 255, dtype=np.uint8)


def draw_rect(image, x0, y0, x1, y1, value=0):
    image[y0:y1, x0:x1] = value
    return image


def framed_room():
    """400x300 plan: 20 px outer frame 10 px from the border plus a 10 px partition."""
    image = white_plan(400, 300)
    draw_rect(image, 10, 10, 390, 30)    # top
    draw_rect(image, 10, 270, 390, 290)  # bottom
    draw_rect(image, 10, 10, 30, 290)    # left
    draw_rect(image, 370, 10, 390, 290)  # right
    draw_rect(image, 120, 30, 130, 270)  # partition
    return image


class TestWallDetectionIntegration(unittest.TestCase):
    """End-to-end runs over synthetic plans."""

    def test_single_vertical_wall_at_1_100(self):
        image = draw_rect(white_plan(1000, 800), 100, 100, 130, 500)
        result = detect_walls(image, "1:100")

        self.assertEqual(result.scale.ratio_label, "1:100")
        self.assertEqual(result.scale.pixels_per_meter, 300)
        self.assertEqual(len(result.walls), 1)
        wall = result.walls[0]
        self.assertEqual(wall.wall_type, WallType.INSULATED)
        self.assertAlmostEqual(wall.length_meters, 1.3333, places=3)
        self.assertAlmostEqual(wall.thickness_meters, 0.1, places=9)
        self.assertAlmostEqual(wall.area_square_meters, 0.13333, places=4)
        self.assertEqual(result.statistics[WallType.INSULATED].count, 1)
        self.assertEqual((result.image_width, result.image_height), (1000, 800))

    def test_framed_room(self):
        result = detect_walls(framed_room())

        # Midline runs 20, 10, 20 px -> ~67 px/m -> nearest standard scale 1:500
        self.assertEqual(result.scale.ratio_label, "1:500")
        self.assertTrue(result.scale.is_estimated)

        self.assertEqual(len(result.walls), 2)
        exterior, partition = result.walls
        self.assertEqual(exterior.wall_type, WallType.EXTERIOR)
        self.assertEqual(len(exterior.segments), 4)
        self.assertEqual(exterior.length_px, 380 + 380 + 280 + 280)
        self.assertAlmostEqual(exterior.avg_thickness_px, 20)
        self.assertEqual(partition.wall_type, WallType.PARTITION)
        self.assertEqual(partition.avg_thickness_px, 10)

    def test_statistics_area_matches_walls(self):
        result = detect_walls(framed_room(), "1:100")
        wall_area = sum(w.area_square_meters for w in result.walls)
        stats_area = sum(s.total_area_square_meters for s in result.statistics.values())
        self.assertAlmostEqual(stats_area, wall_area)
        self.assertAlmostEqual(result.total_area_square_meters, wall_area)

    def test_blank_plan_has_no_walls(self):
        result = detect_walls(white_plan(300, 200))
        self.assertEqual(result.walls, [])
        self.assertEqual(set(result.statistics), set(WallType))
        self.assertTrue(all(s.count == 0 for s in result.statistics.values()))
        self.assertEqual(result.scale.source, "default")

    def test_invalid_input_stops_before_any_step_completes(self):
        completed = []
        executor = PipelineExecutor(progress_callback=lambda name, *_: completed.append(name))
        with self.assertRaises(InvalidInputError):
            executor.execute_pipeline(np.zeros((0, 0), dtype=np.uint8))
        self.assertEqual(completed, [])

    def test_progress_callback_sees_every_step_in_order(self):
        calls = []
        executor = PipelineExecutor(progress_callback=lambda *args: calls.append(args))
        result = executor.execute_pipeline(framed_room(), "1:100")
        self.assertEqual([c[0] for c in calls], [name for name, _ in PipelineExecutor.PIPELINE_STEPS])
        self.assertEqual([c[1] for c in calls], list(range(1, 9)))
        self.assertTrue(all(c[2] == 8 for c in calls))
        self.assertEqual(set(result.step_metrics), {name for name, _ in PipelineExecutor.PIPELINE_STEPS})

    def test_input_pixels_are_not_modified(self):
        image = framed_room()
        before = image.copy()
        detect_walls(image)
        np.testing.assert_array_equal(image, before)

    def test_export_dict_shape(self):
        export = detect_walls(framed_room(), "1:100").to_export_dict()
        self.assertEqual(export["scale"]["scale"], "1:100")
        self.assertEqual(export["wallCount"], 2)
        self.assertEqual(export["statistics"]["exterior"]["count"], 1)
        self.assertEqual(export["statistics"]["exterior"]["dinCode"], "331")
        self.assertEqual({w["type"] for w in export["walls"]}, {"exterior", "partition"})


class TestJunctionPlans(unittest.TestCase):
    """Plans whose walls meet at corners, T-junctions and crossings."""

    def _walls(self, rects):
        image = white_plan(1000, 800)
        for rect in rects:
            draw_rect(image, *rect)
        return detect_walls(image, "1:100").walls

    def _extents(self, wall):
        return [(s.orientation.value, s.x1, s.y1, s.x2, s.y2) for s in wall.segments]

    def test_right_hand_corner_is_one_wall(self):
        walls = self._walls([(100, 100, 700, 130), (670, 130, 700, 500)])
        self.assertEqual(len(walls), 1)
        self.assertEqual(self._extents(walls[0]), [
            ("horizontal", 100, 100, 700, 100),
            ("vertical", 670, 100, 670, 500),
        ])

    def test_l_corner_is_one_wall(self):
        walls = self._walls([(100, 100, 700, 130), (100, 130, 130, 500)])
        self.assertEqual(len(walls), 1)
        self.assertEqual(self._extents(walls[0]), [
            ("horizontal", 100, 100, 700, 100),
            ("vertical", 100, 100, 100, 500),
        ])
        self.assertEqual(walls[0].wall_type, WallType.INSULATED)
        self.assertAlmostEqual(walls[0].length_meters, 1000 / 300)

    def test_t_junction_at_midpoint_finds_bar_and_stem(self):
        walls = self._walls([(100, 100, 700, 130), (385, 130, 415, 500)])
        # The stem ends mid-bar, far from both bar endpoints, so the two stay separate walls
        self.assertEqual([self._extents(w) for w in walls], [
            [("horizontal", 100, 100, 700, 100)],
            [("vertical", 385, 100, 385, 500)],
        ])
        self.assertTrue(all(w.wall_type == WallType.INSULATED for w in walls))

    def test_t_junction_near_bar_end_is_one_wall(self):
        # Stem stroke ends 10 px short of the bar's end cap
        walls = self._walls([(100, 100, 700, 130), (660, 130, 690, 500)])
        self.assertEqual(len(walls), 1)
        self.assertEqual(len(walls[0].segments), 2)

    def test_crossing_at_midpoints_finds_both_walls(self):
        walls = self._walls([(100, 385, 900, 415), (485, 100, 515, 700)])
        self.assertEqual([self._extents(w) for w in walls], [
            [("horizontal", 100, 385, 900, 385)],
            [("vertical", 485, 100, 485, 700)],
        ])

    def test_mirrored_border_walls_are_both_exterior(self):
        walls = self._walls([(40, 100, 70, 700), (930, 100, 960, 700)])
        self.assertEqual(len(walls), 2)
        self.assertEqual([w.wall_type for w in walls], [WallType.EXTERIOR, WallType.EXTERIOR])


class TestBatch(unittest.TestCase):

    def test_results_keep_input_order(self):
        images = [white_plan(200, 200), framed_room(), draw_rect(white_plan(1000, 800), 100, 100, 130, 500)]
        results = detect_walls_batch(images, "1:100", max_workers=3)
        self.assertEqual([len(r.walls) for r in results], [0, 2, 1])

    def test_failure_is_raised(self):
        with self.assertRaises(InvalidInputError):
            detect_walls_batch([white_plan(50, 50), np.zeros((0, 5), dtype=np.uint8)])


if __name__ == "__main__":
    unittest.main()
