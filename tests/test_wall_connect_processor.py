"""
Unit tests for CONNECT_WALLS: stroke end proximity components.
"""

import unittest
from unittest.mock import Mock

from wallscan.config import DetectionConfig
from wallscan.models import Orientation, WallSegment
from wallscan.pipeline.processors.wall_connect_processor import WallConnectProcessor, connect


def h_seg(x1, x2, y, thickness=20.0):
    return WallSegment(orientation=Orientation.HORIZONTAL, x1=x1, y1=y, x2=x2, y2=y, thickness_px=thickness)


def v_seg(y1, y2, x, thickness=20.0):
    return WallSegment(orientation=Orientation.VERTICAL, x1=x, y1=y1, x2=x, y2=y2, thickness_px=thickness)


class TestConnect(unittest.TestCase):

    def test_corner_joins_orientations(self):
        top = h_seg(100, 300, 100)
        left = v_seg(100, 300, 100)
        walls = connect([top, left])
        self.assertEqual(len(walls), 1)
        self.assertEqual(walls[0].segments, (top, left))

    def test_distance_threshold_is_inclusive(self):
        a = h_seg(0, 100, 0)
        self.assertEqual(len(connect([a, h_seg(120, 200, 0)])), 1)
        self.assertEqual(len(connect([a, h_seg(121, 200, 0)])), 2)

    def test_diagonal_end_distance(self):
        # End cap of a ends at (100, 20); cap of b starts at (112, 36): exactly 20 px
        a = h_seg(0, 100, 0)
        self.assertEqual(len(connect([a, v_seg(36, 200, 112)])), 1)
        self.assertEqual(len(connect([a, v_seg(36, 200, 113)])), 2)

    def test_corners_join_on_every_side(self):
        # 30 px walls; vertical strokes are anchored on their left edge
        top = h_seg(100, 700, 100, 30)
        bottom = h_seg(100, 700, 470, 30)
        left = v_seg(100, 500, 100, 30)
        right = v_seg(100, 500, 670, 30)
        for pair in [(top, left), (top, right), (bottom, left), (bottom, right)]:
            with self.subTest(pair=pair):
                self.assertEqual(len(connect(list(pair))), 1)

    def test_stem_meeting_bar_midway_stays_separate(self):
        bar = h_seg(100, 700, 100, 30)
        stem = v_seg(100, 500, 385, 30)
        self.assertEqual(len(connect([bar, stem])), 2)

    def test_zero_thickness_uses_anchor_points(self):
        a = h_seg(0, 100, 0, 0)
        self.assertEqual(len(connect([a, h_seg(120, 200, 0, 0)])), 1)
        self.assertEqual(len(connect([a, h_seg(121, 200, 0, 0)])), 2)

    def test_connection_is_transitive(self):
        a = h_seg(0, 100, 0)
        b = h_seg(110, 200, 0)
        c = h_seg(210, 300, 0)
        far = v_seg(500, 700, 500)
        walls = connect([a, far, b, c])
        self.assertEqual(len(walls), 2)
        self.assertEqual(walls[0].segments, (a, b, c))
        self.assertEqual(walls[1].segments, (far,))

    def test_every_segment_in_exactly_one_wall(self):
        segments = [
            h_seg(0, 100, 0), v_seg(0, 100, 0), h_seg(400, 500, 400),
            v_seg(400, 480, 500), h_seg(800, 900, 50), v_seg(600, 700, 900),
        ]
        walls = connect(segments)
        flattened = [s for wall in walls for s in wall.segments]
        self.assertEqual(sorted(flattened, key=segments.index), segments)
        self.assertEqual(len(flattened), len(segments))

    def test_custom_gap(self):
        a = h_seg(0, 100, 0)
        b = h_seg(130, 200, 0)
        self.assertEqual(len(connect([a, b], max_gap=20)), 2)
        self.assertEqual(len(connect([a, b], max_gap=30)), 1)

    def test_empty_input(self):
        self.assertEqual(connect([]), [])


class TestWallConnectProcessor(unittest.TestCase):

    def test_process_uses_configured_gap(self):
        processor = WallConnectProcessor(job_id="test", config=DetectionConfig(connect_endpoint_gap_px=50))
        processor.log_info = Mock()
        segments = [h_seg(0, 100, 0), h_seg(140, 200, 0)]
        result = processor.process({"merge_segments_results": {"segments": segments}})
        self.assertEqual(result["totals"], {"input_segments": 2, "connected_walls": 1})


if __name__ == "__main__":
    unittest.main()
