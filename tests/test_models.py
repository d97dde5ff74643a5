"""
Tests for typed models.
"""

import time

import numpy as np

from models.frame import FrameData
from models.detection import BoundingBox, boxes_from_rects
from models.narration import NarrationEvent


class TestFrameData:
    def test_from_numpy(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)

        fd = FrameData.from_numpy(frame, timestamp=1.0, frame_index=7, source="cam")

        assert fd.width == 640
        assert fd.height == 480
        assert fd.size == (640, 480)
        assert fd.shape == (480, 640, 3)
        assert fd.frame_index == 7
        assert fd.source == "cam"
        assert fd.is_empty is False

    def test_empty_array_is_empty(self):
        fd = FrameData.from_numpy(np.array([]), timestamp=time.time())

        assert fd.is_empty is True
        assert fd.size == (0, 0)

    def test_none_frame_is_empty(self):
        fd = FrameData.from_numpy(None, timestamp=time.time())

        assert fd.is_empty is True
        assert fd.shape == (0, 0)


class TestBoundingBox:
    def test_derived_corners(self):
        box = BoundingBox(x=10, y=20, width=30, height=40)

        assert box.x1 == 10
        assert box.y1 == 20
        assert box.x2 == 40
        assert box.y2 == 60
        assert box.as_xyxy() == (10, 20, 40, 60)
        assert box.area == 1200

    def test_center(self):
        box = BoundingBox(x=100, y=50, width=80, height=60)

        assert box.center == (140.0, 80.0)

    def test_from_xyxy_matches_from_xywh(self):
        assert BoundingBox.from_xyxy(5, 6, 15, 26) == BoundingBox.from_xywh(5, 6, 10, 20)

    def test_boxes_from_opencv_rects(self):
        rects = np.array([[1, 2, 3, 4], [10, 20, 30, 40]], dtype=np.int32)

        boxes = boxes_from_rects(rects)

        assert boxes == [BoundingBox(1, 2, 3, 4), BoundingBox(10, 20, 30, 40)]
        assert all(isinstance(b.x, int) for b in boxes)

    def test_boxes_from_empty_result(self):
        # detectMultiScale returns an empty tuple when nothing is found
        assert boxes_from_rects(()) == []
        assert boxes_from_rects(None) == []


class TestNarrationEvent:
    def test_timestamp_defaults_to_now(self):
        before = time.time()
        event = NarrationEvent(text="Human face 2 count detected", count_text="2")

        assert event.timestamp >= before
        assert event.count_text == "2"
