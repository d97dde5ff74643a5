"""
Detection models for face detection results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class BoundingBox:
    """
    An axis-aligned box in frame pixel coordinates.
    
    Attributes:
        x: Left edge x coordinate.
        y: Top edge y coordinate.
        width: Box width in pixels.
        height: Box height in pixels.
    """
    x: int
    y: int
    width: int
    height: int

    @property
    def x1(self) -> int:
        return self.x

    @property
    def y1(self) -> int:
        return self.y

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_xyxy(self) -> Tuple[int, int, int, int]:
        """Return as (x1, y1, x2, y2) tuple."""
        return (self.x1, self.y1, self.x2, self.y2)

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> "BoundingBox":
        """Create from (x, y, width, height) format."""
        return cls(x=int(x), y=int(y), width=int(w), height=int(h))

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create from (x1, y1, x2, y2) corners."""
        return cls(x=int(x1), y=int(y1), width=int(x2 - x1), height=int(y2 - y1))


def boxes_from_rects(rects: Sequence[Sequence[float]]) -> List[BoundingBox]:
    """
    Adapter: Convert OpenCV (x, y, w, h) rectangles to BoundingBox objects.
    
    Args:
        rects: Array-like of shape (N, 4), as returned by detectMultiScale.
    """
    if rects is None or len(rects) == 0:
        return []
    return [BoundingBox.from_xywh(*row[:4]) for row in np.asarray(rects)]
