"""
Frame annotation for detected faces.
"""

from __future__ import annotations

from typing import Iterable, Tuple

import cv2
import numpy as np

from models.detection import BoundingBox

# BGR
COLOR_FACE = (255, 0, 0)
RECT_THICKNESS = 3
LABEL_FONT = cv2.FONT_HERSHEY_PLAIN
LABEL_SCALE = 1.2
LABEL_THICKNESS = 2
LABEL_GAP_PX = 2


def label_origin(box: BoundingBox, text_width: int, placement: str = "centered") -> Tuple[int, int]:
    """
    Bottom-left corner of the label drawn above a box.

    "legacy" keeps the historical x + x/2 - text_width/2 formula, which drifts
    right of the box as x grows. "centered" centers the label on the box.
    """
    if placement == "legacy":
        x = box.x + box.x // 2 - text_width // 2
    else:
        x = int(box.center[0]) - text_width // 2
    return (x, box.y - LABEL_GAP_PX)


def draw_detections(
    frame: np.ndarray,
    boxes: Iterable[BoundingBox],
    label: str = "Human",
    placement: str = "centered",
    color: Tuple[int, int, int] = COLOR_FACE,
) -> np.ndarray:
    """Draw a rectangle and label for each box, in place."""
    (text_w, _), _ = cv2.getTextSize(label, LABEL_FONT, LABEL_SCALE, LABEL_THICKNESS)
    for box in boxes:
        cv2.rectangle(frame, (box.x1, box.y1), (box.x2, box.y2), color, RECT_THICKNESS)
        cv2.putText(
            frame,
            label,
            label_origin(box, text_w, placement),
            LABEL_FONT,
            LABEL_SCALE,
            color,
            LABEL_THICKNESS,
        )
    return frame
