"""
Detection interface.

Detectors return face boxes in the pixel coordinates of the frame they were
given. The order of the returned boxes is unspecified.
"""

from __future__ import annotations

from typing import List

import numpy as np

from models.detection import BoundingBox


class Detector:
    """Detector interface returning bounding boxes in pixel-space."""

    def detect(self, frame: np.ndarray) -> List[BoundingBox]:
        raise NotImplementedError
