"""
Haar cascade face detector backed by OpenCV.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence

import cv2
import numpy as np

from models.detection import BoundingBox, boxes_from_rects
from .base import Detector


class ClassifierLoadError(RuntimeError):
    """The cascade model file is missing or unreadable."""


def resolve_model_path(model_path: str) -> str:
    """
    Find the cascade file.

    The path is used as given when it exists. A bare file name that does not
    exist locally is looked up in the cascades bundled with opencv-python.
    """
    if os.path.exists(model_path):
        return model_path

    bundled_dir = getattr(getattr(cv2, "data", None), "haarcascades", None)
    if bundled_dir and os.path.basename(model_path) == model_path:
        candidate = os.path.join(bundled_dir, model_path)
        if os.path.exists(candidate):
            return candidate

    return model_path


class HaarCascadeDetector(Detector):
    def __init__(
        self,
        classifier: cv2.CascadeClassifier,
        scale_factor: float = 1.1,
        min_neighbors: int = 3,
        min_size: Optional[Sequence[int]] = None,
    ):
        self._classifier = classifier
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = tuple(min_size) if min_size else None

    @classmethod
    def load(
        cls,
        model_path: str,
        scale_factor: float = 1.1,
        min_neighbors: int = 3,
        min_size: Optional[Sequence[int]] = None,
    ) -> "HaarCascadeDetector":
        """
        Load a cascade classifier from disk.

        Raises:
            ClassifierLoadError: If the file is missing or not a valid cascade.
        """
        resolved = resolve_model_path(model_path)
        if not hasattr(cv2, "CascadeClassifier"):
            raise ClassifierLoadError(
                f"Error reading cascade file: {model_path}: this OpenCV build "
                f"({cv2.__version__}) has no CascadeClassifier; install opencv-python<5"
            )
        classifier = cv2.CascadeClassifier()
        try:
            loaded = os.path.exists(resolved) and classifier.load(resolved)
        except cv2.error as e:
            raise ClassifierLoadError(f"Error reading cascade file: {model_path}: {e}") from e
        if not loaded:
            raise ClassifierLoadError(f"Error reading cascade file: {model_path}")

        logging.info(f"Loaded cascade classifier from {resolved}")
        return cls(classifier, scale_factor=scale_factor, min_neighbors=min_neighbors, min_size=min_size)

    def detect(self, frame: np.ndarray) -> List[BoundingBox]:
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame
        kwargs = {"scaleFactor": self.scale_factor, "minNeighbors": self.min_neighbors}
        if self.min_size:
            kwargs["minSize"] = self.min_size
        rects = self._classifier.detectMultiScale(gray, **kwargs)
        return boxes_from_rects(rects)
