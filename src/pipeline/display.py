"""
Display surfaces for annotated frames.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np


class Display:
    """Where annotated frames go, and where the operator can ask to stop."""

    def show(self, frame: np.ndarray) -> None:
        raise NotImplementedError

    def poll_for_stop(self) -> bool:
        raise NotImplementedError

    def close(self) -> None:
        pass


class CvDisplay(Display):
    """OpenCV HighGUI window. Any key press requests a stop."""

    def __init__(self, window_title: str = "Face Detection"):
        self.window_title = window_title
        self._shown = False

    def show(self, frame: np.ndarray) -> None:
        cv2.imshow(self.window_title, frame)
        self._shown = True

    def poll_for_stop(self) -> bool:
        return cv2.waitKey(1) >= 0

    def close(self) -> None:
        if not self._shown:
            return
        try:
            cv2.destroyWindow(self.window_title)
        except cv2.error as e:
            logging.debug(f"Window already gone: {e}")
        self._shown = False


class NullDisplay(Display):
    """Headless mode: frames are dropped, stop is never requested."""

    def show(self, frame: np.ndarray) -> None:
        pass

    def poll_for_stop(self) -> bool:
        return False


def create_display(display_cfg) -> Display:
    if display_cfg.enabled:
        return CvDisplay(display_cfg.window_title)
    return NullDisplay()
