"""
FrameData model for captured video frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameData:
    """
    Metadata and payload for a captured video frame.
    
    Attributes:
        frame: The raw frame data as a numpy array (BGR format). None when the
            source delivered nothing for this cycle.
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Unix timestamp when frame was captured.
        frame_index: Sequential frame number since start.
        source: Identifier for the camera/video source.
    """
    frame: Optional[np.ndarray]
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: Optional[np.ndarray],
        timestamp: float,
        frame_index: int = 0,
        source: Optional[str] = None,
    ) -> "FrameData":
        """Create FrameData from a numpy array (empty arrays give a 0x0 frame)."""
        if frame is None or frame.size == 0:
            w, h = 0, 0
        else:
            h, w = frame.shape[:2]
        return cls(
            frame=frame,
            width=w,
            height=h,
            timestamp=timestamp,
            frame_index=frame_index,
            source=source,
        )

    @property
    def is_empty(self) -> bool:
        """True when there is no pixel data to process."""
        return self.frame is None or self.frame.size == 0

    @property
    def shape(self) -> Tuple[int, ...]:
        """Return (height, width, channels)."""
        if self.frame is None:
            return (0, 0)
        return self.frame.shape

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
