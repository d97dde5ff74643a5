"""
ObservationSource interface for video sources.

A source hands out one FrameData per call to read(). Two outcomes other than
a good frame are distinguished:

- read() returns None: the source is exhausted or the device failed. The
  caller treats this as end of stream and does not retry.
- read() returns a FrameData whose is_empty is True: the device answered but
  delivered no pixels. The caller skips the cycle and reads again.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from models.frame import FrameData


@dataclass
class ObservationConfig:
    """
    Base configuration for observation sources.
    
    Attributes:
        source_id: Identifier used in logs and FrameData.source.
        resolution: Requested (width, height). None = device default.
        fps: Requested frames per second. None = device default.
    """
    source_id: str = "default"
    resolution: Optional[Tuple[int, int]] = None
    fps: Optional[int] = None


class ObservationSource(ABC):
    """
    Abstract base class for video sources.

    Lifecycle: open(), read() until it returns None, close(). close() must be
    safe to call more than once and on a source that never opened.

        with OpenCVSource(config) as source:
            for frame_data in source:
                process(frame_data)
    """

    def __init__(self, config: ObservationConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def frame_index(self) -> int:
        """Number of frames read since open()."""
        return self._frame_index

    @abstractmethod
    def open(self) -> None:
        """
        Acquire the underlying device.

        Raises:
            RuntimeError: If the device cannot be opened.
        """

    @abstractmethod
    def read(self) -> Optional[FrameData]:
        """Return the next frame, an empty frame, or None at end of stream."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying device."""

    def __enter__(self) -> "ObservationSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[FrameData]:
        """Yield frames (empty ones included) until the source ends."""
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")

        while True:
            frame_data = self.read()
            if frame_data is None:
                break
            yield frame_data
