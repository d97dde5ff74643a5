"""
Detection loop for the face count narrator.

Pulls frames from an ObservationSource, runs the face detector, hands the
face count to a CountWriter, draws the detections and shows the annotated
frame. Runs until the source ends, the operator asks to stop, or the shared
stop signal is set.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from detection.base import Detector
from models.detection import BoundingBox
from models.frame import FrameData
from observation import ObservationSource
from pipeline.annotate import draw_detections
from pipeline.display import Display, NullDisplay
from storage.writer import CountWriter


@dataclass
class DetectionLoopConfig:
    """
    Configuration for the detection loop.

    Attributes:
        label_text: Text drawn above each face.
        label_placement: "centered" or "legacy" (see pipeline.annotate).
        stats_log_interval: Seconds between status log messages.
        writer_shutdown_timeout: Seconds to wait for pending count writes on exit.
    """
    label_text: str = "Human"
    label_placement: str = "centered"
    stats_log_interval: float = 60.0
    writer_shutdown_timeout: float = 5.0


@dataclass
class LoopStats:
    """Runtime statistics for the detection loop."""
    frame_count: int = 0
    empty_frames: int = 0
    last_count: int = 0
    max_count: int = 0
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)


class DetectionLoop:
    """
    Frame acquisition and detection loop.

    The count for every processed frame is submitted to the writer without
    waiting for it to reach the store. After run() returns, exit_reason is one
    of "stopped", "operator", "acquisition_failure" or "error".

    Example:
        loop = DetectionLoop(source, detector, writer, CvDisplay(), DetectionLoopConfig())
        loop.run()
    """

    def __init__(
        self,
        source: ObservationSource,
        detector: Detector,
        writer: CountWriter,
        display: Optional[Display] = None,
        config: Optional[DetectionLoopConfig] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        self.source = source
        self.detector = detector
        self.writer = writer
        self.display = display or NullDisplay()
        self.config = config or DetectionLoopConfig()
        self.stop_event = stop_event or threading.Event()
        self.stats = LoopStats()
        self.exit_reason: Optional[str] = None
        self._callbacks: List[Callable[[FrameData, List[BoundingBox]], None]] = []

    def add_callback(self, callback: Callable[[FrameData, List[BoundingBox]], None]) -> None:
        """
        Add a callback to be called after each frame is processed.

        Args:
            callback: Function taking (frame_data, boxes) as arguments.
        """
        self._callbacks.append(callback)

    def run(self) -> None:
        """Open the source, process frames until told otherwise, release everything."""
        self.stats = LoopStats()
        self.exit_reason = None
        self.writer.start()

        try:
            try:
                self.source.open()
            except RuntimeError as e:
                logging.error(f"Cannot open video source {self.source.source_id}: {e}")
                self.exit_reason = "acquisition_failure"
                return

            logging.info(f"Detection loop started: source={self.source.source_id}")

            while not self.stop_event.is_set():
                frame_data = self.source.read()

                if frame_data is None:
                    logging.error(f"Cannot read from source {self.source.source_id}, stopping detection")
                    self.exit_reason = "acquisition_failure"
                    break

                if frame_data.is_empty:
                    self.stats.empty_frames += 1
                    continue

                boxes = self._process_frame(frame_data)

                for callback in self._callbacks:
                    try:
                        callback(frame_data, boxes)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                if self._handle_display(frame_data):
                    logging.info("Stop requested from display")
                    self.exit_reason = "operator"
                    self.stop_event.set()
                    break

                self._handle_periodic_tasks()

            if self.exit_reason is None:
                self.exit_reason = "stopped"

        except Exception as e:
            logging.exception(f"Detection loop error: {e}")
            self.exit_reason = "error"
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Signal the loop to stop after the current frame."""
        self.stop_event.set()

    def _process_frame(self, frame_data: FrameData) -> List[BoundingBox]:
        """Detect faces, submit the count, draw annotations. Returns the boxes."""
        frame = frame_data.frame
        self.stats.frame_count += 1

        boxes = list(self.detector.detect(frame))
        count = len(boxes)
        self.writer.submit(count)

        if count != self.stats.last_count:
            logging.debug(f"[FACES] frame={frame_data.frame_index} count={count}")
        self.stats.last_count = count
        self.stats.max_count = max(self.stats.max_count, count)

        draw_detections(
            frame,
            boxes,
            label=self.config.label_text,
            placement=self.config.label_placement,
        )
        return boxes

    def _handle_display(self, frame_data: FrameData) -> bool:
        """
        Show the frame and check for an operator stop.

        Display failures are logged and ignored. Returns True if a stop was requested.
        """
        try:
            self.display.show(frame_data.frame)
            return self.display.poll_for_stop()
        except Exception as e:
            logging.warning(f"Display error: {e}")
            return False

    def _handle_periodic_tasks(self) -> None:
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            self._log_stats()
            self.stats.last_stats_log_time = now

    def _log_stats(self) -> None:
        logging.info(
            f"Detection stats: frames={self.stats.frame_count}, "
            f"empty={self.stats.empty_frames}, "
            f"last_count={self.stats.last_count}, max_count={self.stats.max_count}"
        )

    def _cleanup(self) -> None:
        try:
            self.source.close()
        except Exception as e:
            logging.warning(f"Error closing source: {e}")

        try:
            self.display.close()
        except Exception as e:
            logging.warning(f"Error closing display: {e}")

        # Flush the last count so the store ends on the final frame's value
        self.writer.stop(timeout=self.config.writer_shutdown_timeout)

        self._log_stats()
        logging.info(f"Detection loop stopped (reason={self.exit_reason})")


def create_detection_loop_from_config(config, ctx) -> DetectionLoop:
    """
    Factory: build a DetectionLoop from the typed Config and a RuntimeContext.

    Args:
        config: models.config.Config.
        ctx: RuntimeContext holding source, detector, writer, display and stop signal.
    """
    loop_config = DetectionLoopConfig(
        label_text=config.display.label_text,
        label_placement=config.display.label_placement,
        stats_log_interval=config.pipeline.stats_log_interval_s,
    )
    return DetectionLoop(
        source=ctx.source,
        detector=ctx.detector,
        writer=ctx.writer,
        display=ctx.display,
        config=loop_config,
        stop_event=ctx.stop_event,
    )
