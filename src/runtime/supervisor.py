"""
Supervisor: runs the detection and narration loops side by side.

Process lifetime is "both loops have ended". The supervisor owns the shared
stop signal; it does not restart a loop that has ended on its own.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Dict, List, Optional


class Supervisor:
    def __init__(self, detection_loop, narration_loop, stop_event: Optional[threading.Event] = None):
        self.detection_loop = detection_loop
        self.narration_loop = narration_loop
        self.stop_event = stop_event or threading.Event()
        self._threads: List[threading.Thread] = []

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Supervisor already started")

        self._threads = [
            threading.Thread(target=self.detection_loop.run, name="DetectionLoop", daemon=True),
            threading.Thread(target=self.narration_loop.run, name="NarrationLoop", daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        logging.info("Supervisor started detection and narration loops")

    def stop(self) -> None:
        """Ask both loops to finish."""
        self.stop_event.set()

    def is_alive(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Join both loops.

        Returns True if both have ended, False if the timeout expired first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in self._threads:
            # Short joins keep the main thread responsive to KeyboardInterrupt
            while thread.is_alive():
                if deadline is None:
                    thread.join(0.5)
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                thread.join(min(0.5, remaining))
        return not self.is_alive()

    def run(self, shutdown_timeout: float = 5.0) -> Dict[str, Optional[str]]:
        """Start both loops and block until they end. Returns each loop's exit reason."""
        self.start()
        try:
            self.wait()
        except KeyboardInterrupt:
            logging.info("Interrupted by user")
            self.stop()
            if not self.wait(timeout=shutdown_timeout):
                logging.warning("Loops did not stop within shutdown timeout")
        return self.exit_reasons()

    def exit_reasons(self) -> Dict[str, Optional[str]]:
        return {
            "detection": getattr(self.detection_loop, "exit_reason", None),
            "narration": getattr(self.narration_loop, "exit_reason", None),
        }
