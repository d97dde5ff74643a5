"""
Process signal handling.

SIGINT and SIGTERM set the shared stop signal so both loops can finish their
current iteration and release the camera and window.
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, Dict


def install_signal_handlers(stop_event: threading.Event) -> Dict[int, Callable]:
    """
    Route SIGINT/SIGTERM to stop_event.

    Must be called from the main thread. Returns the previous handlers so they
    can be restored with restore_signal_handlers().
    """
    previous: Dict[int, Callable] = {}

    def _handle(signum, frame) -> None:
        if stop_event.is_set():
            logging.warning(f"Received signal {signum} again, forcing exit")
            raise KeyboardInterrupt
        logging.info(f"Received signal {signum}, shutting down")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[sig] = signal.signal(sig, _handle)
        except (ValueError, OSError) as e:
            logging.warning(f"Cannot install handler for signal {sig}: {e}")

    return previous


def restore_signal_handlers(previous: Dict[int, Callable]) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler)
