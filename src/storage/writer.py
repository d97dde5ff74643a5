"""
Count writers: move counts from the detection loop into the CountStore
without blocking frame capture.

SequencedCountWriter keeps one pending value and one writer thread. A newer
count overwrites an unwritten older one, so the store always ends on the most
recently submitted count.

PerFrameCountWriter starts an independent thread per count. Writes are not
ordered: an older write can finish after a newer one and leave a stale value
in the store until the next frame overwrites it.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import List, Optional

from .count_store import CountStore


class CountWriter:
    """Interface shared by the write strategies."""

    def start(self) -> None:
        pass

    def submit(self, count: int) -> None:
        raise NotImplementedError

    def stop(self, timeout: Optional[float] = None) -> None:
        pass


def _write_logged(store: CountStore, count: int) -> bool:
    try:
        store.write(count)
        return True
    except (OSError, ValueError) as e:
        logging.warning(f"Count write failed (count={count}): {e}")
        return False


class SequencedCountWriter(CountWriter):
    """Single-slot latest-value cell drained by one writer thread."""

    def __init__(self, store: CountStore):
        self.store = store
        self._cond = threading.Condition()
        self._pending: Optional[int] = None
        self._stopping = False
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self.submitted = 0
        self.written = 0
        self.failed = 0

    def start(self) -> None:
        """Start the writer thread, or keep a still-running one alive."""
        with self._cond:
            self._stopping = False
            if self._running:
                return
            self._running = True
        self._thread = threading.Thread(target=self._run, name="CountWriter", daemon=True)
        self._thread.start()

    def submit(self, count: int) -> None:
        with self._cond:
            self._pending = count
            self.submitted += 1
            self._cond.notify()

    def _run(self) -> None:
        while True:
            with self._cond:
                while self._pending is None and not self._stopping:
                    self._cond.wait()
                if self._pending is None:
                    self._running = False
                    return
                count, self._pending = self._pending, None

            if _write_logged(self.store, count):
                self.written += 1
            else:
                self.failed += 1

    def stop(self, timeout: Optional[float] = None) -> None:
        """Flush the pending count, then end the writer thread."""
        with self._cond:
            self._stopping = True
            self._cond.notify()
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logging.warning("Count writer did not finish within timeout")
                return
            self._thread = None

    @property
    def is_running(self) -> bool:
        with self._cond:
            return self._running


class PerFrameCountWriter(CountWriter):
    """Fire-and-forget thread per submitted count."""

    def __init__(self, store: CountStore):
        self.store = store
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    def submit(self, count: int) -> None:
        thread = threading.Thread(
            target=_write_logged, args=(self.store, count), name=f"CountWrite-{count}", daemon=True
        )
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight writes; timeout bounds the whole wait, not each write."""
        with self._lock:
            threads = list(self._threads)
            self._threads = []
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in threads:
            if deadline is None:
                thread.join()
                continue
            thread.join(max(0.0, deadline - time.monotonic()))
        pending = sum(1 for t in threads if t.is_alive())
        if pending:
            logging.warning(f"{pending} count writes still in flight after {timeout}s")


def create_count_writer(store: CountStore, write_mode: str = "sequenced") -> CountWriter:
    if write_mode == "per_frame":
        return PerFrameCountWriter(store)
    return SequencedCountWriter(store)
