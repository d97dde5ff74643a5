"""
Count store: the single shared record of the latest face count.

The detection loop writes it, the narration loop reads it. Both stores
implement the same small contract:

- write(count): persist the decimal text of count. Raises OSError on failure.
- read(): return the full current text, or None when nothing has been
  written yet. Raises OSError on failure.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
import time
from typing import Optional


class CountStore:
    """Interface for the shared count record."""

    def write(self, count: int) -> None:
        raise NotImplementedError

    def read(self) -> Optional[str]:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


def format_count(count: int) -> str:
    if count < 0:
        raise ValueError(f"Face count must be non-negative, got {count}")
    return str(int(count))


class FileCountStore(CountStore):
    """
    Plain-text file holding the decimal count.

    Writes go to a temporary file in the same directory which then replaces
    the record with os.replace, so readers see either the old or the new
    value and never a truncated one. settle_delay_s is a pause between
    opening the temporary file and writing it.
    """

    def __init__(self, path: str, settle_delay_s: float = 0.5, file_mode: int = 0o644):
        self.path = path
        self.settle_delay_s = settle_delay_s
        self.file_mode = file_mode
        self._lock = threading.Lock()

    def write(self, count: int) -> None:
        text = format_count(count)
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        # Each write has its own temp file; only the rename is serialized
        fd, tmp_path = tempfile.mkstemp(prefix=".count-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                if self.settle_delay_s > 0:
                    time.sleep(self.settle_delay_s)
                f.write(text)
            os.chmod(tmp_path, self.file_mode)
            with self._lock:
                os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

        logging.debug(f"Count record written: {text}")

    def read(self) -> Optional[str]:
        try:
            with open(self.path, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def clear(self) -> None:
        with self._lock:
            try:
                os.unlink(self.path)
                logging.info(f"Removed stale count record: {self.path}")
            except FileNotFoundError:
                pass


class MemoryCountStore(CountStore):
    """Lock-guarded in-process count record (no durability)."""

    def __init__(self, settle_delay_s: float = 0.0):
        self.settle_delay_s = settle_delay_s
        self._value: Optional[str] = None
        self._lock = threading.Lock()

    def write(self, count: int) -> None:
        text = format_count(count)
        if self.settle_delay_s > 0:
            time.sleep(self.settle_delay_s)
        with self._lock:
            self._value = text

    def read(self) -> Optional[str]:
        with self._lock:
            return self._value

    def clear(self) -> None:
        with self._lock:
            self._value = None


def create_count_store(storage_cfg) -> CountStore:
    """Build the store selected by storage.backend."""
    if storage_cfg.backend == "memory":
        return MemoryCountStore(settle_delay_s=storage_cfg.settle_delay_s)
    return FileCountStore(
        storage_cfg.count_path,
        settle_delay_s=storage_cfg.settle_delay_s,
        file_mode=storage_cfg.file_mode,
    )
