"""
Tests for the count store and count writers.
"""

import logging
import os
import stat
import threading
import time

import pytest

from storage.count_store import FileCountStore, MemoryCountStore, create_count_store
from storage.writer import PerFrameCountWriter, SequencedCountWriter, create_count_writer
from models.config import StorageConfig


@pytest.fixture
def count_path(tmp_path):
    return str(tmp_path / "state" / "face_count.log")


class SlowStore(MemoryCountStore):
    """Memory store whose write duration depends on the count."""

    def __init__(self, delays):
        super().__init__()
        self.delays = delays
        self.writes = []
        self._writes_lock = threading.Lock()

    def write(self, count: int) -> None:
        time.sleep(self.delays.get(count, 0))
        super().write(count)
        with self._writes_lock:
            self.writes.append(count)


class FailingStore(MemoryCountStore):
    def write(self, count: int) -> None:
        raise OSError("disk full")


class TestFileCountStore:
    def test_absent_record_reads_none(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)

        assert store.read() is None

    def test_write_then_read(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)

        store.write(3)

        assert store.read() == "3"

    def test_zero_is_written_as_zero(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)

        store.write(0)

        assert store.read() == "0"

    def test_shorter_value_replaces_longer(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)

        store.write(13)
        store.write(2)

        assert store.read() == "2"

    def test_repeated_reads_are_identical(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)
        store.write(5)

        assert store.read() == store.read() == "5"

    def test_creates_parent_directory(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)

        store.write(1)

        assert os.path.isfile(count_path)

    def test_file_permissions(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0, file_mode=0o644)

        store.write(1)

        assert stat.S_IMODE(os.stat(count_path).st_mode) == 0o644

    def test_no_temp_files_left_behind(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)

        for n in range(5):
            store.write(n)

        assert os.listdir(os.path.dirname(count_path)) == ["face_count.log"]

    def test_negative_count_rejected(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)

        with pytest.raises(ValueError):
            store.write(-1)
        assert store.read() is None

    def test_settle_delay_applied(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0.05)

        start = time.monotonic()
        store.write(1)

        assert time.monotonic() - start >= 0.05

    def test_reader_never_sees_partial_value(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0.05)
        store.write(11)
        seen = []

        writer = threading.Thread(target=store.write, args=(22,))
        writer.start()
        while writer.is_alive():
            seen.append(store.read())
        writer.join()

        assert set(seen) <= {"11", "22"}
        assert store.read() == "22"

    def test_undecodable_bytes_are_read_with_replacement(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)
        store.write(1)
        with open(count_path, "wb") as f:
            f.write(b"\xff\xfe")

        content = store.read()

        assert content == "\ufffd\ufffd"

    def test_concurrent_writes_overlap_settle_delay(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0.2)
        threads = [threading.Thread(target=store.write, args=(n,)) for n in range(5)]

        start = time.monotonic()
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # serialized writes would take 5 x 0.2s
        assert time.monotonic() - start < 0.6
        assert store.read() in {"0", "1", "2", "3", "4"}
        assert os.listdir(os.path.dirname(count_path)) == ["face_count.log"]

    def test_clear_removes_record(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0)
        store.write(4)

        store.clear()
        store.clear()

        assert store.read() is None


class TestMemoryCountStore:
    def test_round_trip(self):
        store = MemoryCountStore()

        assert store.read() is None
        store.write(7)
        assert store.read() == "7"
        store.clear()
        assert store.read() is None


class TestCreateCountStore:
    def test_file_backend(self, count_path):
        store = create_count_store(StorageConfig(count_path=count_path, settle_delay_s=0.1))

        assert isinstance(store, FileCountStore)
        assert store.path == count_path
        assert store.settle_delay_s == 0.1

    def test_memory_backend(self):
        store = create_count_store(StorageConfig(backend="memory", settle_delay_s=0))

        assert isinstance(store, MemoryCountStore)


class TestSequencedCountWriter:
    def test_last_submitted_count_wins(self):
        store = SlowStore({3: 0.1})
        writer = SequencedCountWriter(store)
        writer.start()

        writer.submit(3)
        time.sleep(0.02)  # let the slow write of 3 begin
        writer.submit(5)
        writer.submit(2)
        writer.stop(timeout=2)

        assert store.read() == "2"
        # 5 was superseded before the writer got to it
        assert store.writes == [3, 2]

    def test_stop_flushes_pending_value(self):
        store = MemoryCountStore()
        writer = SequencedCountWriter(store)
        writer.start()

        writer.submit(4)
        writer.stop(timeout=2)

        assert store.read() == "4"

    def test_submit_does_not_block_on_slow_store(self):
        store = SlowStore({1: 0.3})
        writer = SequencedCountWriter(store)
        writer.start()

        start = time.monotonic()
        for _ in range(10):
            writer.submit(1)
        elapsed = time.monotonic() - start
        writer.stop(timeout=2)

        assert elapsed < 0.1

    def test_write_failure_is_logged_not_raised(self, caplog):
        writer = SequencedCountWriter(FailingStore())
        writer.start()

        with caplog.at_level(logging.WARNING):
            writer.submit(1)
            writer.stop(timeout=2)

        assert writer.failed == 1
        assert "Count write failed" in caplog.text


class TestPerFrameCountWriter:
    def test_out_of_order_completion_leaves_stale_value(self):
        """An older slow write can land after a newer one."""
        store = SlowStore({3: 0.2})
        writer = PerFrameCountWriter(store)

        writer.submit(3)
        writer.submit(2)
        writer.stop(timeout=2)

        assert store.writes == [2, 3]
        assert store.read() == "3"

    def test_write_failure_is_logged_not_raised(self, caplog):
        writer = PerFrameCountWriter(FailingStore())

        with caplog.at_level(logging.WARNING):
            writer.submit(1)
            writer.stop(timeout=2)

        assert "Count write failed" in caplog.text


class TestCreateCountWriter:
    def test_modes(self):
        store = MemoryCountStore()

        assert isinstance(create_count_writer(store), SequencedCountWriter)
        assert isinstance(create_count_writer(store, "sequenced"), SequencedCountWriter)
        assert isinstance(create_count_writer(store, "per_frame"), PerFrameCountWriter)


class TestWriterShutdown:
    def test_sequenced_stop_timeout_keeps_single_consumer(self):
        store = SlowStore({1: 0.3})
        writer = SequencedCountWriter(store)
        writer.start()
        writer.submit(1)
        time.sleep(0.02)

        writer.stop(timeout=0.01)
        assert writer.is_running
        first_thread = writer._thread

        writer.start()
        writer.submit(2)

        assert writer._thread is first_thread
        writer.stop(timeout=2)
        assert store.writes == [1, 2]
        assert not writer.is_running

    def test_sequenced_restart_after_clean_stop(self):
        store = MemoryCountStore()
        writer = SequencedCountWriter(store)
        writer.start()
        writer.submit(1)
        writer.stop(timeout=2)

        writer.start()
        writer.submit(6)
        writer.stop(timeout=2)

        assert store.read() == "6"

    def test_per_frame_stop_timeout_bounds_total_wait(self, caplog):
        store = SlowStore({n: 0.5 for n in range(5)})
        writer = PerFrameCountWriter(store)
        for n in range(5):
            writer.submit(n)

        start = time.monotonic()
        with caplog.at_level(logging.WARNING):
            writer.stop(timeout=0.1)

        assert time.monotonic() - start < 0.4
        assert "still in flight" in caplog.text


class TestPerFrameWithFileStore:
    def test_latest_count_lands_after_one_settle_delay(self, count_path):
        store = FileCountStore(count_path, settle_delay_s=0.1)
        writer = PerFrameCountWriter(store)

        start = time.monotonic()
        for n in range(20):
            writer.submit(1)
        writer.submit(7)
        writer.stop(timeout=5)
        elapsed = time.monotonic() - start

        assert elapsed < 1.0
        assert store.read() in {"1", "7"}
        assert os.listdir(os.path.dirname(count_path)) == ["face_count.log"]
