"""
Tests for signal handling and logging setup.
"""

import logging
import signal
import threading

import pytest

from ops.logging import CHATTY_LOGGERS, setup_logging
from ops.process import install_signal_handlers, restore_signal_handlers


@pytest.fixture
def installed():
    stop_event = threading.Event()
    previous = install_signal_handlers(stop_event)
    yield stop_event
    restore_signal_handlers(previous)


class TestSignalHandlers:
    def test_sigterm_sets_stop_event(self, installed):
        handler = signal.getsignal(signal.SIGTERM)

        handler(signal.SIGTERM, None)

        assert installed.is_set()

    def test_sigint_sets_stop_event(self, installed):
        handler = signal.getsignal(signal.SIGINT)

        handler(signal.SIGINT, None)

        assert installed.is_set()

    def test_second_signal_forces_exit(self, installed):
        handler = signal.getsignal(signal.SIGINT)
        handler(signal.SIGINT, None)

        with pytest.raises(KeyboardInterrupt):
            handler(signal.SIGINT, None)

    def test_restore_puts_back_previous_handlers(self):
        original = signal.getsignal(signal.SIGTERM)
        previous = install_signal_handlers(threading.Event())
        assert signal.getsignal(signal.SIGTERM) is not original

        restore_signal_handlers(previous)

        assert signal.getsignal(signal.SIGTERM) is original


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        library_levels = {name: logging.getLogger(name).level for name in CHATTY_LOGGERS}
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers = handlers
        root.setLevel(level)
        for name, library_level in library_levels.items():
            logging.getLogger(name).setLevel(library_level)

    def test_writes_to_log_file(self, tmp_path):
        log_path = tmp_path / "logs" / "narrator.log"

        setup_logging(str(log_path), "INFO")
        logging.info("camera opened")
        logging.debug("hidden")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_path.read_text()
        assert "INFO - camera opened" in text
        assert "hidden" not in text

    def test_speech_library_loggers_quieted(self, tmp_path):
        setup_logging(str(tmp_path / "narrator.log"), "INFO")

        assert logging.getLogger("gtts").level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_debug_level_keeps_library_detail(self, tmp_path):
        setup_logging(str(tmp_path / "narrator.log"), "DEBUG")

        assert logging.getLogger("gtts").level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.DEBUG

    def test_lines_carry_thread_name(self, tmp_path):
        log_path = tmp_path / "narrator.log"
        setup_logging(str(log_path), "INFO")

        thread = threading.Thread(target=lambda: logging.info("tick"), name="NarrationLoop")
        thread.start()
        thread.join()
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "NarrationLoop - INFO - tick" in log_path.read_text()
