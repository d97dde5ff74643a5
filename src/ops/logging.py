"""
Logging setup for the narrator process.

Both loops log through the root logger; the thread name in every line shows
which loop (DetectionLoop, NarrationLoop, CountWriter) produced it.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(threadName)s - %(levelname)s - %(message)s"

# gTTS and the HTTP stack underneath it log every synthesis request
CHATTY_LOGGERS = ("gtts", "urllib3")


def setup_logging(log_path: str, log_level: str) -> None:
    """
    Send log lines to log_path and to stderr.

    Replaces any handlers installed earlier in the process. Speech library
    loggers stay at WARNING unless log_level is DEBUG.
    """
    log_dir = os.path.dirname(log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    level = getattr(logging, log_level)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_path), logging.StreamHandler()],
        force=True,
    )

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
