"""
Narration loop: polls the count store and announces faces out loud.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from models.narration import NarrationEvent
from narration.speech import SpeechEngine
from storage.count_store import CountStore


@dataclass
class NarrationLoopConfig:
    """
    Configuration for the narration loop.

    Attributes:
        interval_s: Seconds between ticks.
        template: Sentence template; {count} is replaced by the stored text.
        max_read_failures: Consecutive store read failures before the loop gives up.
        repeat_while_present: Announce on every tick while the count is non-zero.
            When False, a value is announced once until it changes.
    """
    interval_s: float = 1.0
    template: str = "Human face {count} count detected"
    max_read_failures: int = 10
    repeat_while_present: bool = True


class NarrationLoop:
    """
    Fixed-interval reader of the count store.

    Each tick reads the record; anything other than "0" (compared
    case-insensitively) is spoken verbatim through the speech engine. A
    missing or empty record means no count is available yet and is skipped.
    """

    def __init__(
        self,
        store: CountStore,
        speech: SpeechEngine,
        config: Optional[NarrationLoopConfig] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        self.store = store
        self.speech = speech
        self.config = config or NarrationLoopConfig()
        self.stop_event = stop_event or threading.Event()
        self.exit_reason: Optional[str] = None
        self.consecutive_read_failures = 0
        self.announcements = 0
        self._last_announced: Optional[str] = None

    def run(self) -> None:
        self.exit_reason = None
        logging.info(f"Narration loop started (interval={self.config.interval_s}s)")

        while not self.stop_event.wait(self.config.interval_s):
            try:
                self.tick()
            except Exception as e:
                if self.consecutive_read_failures >= self.config.max_read_failures:
                    logging.error(
                        f"Count store unreadable after {self.consecutive_read_failures} attempts, "
                        f"stopping narration: {e}"
                    )
                    self.exit_reason = "read_failure"
                else:
                    logging.exception(f"Narration loop error: {e}")
                    self.exit_reason = "error"
                break

        if self.exit_reason is None:
            self.exit_reason = "stopped"
        logging.info(f"Narration loop stopped (reason={self.exit_reason}, announcements={self.announcements})")

    def stop(self) -> None:
        self.stop_event.set()

    def tick(self) -> Optional[NarrationEvent]:
        """
        Run one narration tick.

        Returns the NarrationEvent handed to the speech engine, or None when
        nothing was announced. Re-raises the store error once
        max_read_failures consecutive reads have failed.
        """
        content = self._read_count()
        if not content:
            return None

        if content.lower() == "0":
            self._last_announced = None
            return None

        if not self.config.repeat_while_present and content == self._last_announced:
            return None

        event = NarrationEvent(text=self.config.template.format(count=content), count_text=content)
        self._last_announced = content

        try:
            self.speech.speak(event.text)
            self.announcements += 1
        except Exception as e:
            logging.error(f"Speech synthesis failed: {e}")
        return event

    def _read_count(self) -> Optional[str]:
        try:
            content = self.store.read()
        except (OSError, ValueError) as e:
            self.consecutive_read_failures += 1
            if self.consecutive_read_failures >= self.config.max_read_failures:
                raise
            logging.warning(
                f"Count store read failed ({self.consecutive_read_failures}/"
                f"{self.config.max_read_failures}): {e}"
            )
            return None

        self.consecutive_read_failures = 0
        return content


def create_narration_loop_from_config(config, ctx) -> NarrationLoop:
    """
    Factory: build a NarrationLoop from the typed Config and a RuntimeContext.
    """
    narration_cfg = config.narration
    loop_config = NarrationLoopConfig(
        interval_s=narration_cfg.interval_s,
        template=narration_cfg.template,
        max_read_failures=narration_cfg.max_read_failures,
        repeat_while_present=narration_cfg.repeat_while_present,
    )
    return NarrationLoop(ctx.store, ctx.speech, loop_config, stop_event=ctx.stop_event)
