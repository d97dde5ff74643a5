from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RuntimeContext:
    """Holds the shared stop signal and component references; avoids global singletons."""

    config: Any
    source: Any
    detector: Any
    display: Any
    store: Any
    writer: Any
    speech: Any
    stop_event: threading.Event = field(default_factory=threading.Event)

    def request_stop(self) -> None:
        self.stop_event.set()

    @property
    def stopping(self) -> bool:
        return self.stop_event.is_set()
