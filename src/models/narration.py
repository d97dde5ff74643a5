"""
NarrationEvent model for spoken announcements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import time


@dataclass(frozen=True)
class NarrationEvent:
    """
    One announcement produced by a narration tick.
    
    Attributes:
        text: The sentence handed to the speech engine.
        count_text: The stored count record the sentence was built from.
        timestamp: Unix timestamp of the tick.
    """
    text: str
    count_text: str
    timestamp: float = field(default_factory=time.time)
