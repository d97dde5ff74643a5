"""
Narration: turns the stored face count into speech.
"""

from .loop import NarrationLoop, NarrationLoopConfig, create_narration_loop_from_config
from .speech import GTTSSpeechEngine, LogSpeechEngine, SpeechEngine, SpeechError, create_speech_engine

__all__ = [
    "NarrationLoop",
    "NarrationLoopConfig",
    "create_narration_loop_from_config",
    "GTTSSpeechEngine",
    "LogSpeechEngine",
    "SpeechEngine",
    "SpeechError",
    "create_speech_engine",
]
