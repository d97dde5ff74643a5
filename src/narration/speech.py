"""
Speech engines for narration.

GTTSSpeechEngine synthesizes with Google Text-to-Speech into an audio cache
directory and plays the clip with pygame. LogSpeechEngine only logs the
sentence, for headless machines and development.
"""

from __future__ import annotations

import hashlib
import logging
import os
import time
from typing import Optional, Protocol

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame
from gtts import gTTS


class SpeechError(RuntimeError):
    """Speech synthesis or playback failed."""


class SpeechEngine(Protocol):
    def speak(self, text: str) -> None:
        ...


class LogSpeechEngine:
    """Writes the sentence to the log instead of the speakers."""

    def __init__(self):
        self.spoken = []

    def speak(self, text: str) -> None:
        self.spoken.append(text)
        logging.info(f"[SPEECH] {text}")


class GTTSSpeechEngine:
    """
    Google TTS synthesis with a per-sentence mp3 cache.

    Clips are stored as <output_dir>/<sha1>.mp3 keyed on language and text, so a
    sentence repeated every tick is only downloaded once. speak() blocks until
    playback has finished.
    """

    def __init__(self, output_dir: str = "audio", language: str = "en", poll_interval_s: float = 0.1):
        self.output_dir = output_dir
        self.language = language
        self.poll_interval_s = poll_interval_s

    def audio_path(self, text: str) -> str:
        digest = hashlib.sha1(f"{self.language}:{text}".encode("utf-8")).hexdigest()
        return os.path.join(self.output_dir, f"{digest}.mp3")

    def speak(self, text: str) -> None:
        path = self.audio_path(text)
        try:
            if not os.path.exists(path):
                self._synthesize(text, path)
            self._play(path)
        except SpeechError:
            raise
        except Exception as e:
            raise SpeechError(f"Failed to speak {text!r}: {e}") from e

    def _synthesize(self, text: str, path: str) -> None:
        os.makedirs(self.output_dir, exist_ok=True)
        tmp_path = f"{path}.part"
        gTTS(text=text, lang=self.language).save(tmp_path)
        os.replace(tmp_path, path)
        logging.debug(f"Synthesized speech clip {path}")

    def _play(self, path: str) -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
        pygame.mixer.music.load(path)
        pygame.mixer.music.play()
        while pygame.mixer.music.get_busy():
            time.sleep(self.poll_interval_s)
        pygame.mixer.music.unload()


def create_speech_engine(speech_cfg) -> SpeechEngine:
    """Build the engine selected by narration.speech.engine."""
    if speech_cfg.engine == "log":
        return LogSpeechEngine()
    return GTTSSpeechEngine(output_dir=speech_cfg.audio_dir, language=speech_cfg.language)
