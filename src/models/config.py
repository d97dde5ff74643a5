"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class CameraConfig:
    """Camera configuration."""
    device_id: Union[int, str] = 0
    resolution: Optional[List[int]] = None
    fps: Optional[int] = None
    max_retries: int = 3

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution"),
            fps=d.get("fps"),
            max_retries=d.get("max_retries", 3),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "max_retries": self.max_retries,
        }


@dataclass
class DetectionConfig:
    """Haar cascade detector configuration."""
    model_path: str = "haarcascade_frontalface_default.xml"
    scale_factor: float = 1.1
    min_neighbors: int = 3
    min_size: Optional[List[int]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            model_path=d.get("model_path", "haarcascade_frontalface_default.xml"),
            scale_factor=d.get("scale_factor", 1.1),
            min_neighbors=d.get("min_neighbors", 3),
            min_size=d.get("min_size"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "model_path": self.model_path,
            "scale_factor": self.scale_factor,
            "min_neighbors": self.min_neighbors,
        }
        if self.min_size is not None:
            d["min_size"] = self.min_size
        return d


@dataclass
class DisplayConfig:
    """Display window configuration."""
    enabled: bool = True
    window_title: str = "Face Detection"
    label_text: str = "Human"
    label_placement: str = "centered"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DisplayConfig":
        return cls(
            enabled=d.get("enabled", True),
            window_title=d.get("window_title", "Face Detection"),
            label_text=d.get("label_text", "Human"),
            label_placement=d.get("label_placement", "centered"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "window_title": self.window_title,
            "label_text": self.label_text,
            "label_placement": self.label_placement,
        }


@dataclass
class StorageConfig:
    """Count store configuration."""
    backend: str = "file"
    count_path: str = "face_count.log"
    settle_delay_s: float = 0.5
    write_mode: str = "sequenced"
    file_mode: int = 0o644

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StorageConfig":
        return cls(
            backend=d.get("backend", "file"),
            count_path=d.get("count_path", "face_count.log"),
            settle_delay_s=d.get("settle_delay_s", 0.5),
            write_mode=d.get("write_mode", "sequenced"),
            file_mode=d.get("file_mode", 0o644),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "count_path": self.count_path,
            "settle_delay_s": self.settle_delay_s,
            "write_mode": self.write_mode,
            "file_mode": self.file_mode,
        }


@dataclass
class SpeechConfig:
    """Speech synthesis configuration."""
    engine: str = "gtts"
    audio_dir: str = "audio"
    language: str = "en"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SpeechConfig":
        return cls(
            engine=d.get("engine", "gtts"),
            audio_dir=d.get("audio_dir", "audio"),
            language=d.get("language", "en"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "engine": self.engine,
            "audio_dir": self.audio_dir,
            "language": self.language,
        }


@dataclass
class NarrationConfig:
    """Narration loop configuration."""
    interval_s: float = 1.0
    template: str = "Human face {count} count detected"
    max_read_failures: int = 10
    repeat_while_present: bool = True
    speech: SpeechConfig = field(default_factory=SpeechConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NarrationConfig":
        return cls(
            interval_s=d.get("interval_s", 1.0),
            template=d.get("template", "Human face {count} count detected"),
            max_read_failures=d.get("max_read_failures", 10),
            repeat_while_present=d.get("repeat_while_present", True),
            speech=SpeechConfig.from_dict(d.get("speech", {}) or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval_s": self.interval_s,
            "template": self.template,
            "max_read_failures": self.max_read_failures,
            "repeat_while_present": self.repeat_while_present,
            "speech": self.speech.to_dict(),
        }


@dataclass
class PipelineConfig:
    """Detection loop tuning."""
    stats_log_interval_s: float = 60.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PipelineConfig":
        return cls(stats_log_interval_s=d.get("stats_log_interval_s", 60.0))

    def to_dict(self) -> Dict[str, Any]:
        return {"stats_log_interval_s": self.stats_log_interval_s}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    narration: NarrationConfig = field(default_factory=NarrationConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    log_path: str = "logs/face_count_narrator.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            detection=DetectionConfig.from_dict(d.get("detection", {}) or {}),
            display=DisplayConfig.from_dict(d.get("display", {}) or {}),
            storage=StorageConfig.from_dict(d.get("storage", {}) or {}),
            narration=NarrationConfig.from_dict(d.get("narration", {}) or {}),
            pipeline=PipelineConfig.from_dict(d.get("pipeline", {}) or {}),
            log_path=d.get("log_path", "logs/face_count_narrator.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        return {
            "camera": self.camera.to_dict(),
            "detection": self.detection.to_dict(),
            "display": self.display.to_dict(),
            "storage": self.storage.to_dict(),
            "narration": self.narration.to_dict(),
            "pipeline": self.pipeline.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
