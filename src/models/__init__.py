"""
Typed models for the face count narrator.

These models provide strong typing for frames, detections, narration events
and the YAML configuration tree.
"""

from .frame import FrameData
from .detection import BoundingBox
from .narration import NarrationEvent
from .config import (
    Config,
    CameraConfig,
    DetectionConfig,
    DisplayConfig,
    StorageConfig,
    SpeechConfig,
    NarrationConfig,
    PipelineConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "BoundingBox",
    # Narration
    "NarrationEvent",
    # Config
    "Config",
    "CameraConfig",
    "DetectionConfig",
    "DisplayConfig",
    "StorageConfig",
    "SpeechConfig",
    "NarrationConfig",
    "PipelineConfig",
]
