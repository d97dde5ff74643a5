"""
Observation layer: where frames come from.

The detection loop only talks to an ObservationSource, so a webcam, a video
file or a network stream can be swapped without touching the pipeline.
"""

from .base import ObservationSource, ObservationConfig
from .opencv_source import OpenCVSource, OpenCVSourceConfig, create_source_from_config

__all__ = [
    "ObservationSource",
    "ObservationConfig",
    "OpenCVSource",
    "OpenCVSourceConfig",
    "create_source_from_config",
]
