"""
Pipeline module for the face count narrator.

The detection side of the system:
- Frame acquisition from observation sources
- Face detection
- Count hand-off to the count writer
- Annotation and display
"""

from .engine import DetectionLoop, DetectionLoopConfig, LoopStats, create_detection_loop_from_config
from .display import CvDisplay, Display, NullDisplay, create_display
from .annotate import draw_detections, label_origin

__all__ = [
    "DetectionLoop",
    "DetectionLoopConfig",
    "LoopStats",
    "create_detection_loop_from_config",
    "CvDisplay",
    "Display",
    "NullDisplay",
    "create_display",
    "draw_detections",
    "label_origin",
]
