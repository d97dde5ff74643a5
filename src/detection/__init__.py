"""
Face detection module.

Wraps the face classifier behind the Detector interface.
"""

from .base import Detector
from .cascade import ClassifierLoadError, HaarCascadeDetector

__all__ = ['Detector', 'ClassifierLoadError', 'HaarCascadeDetector']
