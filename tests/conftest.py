"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  device_id: 0
  resolution: [640, 480]
  fps: 30

detection:
  model_path: "haarcascade_frontalface_default.xml"
  scale_factor: 1.1
  min_neighbors: 3

display:
  enabled: false

storage:
  backend: "file"
  count_path: "data/face_count.log"
  settle_delay_s: 0.5
  write_mode: "sequenced"
  file_mode: 0644

narration:
  interval_s: 1.0
  template: "Human face {count} count detected"
  speech:
    engine: "log"
    audio_dir: "audio"
    language: "en"

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "device_id": 0,
            "resolution": [640, 480],
            "fps": 30,
        },
        "detection": {
            "model_path": "haarcascade_frontalface_default.xml",
            "scale_factor": 1.1,
            "min_neighbors": 3,
        },
        "display": {
            "enabled": False,
            "label_placement": "centered",
        },
        "storage": {
            "backend": "file",
            "count_path": "data/face_count.log",
            "settle_delay_s": 0.5,
            "write_mode": "sequenced",
        },
        "narration": {
            "interval_s": 1.0,
            "template": "Human face {count} count detected",
            "speech": {"engine": "log"},
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
