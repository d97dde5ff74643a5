"""
Face count narrator.

Watches a camera, draws a box around every face, keeps the latest face count
in a shared record and reads it out loud while faces are in view.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file
"""

import os
import sys
import argparse
import logging
import yaml
from typing import Dict, Any, Tuple, Optional

from detection.cascade import ClassifierLoadError, HaarCascadeDetector
from models.config import Config
from narration.loop import create_narration_loop_from_config
from narration.speech import create_speech_engine
from observation import create_source_from_config
from ops.logging import setup_logging
from ops.process import install_signal_handlers, restore_signal_handlers
from pipeline.display import create_display
from pipeline.engine import create_detection_loop_from_config
from runtime.context import RuntimeContext
from runtime.supervisor import Supervisor
from storage.count_store import create_count_store
from storage.writer import create_count_writer

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        if os.path.exists(config_path) and os.path.abspath(config_path) not in (
            os.path.abspath(local_overrides_path),
            os.path.abspath(base_path),
        ):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'detection', 'storage', 'narration', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    device_id = camera['device_id']
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (URL/path)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"
    resolution = camera.get('resolution')
    if resolution is not None:
        if not isinstance(resolution, list) or len(resolution) != 2:
            return False, "camera.resolution must be a list of [width, height]"
        if not all(isinstance(x, int) and x > 0 for x in resolution):
            return False, "camera.resolution values must be positive integers"
    if 'max_retries' in camera:
        if not isinstance(camera['max_retries'], int) or camera['max_retries'] <= 0:
            return False, "camera.max_retries must be a positive integer"

    # Detection
    detection = config.get('detection') or {}
    model_path = detection.get('model_path')
    if not isinstance(model_path, str) or not model_path:
        return False, "detection.model_path is required"
    if 'scale_factor' in detection:
        if not _is_number(detection['scale_factor']) or detection['scale_factor'] <= 1.0:
            return False, "detection.scale_factor must be a number greater than 1"
    if 'min_neighbors' in detection:
        if not isinstance(detection['min_neighbors'], int) or detection['min_neighbors'] < 0:
            return False, "detection.min_neighbors must be a non-negative integer"

    # Display (optional)
    display = config.get('display') or {}
    if display.get('label_placement', 'centered') not in ('centered', 'legacy'):
        return False, "display.label_placement must be one of: centered, legacy"

    # Storage
    storage = config.get('storage') or {}
    if storage.get('backend', 'file') not in ('file', 'memory'):
        return False, "storage.backend must be one of: file, memory"
    if storage.get('backend', 'file') == 'file':
        if not isinstance(storage.get('count_path'), str) or not storage.get('count_path'):
            return False, "storage.count_path is required for the file backend"
    if storage.get('write_mode', 'sequenced') not in ('sequenced', 'per_frame'):
        return False, "storage.write_mode must be one of: sequenced, per_frame"
    if 'settle_delay_s' in storage:
        if not _is_number(storage['settle_delay_s']) or storage['settle_delay_s'] < 0:
            return False, "storage.settle_delay_s must be a non-negative number"
    if 'file_mode' in storage:
        mode = storage['file_mode']
        if isinstance(mode, bool) or not isinstance(mode, int) or not (0 <= mode <= 0o777):
            return False, "storage.file_mode must be an octal permission such as 0644"

    # Narration
    narration = config.get('narration') or {}
    if 'interval_s' in narration:
        if not _is_number(narration['interval_s']) or narration['interval_s'] <= 0:
            return False, "narration.interval_s must be a positive number"
    template = narration.get('template', "Human face {count} count detected")
    if not isinstance(template, str) or "{count}" not in template:
        return False, "narration.template must be a string containing {count}"
    try:
        template.format(count="1")
    except (KeyError, IndexError, ValueError) as e:
        return False, f"narration.template must only use the {{count}} placeholder: {e!r}"
    if 'max_read_failures' in narration:
        if not isinstance(narration['max_read_failures'], int) or narration['max_read_failures'] <= 0:
            return False, "narration.max_read_failures must be a positive integer"
    speech = narration.get('speech') or {}
    if speech.get('engine', 'gtts') not in ('gtts', 'log'):
        return False, "narration.speech.engine must be one of: gtts, log"

    # Logging
    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def build_context(config: Config) -> RuntimeContext:
    """
    Create every component the loops need.

    Raises:
        ClassifierLoadError: If the face classifier cannot be loaded.
    """
    detector = HaarCascadeDetector.load(
        config.detection.model_path,
        scale_factor=config.detection.scale_factor,
        min_neighbors=config.detection.min_neighbors,
        min_size=config.detection.min_size,
    )

    store = create_count_store(config.storage)
    # A record left by a previous run must not be announced
    store.clear()

    return RuntimeContext(
        config=config,
        source=create_source_from_config(config.camera.to_dict(), source_id="main-camera"),
        detector=detector,
        display=create_display(config.display),
        store=store,
        writer=create_count_writer(store, config.storage.write_mode),
        speech=create_speech_engine(config.narration.speech),
    )


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Face count narrator')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    args = parser.parse_args()

    raw_config = load_config(args.config)

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)

    logging.info("Starting face count narrator")

    try:
        ctx = build_context(config)
    except ClassifierLoadError as e:
        logging.error(str(e))
        sys.exit(1)

    detection_loop = create_detection_loop_from_config(config, ctx)
    narration_loop = create_narration_loop_from_config(config, ctx)
    supervisor = Supervisor(detection_loop, narration_loop, stop_event=ctx.stop_event)

    previous_handlers = install_signal_handlers(ctx.stop_event)
    try:
        reasons = supervisor.run()
    finally:
        restore_signal_handlers(previous_handlers)

    logging.info(f"Face count narrator stopped: {reasons}")


if __name__ == "__main__":
    main()
