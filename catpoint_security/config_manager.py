"""Configuration management with JSON file persistence."""

import json
import os
from dataclasses import asdict, fields
from typing import Optional, Callable, List

from .models.config import SystemConfig
from .config.defaults import DEFAULT_PATHS, IMAGE_SERVICES
from .logging_config import get_logger
from .utils import ensure_directory_exists

logger = get_logger("config_manager")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigManager:
    """Manages system configuration with file persistence and change callbacks."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_PATHS["config_file"]
        self._config: Optional[SystemConfig] = None
        self._config_change_callbacks: List[Callable[[SystemConfig], None]] = []

        self.load_config()

    def load_config(self) -> SystemConfig:
        """Load configuration from file or create default."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    config_dict = json.load(f)
                known = {f.name for f in fields(SystemConfig)}
                unknown = set(config_dict) - known
                if unknown:
                    logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
                self._config = SystemConfig(
                    **{k: v for k, v in config_dict.items() if k in known}
                )
            except (json.JSONDecodeError, TypeError, AttributeError) as e:
                logger.warning(f"Error loading config {self.config_path}: {e}. Using defaults.")
                self._config = SystemConfig()
        else:
            self._config = SystemConfig()
            self.save_config()

        return self._config

    def save_config(self) -> None:
        """Save current configuration to file."""
        if self._config is None:
            return

        directory = os.path.dirname(self.config_path)
        if directory:
            ensure_directory_exists(directory)

        with open(self.config_path, 'w') as f:
            json.dump(asdict(self._config), f, indent=2)

    def get_config(self) -> SystemConfig:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def update_config(self, **kwargs) -> None:
        """Update configuration with new values; unknown keys are ignored."""
        if self._config is None:
            self.load_config()

        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        self.save_config()
        self._notify_callbacks()

    def reset_to_defaults(self) -> None:
        """Replace the configuration with defaults and save it."""
        self._config = SystemConfig()
        self.save_config()
        self._notify_callbacks()

    def validate_config(self) -> bool:
        """Validate current configuration.

        Values of the wrong type make the configuration invalid rather than
        raising.
        """
        if self._config is None:
            return False

        for path in (self._config.database_path, self._config.log_dir):
            if not isinstance(path, str) or not path:
                return False

        if self._config.image_service not in IMAGE_SERVICES:
            return False

        if self._config.cascade_path is not None and not isinstance(self._config.cascade_path, str):
            return False

        # Validate detection parameters
        if not _is_number(self._config.scale_factor) or self._config.scale_factor <= 1.0:
            return False
        if not _is_int(self._config.min_neighbors) or self._config.min_neighbors < 0:
            return False
        if not _is_int(self._config.min_detection_size) or self._config.min_detection_size < 1:
            return False

        if self._config.fake_seed is not None and not _is_int(self._config.fake_seed):
            return False

        if not _is_int(self._config.history_size) or self._config.history_size < 1:
            return False

        if not isinstance(self._config.log_level, str) or \
                self._config.log_level.upper() not in LOG_LEVELS:
            return False

        return True

    def register_change_callback(self, callback: Callable[[SystemConfig], None]) -> None:
        """Register a callback to be called when config changes."""
        if callback not in self._config_change_callbacks:
            self._config_change_callbacks.append(callback)

    def unregister_change_callback(self, callback: Callable[[SystemConfig], None]) -> None:
        """Unregister a config change callback."""
        if callback in self._config_change_callbacks:
            self._config_change_callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in self._config_change_callbacks:
            try:
                callback(self._config)
            except Exception as e:
                logger.error(f"Error in config change callback: {e}")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
