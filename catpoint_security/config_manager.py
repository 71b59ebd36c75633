"""JSON-backed configuration for the security system."""

import json
import os
from dataclasses import asdict, fields
from typing import Optional, Dict, Any, Callable, List

from .models.config import SystemConfig
from .config.defaults import (
    DEFAULT_PATHS, VALID_IMAGE_SERVICES, VALID_REPOSITORY_BACKENDS, VALID_LOG_LEVELS
)
from .utils import ensure_directory_exists
from .logging_config import get_logger

logger = get_logger("config_manager")

ConfigChangeCallback = Callable[[SystemConfig], None]


class ConfigManager:
    """Holds the current ``SystemConfig``, persists it as JSON and tells
    registered callbacks whenever it changes.

    A missing file is created with defaults. A file that cannot be parsed is
    left alone and defaults are used in memory.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_PATHS["config_file"]
        self._config: Optional[SystemConfig] = None
        self._change_callbacks: List[ConfigChangeCallback] = []

        self.load_config()

    def load_config(self) -> SystemConfig:
        if not os.path.exists(self.config_path):
            self._config = SystemConfig()
            self.save_config()
            logger.info(f"Created default config at {self.config_path}")
            return self._config

        try:
            with open(self.config_path, 'r') as f:
                self._config = SystemConfig(**json.load(f))
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Unreadable config {self.config_path}: {e}. Using defaults.")
            self._config = SystemConfig()

        return self._config

    def save_config(self) -> None:
        if self._config is None:
            return

        ensure_directory_exists(os.path.dirname(self.config_path))
        with open(self.config_path, 'w') as f:
            json.dump(asdict(self._config), f, indent=2)

    def get_config(self) -> SystemConfig:
        return self._config if self._config is not None else self.load_config()

    def update_config(self, **kwargs) -> None:
        """Set the given fields, save, and notify callbacks. Unknown keys are ignored."""
        config = self.get_config()
        known = {f.name for f in fields(SystemConfig)}

        for key, value in kwargs.items():
            if key in known:
                setattr(config, key, value)
            else:
                logger.debug(f"Ignoring unknown config key: {key}")

        self.save_config()
        self._notify_callbacks()

    def validate_config(self) -> bool:
        """Check value ranges and option names of the current configuration."""
        config = self._config
        if config is None:
            return False

        threshold = config.confidence_threshold
        checks = [
            isinstance(threshold, (int, float)) and not isinstance(threshold, bool)
            and 0.0 <= threshold <= 100.0,
            config.image_service in VALID_IMAGE_SERVICES,
            config.repository_backend in VALID_REPOSITORY_BACKENDS,
            config.repository_backend != "sqlite" or bool(config.database_path),
            str(config.log_level).upper() in VALID_LOG_LEVELS,
        ]
        return all(checks)

    def register_change_callback(self, callback: ConfigChangeCallback) -> None:
        if callback not in self._change_callbacks:
            self._change_callbacks.append(callback)

    def unregister_change_callback(self, callback: ConfigChangeCallback) -> None:
        if callback in self._change_callbacks:
            self._change_callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in list(self._change_callbacks):
            try:
                callback(self._config)
            except Exception as e:
                logger.error(f"Config change callback {callback!r} failed: {e}", exc_info=True)

    def reset_to_defaults(self) -> None:
        self._config = SystemConfig()
        self.save_config()
        self._notify_callbacks()

    def export_config(self) -> Dict[str, Any]:
        return asdict(self._config) if self._config is not None else {}

    def import_config(self, config_dict: Dict[str, Any]) -> bool:
        """
        Replace the configuration with the given values.

        Args:
            config_dict: Field values for ``SystemConfig``

        Returns:
            True if the values were valid and applied. On False the previous
            configuration is kept.
        """
        try:
            candidate = SystemConfig(**config_dict)
        except (TypeError, ValueError) as e:
            logger.warning(f"Rejected config import: {e}")
            return False

        previous, self._config = self._config, candidate
        if not self.validate_config():
            self._config = previous
            logger.warning("Rejected config import: validation failed")
            return False

        self.save_config()
        self._notify_callbacks()
        return True
