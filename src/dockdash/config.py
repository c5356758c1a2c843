"""
Configuration management for dockdash.

This module provides configuration file support with YAML format,
user preferences, and default settings.

Features:
- YAML configuration file at ~/.config/dockdash/config.yaml
- Default values with user overrides
- Runtime binary and post-action refresh delay
- Color theme support
- Log level and location override

Architecture:
- ConfigManager: Main configuration interface
- Merges user config with defaults
- Provides typed access to settings
- Handles missing/invalid config gracefully
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class ColorTheme:
    """Color theme configuration (rich style strings)."""
    title: str = "bold color(86)"
    filter: str = "bold color(205)"
    help: str = "color(241)"
    running: str = "color(82)"
    stopped: str = "color(196)"
    paused: str = "color(226)"
    success: str = "color(82)"
    error: str = "bold color(196)"
    info: str = "color(86)"


@dataclass
class UIConfig:
    """UI-related configuration."""
    color_theme: ColorTheme = field(default_factory=ColorTheme)


@dataclass
class RuntimeConfig:
    """Container runtime configuration."""
    binary: str = "docker"
    refresh_delay: float = 2.0  # seconds between an action and its refresh


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file_path: Optional[str] = None  # None for default
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass
class AppConfig:
    """Main application configuration."""
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LogConfig = field(default_factory=LogConfig)


class ConfigManager:
    """Configuration manager with YAML file support."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".config" / "dockdash"
        self.config_file = self.config_dir / "config.yaml"
        self._config: AppConfig = AppConfig()
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if self.config_file.exists():
                with open(self.config_file, 'r') as f:
                    user_config = yaml.safe_load(f) or {}
                if not isinstance(user_config, dict):
                    raise ValueError("top level must be a mapping")
                self._config = self._merge_configs(AppConfig(), user_config)
                logger.debug(f"Loaded configuration from {self.config_file}")
            else:
                self.save_config()
                logger.info(f"Created default configuration at {self.config_file}")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config: {e}, using defaults")
            self._config = AppConfig()

    def save_config(self) -> None:
        """Save current configuration to YAML file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                yaml.dump(asdict(self._config), f, default_flow_style=False, indent=2)
            logger.debug(f"Saved configuration to {self.config_file}")
        except OSError as e:
            logger.error(f"Failed to save config: {e}")

    def get_config(self) -> AppConfig:
        return self._config

    def _merge_configs(self, default: AppConfig, user: Dict[str, Any]) -> AppConfig:
        """Merge user config with defaults."""
        if isinstance(user.get('runtime'), dict):
            self._merge_dataclass(default.runtime, user['runtime'])
        if isinstance(user.get('ui'), dict):
            if isinstance(user['ui'].get('color_theme'), dict):
                self._merge_dataclass(default.ui.color_theme, user['ui']['color_theme'])
        if isinstance(user.get('logging'), dict):
            self._merge_dataclass(default.logging, user['logging'])
        return default

    def _merge_dataclass(self, obj: Any, updates: Dict[str, Any]) -> None:
        """Merge scalar updates into dataclass object, coerced to the default's type."""
        for key, value in updates.items():
            if not hasattr(obj, key) or isinstance(value, dict):
                continue
            default = getattr(obj, key)
            try:
                setattr(obj, key, self._coerce(value, default))
            except (TypeError, ValueError):
                logger.error(f"Invalid value {value!r} for '{key}', using {default!r}")

    @staticmethod
    def _coerce(value: Any, default: Any) -> Any:
        if default is None:
            # Optional strings (file_path)
            if value is None or isinstance(value, str):
                return value
            raise TypeError(f"expected a string, got {type(value).__name__}")
        if isinstance(value, (list, bool)) or value is None:
            raise TypeError(f"expected {type(default).__name__}, got {type(value).__name__}")
        return type(default)(value)

    def get_runtime_binary(self) -> str:
        return self._config.runtime.binary

    def get_refresh_delay(self) -> float:
        """Seconds between a container action and its automatic refresh."""
        try:
            return max(0.0, float(self._config.runtime.refresh_delay))
        except (TypeError, ValueError):
            logger.warning(f"Invalid refresh_delay {self._config.runtime.refresh_delay!r}, using 2.0")
            return 2.0

    def get_color_theme(self) -> ColorTheme:
        return self._config.ui.color_theme

    def get_log_level(self) -> str:
        return str(self._config.logging.level).upper()

    def get_custom_log_path(self) -> Optional[str]:
        return self._config.logging.file_path
