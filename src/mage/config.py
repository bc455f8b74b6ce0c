"""
Configuration Management for Gnosis Mage

Handles loading, saving, and managing configuration for the Mage system.
"""

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FORMATS = ("console", "structured")


@dataclass
class MageConfig:
    """Main configuration class for Gnosis Mage."""

    # Installation toggles
    debug: bool = False
    class_mode: bool = False
    moose: bool = False

    # Namespace settings
    default_namespace: str = "__main__"
    autoload_parents: bool = True

    # Diagnostic stream settings
    diagnostic_prefix: str = "[debug]"
    log_level: str = "DEBUG"
    log_format: str = "console"  # console, structured
    log_to_stdout: bool = True
    buffer_size: int = 1000

    def __post_init__(self):
        """Normalize values."""
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"log_level must be a logging level name, got {self.log_level!r}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {LOG_FORMATS}, got {self.log_format!r}")


class Config:
    """Global configuration singleton."""

    _instance: Optional[MageConfig] = None
    _lock = threading.RLock()
    _config_file: Optional[Path] = None

    @classmethod
    def initialize(cls, config_path: Optional[Path] = None, **kwargs) -> MageConfig:
        """Initialize configuration from file or kwargs."""
        with cls._lock:
            if config_path:
                cls._config_file = config_path
                cls._instance = cls.load_config(config_path)
            else:
                cls._instance = MageConfig(**kwargs)
            cls._apply_environment(cls._instance)
            return cls._instance

    @classmethod
    def get_instance(cls) -> MageConfig:
        """Get the configuration instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = MageConfig()
                cls._apply_environment(cls._instance)
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the current configuration."""
        with cls._lock:
            cls._instance = None
            cls._config_file = None

    @classmethod
    def _apply_environment(cls, config: MageConfig) -> None:
        """Apply MAGE_* environment overrides."""
        debug = os.environ.get("MAGE_DEBUG")
        if debug is not None:
            config.debug = debug.strip().lower() in ("1", "true", "yes", "on")

        namespace = os.environ.get("MAGE_DEFAULT_NAMESPACE")
        if namespace:
            config.default_namespace = namespace

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        instance = cls.get_instance()
        return getattr(instance, key, default)

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """Set a configuration value."""
        instance = cls.get_instance()
        if hasattr(instance, key):
            setattr(instance, key, value)

    @classmethod
    def load_config(cls, config_path: Path) -> MageConfig:
        """Load configuration from file."""
        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return MageConfig(**data)

        return MageConfig()

    @classmethod
    def save_config(cls, config_path: Optional[Path] = None) -> bool:
        """Save current configuration to file."""
        instance = cls.get_instance()
        path = config_path or cls._config_file

        if not path:
            path = Path.cwd() / ".mage" / "config.json"

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(asdict(instance), f, indent=2, default=str)
            return True
        except OSError as e:
            print(f"Error saving config to {path}: {e}")
            return False

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(cls.get_instance())

    @classmethod
    def update(cls, updates: Dict[str, Any]) -> None:
        """Update multiple configuration values."""
        instance = cls.get_instance()
        for key, value in updates.items():
            if hasattr(instance, key):
                setattr(instance, key, value)


def load_config(config_path: Optional[Path] = None) -> MageConfig:
    """Load configuration from file or use defaults."""
    return Config.initialize(config_path)


def save_config(config: MageConfig, config_path: Path) -> bool:
    """Save configuration to file."""
    Config._instance = config
    return Config.save_config(config_path)


def get_config() -> MageConfig:
    """Get the current configuration."""
    return Config.get_instance()
