"""
bootstrap/config.py - Registry configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

from metadep.errors import ConfigurationError

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


# section -> key -> (type, nullable) for values read from a config file
_FIELD_TYPES = {
    "registry": {
        "trace_level": (int, False),
        "max_depth": (int, True),
        "record_notifications": (bool, False),
        "notification_log_size": (int, False),
    },
    "logging": {
        "level": (str, False),
        "format": (str, False),
        "log_file": (str, True),
    },
}


def _coerce(section: str, key: str, value: Any) -> Any:
    """Convert a config file value to the type of its field."""
    kind, nullable = _FIELD_TYPES[section][key]
    if value is None:
        if nullable:
            return None
        raise ConfigurationError(f"{section}.{key} cannot be null")

    if kind is bool and isinstance(value, str):
        return value.lower() == "true"
    if kind is int and isinstance(value, bool):
        raise ConfigurationError(f"{section}.{key} must be an integer (got {value!r})")
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"{section}.{key} must be {kind.__name__} (got {value!r})"
        ) from e


@dataclass
class RegistryConfig:
    """Dependency registry behaviour."""

    trace_level: int = 0
    max_depth: Optional[int] = 256  # None or 0 disables the guard
    record_notifications: bool = False
    notification_log_size: int = 10000

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        max_depth = os.getenv("METADEP_MAX_DEPTH", "256")
        return cls(
            trace_level=int(os.getenv("METADEP_TRACE_LEVEL", "0")),
            max_depth=int(max_depth) if max_depth.strip() else None,
            record_notifications=_env_bool("METADEP_RECORD_NOTIFICATIONS", "false"),
            notification_log_size=int(os.getenv("METADEP_NOTIFICATION_LOG_SIZE", "10000")),
        )

    def validate(self) -> None:
        if self.trace_level < 0:
            raise ConfigurationError(f"trace_level must be >= 0 (got {self.trace_level})")
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigurationError(f"max_depth must be >= 0 (got {self.max_depth})")
        if self.notification_log_size < 1:
            raise ConfigurationError(
                f"notification_log_size must be >= 1 (got {self.notification_log_size})"
            )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("METADEP_LOG_LEVEL", "INFO"),
            format=os.getenv("METADEP_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=os.getenv("METADEP_LOG_FILE"),
        )

    def validate(self) -> None:
        if not isinstance(logging.getLevelName(self.level.upper()), int):
            raise ConfigurationError(f"Unknown log level: {self.level}")


@dataclass
class MetadepConfig:
    """Root configuration."""

    environment: str = "development"

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "MetadepConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("METADEP_ENVIRONMENT", "development"),
            registry=RegistryConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "MetadepConfig":
        """Load configuration from a JSON file, on top of the environment."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {filepath}: {e}") from e

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "MetadepConfig":
        """Create config from dictionary."""
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]

        for section in ("registry", "logging"):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if key in _FIELD_TYPES[section]:
                    setattr(target, key, _coerce(section, key, value))
                else:
                    logger.warning(f"Ignoring unknown {section} setting: {key}")

        return config

    def validate(self) -> None:
        self.registry.validate()
        self.logging.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "registry": {
                "trace_level": self.registry.trace_level,
                "max_depth": self.registry.max_depth,
                "record_notifications": self.registry.record_notifications,
                "notification_log_size": self.registry.notification_log_size,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_file": self.logging.log_file,
            },
        }


DEFAULT_CONFIG_PATHS = (
    "./metadep.json",
    "./config/metadep.json",
)


def load_config(filepath: Optional[str] = None) -> MetadepConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file. When omitted the
            default locations are tried, then the environment alone.

    Returns:
        Validated MetadepConfig instance
    """
    if filepath:
        config = MetadepConfig.from_file(filepath)
    else:
        config = None
        for path in DEFAULT_CONFIG_PATHS:
            if Path(path).exists():
                config = MetadepConfig.from_file(path)
                logger.info(f"Loaded config from {path}")
                break
        if config is None:
            config = MetadepConfig.from_env()

    config.validate()
    return config
