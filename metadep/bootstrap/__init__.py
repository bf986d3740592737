"""
bootstrap/ - Configuration and registry construction
"""

from .config import (
    MetadepConfig,
    RegistryConfig,
    LoggingConfig,
    load_config,
)
from .app import (
    build_registry,
    configure_logging,
)

__all__ = [
    "MetadepConfig",
    "RegistryConfig",
    "LoggingConfig",
    "load_config",
    "build_registry",
    "configure_logging",
]
