"""
bootstrap/app.py - Registry construction and logging setup

The registry is process-wide state: build it once at startup with
build_registry() and pass the instance to every collaborator.
"""

from __future__ import annotations
from typing import Optional
import logging

from metadep.dependencies import MetadataDependencyRegistry, NotificationLog
from metadep.identifiers import IdentifierScheme

from .config import LoggingConfig, MetadepConfig, load_config

logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig) -> None:
    """Apply level, format and optional log file to the root logger."""
    handlers = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=config.level.upper(),
        format=config.format,
        handlers=handlers,
        force=True,
    )


def build_registry(
    config: Optional[MetadepConfig] = None,
    scheme: Optional[IdentifierScheme] = None,
) -> MetadataDependencyRegistry:
    """
    Create the registry described by config.

    Args:
        config: Configuration; loaded with load_config() when omitted
        scheme: Identifier functions supplied by the host system

    Returns:
        A new MetadataDependencyRegistry
    """
    if config is None:
        config = load_config()
    config.validate()

    registry_config = config.registry
    notification_log = None
    if registry_config.record_notifications:
        notification_log = NotificationLog(registry_config.notification_log_size)

    registry = MetadataDependencyRegistry(
        scheme=scheme,
        max_depth=registry_config.max_depth,
        trace_level=registry_config.trace_level,
        notification_log=notification_log,
    )

    logger.info(
        f"Metadata dependency registry built ({config.environment}): "
        f"trace={registry_config.trace_level}, max_depth={registry_config.max_depth}, "
        f"recording={'on' if notification_log is not None else 'off'}"
    )
    return registry
