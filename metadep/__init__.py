"""
metadep - Metadata dependency registry

Tracks which derived metadata items depend on which others, rejects
dependency cycles, and notifies the components that recompute items when
something upstream changes.
"""

__version__ = "1.0.0"

from metadep.errors import (
    MetadepError,
    InvalidIdentifierError,
    InvalidDependencyError,
    SelfDependencyError,
    CyclicDependencyError,
    ListenerConfigurationError,
    NotificationDepthExceededError,
    ConfigurationError,
)
from metadep.identifiers import IdentifierScheme, DEFAULT_SCHEME
from metadep.dependencies import (
    DependencyGraph,
    MetadataDependencyRegistry,
    NotificationListener,
    PrimaryConsumer,
    CallbackObserver,
    TimingStatistic,
)
from metadep.bootstrap import build_registry, load_config

__all__ = [
    "__version__",
    "MetadepError",
    "InvalidIdentifierError",
    "InvalidDependencyError",
    "SelfDependencyError",
    "CyclicDependencyError",
    "ListenerConfigurationError",
    "NotificationDepthExceededError",
    "ConfigurationError",
    "IdentifierScheme",
    "DEFAULT_SCHEME",
    "DependencyGraph",
    "MetadataDependencyRegistry",
    "NotificationListener",
    "PrimaryConsumer",
    "CallbackObserver",
    "TimingStatistic",
    "build_registry",
    "load_config",
]
