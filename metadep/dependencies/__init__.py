"""
metadep Dependency & Notification Engine

Provides:
- DependencyGraph: mirrored upstream/downstream adjacency with cycle rejection
- NotificationDispatcher: instance, class and observer fan-out
- TimingRecorder: dispatch time per responsible component
- NotificationLog: optional audit trail of dispatched callbacks
- MetadataDependencyRegistry: facade composing the above
"""

from .graph import (
    DependencyGraph,
    DependencyEdge,
)
from .listeners import (
    NotificationListener,
    PrimaryConsumer,
    CallbackObserver,
    ListenerSet,
)
from .timing import (
    TimingRecorder,
    TimingStatistic,
    UNATTRIBUTED,
)
from .notification_log import (
    NotificationLog,
    NotificationRecord,
    DispatchPhase,
)
from .dispatcher import (
    NotificationDispatcher,
    DEFAULT_MAX_DEPTH,
)
from .registry import (
    MetadataDependencyRegistry,
)
from .report import (
    RegistryReport,
    TimingEntry,
    EdgeEntry,
)

__all__ = [
    # Graph
    "DependencyGraph",
    "DependencyEdge",
    # Listeners
    "NotificationListener",
    "PrimaryConsumer",
    "CallbackObserver",
    "ListenerSet",
    # Timing
    "TimingRecorder",
    "TimingStatistic",
    "UNATTRIBUTED",
    # Notification Log
    "NotificationLog",
    "NotificationRecord",
    "DispatchPhase",
    # Dispatcher
    "NotificationDispatcher",
    "DEFAULT_MAX_DEPTH",
    # Registry
    "MetadataDependencyRegistry",
    # Report
    "RegistryReport",
    "TimingEntry",
    "EdgeEntry",
]
