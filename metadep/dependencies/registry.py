"""
metadep Metadata Dependency Registry

Facade composing the dependency graph, the listener set, the dispatcher and
the timing recorder. One instance is built at process start (see
metadep.bootstrap.build_registry) and handed to every collaborator that
registers dependencies or triggers notifications.

Usage:
    registry = MetadataDependencyRegistry()
    registry.add_notification_listener(metadata_service)
    registry.register_dependency("MID:physical#Foo", "MID:entity#Foo")
    registry.notify_downstream("MID:physical#Foo")
"""

from __future__ import annotations
from typing import Callable, FrozenSet, Optional, Tuple
import logging
import time

from metadep.identifiers import IdentifierScheme

from .dispatcher import DEFAULT_MAX_DEPTH, NotificationDispatcher
from .graph import DependencyGraph
from .listeners import ListenerSet, NotificationListener
from .notification_log import NotificationLog
from .report import EdgeEntry, RegistryReport, TimingEntry
from .timing import TimingRecorder, TimingStatistic

logger = logging.getLogger(__name__)


class MetadataDependencyRegistry:
    """
    Tracks dependencies between metadata items and notifies listeners.

    Not thread safe: the surrounding process coordinator guarantees a single
    logical thread, so no locking is done here.
    """

    def __init__(
        self,
        scheme: Optional[IdentifierScheme] = None,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
        trace_level: int = 0,
        notification_log: Optional[NotificationLog] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._graph = DependencyGraph(scheme)
        self._listeners = ListenerSet()
        self._timing = TimingRecorder(clock)
        self._notification_log = notification_log
        self._dispatcher = NotificationDispatcher(
            self._graph,
            self._listeners,
            timing=self._timing,
            notification_log=notification_log,
            max_depth=max_depth,
            trace_level=trace_level,
        )

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return self._dispatcher

    @property
    def notification_log(self) -> Optional[NotificationLog]:
        return self._notification_log

    @property
    def depth(self) -> int:
        return self._dispatcher.depth

    # -------------------------------------------------------------------------
    # Dependencies
    # -------------------------------------------------------------------------

    def register_dependency(self, upstream: str, downstream: str) -> None:
        self._graph.register_dependency(upstream, downstream)

    def deregister_dependency(self, upstream: str, downstream: str) -> None:
        self._graph.deregister_dependency(upstream, downstream)

    def deregister_dependencies(self, downstream: str) -> None:
        self._graph.deregister_dependencies(downstream)

    def is_valid_dependency(self, upstream: str, downstream: str) -> bool:
        return self._graph.is_valid_dependency(upstream, downstream)

    def get_downstream(self, upstream: str) -> FrozenSet[str]:
        return self._graph.get_downstream(upstream)

    def get_upstream(self, downstream: str) -> FrozenSet[str]:
        return self._graph.get_upstream(downstream)

    # -------------------------------------------------------------------------
    # Notification
    # -------------------------------------------------------------------------

    def notify_downstream(self, upstream: str) -> None:
        self._dispatcher.notify_downstream(upstream)

    def add_notification_listener(self, listener: NotificationListener) -> None:
        self._listeners.add(listener)

    def remove_notification_listener(self, listener: NotificationListener) -> None:
        self._listeners.remove(listener)

    @property
    def primary_consumer(self) -> Optional[NotificationListener]:
        return self._listeners.primary

    def get_observers(self) -> Tuple[NotificationListener, ...]:
        return self._listeners.observers()

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def set_trace(self, level: int) -> None:
        """Adjust dispatch logging verbosity. Has no functional effect."""
        self._dispatcher.set_trace(level)
        logger.info(f"Metadata notification trace level set to {level}")

    def get_timings(self) -> Tuple[TimingStatistic, ...]:
        """Accumulated dispatch time per component, cheapest first."""
        return self._timing.get_timings()

    def reset_timings(self) -> None:
        self._timing.reset()

    def report(self, include_edges: bool = False) -> RegistryReport:
        """Build a diagnostic snapshot of the registry."""
        primary = self._listeners.primary
        return RegistryReport(
            edge_count=len(self._graph),
            identifier_count=len(self._graph.identifiers()),
            primary_consumer=primary.component_kind() if primary else None,
            observers=[o.component_kind() for o in self._listeners.observers()],
            trace_level=self._dispatcher.trace_level,
            depth=self._dispatcher.depth,
            max_depth=self._dispatcher.max_depth,
            notification_count=self._dispatcher.notification_count,
            timings=[
                TimingEntry(component=t.component, duration_ms=t.duration_ms)
                for t in self.get_timings()
            ],
            edges=[
                EdgeEntry(upstream=e.upstream, downstream=e.downstream)
                for e in self._graph.edges()
            ] if include_edges else [],
        )
