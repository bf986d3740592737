"""
metadep Notification Dispatcher

Fans a change out to the listeners that care about it.

notify_downstream(upstream) runs three phases:
1. instance: the primary consumer is told about every identifier directly
   downstream of upstream.
2. class: if upstream is instance-level, the primary consumer is also told
   about every identifier downstream of upstream's class, skipping those
   already notified and upstream itself.
3. observer: every generic observer is told once, with no downstream.

Callbacks may register dependencies or call notify_downstream again. The
nested call runs to completion before the outer one continues. Listener
exceptions propagate to the caller unchanged.
"""

from __future__ import annotations
from typing import Optional, Set
import logging

from metadep.errors import ConfigurationError, NotificationDepthExceededError

from .graph import DependencyGraph
from .listeners import ListenerSet, NotificationListener
from .notification_log import DispatchPhase, NotificationLog, NotificationRecord
from .timing import TimingRecorder

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256

# trace level at which each phase is written to the log
_TRACE_THRESHOLDS = {
    DispatchPhase.INSTANCE: 1,
    DispatchPhase.CLASS: 1,
    DispatchPhase.OBSERVER: 2,
}


class NotificationDispatcher:
    """
    Walks the dependency graph and invokes listener callbacks.

    Not thread safe: callers guarantee a single logical thread.
    """

    def __init__(
        self,
        graph: DependencyGraph,
        listeners: ListenerSet,
        timing: Optional[TimingRecorder] = None,
        notification_log: Optional[NotificationLog] = None,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
        trace_level: int = 0,
    ):
        self._graph = graph
        self._listeners = listeners
        self._timing = timing or TimingRecorder()
        self._log = notification_log
        if max_depth is not None and max_depth < 0:
            raise ConfigurationError(f"max_depth must be >= 0 (got {max_depth})")
        self._max_depth = max_depth or None
        self._trace = 0
        self.set_trace(trace_level)

        self._depth = 0
        self._notification_count = 0

    @property
    def depth(self) -> int:
        """Current nesting depth (0 when no notification is running)."""
        return self._depth

    @property
    def notification_count(self) -> int:
        """Number of notify_downstream calls started so far."""
        return self._notification_count

    @property
    def max_depth(self) -> Optional[int]:
        return self._max_depth

    @property
    def trace_level(self) -> int:
        return self._trace

    @property
    def timing(self) -> TimingRecorder:
        return self._timing

    def set_trace(self, level: int) -> None:
        """0 = silent, 1 = primary dispatches, 2 = also observer dispatches."""
        if level < 0:
            raise ConfigurationError(f"Trace level must be >= 0 (got {level})")
        self._trace = level

    def notify_downstream(self, upstream: str) -> None:
        """Notify everything that depends on upstream. See module docstring."""
        scheme = self._graph.scheme
        scheme.require_valid(upstream, "upstream")

        if self._max_depth is not None and self._depth >= self._max_depth:
            raise NotificationDepthExceededError(upstream, self._max_depth)

        self._notification_count += 1
        number = self._notification_count
        self._timing.enter_frame()
        self._depth += 1

        try:
            # Callbacks may remove or replace the primary; re-read it per dispatch
            if self._listeners.primary is not None:
                notified: Set[str] = set()
                for downstream in sorted(self._graph.get_downstream(upstream)):
                    primary = self._listeners.primary
                    if primary is None:
                        break
                    self._dispatch(number, primary, upstream, downstream, DispatchPhase.INSTANCE)
                    notified.add(downstream)

                # A class-level upstream was fully handled by the instance phase
                if not scheme.is_class_level(upstream):
                    as_class = scheme.class_of(upstream)
                    for downstream in sorted(self._graph.get_downstream(as_class)):
                        if downstream in notified or downstream == upstream:
                            continue
                        primary = self._listeners.primary
                        if primary is None:
                            break
                        self._dispatch(number, primary, upstream, downstream, DispatchPhase.CLASS)

            for observer in self._listeners.observers():
                self._dispatch(number, observer, upstream, None, DispatchPhase.OBSERVER)
        finally:
            self._depth -= 1
            self._timing.exit_frame(self._depth)

    def _dispatch(
        self,
        number: int,
        listener: NotificationListener,
        upstream: str,
        downstream: Optional[str],
        phase: DispatchPhase,
    ) -> None:
        if downstream is None:
            component = listener.component_kind()
        else:
            component = self._graph.scheme.component_of(downstream)

        if self._trace >= _TRACE_THRESHOLDS[phase]:
            self._trace_line(number, upstream, downstream, phase, component)

        if self._log is not None:
            self._log.log(NotificationRecord(
                notification=number,
                depth=self._depth,
                upstream=upstream,
                downstream=downstream,
                phase=phase,
                component=component,
            ))

        self._timing.set_responsible(component)
        listener.notify(upstream, downstream)

    def _trace_line(
        self,
        number: int,
        upstream: str,
        downstream: Optional[str],
        phase: DispatchPhase,
        component: str,
    ) -> None:
        if phase is DispatchPhase.OBSERVER:
            message = f"{upstream} -> {upstream} [{component}]"
        elif phase is DispatchPhase.CLASS:
            message = f"{upstream} -> {downstream} [via class]"
        else:
            message = f"{upstream} -> {downstream}"
        logger.debug(f"{number:08x}{' ' * self._depth}{message}")
