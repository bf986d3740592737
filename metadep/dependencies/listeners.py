"""
metadep Notification Listeners

Listeners receive change notifications from the registry.

- The primary consumer (at most one) recomputes and caches metadata items.
  It is called with (upstream, downstream) once per affected downstream.
- Generic observers are called with (upstream, None) once per notification.

Every listener reports a component kind, used as the timing label, instead
of the registry inspecting its type.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple
import logging

from metadep.errors import ErrorCode, ListenerConfigurationError

logger = logging.getLogger(__name__)


class NotificationListener(ABC):
    """Receives notifications that an upstream identifier changed."""

    @abstractmethod
    def notify(self, upstream: str, downstream: Optional[str]) -> None:
        """Handle a change. Must be idempotent."""

    @abstractmethod
    def component_kind(self) -> str:
        """Label identifying this listener in timings and trace output."""

    def is_primary_consumer(self) -> bool:
        return False


class PrimaryConsumer(NotificationListener):
    """Base class for the single component that recomputes metadata."""

    def is_primary_consumer(self) -> bool:
        return True


class CallbackObserver(NotificationListener):
    """Generic observer wrapping a plain callable."""

    def __init__(self, kind: str, callback: Callable[[str, Optional[str]], None]):
        self._kind = kind
        self._callback = callback

    def notify(self, upstream: str, downstream: Optional[str]) -> None:
        self._callback(upstream, downstream)

    def component_kind(self) -> str:
        return self._kind

    def __repr__(self) -> str:
        return f"CallbackObserver({self._kind!r})"


class ListenerSet:
    """
    The primary slot plus an insertion-ordered set of generic observers.

    INVARIANT: at most one primary consumer is registered.
    """

    def __init__(self):
        self._primary: Optional[NotificationListener] = None
        # dict keys keep insertion order and give set semantics
        self._observers: Dict[NotificationListener, None] = {}

    @property
    def primary(self) -> Optional[NotificationListener]:
        return self._primary

    def observers(self) -> Tuple[NotificationListener, ...]:
        """Snapshot of generic observers in registration order."""
        return tuple(self._observers)

    def add(self, listener: NotificationListener) -> None:
        if listener is None:
            raise ListenerConfigurationError("Metadata notification listener required")

        if listener.is_primary_consumer():
            if self._primary is not None and self._primary is not listener:
                raise ListenerConfigurationError(
                    f"Cannot register more than one primary consumer "
                    f"('{self._primary.component_kind()}' already registered, "
                    f"rejected '{listener.component_kind()}')",
                    code=ErrorCode.LSN_DUPLICATE_PRIMARY,
                )
            self._primary = listener
            logger.info(f"Registered primary consumer {listener.component_kind()}")
            return

        if listener not in self._observers:
            self._observers[listener] = None
            logger.debug(f"Registered observer {listener.component_kind()}")

    def remove(self, listener: NotificationListener) -> None:
        if listener is None:
            raise ListenerConfigurationError("Metadata notification listener required")

        if listener.is_primary_consumer() and listener is self._primary:
            self._primary = None
            logger.info(f"Removed primary consumer {listener.component_kind()}")
            return

        if listener in self._observers:
            del self._observers[listener]
        else:
            logger.warning(f"Listener {listener.component_kind()} was not registered")

    def __len__(self) -> int:
        return len(self._observers) + (1 if self._primary is not None else 0)
