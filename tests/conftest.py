"""
metadep Test Configuration and Fixtures

Provides recording listeners and a controllable clock for dispatch tests.
"""

import pytest
from typing import Callable, List, Optional, Tuple

from metadep.dependencies import (
    MetadataDependencyRegistry,
    NotificationListener,
    PrimaryConsumer,
)


class RecordingConsumer(PrimaryConsumer):
    """
    Primary consumer that records every (upstream, downstream) call.

    An optional on_notify hook runs inside the callback, which lets tests
    register dependencies or trigger nested notifications mid-dispatch.
    """

    def __init__(self, kind: str = "test-consumer", on_notify: Optional[Callable] = None):
        self.kind = kind
        self.on_notify = on_notify
        self.calls: List[Tuple[str, Optional[str]]] = []

    def notify(self, upstream: str, downstream: Optional[str]) -> None:
        self.calls.append((upstream, downstream))
        if self.on_notify is not None:
            self.on_notify(upstream, downstream)

    def component_kind(self) -> str:
        return self.kind


class RecordingObserver(NotificationListener):
    """Generic observer that records every call."""

    def __init__(self, kind: str = "test-observer", on_notify: Optional[Callable] = None):
        self.kind = kind
        self.on_notify = on_notify
        self.calls: List[Tuple[str, Optional[str]]] = []

    def notify(self, upstream: str, downstream: Optional[str]) -> None:
        self.calls.append((upstream, downstream))
        if self.on_notify is not None:
            self.on_notify(upstream, downstream)

    def component_kind(self) -> str:
        return self.kind


class FakeClock:
    """Clock returning a value that only moves when advanced."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def consumer():
    return RecordingConsumer()


@pytest.fixture
def make_consumer():
    """Factory for primary consumers with custom kind or hook."""
    return RecordingConsumer


@pytest.fixture
def make_observer():
    """Factory for generic observers with custom kind or hook."""
    return RecordingObserver


@pytest.fixture
def registry(fake_clock):
    """Registry on a fake clock with no listeners."""
    return MetadataDependencyRegistry(clock=fake_clock)


@pytest.fixture
def wired_registry(registry, consumer):
    """Registry with the recording consumer installed as primary."""
    registry.add_notification_listener(consumer)
    return registry
