"""
metadep Timing Recorder

Attributes wall-clock time spent inside notify_downstream to the component
responsible for it. Nested notifications split the outer frame: when an
inner frame starts, the time so far is charged to whoever was responsible,
and the clock restarts.

The accumulated statistics of one call tree therefore sum to the wall-clock
duration of its outermost notification.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
import time

UNATTRIBUTED = "unattributed"


@dataclass(frozen=True)
class TimingStatistic:
    """Accumulated dispatch time for one responsible component."""
    component: str
    duration_seconds: float

    @property
    def duration_ms(self) -> float:
        return self.duration_seconds * 1000.0

    def sort_key(self) -> Tuple[float, str]:
        return (self.duration_seconds, self.component)

    def __lt__(self, other: "TimingStatistic") -> bool:
        if not isinstance(other, TimingStatistic):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def to_dict(self) -> Dict[str, object]:
        return {
            "component": self.component,
            "duration_ms": round(self.duration_ms, 3),
        }


class TimingRecorder:
    """Per-component accumulation of nested dispatch time."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self._timings: Dict[str, float] = {}
        self._started: Optional[float] = None
        self._responsible: str = UNATTRIBUTED

    @property
    def responsible(self) -> str:
        return self._responsible

    def set_responsible(self, component: str) -> None:
        self._responsible = component

    def enter_frame(self) -> None:
        """Start a (possibly nested) notification frame."""
        now = self._clock()
        if self._started is not None:
            self._accumulate(now - self._started)
        self._started = now

    def exit_frame(self, remaining_depth: int) -> None:
        """Finish a frame; the outermost frame closes the clock."""
        if remaining_depth > 0 or self._started is None:
            return
        self._accumulate(self._clock() - self._started)
        self._started = None
        self._responsible = UNATTRIBUTED

    def _accumulate(self, duration: float) -> None:
        self._timings[self._responsible] = self._timings.get(self._responsible, 0.0) + duration

    def get_timings(self) -> Tuple[TimingStatistic, ...]:
        """Sorted snapshot, cheapest component first."""
        return tuple(sorted(
            TimingStatistic(component, duration)
            for component, duration in self._timings.items()
        ))

    def total_seconds(self) -> float:
        return sum(self._timings.values())

    def reset(self) -> None:
        self._timings.clear()
