"""
metadep Notification Log

Optional audit trail of every callback the dispatcher makes. Bounded: the
oldest records are discarded once max_records is reached.

Queryable by upstream, downstream, dispatch phase and notification number,
and exportable to JSON for debugging.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Set
import json
import logging

logger = logging.getLogger(__name__)


class DispatchPhase(Enum):
    """Which dispatch phase made a callback."""
    INSTANCE = "instance"    # direct downstream of the changed identifier
    CLASS = "class"          # downstream of the changed identifier's class
    OBSERVER = "observer"    # generic observer, no downstream


@dataclass(frozen=True)
class NotificationRecord:
    """A single dispatched callback."""
    notification: int
    depth: int
    upstream: str
    downstream: Optional[str]
    phase: DispatchPhase
    component: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notification": self.notification,
            "depth": self.depth,
            "upstream": self.upstream,
            "downstream": self.downstream,
            "phase": self.phase.value,
            "component": self.component,
            "timestamp": self.timestamp.isoformat(),
        }


class NotificationLog:
    """Bounded, queryable record of dispatched notifications."""

    DEFAULT_MAX_RECORDS = 10000

    def __init__(self, max_records: int = DEFAULT_MAX_RECORDS):
        self._max_records = max_records
        self._records: Deque[NotificationRecord] = deque(maxlen=max_records)

    @property
    def max_records(self) -> int:
        return self._max_records

    def log(self, record: NotificationRecord) -> None:
        self._records.append(record)

    def query(
        self,
        upstream: Optional[str] = None,
        downstream: Optional[str] = None,
        phases: Optional[Set[DispatchPhase]] = None,
        notification: Optional[int] = None,
        limit: int = 100,
    ) -> List[NotificationRecord]:
        """
        Query the log.

        Args:
            upstream: Filter by changed identifier
            downstream: Filter by notified identifier
            phases: Filter by dispatch phase(s)
            notification: Filter by notification number
            limit: Maximum records to return

        Returns:
            Matching records, newest first
        """
        results = []
        for record in reversed(self._records):
            if upstream is not None and record.upstream != upstream:
                continue
            if downstream is not None and record.downstream != downstream:
                continue
            if phases and record.phase not in phases:
                continue
            if notification is not None and record.notification != notification:
                continue

            results.append(record)
            if len(results) >= limit:
                break

        return results

    def get_recent(self, count: int = 100) -> List[NotificationRecord]:
        """Most recent records, newest first."""
        return list(reversed(self._records))[:count]

    def export_to_json(self, path: Path, limit: int = DEFAULT_MAX_RECORDS) -> int:
        """Write records (newest first) to a JSON file. Returns the count."""
        records = self.get_recent(limit)
        data = {
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "record_count": len(records),
            "records": [r.to_dict() for r in records],
        }

        with open(path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info(f"Exported {len(records)} notification records to {path}")
        return len(records)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_records": self._max_records,
            "records": [r.to_dict() for r in self._records],
        }

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
