"""
metadep Dependency Graph

Directed acyclic graph of metadata identifiers.

Two mirrored adjacency mappings are maintained:
- upstream-keyed:   upstream   -> {downstream, ...}
- downstream-keyed: downstream -> {upstream, ...}

INVARIANT: D in downstream(U) <=> U in upstream(D), and no mapping ever
holds an empty set.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple
from collections import deque
import logging

from metadep.errors import CyclicDependencyError, SelfDependencyError
from metadep.identifiers import DEFAULT_SCHEME, IdentifierScheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class DependencyEdge:
    """An edge in the dependency graph."""
    upstream: str
    downstream: str

    def to_dict(self) -> Dict[str, str]:
        return {"upstream": self.upstream, "downstream": self.downstream}


class DependencyGraph:
    """
    Upstream/downstream relationships between metadata identifiers.

    Not thread safe: callers guarantee a single logical thread.
    """

    def __init__(self, scheme: Optional[IdentifierScheme] = None):
        self._scheme = scheme or DEFAULT_SCHEME

        # key: upstream dependency; value: downstream dependencies
        self._upstream_keyed: Dict[str, Set[str]] = {}

        # key: downstream dependency; value: upstream dependencies
        self._downstream_keyed: Dict[str, Set[str]] = {}

    @property
    def scheme(self) -> IdentifierScheme:
        return self._scheme

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def register_dependency(self, upstream: str, downstream: str) -> None:
        """
        Record that downstream must be notified when upstream changes.

        Registering an existing edge is a no-op.

        Raises:
            InvalidIdentifierError: either identifier is malformed
            SelfDependencyError: upstream == downstream
            CyclicDependencyError: the edge would close a cycle
        """
        if not self.is_valid_dependency(upstream, downstream):
            if upstream == downstream:
                raise SelfDependencyError(upstream)
            raise CyclicDependencyError(
                upstream, downstream, self._find_cycle(upstream, downstream)
            )

        self._upstream_keyed.setdefault(upstream, set()).add(downstream)
        self._downstream_keyed.setdefault(downstream, set()).add(upstream)

    def deregister_dependency(self, upstream: str, downstream: str) -> None:
        """Remove a single edge. Safe if the edge does not exist."""
        self._scheme.require_valid(upstream, "upstream")
        self._scheme.require_valid(downstream, "downstream")

        downstreams = self._upstream_keyed.get(upstream)
        if downstreams is not None:
            downstreams.discard(downstream)
            if not downstreams:
                del self._upstream_keyed[upstream]

        upstreams = self._downstream_keyed.get(downstream)
        if upstreams is not None:
            upstreams.discard(upstream)
            if not upstreams:
                del self._downstream_keyed[downstream]

    def deregister_dependencies(self, downstream: str) -> None:
        """Remove every edge where the identifier is the downstream."""
        self._scheme.require_valid(downstream, "downstream")

        upstreams = self._downstream_keyed.get(downstream)
        if not upstreams:
            return

        to_delete = list(upstreams)
        for upstream in to_delete:
            self.deregister_dependency(upstream, downstream)

        logger.debug(f"Deregistered {len(to_delete)} upstream dependencies of {downstream}")

    def clear(self) -> None:
        """Remove every edge."""
        self._upstream_keyed.clear()
        self._downstream_keyed.clear()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def is_valid_dependency(self, upstream: str, downstream: str) -> bool:
        """
        Check whether upstream -> downstream may be registered.

        An existing edge is always valid. Otherwise every transitive upstream
        of the proposed upstream is collected, and the edge is valid only if
        the proposed downstream is not among them. A self-loop is never
        valid.
        """
        self._scheme.require_valid(upstream, "upstream")
        self._scheme.require_valid(downstream, "downstream")

        if upstream == downstream:
            return False

        downstreams = self._upstream_keyed.get(upstream)
        if downstreams is not None and downstream in downstreams:
            return True

        return downstream not in self._collect_upstreams(upstream)

    def _collect_upstreams(self, start: str) -> Set[str]:
        """Every identifier reachable from start by following edges backward."""
        result: Set[str] = set()
        to_process = [start]

        while to_process:
            current = to_process.pop()
            for upstream in self._downstream_keyed.get(current, ()):
                if upstream not in result:
                    result.add(upstream)
                    to_process.append(upstream)

        return result

    def _find_cycle(self, upstream: str, downstream: str) -> List[str]:
        """Path downstream -> ... -> upstream -> downstream that the edge would close."""
        parents: Dict[str, Optional[str]] = {downstream: None}
        queue = deque([downstream])

        while queue:
            current = queue.popleft()
            if current == upstream:
                break
            for child in sorted(self._upstream_keyed.get(current, ())):
                if child not in parents:
                    parents[child] = current
                    queue.append(child)

        if upstream not in parents:
            return [upstream, downstream]

        path = [upstream]
        while parents[path[-1]] is not None:
            path.append(parents[path[-1]])
        path.reverse()
        path.append(downstream)
        return path

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_downstream(self, upstream: str) -> FrozenSet[str]:
        """Snapshot of identifiers directly downstream of upstream."""
        self._scheme.require_valid(upstream, "upstream")
        return frozenset(self._upstream_keyed.get(upstream, ()))

    def get_upstream(self, downstream: str) -> FrozenSet[str]:
        """Snapshot of identifiers directly upstream of downstream."""
        self._scheme.require_valid(downstream, "downstream")
        return frozenset(self._downstream_keyed.get(downstream, ()))

    def has_dependency(self, upstream: str, downstream: str) -> bool:
        """Check if the exact edge upstream -> downstream exists."""
        return downstream in self._upstream_keyed.get(upstream, ())

    def get_all_downstream(self, upstream: str) -> FrozenSet[str]:
        """Transitive closure of downstream identifiers."""
        self._scheme.require_valid(upstream, "upstream")
        result: Set[str] = set()
        to_process = [upstream]

        while to_process:
            current = to_process.pop()
            for downstream in self._upstream_keyed.get(current, ()):
                if downstream not in result:
                    result.add(downstream)
                    to_process.append(downstream)

        return frozenset(result)

    def get_all_upstream(self, downstream: str) -> FrozenSet[str]:
        """Transitive closure of upstream identifiers."""
        self._scheme.require_valid(downstream, "downstream")
        return frozenset(self._collect_upstreams(downstream))

    def edges(self) -> Tuple[DependencyEdge, ...]:
        """All edges, sorted by upstream then downstream."""
        return tuple(sorted(
            DependencyEdge(upstream, downstream)
            for upstream, downstreams in self._upstream_keyed.items()
            for downstream in downstreams
        ))

    def identifiers(self) -> FrozenSet[str]:
        """Every identifier taking part in at least one edge."""
        return frozenset(self._upstream_keyed) | frozenset(self._downstream_keyed)

    def __len__(self) -> int:
        return sum(len(d) for d in self._upstream_keyed.values())

    def __contains__(self, edge: Any) -> bool:
        if isinstance(edge, DependencyEdge):
            return self.has_dependency(edge.upstream, edge.downstream)
        if isinstance(edge, tuple) and len(edge) == 2:
            return self.has_dependency(edge[0], edge[1])
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for diagnostics."""
        return {
            "edge_count": len(self),
            "identifier_count": len(self.identifiers()),
            "edges": [e.to_dict() for e in self.edges()],
        }
