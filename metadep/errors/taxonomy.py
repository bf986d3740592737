"""
errors/taxonomy.py - Error classification for the dependency registry

Every exception raised by metadep carries an ErrorCode and ErrorCategory so
callers can branch on the code instead of parsing messages.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(Enum):
    """Error categories."""
    IDENTIFIER = "identifier"
    DEPENDENCY = "dependency"
    LISTENER = "listener"
    NOTIFICATION = "notification"
    CONFIGURATION = "configuration"


class ErrorCode(Enum):
    """Specific error codes."""

    # Identifier (1xxx)
    ID_INVALID = 1001

    # Dependency (2xxx)
    DEP_INVALID = 2001
    DEP_SELF = 2002
    DEP_CYCLE = 2003

    # Listener (3xxx)
    LSN_INVALID = 3001
    LSN_DUPLICATE_PRIMARY = 3002

    # Notification (4xxx)
    NTF_DEPTH = 4001

    # Configuration (5xxx)
    CFG_INVALID = 5001


class MetadepError(Exception):
    """Base exception for all registry errors."""

    code: ErrorCode = ErrorCode.DEP_INVALID
    category: ErrorCategory = ErrorCategory.DEPENDENCY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "category": self.category.value,
            "error": type(self).__name__,
            "message": str(self),
        }


class InvalidIdentifierError(MetadepError, ValueError):
    """Raised for a null, blank or malformed metadata identifier."""

    code = ErrorCode.ID_INVALID
    category = ErrorCategory.IDENTIFIER

    def __init__(self, metadata_id: Any, reason: str = "invalid metadata identification string"):
        self.metadata_id = metadata_id
        super().__init__(f"{reason} ('{metadata_id}')")


class InvalidDependencyError(MetadepError, ValueError):
    """Raised when a dependency edge is rejected."""

    code = ErrorCode.DEP_INVALID
    category = ErrorCategory.DEPENDENCY

    def __init__(self, upstream: str, downstream: str, message: Optional[str] = None):
        self.upstream = upstream
        self.downstream = downstream
        super().__init__(
            message
            or f"Invalid dependency between upstream '{upstream}' and downstream '{downstream}'"
        )


class SelfDependencyError(InvalidDependencyError):
    """Raised when an identifier is registered as its own dependency."""

    code = ErrorCode.DEP_SELF

    def __init__(self, metadata_id: str):
        super().__init__(
            metadata_id,
            metadata_id,
            f"Upstream dependency cannot be the same as the downstream dependency ('{metadata_id}')",
        )


class CyclicDependencyError(InvalidDependencyError):
    """Raised when an edge would make an identifier depend on itself."""

    code = ErrorCode.DEP_CYCLE

    def __init__(self, upstream: str, downstream: str, cycle: List[str]):
        self.cycle = cycle
        super().__init__(
            upstream,
            downstream,
            f"Cyclic dependency detected: {' -> '.join(cycle)}",
        )


class ListenerConfigurationError(MetadepError):
    """Raised for listener wiring mistakes, e.g. a second primary consumer."""

    code = ErrorCode.LSN_INVALID
    category = ErrorCategory.LISTENER

    def __init__(self, message: str, code: ErrorCode = ErrorCode.LSN_INVALID):
        self.code = code
        super().__init__(message)


class NotificationDepthExceededError(MetadepError, RuntimeError):
    """Raised when nested notify_downstream calls exceed the configured depth."""

    code = ErrorCode.NTF_DEPTH
    category = ErrorCategory.NOTIFICATION

    def __init__(self, upstream: str, max_depth: int):
        self.upstream = upstream
        self.max_depth = max_depth
        super().__init__(
            f"Notification depth {max_depth} exceeded while notifying downstream of '{upstream}'"
        )


class ConfigurationError(MetadepError):
    """Raised for invalid configuration values."""

    code = ErrorCode.CFG_INVALID
    category = ErrorCategory.CONFIGURATION
