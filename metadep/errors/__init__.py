"""
errors/ - Error taxonomy

Structured exceptions raised by the dependency registry.
"""

from .taxonomy import (
    ErrorCategory,
    ErrorCode,
    MetadepError,
    InvalidIdentifierError,
    InvalidDependencyError,
    SelfDependencyError,
    CyclicDependencyError,
    ListenerConfigurationError,
    NotificationDepthExceededError,
    ConfigurationError,
)

__all__ = [
    "ErrorCategory",
    "ErrorCode",
    "MetadepError",
    "InvalidIdentifierError",
    "InvalidDependencyError",
    "SelfDependencyError",
    "CyclicDependencyError",
    "ListenerConfigurationError",
    "NotificationDepthExceededError",
    "ConfigurationError",
]
