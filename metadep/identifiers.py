"""
metadep/identifiers.py - Metadata identification strings

Identifiers are opaque string keys. The default convention is:

    MID:<class>              class-level identifier (a provider/kind)
    MID:<class>#<instance>   instance-level identifier

The registry never parses identifiers itself; it only calls the functions
exposed by an IdentifierScheme, so a host system with another convention
can supply its own.
"""

from __future__ import annotations
from typing import Any, Callable, Optional

from metadep.errors import InvalidIdentifierError


MID_PREFIX = "MID:"
INSTANCE_DELIMITER = "#"


# =============================================================================
# DEFAULT CONVENTION
# =============================================================================

def is_valid(metadata_id: Any) -> bool:
    """Check an identifier follows the MID: convention."""
    if not isinstance(metadata_id, str) or not metadata_id.startswith(MID_PREFIX):
        return False

    body = metadata_id[len(MID_PREFIX):]
    class_part, sep, instance_part = body.partition(INSTANCE_DELIMITER)
    if not class_part.strip():
        return False
    if sep and not instance_part.strip():
        return False
    return True


def is_class_level(metadata_id: str) -> bool:
    """True if the identifier names a provider rather than an instance."""
    return INSTANCE_DELIMITER not in metadata_id


def get_metadata_class(metadata_id: str) -> str:
    """Return the bare class part, e.g. "MID:entity#Foo" -> "entity"."""
    body = metadata_id[len(MID_PREFIX):] if metadata_id.startswith(MID_PREFIX) else metadata_id
    return body.split(INSTANCE_DELIMITER, 1)[0]


def get_metadata_instance(metadata_id: str) -> Optional[str]:
    """Return the instance part, or None for a class-level identifier."""
    if is_class_level(metadata_id):
        return None
    return metadata_id.split(INSTANCE_DELIMITER, 1)[1]


def create(metadata_class: str, instance: Optional[str] = None) -> str:
    """Build an identifier from a class name and optional instance key."""
    if not metadata_class or not metadata_class.strip():
        raise InvalidIdentifierError(metadata_class, "metadata class required")
    if INSTANCE_DELIMITER in metadata_class:
        raise InvalidIdentifierError(
            metadata_class, f"metadata class cannot contain '{INSTANCE_DELIMITER}'"
        )

    metadata_id = MID_PREFIX + metadata_class
    if instance is not None:
        if not instance.strip():
            raise InvalidIdentifierError(instance, "instance key cannot be blank")
        metadata_id += INSTANCE_DELIMITER + instance
    return metadata_id


def class_of(metadata_id: str) -> str:
    """Class-level identifier for any identifier (class ids map to themselves)."""
    if is_class_level(metadata_id):
        return metadata_id
    return metadata_id.split(INSTANCE_DELIMITER, 1)[0]


# =============================================================================
# SCHEME
# =============================================================================

class IdentifierScheme:
    """
    The identifier functions the registry depends on.

    Defaults to the MID: convention above. Any callable can be replaced:

        scheme = IdentifierScheme(
            class_of=lambda i: i.split("/")[0],
            is_class_level=lambda i: "/" not in i,
            is_valid=lambda i: isinstance(i, str) and bool(i.strip()),
        )
    """

    def __init__(
        self,
        class_of: Callable[[str], str] = class_of,
        is_class_level: Callable[[str], bool] = is_class_level,
        is_valid: Callable[[Any], bool] = is_valid,
    ):
        self._class_of = class_of
        self._is_class_level = is_class_level
        self._is_valid = is_valid

    def is_valid(self, metadata_id: Any) -> bool:
        if metadata_id is None:
            return False
        return self._is_valid(metadata_id)

    def is_class_level(self, metadata_id: str) -> bool:
        return self._is_class_level(metadata_id)

    def class_of(self, metadata_id: str) -> str:
        return self._class_of(metadata_id)

    def component_of(self, metadata_id: str) -> str:
        """Label used to attribute dispatch time to the owner of an identifier."""
        if self._is_class_level(metadata_id):
            return metadata_id
        return self._class_of(metadata_id)

    def require_valid(self, metadata_id: Any, role: str = "metadata") -> str:
        """Return the identifier unchanged or raise InvalidIdentifierError."""
        if not self.is_valid(metadata_id):
            raise InvalidIdentifierError(
                metadata_id,
                f"{role} identifier is an invalid metadata identification string",
            )
        return metadata_id


DEFAULT_SCHEME = IdentifierScheme()
