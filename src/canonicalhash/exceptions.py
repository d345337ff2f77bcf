"""Custom exceptions for canonicalhash."""

from typing import Any


class CanonicalHashError(Exception):
    """Base exception for all canonicalhash errors."""

    pass


class UnsupportedKindError(CanonicalHashError, TypeError):
    """Raised when a value has no hashing rule (functions, modules, ...)."""

    def __init__(self, message: str, value_type: type | None = None):
        self.value_type = value_type
        super().__init__(message)


class UnresolvableCollisionError(CanonicalHashError):
    """Raised when two distinct keys still collide after fallback hashing."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"unresolvable hash collision: {key!r}")


class NotStringerError(CanonicalHashError):
    """Raised when a field has the "string" directive but no text form."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f'canonicalhash: {field} has hash:"string" set, '
            "but does not implement __str__"
        )


class InvalidDirectiveError(CanonicalHashError, ValueError):
    """Raised when a field carries a directive that is not recognized."""

    pass
