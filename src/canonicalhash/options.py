"""Per-call hashing options."""

from dataclasses import dataclass, field
from typing import Callable

from .digests import Accumulator, Crc64, Fnv64
from .introspection import DefaultIntrospector, FieldIntrospector

DEFAULT_DIRECTIVE_KEY = "hash"


@dataclass(frozen=True)
class HashOptions:
    """
    Options for a single hashing call.

    Attributes:
        digest_factory: Builds the primary accumulator (default CRC-64)
        directive_key: Metadata key that holds per-field directives
        fallback_digest_factory: Builds the accumulator used only to break
            collisions between map keys or set members (default FNV-1 64)
        introspector: Enumerates record fields
        slices_as_sets: Treat every ordered sequence as if it carried the
            "set" directive

    Example:
        >>> options = HashOptions(digest_factory=Xxh64, directive_key="fingerprint")
        >>> hash_value({"a": 1}, options)
    """
    digest_factory: Callable[[], Accumulator] = Crc64
    directive_key: str = DEFAULT_DIRECTIVE_KEY
    fallback_digest_factory: Callable[[], Accumulator] = Fnv64
    introspector: FieldIntrospector = field(default_factory=DefaultIntrospector)
    slices_as_sets: bool = False

    def __post_init__(self):
        if not callable(self.digest_factory):
            raise TypeError("digest_factory must be callable")
        if not callable(self.fallback_digest_factory):
            raise TypeError("fallback_digest_factory must be callable")
        if not isinstance(self.directive_key, str) or not self.directive_key:
            raise ValueError("directive_key must be a non-empty string")
