"""Canonical structural hashing for Python values.

This package computes deterministic 64-bit fingerprints of arbitrary nested
values (scalars, sequences, maps, sets and records) such that values that
are equal under a configurable field policy always share a fingerprint.
Useful for cache keys, deduplication and change detection.

Example:
    from dataclasses import dataclass, field
    from canonicalhash import hash_value

    @dataclass
    class User:
        name: str
        tags: list = field(default_factory=list, metadata={"hash": "set"})
        session: str = field(default="", metadata={"hash": "ignore"})

    hash_value(User("ada", ["a", "b"], "s1")) == hash_value(User("ada", ["b", "a"], "s2"))
"""

from canonicalhash.digests import Accumulator, Crc64, Fnv64, Fnv64a, HashlibDigest, Xxh64
from canonicalhash.engine import HashEngine
from canonicalhash.exceptions import (
    CanonicalHashError,
    InvalidDirectiveError,
    NotStringerError,
    UnresolvableCollisionError,
    UnsupportedKindError,
)
from canonicalhash.hashing import canonical_hash, hash_value
from canonicalhash.introspection import DefaultIntrospector, Directive, FieldIntrospector, FieldSpec
from canonicalhash.options import HashOptions
from canonicalhash.ordering import MapOrderer
from canonicalhash.policy import FieldPolicy, Includable, IncludableMap
from canonicalhash.sink import HashSink

__all__ = [
    # Entry points
    "hash_value",
    "canonical_hash",
    # Configuration
    "HashOptions",
    "Directive",
    # Digests
    "Accumulator",
    "Crc64",
    "Fnv64",
    "Fnv64a",
    "HashlibDigest",
    "Xxh64",
    # Building blocks
    "HashEngine",
    "HashSink",
    "MapOrderer",
    "FieldPolicy",
    "FieldSpec",
    "FieldIntrospector",
    "DefaultIntrospector",
    "Includable",
    "IncludableMap",
    # Exceptions
    "CanonicalHashError",
    "UnsupportedKindError",
    "UnresolvableCollisionError",
    "NotStringerError",
    "InvalidDirectiveError",
]
__version__ = "0.2.0"
