"""Deterministic structural hashing for arbitrary Python objects.

This module provides the public entry points for computing stable 64-bit
fingerprints of nested values, which are essential for cache keys,
deduplication and change detection.
"""

from typing import Any

from .engine import digest
from .options import HashOptions


def hash_value(obj: Any, options: HashOptions | None = None) -> int:
    """
    Generate a deterministic 64-bit hash for an arbitrary Python object.

    Strategy:
    1. Scalars are written as fixed-width little-endian bytes
    2. Maps and sets are visited in the order of their members' own digests,
       so insertion order never matters
    3. Records (dataclasses, pydantic models, named tuples, plain objects)
       contribute their type name and their included fields by name

    Args:
        obj: Any Python object to hash
        options: Digest families and field directive settings (defaults
            to CRC-64 with an FNV-1 fallback and the "hash" directive key)

    Returns:
        Unsigned 64-bit integer

    Raises:
        UnsupportedKindError: If obj contains a value with no hashing rule
        UnresolvableCollisionError: If two map keys collide under both
            digest families
        NotStringerError: If a "string" field has no text form

    Example:
        >>> hash_value({"b": 2, "a": 1}) == hash_value({"a": 1, "b": 2})
        True
    """
    if options is None:
        options = HashOptions()
    return digest(obj, options, options.digest_factory)


def canonical_hash(obj: Any, options: HashOptions | None = None) -> str:
    """
    Generate a deterministic hash as a 16-character hex string.

    Same code as ``hash_value``, zero-padded, for use as a text key.

    Example:
        >>> len(canonical_hash([1, 2, 3]))
        16
    """
    return f"{hash_value(obj, options):016x}"
