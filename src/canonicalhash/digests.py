"""Pluggable 64-bit digest families.

The hashing engine only talks to the ``Accumulator`` protocol, so any
running digest that can be reset, fed bytes and finalized to an unsigned
64-bit integer can be used. Two families are used by default:

- ``Crc64``: table-driven CRC-64 (ECMA-182 polynomial, reflected), the
  primary digest.
- ``Fnv64``: FNV-1 64-bit, used only to break ties between keys whose
  primary digests collide.
"""

import hashlib
from functools import lru_cache
from typing import Protocol

import xxhash

MASK64 = (1 << 64) - 1

CRC64_ECMA = 0xC96C5795D7870F42
CRC64_ISO = 0xD800000000000000

FNV64_OFFSET = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3


class Accumulator(Protocol):
    """Protocol for running 64-bit digest state.

    Implement this protocol to plug a custom digest into ``HashOptions``.
    """

    def reset(self) -> None:
        """Return the digest to its initial state."""
        ...

    def write(self, data: bytes) -> None:
        """Feed bytes into the digest."""
        ...

    def finalize(self) -> int:
        """Return the current digest as an unsigned 64-bit integer."""
        ...


@lru_cache(maxsize=None)
def make_crc64_table(poly: int) -> tuple[int, ...]:
    """Build the 256-entry lookup table for a reflected CRC-64 polynomial."""
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ poly
            else:
                crc >>= 1
        table.append(crc)
    return tuple(table)


class Crc64:
    """Table-driven CRC-64.

    With the default ECMA polynomial this is the CRC-64/XZ variant: the
    check value of ``b"123456789"`` is ``0x995DC9BBDF1939FA``.
    """

    def __init__(self, poly: int = CRC64_ECMA):
        self._table = make_crc64_table(poly)
        self._crc = 0

    def reset(self) -> None:
        self._crc = 0

    def write(self, data: bytes) -> None:
        table = self._table
        crc = ~self._crc & MASK64
        for byte in data:
            crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
        self._crc = ~crc & MASK64

    def finalize(self) -> int:
        return self._crc


class Fnv64:
    """FNV-1 64-bit (multiply, then xor)."""

    def __init__(self):
        self._h = FNV64_OFFSET

    def reset(self) -> None:
        self._h = FNV64_OFFSET

    def write(self, data: bytes) -> None:
        h = self._h
        for byte in data:
            h = (h * FNV64_PRIME) & MASK64
            h ^= byte
        self._h = h

    def finalize(self) -> int:
        return self._h


class Fnv64a(Fnv64):
    """FNV-1a 64-bit (xor, then multiply)."""

    def write(self, data: bytes) -> None:
        h = self._h
        for byte in data:
            h ^= byte
            h = (h * FNV64_PRIME) & MASK64
        self._h = h


class HashlibDigest:
    """Any ``hashlib`` algorithm, truncated to its first 64 bits.

    Example:
        >>> from functools import partial
        >>> options = HashOptions(digest_factory=partial(HashlibDigest, "sha256"))
    """

    def __init__(self, name: str = "sha256"):
        self.name = name
        self._h = hashlib.new(name)

    def reset(self) -> None:
        self._h = hashlib.new(self.name)

    def write(self, data: bytes) -> None:
        self._h.update(data)

    def finalize(self) -> int:
        return int.from_bytes(self._h.digest()[:8], "big")


class Xxh64:
    """XXH64 from the ``xxhash`` package."""

    def __init__(self, seed: int = 0):
        self._h = xxhash.xxh64(seed=seed)

    def reset(self) -> None:
        self._h.reset()

    def write(self, data: bytes) -> None:
        self._h.update(data)

    def finalize(self) -> int:
        return self._h.intdigest()
