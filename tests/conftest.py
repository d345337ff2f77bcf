"""Pytest configuration and shared fixtures for canonicalhash tests."""

from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from canonicalhash import Crc64, HashOptions


# --- Test digests ---

class ConstantDigest:
    """Digest that maps every input to the same code."""

    def __init__(self, code: int = 42):
        self.code = code

    def reset(self):
        pass

    def write(self, data: bytes):
        pass

    def finalize(self) -> int:
        return self.code


class CollidingDigest:
    """CRC-64, except that the given payloads all digest to the same code."""

    def __init__(self, payloads: set[bytes], code: int = 7):
        self.payloads = payloads
        self.code = code
        self._buf = bytearray()

    def reset(self):
        self._buf.clear()

    def write(self, data: bytes):
        self._buf.extend(data)

    def finalize(self) -> int:
        if bytes(self._buf) in self.payloads:
            return self.code
        crc = Crc64()
        crc.write(bytes(self._buf))
        return crc.finalize()


class RecordingDigest:
    """Keeps every written chunk so tests can inspect the byte stream."""

    def __init__(self):
        self.chunks: list[bytes] = []

    def reset(self):
        self.chunks = []

    def write(self, data: bytes):
        self.chunks.append(data)

    def finalize(self) -> int:
        return len(b"".join(self.chunks))


# --- Sample record types ---

@dataclass
class Person:
    name: str
    age: int
    metadata: dict = field(default_factory=dict)


@dataclass
class FullName:
    fname: str
    lname: str


@dataclass
class TaggedItem:
    name: str
    tags: list = field(default_factory=list, metadata={"hash": "set"})
    session: str = field(default="", metadata={"hash": "ignore"})


@pytest.fixture
def colliding_options():
    """Options whose primary digest collides on the keys "a" and "b"."""
    return HashOptions(digest_factory=partial(CollidingDigest, {b"a", b"b"}))


@pytest.fixture
def always_colliding_options():
    """Options whose primary and fallback digests collide on everything."""
    return HashOptions(digest_factory=ConstantDigest, fallback_digest_factory=ConstantDigest)
