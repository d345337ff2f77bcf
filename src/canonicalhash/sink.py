"""Byte/scalar stream feeding a 64-bit accumulator."""

import struct

from .digests import MASK64, Accumulator


class HashSink:
    """Append-only stream over an ``Accumulator``.

    Scalars are always packed little-endian at a fixed width so that the
    byte stream, and therefore the digest, does not depend on the host.
    """

    def __init__(self, accumulator: Accumulator):
        self.accumulator = accumulator

    def reset(self) -> None:
        self.accumulator.reset()

    def write_bytes(self, data: bytes) -> None:
        self.accumulator.write(bytes(data))

    def write_scalar(self, fmt: str, *values) -> None:
        """Pack values with a ``struct`` format code (e.g. ``"q"``, ``"d"``)."""
        self.accumulator.write(struct.pack("<" + fmt, *values))

    def finalize(self) -> int:
        return self.accumulator.finalize() & MASK64
