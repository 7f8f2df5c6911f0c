"""Rolling, position-sensitive checksum used to cross-check byte ranges.

Not cryptographic. It is a fast equality pre-check that always runs next to a
byte-by-byte comparison.
"""
from typing import Union

_MASK = 0xFFFFFFFFFFFFFFFF


def _rotate_left(value: int, shift: int) -> int:
    shift %= 64
    if shift == 0:
        return value & _MASK
    return ((value << shift) | (value >> (64 - shift))) & _MASK


def window_checksum(window: Union[bytes, bytearray, memoryview]) -> int:
    """Checksum a single window: sum of ``rotl(byte, i mod 64) + byte``, wrapping at 64 bits."""
    total = 0
    for i, byte in enumerate(bytes(window)):
        total = (total + _rotate_left(byte, i % 64) + byte) & _MASK
    return total


class RollingChecksum:
    """Accumulates window checksums over a stream of windows."""

    def __init__(self):
        self.value = 0
        self.bytes_seen = 0

    def update(self, window: Union[bytes, bytearray, memoryview]) -> "RollingChecksum":
        self.value = (self.value + window_checksum(window)) & _MASK
        self.bytes_seen += len(window)
        return self

    def hexdigest(self) -> str:
        return f"{self.value:016X}"

    def __eq__(self, other):
        if not isinstance(other, RollingChecksum):
            return NotImplemented
        return self.value == other.value

    def __repr__(self):
        return f"RollingChecksum({self.hexdigest()}, bytes_seen={self.bytes_seen})"
