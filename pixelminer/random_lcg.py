"""Deterministic linear congruential generator used for world generation."""

from __future__ import annotations

import struct

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 4294967296  # 2**32
_UINT64_MASK = 2**64 - 1


def _to_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


class Random:
    """Seeded generator producing single-precision floats and bounded integers."""

    def __init__(self, seed: int) -> None:
        # A negative seed is taken as its unsigned 64-bit pattern.
        self._state = seed & _UINT64_MASK

    def next_float(self) -> float:
        """Advance the generator and return a value in [0, 1]."""
        self._state = (_MULTIPLIER * self._state + _INCREMENT) % _MODULUS
        return _to_float32(self._state) / _MODULUS

    def next_int(self, low: int, high: int) -> int:
        """Return an integer drawn from ``low`` to ``high``."""
        span = _to_float32(high - low + 1)
        return low + int(_to_float32(self.next_float() * span))