"""Seeded two-dimensional Perlin noise and layered noise maps."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from .random_lcg import Random

_PERMUTATION_SIZE = 256
_UINT32_MASK = 2**32 - 1


@dataclass(frozen=True)
class Wave:
    """One layer of noise: a coordinate offset, a frequency and a weight."""

    seed: float
    frequency: float
    amplitude: float


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


def _grad(hash_value: int, x: float, y: float) -> float:
    h = hash_value & 3
    u, v = (x, y) if h < 2 else (y, x)
    return (u if h & 1 == 0 else -u) + (v if h & 2 == 0 else -v)


class PerlinNoise:
    """Perlin noise generator whose gradients are shuffled from a seed."""

    def __init__(self, seed: int) -> None:
        rng = Random(seed & _UINT32_MASK)
        table = list(range(_PERMUTATION_SIZE))
        for i in range(_PERMUTATION_SIZE - 1, 0, -1):
            j = rng.next_int(0, i)
            table[i], table[j] = table[j], table[i]
        self.permutation: tuple[int, ...] = tuple(table + table)

    def noise(self, x: float, y: float) -> float:
        """Noise value at a point, shifted from [-1, 1] into [0, 1]."""
        p = self.permutation
        fx = math.floor(x)
        fy = math.floor(y)
        cx = int(fx) & 255
        cy = int(fy) & 255
        x -= fx
        y -= fy

        u = _fade(x)
        v = _fade(y)

        aa = p[p[cx] + cy]
        ab = p[p[cx] + cy + 1]
        ba = p[p[cx + 1] + cy]
        bb = p[p[cx + 1] + cy + 1]

        result = _lerp(
            _lerp(_grad(aa, x, y), _grad(ba, x - 1, y), u),
            _lerp(_grad(ab, x, y - 1), _grad(bb, x - 1, y - 1), u),
            v,
        )
        return (result + 1.0) / 2.0

    def noise_map(
        self,
        width: int,
        height: int,
        scale: float,
        waves: Iterable[Wave],
        offset: tuple[float, float] = (0.0, 0.0),
    ) -> list[list[float]]:
        """Return a ``width`` by ``height`` grid indexed ``[x][y]``.

        Each cell is the amplitude-weighted mean of the waves' noise.
        """
        waves = list(waves)
        total_amplitude = sum(wave.amplitude for wave in waves)
        if total_amplitude == 0:
            total_amplitude = 1.0
        off_x, off_y = offset

        grid: list[list[float]] = []
        for x in range(width):
            sample_x = x * scale + off_x
            column = []
            for y in range(height):
                sample_y = y * scale + off_y
                value = sum(
                    wave.amplitude
                    * self.noise(
                        sample_x * wave.frequency + wave.seed,
                        sample_y * wave.frequency + wave.seed,
                    )
                    for wave in waves
                )
                column.append(value / total_amplitude)
            grid.append(column)
        return grid