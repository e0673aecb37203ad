"""Deterministic multi-octave noise for organic outlines. No engine imports.

The lookup table is a fixed sum of low-frequency sinusoids plus a small
closed-form hash term, built once per NoiseField and never mutated.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

# Table amplitudes: 0.4 + 0.3 + 0.2 from the sinusoids, 0.1 from the hash.
_WAVES = ((0.1, 0.4), (0.3, 0.3), (0.7, 0.2))
_HASH_AMPLITUDE = 0.1
# Index spread: inputs are scaled by 100 before table lookup.
_INDEX_SCALE = 100.0
# Octave falloff
_AMPLITUDE_DECAY = 0.5
_FREQUENCY_GAIN = 1.8


def _hash_unit(i: NDArray[np.float64]) -> NDArray[np.float64]:
    """Fractional part of sin(i * 12.9898) * 43758.5453, in [0, 1)."""
    v = np.sin(i * 12.9898) * 43758.5453
    return v - np.floor(v)


def build_noise_table(size: int = 512) -> NDArray[np.float64]:
    idx = np.arange(size, dtype=np.float64)
    table = np.zeros(size, dtype=np.float64)
    for freq, amp in _WAVES:
        table += np.sin(idx * freq) * amp
    table += _hash_unit(idx) * _HASH_AMPLITUDE
    table.setflags(write=False)
    return table


class NoiseField:
    """Smooth pseudo-noise sampled from a precomputed table."""

    def __init__(self, size: int = 512) -> None:
        if size < 1:
            raise ValueError(f"Noise table size must be positive, got {size}")
        self._table = build_noise_table(size)

    @property
    def table(self) -> NDArray[np.float64]:
        return self._table

    def _lookup(self, v: float) -> float:
        n = len(self._table)
        # Truncated remainder keeps the sign of v, then abs() folds it back.
        idx = abs(int(math.fmod(math.floor(v * _INDEX_SCALE), n)))
        return float(self._table[idx])

    def sample(self, x: float, y: float, seed: float = 0, octaves: int = 4) -> float:
        """Blend ``octaves`` table lookups; result is clamped to [-1, 1]."""
        if octaves < 1:
            return 0.0

        value = 0.0
        amplitude = 1.0
        frequency = 1.0
        total = 0.0

        for _ in range(octaves):
            nx = self._lookup(x * frequency + seed)
            ny = self._lookup(y * frequency + seed * 2)
            value += (nx + ny) / 2 * amplitude
            total += amplitude
            amplitude *= _AMPLITUDE_DECAY
            frequency *= _FREQUENCY_GAIN

        return max(-1.0, min(1.0, value / total))


_fields: dict[int, NoiseField] = {}


def get_noise_field(size: int = 512) -> NoiseField:
    """Shared read-only field per table size."""
    field = _fields.get(size)
    if field is None:
        field = _fields[size] = NoiseField(size)
    return field
