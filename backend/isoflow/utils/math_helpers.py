"""Math helpers — clamping, spread statistics. No engine imports."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

# Standard deviation that maps to a full 1.0 spread score.
STD_FULL_SCALE = 0.3


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def normalized_std(values: Sequence[float], empty: float = 0.5) -> float:
    """std / 0.3 clamped to [0, 1]. Returns ``empty`` for an empty vector."""
    if len(values) == 0:
        return empty
    std = float(np.std(np.asarray(values, dtype=np.float64)))
    return clamp(std / STD_FULL_SCALE)


def mean_abs(values: Sequence[float], limit: int | None = None, empty: float = 0.5) -> float:
    """Sum of |v| over the first ``limit`` entries, divided by ``limit``.

    Vectors shorter than ``limit`` are averaged as if zero-padded.
    """
    head = values[:limit] if limit is not None else values
    if len(head) == 0:
        return empty
    total = float(np.sum(np.abs(np.asarray(head, dtype=np.float64))))
    return total / (limit if limit is not None else len(head))


def sum_abs(values: Sequence[float], limit: int | None = None) -> float:
    head = values[:limit] if limit is not None else values
    if len(head) == 0:
        return 0.0
    return float(np.sum(np.abs(np.asarray(head, dtype=np.float64))))
