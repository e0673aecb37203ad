"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon


def ring_angles(num_points: int) -> NDArray[np.float64]:
    """``num_points`` angles evenly spaced over [0, 2π), strictly increasing."""
    return 2 * np.pi * np.arange(num_points, dtype=np.float64) / num_points


def polar_to_points(
    center: tuple[float, float],
    angles: NDArray[np.float64],
    distances: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Nx2 (x, y) array of points at ``distances`` along each angle's ray."""
    cx, cy = center
    return np.column_stack([cx + np.cos(angles) * distances, cy + np.sin(angles) * distances])


def signed_area(points: NDArray[np.float64]) -> float:
    """Shoelace formula over a closed ring. Positive = CCW, Negative = CW."""
    if len(points) < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return float(0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def centroid(points: NDArray[np.float64]) -> tuple[float, float]:
    """Arithmetic mean of a point set."""
    if len(points) == 0:
        return (0.0, 0.0)
    return (float(np.mean(points[:, 0])), float(np.mean(points[:, 1])))


def max_distance_from(points: NDArray[np.float64], center: tuple[float, float]) -> float:
    if len(points) == 0:
        return 0.0
    d = np.sqrt((points[:, 0] - center[0]) ** 2 + (points[:, 1] - center[1]) ** 2)
    return float(np.max(d))


def outline_polygon(points: NDArray[np.float64]) -> Polygon | None:
    """Shapely polygon for a closed outline; None when degenerate."""
    if len(points) < 3:
        return None
    poly = Polygon(points)
    if not poly.is_valid:
        poly = poly.buffer(0)
    if poly.is_empty:
        return None
    return poly
