"""Fusion shapes — an organic boundary and color blend per detected cluster."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from isoflow.engine.core.clusters import ClusterBounds
from isoflow.engine.core.subject import Subject
from isoflow.utils.color import DEFAULT_GLYPH_COLOR, average_color, rgba
from isoflow.utils.geometry import polar_to_points, ring_angles
from isoflow.utils.math_helpers import sum_abs
from isoflow.utils.noise import NoiseField, get_noise_field

FUSION_POINTS = 32
FUSION_OPACITY = 0.4

_BASE_SCALE = 0.94
_SOFTNESS_BASE = 0.12
_SOFTNESS_EMOTION = 0.1
_NOISE_OCTAVES = 3
_MAX_STOPS = 5
# Stop opacity runs from 0.6×base at the center to 0.15×base at the edge.
_CENTER_ALPHA = 0.6
_MID_ALPHA = 0.4
_EDGE_ALPHA = 0.15


@dataclass(frozen=True)
class GradientStop:
    offset: float
    color: str
    opacity: float

    @property
    def css(self) -> str:
        return rgba(self.color, self.opacity)


@dataclass(frozen=True)
class FusionShape:
    points: NDArray[np.float64]
    angles: NDArray[np.float64]
    seed: int
    softness: float
    bounds: ClusterBounds
    stops: tuple[GradientStop, ...]
    stroke_color: str
    cluster_id: int | None = None


def cluster_seed(members: Sequence[Subject]) -> int:
    """Σ (idNumber×100 + floor(Σ|semantic[:5]|×100)) × (position+1)."""
    seed = 0
    for index, subject in enumerate(members):
        semantic_sum = sum_abs(subject.semantic, 5)
        seed += (subject.id_number * 100 + math.floor(semantic_sum * 100)) * (index + 1)
    return seed


def average_peak_emotion(members: Sequence[Subject]) -> float:
    if not members:
        return 0.5
    peaks = [max(s.emotion) if len(s.emotion) > 0 else 0.5 for s in members]
    return sum(peaks) / len(peaks)


def gradient_stops(colors: Sequence[str], base_opacity: float = FUSION_OPACITY) -> tuple[GradientStop, ...]:
    """Radial stops from member colors, fading from center to edge."""
    if not colors:
        return ()
    if len(colors) == 1:
        c = colors[0]
        return (
            GradientStop(0.0, c, base_opacity * _CENTER_ALPHA),
            GradientStop(0.5, c, base_opacity * _MID_ALPHA),
            GradientStop(1.0, c, base_opacity * _EDGE_ALPHA),
        )
    if len(colors) == 2:
        return (
            GradientStop(0.0, colors[0], base_opacity * _CENTER_ALPHA),
            GradientStop(0.5, colors[1], base_opacity * _MID_ALPHA),
            GradientStop(1.0, colors[1], base_opacity * _EDGE_ALPHA),
        )

    num_stops = min(_MAX_STOPS, len(colors))
    stops = []
    for i in range(num_stops):
        offset = i / (num_stops - 1)
        color = colors[math.floor((len(colors) - 1) * offset)]
        alpha = base_opacity * (_CENTER_ALPHA - offset * (_CENTER_ALPHA - _EDGE_ALPHA))
        stops.append(GradientStop(offset, color, alpha))
    return tuple(stops)


class FusionShapeSynthesizer:
    def __init__(
        self,
        noise: NoiseField | None = None,
        num_points: int = FUSION_POINTS,
        base_opacity: float = FUSION_OPACITY,
    ) -> None:
        self.noise = noise or get_noise_field()
        self.num_points = num_points
        self.base_opacity = base_opacity

    def fuse(
        self,
        bounds: ClusterBounds,
        members: Sequence[Subject],
        cluster_id: int | None = None,
    ) -> FusionShape:
        seed = cluster_seed(members)
        softness = _SOFTNESS_BASE + average_peak_emotion(members) * _SOFTNESS_EMOTION

        theta = ring_angles(self.num_points)
        noise = np.array(
            [self.noise.sample(math.cos(a) * 2, math.sin(a) * 2, seed, _NOISE_OCTAVES) for a in theta],
            dtype=np.float64,
        )
        distances = bounds.radius * (_BASE_SCALE + noise * softness)

        colors = [s.color or DEFAULT_GLYPH_COLOR for s in members]
        return FusionShape(
            points=polar_to_points(bounds.center, theta, distances),
            angles=theta,
            seed=seed,
            softness=softness,
            bounds=bounds,
            stops=gradient_stops(colors, self.base_opacity),
            stroke_color=average_color(colors),
            cluster_id=cluster_id,
        )
