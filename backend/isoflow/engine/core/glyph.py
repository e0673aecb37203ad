"""Glyph geometry — subjectivity profile → signature → closed outline.

Every glyph shares the same base (a circle). The profile only bends the
outline, sets internal pattern directives, edge parameters, and opacity.
Hue and saturation of the subject's base color are never adjusted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from isoflow.engine.core.subject import Subject
from isoflow.engine.core.subjectivity import SubjectivityExtractor, SubjectivityProfile
from isoflow.utils.color import dominant_emotion
from isoflow.utils.geometry import polar_to_points, ring_angles
from isoflow.utils.math_helpers import mean_abs, sum_abs
from isoflow.utils.noise import NoiseField, get_noise_field

OUTLINE_POINTS = 32
HIGHLIGHT_SCALE = 1.3

# Base size: 10px plus up to 15px from uniqueness and text length.
_BASE_SIZE_MIN = 10.0
_BASE_SIZE_SPAN = 15.0
_TEXT_LENGTH_FULL = 5000.0

_REGULARITY = {"direct": 0.9, "reflective": 0.6, "metaphorical": 0.5}
_REGULARITY_DEFAULT = 0.8
_DEFORMATION = {"intense": 0.25, "expressive": 0.18, "reserved": 0.05}
_DEFORMATION_DEFAULT = 0.1
_ASYMMETRY_SCALE = 0.15

_PATTERN_DENSITY = {"complex": 0.6, "moderate": 0.4, "simple": 0.2}
_LAYERED_DEPTH = 0.7
_MODERATE_DEPTH = 0.4

_EDGE_SHARPNESS = {"formal": 0.8, "intimate": 0.3}
_EDGE_SHARPNESS_DEFAULT = 0.5
_EDGE_REGULARITY = {"direct": 0.9}
_EDGE_REGULARITY_INDIRECT = 0.5

_OPACITY_MIN = 0.7
_OPACITY_SPAN = 0.25


@dataclass(frozen=True)
class ShapeDeformation:
    regularity: float
    deformation: float
    asymmetry: float


@dataclass(frozen=True)
class InternalPattern:
    density: float
    pattern_type: str
    complexity: float
    reflection_depth: float


@dataclass(frozen=True)
class EdgeCharacteristics:
    sharpness: float
    regularity: float
    thickness: float


@dataclass(frozen=True)
class ColorAdjustment:
    opacity: float
    saturation: float = 1.0
    hue_shift: float = 0.0
    brightness: float = 1.0


@dataclass(frozen=True)
class GlyphSignature:
    subject_id: str
    base_size: float
    base_color: str
    seed: int
    profile: SubjectivityProfile
    shape_deformation: ShapeDeformation
    internal_pattern: InternalPattern
    edge_characteristics: EdgeCharacteristics
    color_adjustment: ColorAdjustment
    base_shape: str = "circle"

    def display_size(self, highlighted: bool = False) -> float:
        return self.base_size * HIGHLIGHT_SCALE if highlighted else self.base_size


@dataclass(frozen=True)
class GlyphOutline:
    """Closed polygon: Nx2 points ordered by strictly increasing angle."""

    points: NDArray[np.float64]
    angles: NDArray[np.float64]
    center: tuple[float, float]
    radius: float

    def __len__(self) -> int:
        return len(self.points)


def glyph_seed(subject: Subject) -> int:
    """Deterministic per-subject seed from id digits, vector magnitudes and text."""
    semantic_sum = sum_abs(subject.semantic, 10)
    emotion_sum = sum_abs(subject.emotion)
    text_hash = len(subject.text) + (len(subject.text.split(" ")) % 100)
    return (
        subject.id_number * 10000
        + math.floor(semantic_sum * 1000)
        + math.floor(emotion_sum * 500)
        + text_hash
    )


def base_size(subject: Subject) -> float:
    normalized_length = min(1.0, subject.text_length / _TEXT_LENGTH_FULL)
    return _BASE_SIZE_MIN + (subject.uniqueness_score * 0.5 + normalized_length * 0.5) * _BASE_SIZE_SPAN


def shape_deformation(profile: SubjectivityProfile) -> ShapeDeformation:
    emotional = profile.emotional_expression
    return ShapeDeformation(
        regularity=_REGULARITY.get(profile.narrative_style.type, _REGULARITY_DEFAULT),
        deformation=_DEFORMATION.get(emotional.level, _DEFORMATION_DEFAULT),
        asymmetry=emotional.intensity * _ASYMMETRY_SCALE,
    )


def internal_pattern(profile: SubjectivityProfile) -> InternalPattern:
    depth = profile.reflection_depth
    if depth > _LAYERED_DEPTH:
        pattern_type = "layered"
    elif depth > _MODERATE_DEPTH:
        pattern_type = "moderate"
    else:
        pattern_type = "simple"
    return InternalPattern(
        density=_PATTERN_DENSITY.get(profile.complexity.level, _PATTERN_DENSITY["simple"]),
        pattern_type=pattern_type,
        complexity=profile.complexity.score,
        reflection_depth=depth,
    )


def edge_characteristics(profile: SubjectivityProfile) -> EdgeCharacteristics:
    authenticity = profile.authenticity
    return EdgeCharacteristics(
        sharpness=_EDGE_SHARPNESS.get(authenticity.style, _EDGE_SHARPNESS_DEFAULT),
        regularity=_EDGE_REGULARITY.get(profile.expression_mode.mode, _EDGE_REGULARITY_INDIRECT),
        thickness=0.5 + authenticity.score * 0.3,
    )


def color_adjustment(profile: SubjectivityProfile) -> ColorAdjustment:
    """Only opacity follows emotional intensity (0.7 - 0.95)."""
    intensity = profile.emotional_expression.intensity
    return ColorAdjustment(opacity=min(1.0, _OPACITY_MIN + intensity * _OPACITY_SPAN))


class GlyphGeometrySynthesizer:
    """Builds glyph signatures and outlines."""

    def __init__(
        self,
        extractor: SubjectivityExtractor | None = None,
        noise: NoiseField | None = None,
        num_points: int = OUTLINE_POINTS,
    ) -> None:
        self.extractor = extractor or SubjectivityExtractor()
        self.noise = noise or get_noise_field()
        self.num_points = num_points

    def signature(self, subject: Subject, profile: SubjectivityProfile | None = None) -> GlyphSignature:
        if profile is None:
            profile = self.extractor.extract(subject.text, subject.semantic, subject.emotion)
        return GlyphSignature(
            subject_id=subject.id,
            base_size=base_size(subject),
            base_color=subject.color,
            seed=glyph_seed(subject),
            profile=profile,
            shape_deformation=shape_deformation(profile),
            internal_pattern=internal_pattern(profile),
            edge_characteristics=edge_characteristics(profile),
            color_adjustment=color_adjustment(profile),
        )

    def outline(
        self,
        center: tuple[float, float],
        radius: float,
        signature: GlyphSignature,
    ) -> GlyphOutline:
        """Deformed circle: radius × (1 + regularity + deformation + asymmetry terms)."""
        d = signature.shape_deformation
        theta = ring_angles(self.num_points)
        regularity_term = np.sin(theta * 4) * (1 - d.regularity) * 0.1
        deformation_term = np.sin(theta * 3 + np.pi / 4) * d.deformation
        asymmetry_term = np.sin(theta * 2) * d.asymmetry
        distances = radius * (1 + regularity_term + deformation_term + asymmetry_term)
        return GlyphOutline(
            points=polar_to_points(center, theta, distances),
            angles=theta,
            center=(float(center[0]), float(center[1])),
            radius=float(radius),
        )

    def organic_outline(
        self,
        center: tuple[float, float],
        radius: float,
        subject: Subject,
        signature: GlyphSignature,
    ) -> GlyphOutline:
        """Noise-driven outline whose softness and point count follow the subject."""
        emotion = subject.emotion
        intensity = max(emotion) if len(emotion) > 0 else 0.5
        rhythm = signature.profile.rhythm
        complexity = min(1.0, mean_abs(subject.semantic, 20))
        mood = dominant_emotion(emotion)
        seed = signature.seed

        softness = 0.15 + intensity * 0.15
        num_points = 24 + math.floor(complexity * 16)
        theta = ring_angles(num_points)
        distances = np.empty(num_points, dtype=np.float64)

        for i, angle in enumerate(theta):
            c, s = math.cos(angle), math.sin(angle)
            combined = (
                self.noise.sample(c * 2, s * 2, seed, 4) * 0.5
                + self.noise.sample(c * 4, s * 4, seed + 1000, 3) * 0.3
                + self.noise.sample(c * 8, s * 8, seed + 2000, 2) * 0.2
            )

            if mood == "joy":
                modifier = 1.0 + math.sin(angle * 2) * 0.05
            elif mood == "sadness":
                modifier = 0.95 + math.sin(angle * 3) * 0.03
            elif mood == "anger":
                modifier = 1.0 + abs(combined) * 0.1
            elif mood == "fear":
                modifier = 0.92 + combined * 0.08
            else:
                modifier = 0.98 + combined * 0.04

            rhythm_modifier = 1.0 + math.sin(angle * rhythm * 4) * (rhythm * 0.03)
            distances[i] = radius * (0.92 + combined * softness) * modifier * rhythm_modifier

        return GlyphOutline(
            points=polar_to_points(center, theta, distances),
            angles=theta,
            center=(float(center[0]), float(center[1])),
            radius=float(radius),
        )
