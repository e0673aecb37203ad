"""Subjectivity extraction — interview text + vectors → SubjectivityProfile.

Every analyzer is a pure function of the lowercased text and the optional
vectors. Lexical analyzers count word-boundary matches of fixed indicator
phrases per category and normalize by the total hit count; the first declared
category wins ties. Missing input never raises: each analyzer has a fixed
fallback, collected in DEFAULT_PROFILE.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from isoflow.utils.color import EMOTIONS
from isoflow.utils.math_helpers import clamp, mean_abs, normalized_std

EmotionInput = Union[Sequence[float], Mapping[str, float], None]


# ── Indicator vocabularies (declaration order = tie-break order) ──

NARRATIVE_INDICATORS: dict[str, tuple[str, ...]] = {
    "direct": ("i said", "i did", "i went", "i was", "i am"),
    "reflective": (
        "i think", "i feel", "i believe", "i realize", "i understand",
        "reflection", "looking back",
    ),
    "metaphorical": ("like", "as if", "as though", "metaphor", "symbol"),
    "conversational": ("you know", "i mean", "like i said", "you know what", "sayin"),
}

EMOTION_WORDS: dict[str, tuple[str, ...]] = {
    "intense": ("love", "hate", "terrible", "amazing", "devastated", "ecstatic", "horrible", "wonderful"),
    "moderate": ("happy", "sad", "angry", "worried", "excited", "disappointed"),
    "reserved": ("okay", "fine", "alright", "good", "bad"),
}

TEMPORAL_INDICATORS: dict[str, tuple[str, ...]] = {
    "past": (
        "was", "were", "had", "went", "did", "said", "thought", "felt",
        "used to", "before", "ago", "back then",
    ),
    "present": ("am", "is", "are", "do", "have", "now", "currently", "today", "right now"),
    "future": ("will", "going to", "gonna", "future", "later", "soon", "hope", "plan", "want to"),
}

AUTHENTICITY_INDICATORS: dict[str, tuple[str, ...]] = {
    "formal": ("therefore", "however", "furthermore", "moreover", "consequently", "nevertheless"),
    "casual": ("gonna", "wanna", "gotta", "yeah", "yep", "nah", "ain't", "don't", "can't"),
    "intimate": ("i feel", "i think", "for me", "personally", "my heart", "my soul", "deeply"),
}

REFLECTION_PHRASES: tuple[str, ...] = (
    "reflect", "think about", "realize", "understand", "learn",
    "realized", "understood", "learned", "came to understand",
    "looking back", "in retrospect", "now i see", "i see now",
)

DIRECT_EXPRESSION: tuple[str, ...] = ("i said", "i told", "i think", "i believe", "i feel", "i know")
INDIRECT_EXPRESSION: tuple[str, ...] = ("like", "as if", "seems", "appears", "maybe", "perhaps", "might", "could")

_FIRST_PERSON_RE = re.compile(r"\b(?:i|me|my|myself|mine)\b")
_CONDITIONAL_RE = re.compile(r"\b(?:if|whether|what if|suppose)\b")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?。！？]")
_WORD_RE = re.compile(r"\b\w+\b")
_REPETITION_RE = re.compile(r"(.)\1{2,}")

# Weights for emotional intensity: intense/moderate/reserved words,
# exclamation marks, and stretched letters ("sooo").
_EMOTION_WEIGHTS = {"intense": 3.0, "moderate": 2.0, "reserved": 1.0}
_EXCLAMATION_WEIGHT = 0.5
_REPETITION_WEIGHT = 0.3
_EMOTION_INDICATOR_SCALE = 20.0

# Complexity blend: sentence length / variance / lexical diversity / semantic
_COMPLEXITY_WEIGHTS = (0.3, 0.2, 0.3, 0.2)
_SENTENCE_LENGTH_CAP = 100.0
_SENTENCE_VARIANCE_CAP = 1000.0
_SEMANTIC_DIMS = 20
_COMPLEXITY_MODERATE = 0.4
_COMPLEXITY_COMPLEX = 0.7

# Uniqueness blend: embedding spread / emotion spread / lexical diversity
_UNIQUENESS_WEIGHTS = (0.4, 0.3, 0.3)

# Direct share above which the expression mode is "direct"
_DIRECT_MODE_SHARE = 0.6


# ── Profile data model ──


@dataclass(frozen=True)
class NarrativeStyle:
    type: str = "conversational"
    score: float = 0.5
    distribution: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class EmotionalExpression:
    level: str = "moderate"
    intensity: float = 0.5


@dataclass(frozen=True)
class TemporalOrientation:
    orientation: str = "mixed"
    score: float = 0.33
    distribution: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class SelfReference:
    level: str = "medium"
    score: float = 0.5


@dataclass(frozen=True)
class Complexity:
    level: str = "moderate"
    score: float = 0.5


@dataclass(frozen=True)
class Authenticity:
    style: str = "casual"
    score: float = 0.5
    distribution: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ExpressionMode:
    mode: str = "direct"
    score: float = 0.5


@dataclass(frozen=True)
class SubjectivityProfile:
    narrative_style: NarrativeStyle = field(default_factory=NarrativeStyle)
    emotional_expression: EmotionalExpression = field(default_factory=EmotionalExpression)
    temporal_orientation: TemporalOrientation = field(default_factory=TemporalOrientation)
    self_reference: SelfReference = field(default_factory=SelfReference)
    complexity: Complexity = field(default_factory=Complexity)
    authenticity: Authenticity = field(default_factory=Authenticity)
    rhythm: float = 0.5
    reflection_depth: float = 0.5
    expression_mode: ExpressionMode = field(default_factory=ExpressionMode)
    uniqueness: float = 0.35


# ── Text primitives ──


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(phrase) + r"\b")


_PATTERN_CACHE: dict[str, re.Pattern[str]] = {}


def count_phrases(lower_text: str, phrases: Sequence[str]) -> int:
    """Total word-boundary matches of all ``phrases`` in ``lower_text``."""
    total = 0
    for phrase in phrases:
        pattern = _PATTERN_CACHE.get(phrase)
        if pattern is None:
            pattern = _PATTERN_CACHE[phrase] = _phrase_pattern(phrase)
        total += len(pattern.findall(lower_text))
    return total


def sentence_lengths(text: str) -> list[int]:
    return [len(s) for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def word_count(text: str) -> int:
    return max(1, len(text.split()))


def lexical_diversity(text: str) -> float:
    words = _WORD_RE.findall(text.lower())
    return len(set(words)) / max(1, len(words))


def _dominant(counts: dict[str, int]) -> tuple[str, float, dict[str, float]] | None:
    """Normalized distribution and its first-max category; None on zero hits."""
    total = sum(counts.values())
    if total == 0:
        return None
    distribution = {k: v / total for k, v in counts.items()}
    best = next(iter(distribution))
    for key, share in distribution.items():
        if share > distribution[best]:
            best = key
    return best, distribution[best], distribution


def emotion_vector_from_scores(scores: Mapping[str, float] | None) -> list[float]:
    """Named emotion scores → 7-dim vector in EMOTIONS order.

    A neutral-only mapping is spread across the other categories so that the
    vector still carries a distribution.
    """
    if not scores:
        return []
    vector = [float(scores.get(name, 0.0) or 0.0) for name in EMOTIONS]
    neutral = scores.get("neutral")
    if neutral and len(scores) == 1:
        spread = (0.1, 0.2, 0.1, 0.1, 0.1, 0.1, 0.3)
        vector = [neutral * w for w in spread]
    return vector


def _as_emotion_vector(emotion: EmotionInput) -> list[float]:
    if emotion is None:
        return []
    if isinstance(emotion, Mapping):
        return emotion_vector_from_scores(emotion)
    return [float(v) for v in emotion]


# ── Analyzers ──


def analyze_narrative_style(lower_text: str) -> NarrativeStyle:
    if not lower_text:
        return NarrativeStyle()
    counts = {k: count_phrases(lower_text, v) for k, v in NARRATIVE_INDICATORS.items()}
    result = _dominant(counts)
    if result is None:
        return NarrativeStyle()
    kind, score, distribution = result
    return NarrativeStyle(type=kind, score=score, distribution=distribution)


def analyze_emotional_expression(text: str, emotion: Sequence[float]) -> EmotionalExpression:
    if not text:
        return EmotionalExpression()
    lower = text.lower()
    weighted = sum(
        count_phrases(lower, words) * _EMOTION_WEIGHTS[kind] for kind, words in EMOTION_WORDS.items()
    )
    weighted += text.count("!") * _EXCLAMATION_WEIGHT
    weighted += len(_REPETITION_RE.findall(text)) * _REPETITION_WEIGHT

    vector_intensity = max(emotion) if len(emotion) > 0 else 0.5
    intensity = min(1.0, weighted / _EMOTION_INDICATOR_SCALE + vector_intensity * 0.5)

    if intensity < 0.3:
        level = "reserved"
    elif intensity < 0.6:
        level = "moderate"
    elif intensity < 0.8:
        level = "expressive"
    else:
        level = "intense"
    return EmotionalExpression(level=level, intensity=intensity)


def analyze_temporal_orientation(lower_text: str) -> TemporalOrientation:
    if not lower_text:
        return TemporalOrientation()
    counts = {k: count_phrases(lower_text, v) for k, v in TEMPORAL_INDICATORS.items()}
    result = _dominant(counts)
    if result is None:
        return TemporalOrientation()
    kind, score, distribution = result
    return TemporalOrientation(orientation=f"{kind}_focused", score=score, distribution=distribution)


def analyze_self_reference(lower_text: str) -> SelfReference:
    if not lower_text:
        return SelfReference()
    hits = len(_FIRST_PERSON_RE.findall(lower_text))
    score = min(1.0, hits / (word_count(lower_text) / 10))
    if score < 0.3:
        level = "low"
    elif score < 0.6:
        level = "medium"
    else:
        level = "high"
    return SelfReference(level=level, score=score)


def analyze_complexity(text: str, semantic: Sequence[float]) -> Complexity:
    if not text:
        return Complexity()
    lengths = sentence_lengths(text)
    if lengths:
        avg = sum(lengths) / len(lengths)
        variance = sum((n - avg) ** 2 for n in lengths) / len(lengths) if len(lengths) > 1 else 0.0
    else:
        avg, variance = 50.0, 0.0

    w_len, w_var, w_div, w_sem = _COMPLEXITY_WEIGHTS
    score = (
        min(1.0, avg / _SENTENCE_LENGTH_CAP) * w_len
        + min(1.0, variance / _SENTENCE_VARIANCE_CAP) * w_var
        + lexical_diversity(text) * w_div
        + mean_abs(semantic, _SEMANTIC_DIMS) * w_sem
    )

    if score < _COMPLEXITY_MODERATE:
        level = "simple"
    elif score < _COMPLEXITY_COMPLEX:
        level = "moderate"
    else:
        level = "complex"
    return Complexity(level=level, score=score)


def analyze_authenticity(lower_text: str) -> Authenticity:
    if not lower_text:
        return Authenticity()
    counts = {k: count_phrases(lower_text, v) for k, v in AUTHENTICITY_INDICATORS.items()}
    result = _dominant(counts)
    if result is None:
        return Authenticity()
    style, score, distribution = result
    return Authenticity(style=style, score=score, distribution=distribution)


def analyze_rhythm(text: str) -> float:
    """Sentence-length variance relative to the squared mean, capped at 1."""
    if not text:
        return 0.5
    lengths = sentence_lengths(text)
    if len(lengths) < 2:
        return 0.5
    avg = sum(lengths) / len(lengths)
    variance = sum((n - avg) ** 2 for n in lengths) / len(lengths)
    return min(1.0, variance / (avg * avg))


def analyze_reflection_depth(text: str) -> float:
    if not text:
        return 0.5
    lower = text.lower()
    phrase_hits = count_phrases(lower, REFLECTION_PHRASES)
    questions = text.count("?")
    conditionals = len(_CONDITIONAL_RE.findall(lower))
    raw = phrase_hits * 2 + questions * 0.5 + conditionals
    return min(1.0, raw / (word_count(text) / 50))


def analyze_expression_mode(lower_text: str) -> ExpressionMode:
    if not lower_text:
        return ExpressionMode()
    direct = count_phrases(lower_text, DIRECT_EXPRESSION)
    indirect = count_phrases(lower_text, INDIRECT_EXPRESSION)
    total = direct + indirect
    if total == 0:
        return ExpressionMode()
    share = direct / total
    return ExpressionMode(mode="direct" if share > _DIRECT_MODE_SHARE else "indirect", score=share)


def calculate_uniqueness(text: str, semantic: Sequence[float], emotion: Sequence[float]) -> float:
    w_sem, w_emo, w_lex = _UNIQUENESS_WEIGHTS
    value = (
        normalized_std(semantic) * w_sem
        + normalized_std(emotion) * w_emo
        + lexical_diversity(text) * w_lex
    )
    return clamp(value)


# Profile for empty text with no vectors: every analyzer at its fallback,
# uniqueness = 0.4*0.5 + 0.3*0.5 + 0.3*0.
DEFAULT_PROFILE = SubjectivityProfile(uniqueness=calculate_uniqueness("", (), ()))


class SubjectivityExtractor:
    """Derives a SubjectivityProfile from text and optional vectors."""

    def extract(
        self,
        text: str | None,
        semantic_vector: Sequence[float] | None = None,
        emotion_vector: EmotionInput = None,
    ) -> SubjectivityProfile:
        text = text or ""
        if not text.strip():
            text = ""
        semantic = list(np.asarray(semantic_vector, dtype=np.float64)) if semantic_vector is not None else []
        emotion = _as_emotion_vector(emotion_vector)
        lower = text.lower()

        return SubjectivityProfile(
            narrative_style=analyze_narrative_style(lower),
            emotional_expression=analyze_emotional_expression(text, emotion),
            temporal_orientation=analyze_temporal_orientation(lower),
            self_reference=analyze_self_reference(lower),
            complexity=analyze_complexity(text, semantic),
            authenticity=analyze_authenticity(lower),
            rhythm=analyze_rhythm(text),
            reflection_depth=analyze_reflection_depth(text),
            expression_mode=analyze_expression_mode(lower),
            uniqueness=calculate_uniqueness(text, semantic, emotion),
        )
