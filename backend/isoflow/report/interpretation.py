"""Glyph interpretation + representative quote for tooltips and info panels."""

from __future__ import annotations

import re
from typing import Any

from isoflow.engine.core.glyph import GlyphSignature
from isoflow.engine.core.subject import Subject

DEFAULT_QUOTE = "I have a story to tell."

# Below this outline regularity the glyph reads as irregular.
_REGULAR_SHAPE = 0.7
# Below this edge sharpness the edge reads as soft.
_SOFT_EDGE = 0.4
_MIN_SENTENCE_CHARS = 10
_MAX_ANSWER_CHARS = 150

_ANSWER_RE = re.compile(r"(?<!\w)A[:：]\s*([^\n]*)", re.IGNORECASE)
_QUESTION_RE = re.compile(r"(?<!\w)Q[:：]", re.IGNORECASE)
_SENTENCE_RE = re.compile(r"[^.!?。！？]+[.!?。！？]")
_SENTENCE_END_RE = re.compile(r"[.!?。！？]")

_PATTERN_MEANINGS = {
    "layered": (
        "Layered Pattern",
        "Deep reflection; the multi-layered internal pattern stands for a rich inner world",
    ),
    "moderate": (
        "Moderate Pattern",
        "Moderate reflection; the arc pattern stands for balanced thinking",
    ),
    "simple": (
        "Simple Pattern",
        "Concise, direct thinking; the dot pattern stands for seeds of thought",
    ),
}


def interpret_glyph(signature: GlyphSignature) -> dict[str, Any]:
    """Explain each visual feature of a glyph in plain language."""
    profile = signature.profile
    items: list[dict[str, str]] = []

    if signature.shape_deformation.regularity >= _REGULAR_SHAPE:
        items.append({
            "feature": "Shape",
            "value": "Regular",
            "meaning": "Direct narrative style; the regular outline reflects clear expression",
        })
    else:
        items.append({
            "feature": "Shape",
            "value": "Irregular",
            "meaning": "Reflective or metaphorical narrative style; the outline bends with that complexity",
        })

    value, meaning = _PATTERN_MEANINGS.get(
        signature.internal_pattern.pattern_type, _PATTERN_MEANINGS["simple"]
    )
    items.append({"feature": "Internal Pattern", "value": value, "meaning": meaning})

    if signature.edge_characteristics.sharpness < _SOFT_EDGE:
        items.append({
            "feature": "Edge",
            "value": "Soft Edge",
            "meaning": "Intimate, personal expression; the soft edge stands for open boundaries",
        })
    else:
        items.append({
            "feature": "Edge",
            "value": "Sharp Edge",
            "meaning": "More formal expression; the sharp edge stands for clear boundaries",
        })

    items.append({
        "feature": "Color",
        "value": signature.base_color,
        "meaning": "Base color follows the dominant emotion, or semantic traits when emotion is flat",
    })

    return {
        "subject_id": signature.subject_id,
        "interpretations": items,
        "summary": (
            f"This glyph represents a person with {profile.narrative_style.type} narrative style "
            f"and {profile.emotional_expression.level} emotional expression"
        ),
    }


def _id_seed(subject: Subject) -> int:
    return sum(ord(c) for c in (subject.id or subject.original_id))


def _answer_sentences(text: str) -> list[str]:
    sentences: list[str] = []
    for match in _ANSWER_RE.finditer(text):
        answer = _QUESTION_RE.split(match.group(1), maxsplit=1)[0].strip()
        for s in _SENTENCE_RE.findall(answer):
            s = s.strip()
            if len(s) > _MIN_SENTENCE_CHARS:
                sentences.append(s)
        # Unpunctuated answers count as one sentence
        if len(answer) > _MIN_SENTENCE_CHARS and not _SENTENCE_END_RE.search(answer):
            clipped = answer[:_MAX_ANSWER_CHARS].strip()
            sentences.append(clipped + ("..." if len(answer) > _MAX_ANSWER_CHARS else ""))
    return sentences


def _plain_sentences(text: str) -> list[str]:
    lines = [
        line.strip()
        for line in text.split("\n")
        if len(line.strip()) > _MIN_SENTENCE_CHARS and not _QUESTION_RE.match(line.strip())
    ]
    if not lines:
        return []
    parts = _SENTENCE_END_RE.split(" ".join(lines))
    return [p.strip() for p in parts if len(p.strip()) > _MIN_SENTENCE_CHARS]


def representative_quote(subject: Subject) -> str:
    """One sentence from the subject's answers, picked by a hash of the id.

    Answers follow ``A:`` markers; question lines (``Q:``) are never quoted.
    Text without answer markers falls back to its plain sentences.
    """
    text = subject.text
    if not text:
        return DEFAULT_QUOTE

    sentences = _answer_sentences(text) or _plain_sentences(text)
    if not sentences:
        return DEFAULT_QUOTE
    return sentences[_id_seed(subject) % len(sentences)]
