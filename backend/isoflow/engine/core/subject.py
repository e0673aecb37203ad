"""Subject — one interview participant, immutable once loaded."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from isoflow.utils.color import DEFAULT_SUBJECT_COLOR

_DIGITS_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class Subject:
    id: str
    original_id: str = ""
    text: str = ""
    # Fixed-length semantic embedding (may be empty)
    semantic: tuple[float, ...] = ()
    # 7-dim emotion vector in EMOTIONS order (may be empty)
    emotion: tuple[float, ...] = ()
    # Combined multi-dimension embedding used for "multidimensional" similarity
    unified: tuple[float, ...] = ()
    emotion_scores: dict[str, float] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    color: str = DEFAULT_SUBJECT_COLOR
    uniqueness_score: float = 0.5

    @property
    def id_number(self) -> int:
        """First run of digits in the original id, 0 when there is none."""
        m = _DIGITS_RE.search(self.original_id or self.id)
        return int(m.group(0)) if m else 0

    @property
    def text_length(self) -> int:
        value = self.metadata.get("text_length")
        if isinstance(value, (int, float)) and value > 0:
            return int(value)
        return 1000

    def vector(self, dimension: str) -> tuple[float, ...]:
        """Feature vector for a dimension selector.

        ``multidimensional`` selects the unified vector; a named dimension
        falls back to the semantic embedding when absent or empty. An empty
        named vector is treated as absent on purpose, so a subject without
        emotion scores still compares on its semantic embedding.
        """
        if dimension == "multidimensional":
            return self.unified
        named = {"semantic": self.semantic, "emotion": self.emotion, "unified": self.unified}
        return named.get(dimension) or self.semantic
