"""T0.01 — Subjectivity Profile.

Lexical + vector analysis of each subject's interview text: narrative style,
emotional expression, temporal orientation, self-reference, complexity,
authenticity, rhythm, reflection depth, expression mode, uniqueness.
Empty text resolves to the default profile.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.subjectivity import SubjectivityExtractor
from isoflow.engine.registry import Layer, transform


@transform(
    id="T0.01",
    layer=Layer.EXTRACTION,
    description="Extract subjectivity profile from interview text and vectors",
    tags={"always"},
)
def subjectivity_profile(ctx: EngineContext) -> None:
    extractor = SubjectivityExtractor()
    for subject in ctx.subjects:
        glyph = ctx.glyph(subject.id)
        glyph.profile = extractor.extract(subject.text, subject.semantic, subject.emotion)
        glyph.features["narrative_style"] = glyph.profile.narrative_style.type
        glyph.features["emotional_level"] = glyph.profile.emotional_expression.level
