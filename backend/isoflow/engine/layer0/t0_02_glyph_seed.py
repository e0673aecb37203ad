"""T0.02 — Glyph Seed.

Deterministic integer per subject from id digits, semantic/emotion magnitudes
and text length. Drives every noise-based shape for that subject.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.glyph import glyph_seed
from isoflow.engine.registry import Layer, transform


@transform(
    id="T0.02",
    layer=Layer.EXTRACTION,
    description="Derive deterministic per-subject seed",
    tags={"always"},
)
def subject_seed(ctx: EngineContext) -> None:
    for subject in ctx.subjects:
        ctx.glyph(subject.id).seed = glyph_seed(subject)
