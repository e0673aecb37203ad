"""T1.03 — Glyph Interpretation.

Human-readable meaning of each visual feature plus a representative quote
from the subject's answers, for tooltips and info panels.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.registry import Layer, transform
from isoflow.report.interpretation import interpret_glyph, representative_quote


@transform(
    id="T1.03",
    layer=Layer.GLYPH,
    dependencies=["T1.01"],
    description="Explain glyph features and pick a representative quote",
)
def glyph_interpretation(ctx: EngineContext) -> None:
    for subject in ctx.subjects:
        glyph = ctx.glyph(subject.id)
        if glyph.signature is None:
            continue
        glyph.features["interpretation"] = interpret_glyph(glyph.signature)
        glyph.features["quote"] = representative_quote(subject)
