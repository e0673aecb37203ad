"""T1.01 — Glyph Signature.

Maps the profile onto shape deformation, internal pattern, edge and opacity
parameters on a shared circular base.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.glyph import GlyphGeometrySynthesizer
from isoflow.engine.registry import Layer, transform


@transform(
    id="T1.01",
    layer=Layer.GLYPH,
    dependencies=["T0.01", "T0.02"],
    description="Map subjectivity profile to glyph signature",
    tags={"always"},
)
def glyph_signature(ctx: EngineContext) -> None:
    synth = GlyphGeometrySynthesizer()
    for subject in ctx.subjects:
        glyph = ctx.glyph(subject.id)
        glyph.signature = synth.signature(subject, glyph.profile)
        glyph.features["pattern_type"] = glyph.signature.internal_pattern.pattern_type
        glyph.features["base_size"] = round(glyph.signature.base_size, 3)
