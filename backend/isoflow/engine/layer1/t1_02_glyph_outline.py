"""T1.02 — Glyph Outline.

Closed boundary of each glyph at its current position: 32 points by
increasing angle, consecutive points adjacent around the ring. Highlighted
subjects are drawn 1.3× larger.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.glyph import GlyphGeometrySynthesizer
from isoflow.engine.registry import Layer, transform
from isoflow.utils.geometry import outline_polygon
from isoflow.utils.noise import get_noise_field


@transform(
    id="T1.02",
    layer=Layer.GLYPH,
    dependencies=["T1.01"],
    description="Generate glyph outline points and polygon",
    tags={"always"},
)
def glyph_outline(ctx: EngineContext) -> None:
    config = ctx.config
    synth = GlyphGeometrySynthesizer(
        noise=get_noise_field(config.noise_table_size),
        num_points=config.outline_points,
    )
    for subject in ctx.subjects:
        glyph = ctx.glyph(subject.id)
        signature = glyph.signature
        if signature is None:
            continue
        center = ctx.position(subject.id)
        radius = signature.display_size(subject.id in ctx.highlighted)
        if config.organic_outlines:
            glyph.outline = synth.organic_outline(center, radius, subject, signature)
        else:
            glyph.outline = synth.outline(center, radius, signature)
        glyph.polygon = outline_polygon(glyph.outline.points)
        glyph.features["area"] = round(glyph.area, 2)
