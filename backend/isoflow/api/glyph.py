"""POST /api/glyph — profile, signature and outline for one participant."""

from __future__ import annotations

import dataclasses

from fastapi import APIRouter

from isoflow.data.loader import subjects_from_records
from isoflow.engine.context import EngineContext, GlyphData
from isoflow.engine.core.glyph import GlyphGeometrySynthesizer
from isoflow.engine.core.subjectivity import SubjectivityExtractor
from isoflow.models.requests import GlyphRequest
from isoflow.models.responses import GlyphResponse
from isoflow.report.interpretation import interpret_glyph, representative_quote
from isoflow.report.scene_formatter import glyph_to_scene
from isoflow.utils.geometry import outline_polygon

router = APIRouter()


@router.post("/glyph", response_model=GlyphResponse)
async def glyph(req: GlyphRequest) -> GlyphResponse:
    subject = subjects_from_records([req.participant])[0]
    synth = GlyphGeometrySynthesizer(extractor=SubjectivityExtractor())

    signature = synth.signature(subject)
    center = (req.x, req.y)
    radius = signature.display_size(req.highlighted)
    if req.organic:
        outline = synth.organic_outline(center, radius, subject, signature)
    else:
        outline = synth.outline(center, radius, signature)

    data = GlyphData(
        subject_id=subject.id,
        profile=signature.profile,
        seed=signature.seed,
        signature=signature,
        outline=outline,
        polygon=outline_polygon(outline.points),
    )
    data.features["interpretation"] = interpret_glyph(signature)
    data.features["quote"] = representative_quote(subject)

    ctx = EngineContext(
        subjects=[subject],
        positions={subject.id: center},
        highlighted={subject.id} if req.highlighted else set(),
        glyphs={subject.id: data},
    )

    sig = dataclasses.asdict(signature)
    sig.pop("profile")
    return GlyphResponse(
        glyph=glyph_to_scene(ctx, subject, data),
        profile=dataclasses.asdict(signature.profile),
        signature=sig,
    )
