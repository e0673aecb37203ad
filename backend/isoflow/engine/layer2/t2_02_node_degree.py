"""T2.02 — Node Degree.

Incident edge count per subject, for interaction layers that size or rank
nodes by connectivity.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.similarity import node_degrees
from isoflow.engine.registry import Layer, transform


@transform(
    id="T2.02",
    layer=Layer.RELATIONSHIPS,
    dependencies=["T2.01"],
    description="Count incident similarity edges per subject",
)
def node_degree(ctx: EngineContext) -> None:
    ctx.degrees = node_degrees(ctx.num_subjects, ctx.edges)
    for subject, degree in zip(ctx.subjects, ctx.degrees):
        ctx.glyph(subject.id).features["degree"] = degree
