"""T3.02 — Fusion Shapes.

One noise-perturbed organic boundary per cluster with radial color stops
blended from member colors. Sorted largest first so smaller shapes draw on top.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.fusion import FusionShapeSynthesizer
from isoflow.engine.registry import Layer, transform
from isoflow.utils.noise import get_noise_field


@transform(
    id="T3.02",
    layer=Layer.FUSION,
    dependencies=["T3.01"],
    description="Synthesize fusion shapes for detected clusters",
)
def fusion_shapes(ctx: EngineContext) -> None:
    config = ctx.config
    synth = FusionShapeSynthesizer(
        noise=get_noise_field(config.noise_table_size),
        num_points=config.fusion_points,
        base_opacity=config.fusion_opacity,
    )
    shapes = []
    for cluster in ctx.clusters:
        members = [ctx.subjects[m] for m in cluster.members]
        shapes.append(synth.fuse(cluster.bounds, members, cluster_id=cluster.cluster_id))
    shapes.sort(key=lambda s: s.bounds.radius, reverse=True)
    ctx.fusion_shapes = shapes
