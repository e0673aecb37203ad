"""T3.01 — Cluster Detection.

BFS connected components over edges at or above the relaxed threshold
(similarity threshold × 0.9 by default). Singletons are dropped. Bounds are
the centroid of member positions and 1.3× the farthest member distance.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.clusters import ClusterDetector
from isoflow.engine.registry import Layer, transform


@transform(
    id="T3.01",
    layer=Layer.FUSION,
    dependencies=["T2.01"],
    description="Detect similarity clusters and their bounds",
)
def cluster_detection(ctx: EngineContext) -> None:
    detector = ClusterDetector(padding=ctx.config.cluster_padding)
    ctx.clusters = detector.detect(ctx.subjects, ctx.edges, ctx.cluster_threshold, ctx.positions)

    for cluster in ctx.clusters:
        for m in cluster.members:
            features = ctx.glyph(ctx.subjects[m].id).features
            features["cluster_id"] = cluster.cluster_id
            features["cluster_size"] = cluster.size
