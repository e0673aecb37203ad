"""T2.01 — Similarity Graph.

Cosine similarity over the selected dimension's vectors, sampled per subject
(index window + seeded random fill), thresholded, top-k per subject, one edge
per unordered pair.
"""

from __future__ import annotations

from isoflow.engine.context import EngineContext
from isoflow.engine.core.similarity import SimilarityGraphBuilder
from isoflow.engine.registry import Layer, transform


@transform(
    id="T2.01",
    layer=Layer.RELATIONSHIPS,
    description="Build sampled, degree-bounded similarity graph",
)
def similarity_graph(ctx: EngineContext) -> None:
    config = ctx.config
    builder = SimilarityGraphBuilder(
        seed=config.sampling_seed,
        window=config.local_window,
        legacy_sampling=config.legacy_cosine_sampling,
    )
    ctx.edges = builder.build(ctx.subjects, ctx.dimension, ctx.similarity_threshold)
