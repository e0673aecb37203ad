"""Pipeline orchestrator — runs transforms in dependency order with adaptive gating."""

from __future__ import annotations

import logging
import time
from collections.abc import Generator
from typing import Any

from isoflow.engine.config import EngineConfig
from isoflow.engine.context import EngineContext
from isoflow.engine.registry import Layer, TransformRegistry, TransformSpec, get_registry

logger = logging.getLogger(__name__)

_RELATIONSHIP_IDS = {"T2.01", "T2.02", "T3.01", "T3.02"}
_FUSION_IDS = {"T3.02"}


class Pipeline:
    """Orchestrates the transform pipeline."""

    def __init__(
        self,
        registry: TransformRegistry | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or EngineConfig()

    def _ordered(self, ctx: EngineContext) -> tuple[list[TransformSpec], set[str]]:
        skip_ids = self._adaptive_gate(ctx)
        requested = {s.id for s in self.registry.all()} - skip_ids
        return self.registry.resolve_order(requested), skip_ids

    def run(self, ctx: EngineContext) -> EngineContext:
        """Run the full pipeline on the given context."""
        start = time.perf_counter()
        ctx.config = self.config
        ordered, skip_ids = self._ordered(ctx)

        logger.info(
            "Pipeline: %d transforms queued (%d skipped) for %d subjects",
            len(ordered),
            len(skip_ids),
            ctx.num_subjects,
        )

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
                ctx.completed_transforms.add(spec.id)
                elapsed = (time.perf_counter() - t0) * 1000
                logger.debug("  %s completed in %.1fms", spec.id, elapsed)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d transforms in %.0fms",
            len(ctx.completed_transforms),
            len(ordered),
            total,
        )
        return ctx

    def run_streaming(self, ctx: EngineContext) -> Generator[dict[str, Any], None, None]:
        """Run the pipeline, yielding a progress dict before and after each transform.

        The caller's ``ctx`` is mutated in-place, so after the generator is
        exhausted the context contains all results (same as ``run()``).
        """
        ctx.config = self.config
        ordered, _ = self._ordered(ctx)
        total = len(ordered)

        for i, spec in enumerate(ordered):
            event = {
                "transform_id": spec.id,
                "description": spec.description,
                "layer": spec.layer.name,
                "index": i,
                "total": total,
                "elapsed_ms": 0.0,
                "status": "running",
                "error": "",
            }
            yield dict(event)

            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
                ctx.completed_transforms.add(spec.id)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                event["status"] = "error"
                event["error"] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
            else:
                event["status"] = "ok"

            event["elapsed_ms"] = round((time.perf_counter() - t0) * 1000, 1)
            yield event

    def run_layer(self, ctx: EngineContext, layer: Layer) -> EngineContext:
        """Run only transforms in a specific layer."""
        ctx.config = self.config
        for spec in self.registry.get_layer(layer):
            try:
                spec.fn(ctx)
                ctx.completed_transforms.add(spec.id)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
        return ctx

    def _adaptive_gate(self, ctx: EngineContext) -> set[str]:
        """Determine which transforms to skip for this context.

        - Fewer than ``min_subjects_for_relationships`` subjects: no graph,
          clusters or fusion.
        - Fusion display disabled: no fusion shapes.
        """
        skip: set[str] = set()

        if ctx.num_subjects < self.config.min_subjects_for_relationships:
            skip.update(_RELATIONSHIP_IDS)

        if not self.config.show_cluster_fusion:
            skip.update(_FUSION_IDS)

        return skip


def create_pipeline(config: EngineConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    return Pipeline(config=config)
