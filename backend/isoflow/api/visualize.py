"""POST /api/visualize — full pipeline over posted participants."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import time
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import Response, StreamingResponse

from isoflow.config import Settings
from isoflow.data.loader import DataLoadError, load_participants, subjects_from_records
from isoflow.dependencies import get_settings
from isoflow.engine.config import EngineConfig
from isoflow.engine.context import EngineContext
from isoflow.engine.pipeline import create_pipeline
from isoflow.models.requests import VisualizeRequest
from isoflow.models.responses import VisualizeResponse
from isoflow.report.scene_formatter import context_to_scene
from isoflow.svg.serializer import scene_to_svg

logger = logging.getLogger(__name__)

router = APIRouter()


_SENTINEL = object()  # marks end of queue

_CONFIG_FLAGS = {f.name for f in dataclasses.fields(EngineConfig) if f.type in ("bool", bool)}


def engine_config_from_options(options: dict[str, bool]) -> EngineConfig:
    """Apply boolean feature flags; unknown keys are ignored."""
    known = {k: v for k, v in options.items() if k in _CONFIG_FLAGS}
    return dataclasses.replace(EngineConfig(), **known)


def build_context(req: VisualizeRequest, settings: Settings) -> EngineContext:
    if req.participants:
        subjects = subjects_from_records(req.participants)
    elif settings.isoflow_data_path:
        subjects = load_participants(settings.isoflow_data_path)
    else:
        raise DataLoadError("No participants posted and no data path configured")

    return EngineContext(
        subjects=subjects,
        positions={k: (float(x), float(y)) for k, (x, y) in req.positions.items()},
        similarity_threshold=(
            req.similarity_threshold if req.similarity_threshold is not None else settings.similarity_threshold
        ),
        dimension=req.dimension or settings.dimension,
        highlighted=set(req.highlighted),
    )


def _run(req: VisualizeRequest, settings: Settings) -> tuple[EngineContext, float]:
    start = time.perf_counter()
    ctx = build_context(req, settings)
    pipeline = create_pipeline(engine_config_from_options(req.options))
    ctx = pipeline.run(ctx)
    return ctx, (time.perf_counter() - start) * 1000


async def _stream_visualize(req: VisualizeRequest, settings: Settings) -> AsyncGenerator[str, None]:
    """Drive pipeline.run_streaming() in a thread, yielding SSE events as they arrive."""
    start = time.perf_counter()

    try:
        ctx = build_context(req, settings)
    except DataLoadError as e:
        data = json.dumps({"type": "error", "message": str(e)})
        yield f"event: error\ndata: {data}\n\n"
        return

    pipeline = create_pipeline(engine_config_from_options(req.options))
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def _run_pipeline() -> None:
        """Sync pipeline in thread — pushes progress dicts onto the async queue."""
        for progress in pipeline.run_streaming(ctx):
            loop.call_soon_threadsafe(queue.put_nowait, progress)
        loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Start pipeline in a thread so the event loop stays free to flush SSE
    loop.run_in_executor(None, _run_pipeline)

    while True:
        item = await queue.get()
        if item is _SENTINEL:
            break
        yield f"event: progress\ndata: {json.dumps(item)}\n\n"

    elapsed = (time.perf_counter() - start) * 1000
    response = VisualizeResponse(
        scene=context_to_scene(ctx),
        processing_time_ms=round(elapsed, 1),
        transforms_completed=len(ctx.completed_transforms),
        transforms_failed=len(ctx.errors),
        errors=ctx.errors,
    )
    yield f"event: result\ndata: {response.model_dump_json()}\n\n"

    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/visualize/stream")
async def visualize_stream(
    req: VisualizeRequest,
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    return StreamingResponse(
        _stream_visualize(req, settings),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/visualize", response_model=VisualizeResponse)
async def visualize(
    req: VisualizeRequest,
    settings: Settings = Depends(get_settings),
) -> VisualizeResponse:
    ctx, elapsed = _run(req, settings)
    logger.info("Visualize: %d subjects, %d edges, %d clusters", ctx.num_subjects, len(ctx.edges), len(ctx.clusters))

    return VisualizeResponse(
        scene=context_to_scene(ctx),
        processing_time_ms=round(elapsed, 1),
        transforms_completed=len(ctx.completed_transforms),
        transforms_failed=len(ctx.errors),
        errors=ctx.errors,
    )


@router.post("/visualize/svg")
async def visualize_svg(
    req: VisualizeRequest,
    settings: Settings = Depends(get_settings),
) -> Response:
    ctx, _ = _run(req, settings)
    return Response(content=scene_to_svg(ctx), media_type="image/svg+xml")
