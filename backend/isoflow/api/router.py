"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from isoflow.api import glyph, health, visualize

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(visualize.router)
api_router.include_router(glyph.router)
