"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from isoflow.config import settings
from isoflow.data.loader import DataLoadError
from isoflow.engine.registry import register_all_transforms

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.isoflow_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Isoflow",
        description="Subjectivity isotype engine — interview text to glyphs, similarity graph and cluster fusion",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DataLoadError)
    async def _data_load_error(request: Request, exc: DataLoadError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    # Import all transform modules to trigger registration
    register_all_transforms()

    from isoflow.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
