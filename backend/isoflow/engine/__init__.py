"""Isoflow glyph and similarity-graph engine."""

from isoflow.engine.registry import transform, Layer, get_registry, register_all_transforms
from isoflow.engine.context import EngineContext, GlyphData
from isoflow.engine.pipeline import Pipeline

__all__ = [
    "transform",
    "Layer",
    "get_registry",
    "register_all_transforms",
    "EngineContext",
    "GlyphData",
    "Pipeline",
]
