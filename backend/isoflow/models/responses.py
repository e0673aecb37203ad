"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from isoflow.models.scene import GlyphScene, SceneOutput


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    transforms_registered: int = 0


class VisualizeResponse(BaseModel):
    scene: SceneOutput
    processing_time_ms: float = 0.0
    transforms_completed: int = 0
    transforms_failed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)


class GlyphResponse(BaseModel):
    glyph: GlyphScene
    profile: dict[str, Any] = Field(default_factory=dict)
    signature: dict[str, Any] = Field(default_factory=dict)
