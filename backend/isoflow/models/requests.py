"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ParticipantRecord(BaseModel):
    """One raw interview participant as exported by the embedding pipeline."""

    participant_id: str = Field(..., min_length=1, description="Participant identifier")
    text_content: str = Field(default="", description="Interview transcript (Q:/A: lines)")
    semantic_embedding: list[float] = Field(default_factory=list)
    unified_embedding: list[float] = Field(default_factory=list)
    emotion_scores: dict[str, float] = Field(
        default_factory=dict,
        description="Named emotion scores (joy, sadness, anger, fear, surprise, disgust, neutral)",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)


class VisualizeRequest(BaseModel):
    participants: list[ParticipantRecord] = Field(..., description="Participants to visualize")
    positions: dict[str, tuple[float, float]] = Field(
        default_factory=dict,
        description="Current (x, y) per subject id; missing ids sit at the origin",
    )
    similarity_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    dimension: str | None = Field(
        default=None,
        description="multidimensional, semantic, emotion or unified",
    )
    highlighted: list[str] = Field(default_factory=list, description="Subject ids drawn 1.3× larger")
    options: dict[str, bool] = Field(
        default_factory=dict,
        description="Optional feature flags (e.g., show_cluster_fusion=False, organic_outlines=True)",
    )


class GlyphRequest(BaseModel):
    participant: ParticipantRecord
    x: float = Field(default=0.0, description="Glyph center x")
    y: float = Field(default=0.0, description="Glyph center y")
    highlighted: bool = False
    organic: bool = Field(default=False, description="Use the noise-driven outline")
