"""Scene data model — the structured output of the pipeline for renderers."""

from __future__ import annotations

from pydantic import BaseModel, Field


class InterpretationItem(BaseModel):
    feature: str
    value: str
    meaning: str = ""


class GlyphScene(BaseModel):
    subject_id: str
    original_id: str = ""
    position: tuple[float, float] = (0.0, 0.0)
    color: str = ""
    opacity: float = 1.0
    base_size: float = 0.0
    display_size: float = 0.0
    seed: int = 0
    base_shape: str = "circle"
    narrative_style: str = ""
    emotional_level: str = ""
    pattern_type: str = "simple"
    pattern_density: float = 0.0
    reflection_depth: float = 0.0
    edge_sharpness: float = 0.5
    edge_thickness: float = 0.5
    uniqueness: float = 0.0
    outline: list[tuple[float, float]] = Field(default_factory=list)
    path_d: str = ""
    area: float = 0.0
    degree: int = 0
    cluster_id: int | None = None
    interpretations: list[InterpretationItem] = Field(default_factory=list)
    summary: str = ""
    quote: str = ""


class EdgeScene(BaseModel):
    source: str
    target: str
    similarity: float
    dimension: str = "multidimensional"


class GradientStopScene(BaseModel):
    offset: float
    color: str
    opacity: float
    css: str = ""


class ClusterScene(BaseModel):
    cluster_id: int
    members: list[str] = Field(default_factory=list)
    center: tuple[float, float] = (0.0, 0.0)
    radius: float = 0.0


class FusionScene(BaseModel):
    cluster_id: int | None = None
    seed: int = 0
    softness: float = 0.0
    center: tuple[float, float] = (0.0, 0.0)
    radius: float = 0.0
    outline: list[tuple[float, float]] = Field(default_factory=list)
    path_d: str = ""
    area: float = 0.0
    stops: list[GradientStopScene] = Field(default_factory=list)
    stroke_color: str = ""


class SceneOutput(BaseModel):
    subject_count: int = 0
    dimension: str = "multidimensional"
    similarity_threshold: float = 0.95
    cluster_threshold: float = 0.855
    glyphs: list[GlyphScene] = Field(default_factory=list)
    edges: list[EdgeScene] = Field(default_factory=list)
    clusters: list[ClusterScene] = Field(default_factory=list)
    # Largest first, drawing order
    fusion_shapes: list[FusionScene] = Field(default_factory=list)
    scene_text: str = ""
