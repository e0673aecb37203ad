"""EngineContext — the single state object flowing through all transforms.

Per-subject results → GlyphData
Cross-subject results → EngineContext.* (edges, clusters, fusion shapes, ...)

Subjects and positions are inputs; transforms read them and never write them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from shapely.geometry import Polygon

from isoflow.engine.config import EngineConfig
from isoflow.engine.core.clusters import Cluster
from isoflow.engine.core.fusion import FusionShape
from isoflow.engine.core.glyph import GlyphOutline, GlyphSignature
from isoflow.engine.core.similarity import SimilarityEdge
from isoflow.engine.core.subject import Subject
from isoflow.engine.core.subjectivity import SubjectivityProfile


@dataclass
class GlyphData:
    """Derived glyph state for a single subject."""

    subject_id: str
    profile: SubjectivityProfile | None = None
    seed: int = 0
    signature: GlyphSignature | None = None
    outline: GlyphOutline | None = None
    # Shapely polygon built from the outline points
    polygon: Polygon | None = None
    # Everything else (interpretation, quote, degree, ...)
    features: dict[str, Any] = field(default_factory=dict)

    @property
    def area(self) -> float:
        if self.polygon is not None and not self.polygon.is_empty:
            return float(self.polygon.area)
        return 0.0


@dataclass
class EngineContext:
    """Shared state for one pipeline run."""

    subjects: list[Subject] = field(default_factory=list)
    # Current 2-D position per subject id, owned by the layout collaborator
    positions: dict[str, tuple[float, float]] = field(default_factory=dict)
    # Similarity settings supplied by the caller
    similarity_threshold: float = 0.95
    dimension: str = "multidimensional"
    config: EngineConfig = field(default_factory=EngineConfig)
    # Ids rendered at highlight scale
    highlighted: set[str] = field(default_factory=set)

    # --- Per-subject results (populated by Layers 0-1) ---
    glyphs: dict[str, GlyphData] = field(default_factory=dict)

    # --- Cross-subject results (populated by Layers 2-3) ---
    edges: list[SimilarityEdge] = field(default_factory=list)
    degrees: list[int] = field(default_factory=list)
    clusters: list[Cluster] = field(default_factory=list)
    fusion_shapes: list[FusionShape] = field(default_factory=list)

    # --- Pipeline metadata ---
    completed_transforms: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def num_subjects(self) -> int:
        return len(self.subjects)

    @property
    def cluster_threshold(self) -> float:
        return self.similarity_threshold * self.config.cluster_threshold_relax

    def position(self, subject_id: str) -> tuple[float, float]:
        return self.positions.get(subject_id, (0.0, 0.0))

    def glyph(self, subject_id: str) -> GlyphData:
        data = self.glyphs.get(subject_id)
        if data is None:
            data = self.glyphs[subject_id] = GlyphData(subject_id=subject_id)
        return data
