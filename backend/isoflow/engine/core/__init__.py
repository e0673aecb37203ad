"""Pure glyph/graph algorithms used by the pipeline transforms."""

from isoflow.engine.core.clusters import Cluster, ClusterBounds, ClusterDetector
from isoflow.engine.core.fusion import FusionShape, FusionShapeSynthesizer
from isoflow.engine.core.glyph import GlyphGeometrySynthesizer, GlyphOutline, GlyphSignature
from isoflow.engine.core.similarity import SimilarityEdge, SimilarityGraphBuilder, cosine_similarity
from isoflow.engine.core.subject import Subject
from isoflow.engine.core.subjectivity import DEFAULT_PROFILE, SubjectivityExtractor, SubjectivityProfile

__all__ = [
    "Cluster",
    "ClusterBounds",
    "ClusterDetector",
    "FusionShape",
    "FusionShapeSynthesizer",
    "GlyphGeometrySynthesizer",
    "GlyphOutline",
    "GlyphSignature",
    "SimilarityEdge",
    "SimilarityGraphBuilder",
    "cosine_similarity",
    "Subject",
    "DEFAULT_PROFILE",
    "SubjectivityExtractor",
    "SubjectivityProfile",
]
