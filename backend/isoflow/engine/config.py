"""Engine configuration — algorithm constants and adaptive behavior."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Controls glyph geometry, graph sampling and cluster fusion."""

    # Glyph / fusion outline resolution
    outline_points: int = 32
    fusion_points: int = 32

    # Noise lookup table length
    noise_table_size: int = 512

    # Similarity graph sampling
    local_window: int = 20
    sampling_seed: int | None = 0
    legacy_cosine_sampling: bool = False  # stride-sample vectors > 500 dims

    # Cluster detection runs at similarity_threshold × relax
    cluster_threshold_relax: float = 0.9
    cluster_padding: float = 1.3

    # Fusion rendering
    show_cluster_fusion: bool = True
    fusion_opacity: float = 0.4

    # Below this many subjects, relationship transforms are skipped
    min_subjects_for_relationships: int = 2

    # Use the noise-driven outline instead of the sinusoidal one
    organic_outlines: bool = False
