"""Similarity graph — sampled, thresholded, degree-bounded cosine graph.

Each subject compares itself against a sample of candidates (an index window
around it plus random fill), keeps the candidates at or above the threshold,
and links to its top ``max_links`` by similarity. Candidate search per subject
only reads the input vectors; all edge deduplication happens in one ordered
merge pass afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np

from isoflow.engine.core.subject import Subject

logger = logging.getLogger(__name__)

VectorSelector = Callable[[Subject], Sequence[float]]

LOCAL_WINDOW = 20
# Vectors longer than this are stride-sampled in legacy mode.
_LEGACY_SAMPLING_DIMS = 500


@dataclass(frozen=True)
class SimilarityEdge:
    """Undirected edge by subject index. ``source`` is the discovering subject."""

    source: int
    target: int
    similarity: float
    dimension: str = "multidimensional"

    @property
    def key(self) -> tuple[int, int]:
        return pair_key(self.source, self.target)


def pair_key(i: int, j: int) -> tuple[int, int]:
    return (i, j) if i < j else (j, i)


def cosine_similarity(
    a: Sequence[float] | None,
    b: Sequence[float] | None,
    legacy_sampling: bool = False,
) -> float:
    """dot / (|a| |b|); 0.0 for missing, mismatched or zero-norm vectors.

    ``legacy_sampling`` reproduces the old every-other-dimension estimate for
    vectors over 500 dims. It is not exact cosine similarity.
    """
    if a is None or b is None or len(a) != len(b) or len(a) == 0:
        return 0.0
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if legacy_sampling and len(va) > _LEGACY_SAMPLING_DIMS:
        # The x2 compensation cancels in the ratio; kept for parity.
        va, vb = va[::2], vb[::2]
        dot = float(np.dot(va, vb)) * 2
        norm_a = float(np.dot(va, va)) * 2
        norm_b = float(np.dot(vb, vb)) * 2
    else:
        dot = float(np.dot(va, vb))
        norm_a = float(np.dot(va, va))
        norm_b = float(np.dot(vb, vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return max(-1.0, min(1.0, dot / float(np.sqrt(norm_a * norm_b))))


def link_budget(n: int) -> tuple[int, int]:
    """(max_links_per_node, sample_size) for ``n`` subjects."""
    if n <= 20:
        return max(0, min(10, n - 1)), n
    if n <= 50:
        return 8, min(30, n)
    return 5, min(50, n)


def sample_indices(
    index: int,
    n: int,
    sample_size: int,
    rng: np.random.Generator,
    window: int = LOCAL_WINDOW,
) -> list[int]:
    """Index window around ``index`` plus random fill, in insertion order."""
    indices: dict[int, None] = {}
    span = min(window, n)
    for j in range(max(0, index - span), min(n, index + span)):
        if j != index:
            indices[j] = None

    random_count = sample_size - len(indices)
    for _ in range(max(0, random_count)):
        if len(indices) >= sample_size:
            break
        j = int(rng.integers(0, n))
        if j != index:
            indices[j] = None
    return list(indices)


class SimilarityGraphBuilder:
    """Builds the sparse similarity edge list for one call."""

    def __init__(
        self,
        seed: int | None = 0,
        window: int = LOCAL_WINDOW,
        legacy_sampling: bool = False,
    ) -> None:
        self.seed = seed
        self.window = window
        self.legacy_sampling = legacy_sampling

    def _candidates(
        self,
        index: int,
        vectors: list[np.ndarray | None],
        sample: list[int],
        threshold: float,
    ) -> list[tuple[int, float]]:
        """Sampled neighbors at or above threshold, most similar first.

        Only positive similarity links; a 0.0 from a missing or degenerate
        vector never does, whatever the threshold.
        """
        found: list[tuple[int, float]] = []
        own = vectors[index]
        for j in sample:
            sim = cosine_similarity(own, vectors[j], self.legacy_sampling)
            if sim > 0.0 and sim >= threshold:
                found.append((j, sim))
        found.sort(key=lambda c: c[1], reverse=True)
        return found

    def build(
        self,
        subjects: Sequence[Subject],
        selector: VectorSelector | str = "multidimensional",
        threshold: float = 0.95,
    ) -> list[SimilarityEdge]:
        n = len(subjects)
        if n < 2:
            return []

        if isinstance(selector, str):
            dimension = selector
            select: VectorSelector = lambda s: s.vector(dimension)  # noqa: E731
        else:
            dimension = getattr(selector, "__name__", "custom")
            select = selector

        max_links, sample_size = link_budget(n)
        logger.debug(
            "Similarity graph: n=%d max_links=%d sample_size=%d threshold=%.3f",
            n, max_links, sample_size, threshold,
        )

        vectors = [np.asarray(select(s), dtype=np.float64) for s in subjects]
        rng = np.random.default_rng(self.seed)
        samples = [sample_indices(i, n, sample_size, rng, self.window) for i in range(n)]

        candidates = [self._candidates(i, vectors, samples[i], threshold) for i in range(n)]

        # Single merge pass: pairs already linked from an earlier subject
        # do not use up the later subject's link budget.
        linked: set[tuple[int, int]] = set()
        edges: list[SimilarityEdge] = []
        for i in range(n):
            fresh = [(j, sim) for j, sim in candidates[i] if pair_key(i, j) not in linked]
            for j, sim in fresh[:max_links]:
                linked.add(pair_key(i, j))
                edges.append(SimilarityEdge(source=i, target=j, similarity=sim, dimension=dimension))

        logger.info("Similarity graph: %d edges across %d subjects", len(edges), n)
        return edges


def node_degrees(n: int, edges: Sequence[SimilarityEdge]) -> list[int]:
    degrees = [0] * n
    for e in edges:
        degrees[e.source] += 1
        degrees[e.target] += 1
    return degrees
