"""Tests for Layer 2 — cosine similarity and the sampled similarity graph."""

from collections import Counter

import numpy as np
import pytest

from isoflow.engine.context import EngineContext
from isoflow.engine.core.clusters import ClusterDetector
from isoflow.engine.core.similarity import (
    SimilarityGraphBuilder,
    cosine_similarity,
    link_budget,
    node_degrees,
    sample_indices,
)
from isoflow.engine.pipeline import Pipeline
from isoflow.engine.registry import register_all_transforms
from tests.conftest import make_subject

register_all_transforms()


def _crowd(n: int, dims: int = 6, seed: int = 7) -> list:
    """``n`` subjects with small perturbations of one shared direction."""
    rng = np.random.default_rng(seed)
    base = rng.normal(size=dims)
    return [
        make_subject(f"p{i}", unified=tuple(base + rng.normal(scale=0.05, size=dims)))
        for i in range(n)
    ]


class TestCosine:
    def test_symmetry(self):
        rng = np.random.default_rng(0)
        for _ in range(20):
            a, b = rng.normal(size=16), rng.normal(size=16)
            assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_self_similarity(self):
        rng = np.random.default_rng(1)
        for _ in range(20):
            a = rng.normal(size=32)
            assert cosine_similarity(a, a) == pytest.approx(1.0)

    def test_degenerate_vectors(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0
        assert cosine_similarity([], []) == 0.0
        assert cosine_similarity(None, [1.0]) == 0.0

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 0.0], [-2.0, 0.0]) == pytest.approx(-1.0)

    def test_legacy_sampling_only_for_long_vectors(self):
        rng = np.random.default_rng(2)
        a, b = rng.normal(size=10), rng.normal(size=10)
        assert cosine_similarity(a, b, legacy_sampling=True) == cosine_similarity(a, b)

        long_a, long_b = rng.normal(size=600), rng.normal(size=600)
        expected = cosine_similarity(long_a[::2], long_b[::2])
        assert cosine_similarity(long_a, long_b, legacy_sampling=True) == pytest.approx(expected)


class TestBudget:
    @pytest.mark.parametrize(
        "n, expected",
        [(1, (0, 1)), (5, (4, 5)), (20, (10, 20)), (21, (8, 21)), (50, (8, 30)), (51, (5, 50)), (500, (5, 50))],
    )
    def test_link_budget_tiers(self, n, expected):
        assert link_budget(n) == expected

    def test_sample_window_then_random(self):
        rng = np.random.default_rng(0)
        sample = sample_indices(30, 100, 50, rng, window=20)
        assert sample[:39] == [j for j in range(10, 50) if j != 30]
        assert 30 not in sample
        assert len(sample) == len(set(sample))
        assert len(sample) <= 50


class TestGraph:
    def test_fewer_than_two_subjects(self):
        builder = SimilarityGraphBuilder()
        assert builder.build([]) == []
        assert builder.build([make_subject("a", unified=(1.0,))]) == []

    def test_identical_trio(self, identical_trio):
        edges = SimilarityGraphBuilder().build(identical_trio, threshold=0.95)
        assert sorted(e.key for e in edges) == [(0, 1), (0, 2), (1, 2)]
        assert all(e.similarity == pytest.approx(1.0) for e in edges)
        assert node_degrees(3, edges) == [2, 2, 2]

    @pytest.mark.parametrize("n, cap", [(15, 10), (35, 8), (80, 5)])
    def test_edge_cap(self, n, cap):
        edges = SimilarityGraphBuilder().build(_crowd(n), threshold=0.5)
        outgoing = Counter(e.source for e in edges)
        assert edges
        assert max(outgoing.values()) <= cap

    @pytest.mark.parametrize("n", [15, 35, 80])
    def test_no_duplicate_edges(self, n):
        edges = SimilarityGraphBuilder().build(_crowd(n), threshold=0.5)
        keys = [e.key for e in edges]
        assert len(keys) == len(set(keys))
        assert all(e.source != e.target for e in edges)

    def test_threshold_respected(self):
        edges = SimilarityGraphBuilder().build(_crowd(40), threshold=0.99)
        assert all(e.similarity >= 0.99 for e in edges)

    def test_build_is_repeatable(self):
        subjects = _crowd(70)
        builder = SimilarityGraphBuilder(seed=3)
        assert builder.build(subjects, threshold=0.5) == builder.build(subjects, threshold=0.5)

    def test_dimension_selector(self):
        subjects = [
            make_subject("a", unified=(1.0, 0.0), semantic=(0.0, 1.0)),
            make_subject("b", unified=(0.0, 1.0), semantic=(0.0, 1.0)),
        ]
        builder = SimilarityGraphBuilder()
        assert builder.build(subjects, "multidimensional", 0.9) == []

        edges = builder.build(subjects, "semantic", 0.9)
        assert len(edges) == 1
        assert edges[0].dimension == "semantic"

    def test_callable_selector(self):
        subjects = [make_subject("a", emotion=(0.9, 0.1)), make_subject("b", emotion=(0.8, 0.1))]

        def emotion(s):
            return s.emotion

        edges = SimilarityGraphBuilder().build(subjects, emotion, 0.9)
        assert len(edges) == 1
        assert edges[0].dimension == "emotion"

    def test_degenerate_vectors_never_link(self):
        subjects = [make_subject("a"), make_subject("b", unified=(1.0, 1.0)), make_subject("c", unified=(0.0, 0.0))]
        assert SimilarityGraphBuilder().build(subjects, threshold=0.5) == []

    def test_degenerate_vectors_never_link_at_zero_threshold(self):
        subjects = [make_subject("a"), make_subject("b"), make_subject("c", unified=(0.0, 0.0))]
        edges = SimilarityGraphBuilder().build(subjects, threshold=0.0)
        assert edges == []
        assert ClusterDetector().detect(subjects, edges, 0.0) == []

    def test_orthogonal_vectors_never_link_at_zero_threshold(self):
        subjects = [make_subject("a", unified=(1.0, 0.0)), make_subject("b", unified=(0.0, 1.0))]
        assert SimilarityGraphBuilder().build(subjects, threshold=0.0) == []

    def test_negative_threshold_keeps_only_positive_similarity(self):
        subjects = [
            make_subject("a", unified=(1.0, 0.0)),
            make_subject("b", unified=(-0.3, 1.0)),
            make_subject("c", unified=(1.0, 0.1)),
        ]
        edges = SimilarityGraphBuilder().build(subjects, threshold=-0.5)
        assert [e.key for e in edges] == [(0, 2)]
        assert all(0.0 < e.similarity <= 1.0 for e in edges)

    def test_empty_named_vector_compares_on_semantic(self):
        subject = make_subject("a", semantic=(0.2, 0.4))
        assert subject.vector("emotion") == (0.2, 0.4)
        assert subject.vector("multidimensional") == ()


def test_layer2_pipeline(identical_trio):
    ctx = Pipeline().run(EngineContext(subjects=identical_trio, similarity_threshold=0.95))
    assert len(ctx.edges) == 3
    assert ctx.degrees == [2, 2, 2]
    assert ctx.glyphs["s0"].features["degree"] == 2
