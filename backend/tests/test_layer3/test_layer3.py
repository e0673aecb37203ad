"""Tests for Layer 3 — cluster detection and fusion shapes."""

import numpy as np
import pytest

from isoflow.engine.context import EngineContext
from isoflow.engine.core.clusters import ClusterBounds, ClusterDetector, cluster_bounds
from isoflow.engine.core.fusion import FusionShapeSynthesizer, cluster_seed, gradient_stops
from isoflow.engine.core.similarity import SimilarityEdge, SimilarityGraphBuilder
from isoflow.engine.pipeline import Pipeline
from isoflow.engine.registry import Layer, register_all_transforms
from isoflow.utils.geometry import outline_polygon
from tests.conftest import make_subject

register_all_transforms()


def _edge(i: int, j: int, sim: float) -> SimilarityEdge:
    return SimilarityEdge(source=i, target=j, similarity=sim)


class TestClusterDetection:
    def test_identical_trio_single_cluster(self, identical_trio):
        edges = SimilarityGraphBuilder().build(identical_trio, threshold=0.95)
        clusters = ClusterDetector().detect(identical_trio, edges, 0.95)
        assert len(clusters) == 1
        assert sorted(clusters[0].members) == [0, 1, 2]

    def test_weak_edges_ignored_and_singletons_dropped(self):
        edges = [_edge(0, 1, 0.99), _edge(1, 2, 0.5), _edge(3, 4, 0.97)]
        components = ClusterDetector().components(6, edges, 0.9)
        assert components == [[0, 1], [3, 4]]

    def test_clusters_are_disjoint_and_minimal(self):
        rng = np.random.default_rng(5)
        edges = [
            _edge(int(i), int(j), float(s))
            for i, j, s in zip(rng.integers(0, 40, 60), rng.integers(0, 40, 60), rng.uniform(0.8, 1.0, 60))
            if i != j
        ]
        components = ClusterDetector().components(40, edges, 0.9)
        seen = [m for c in components for m in c]
        assert len(seen) == len(set(seen))
        assert all(len(c) >= 2 for c in components)

    def test_bfs_order(self):
        edges = [_edge(0, 2, 1.0), _edge(2, 1, 1.0), _edge(0, 3, 1.0)]
        assert ClusterDetector().components(4, edges, 0.9) == [[0, 2, 3, 1]]

    def test_bounds_from_positions(self, two_groups):
        subjects, positions = two_groups
        edges = [_edge(0, 1, 1.0), _edge(2, 3, 1.0)]
        clusters = ClusterDetector().detect(subjects, edges, 0.9, positions)
        a, b = clusters
        assert a.bounds.center == (0.0, 0.0)
        assert a.bounds.radius == pytest.approx(6.5)
        assert b.bounds.center == (100.0, 0.0)
        assert b.bounds.radius == pytest.approx(26.0)

    def test_missing_positions_at_origin(self, identical_trio):
        edges = [_edge(0, 1, 1.0)]
        (cluster,) = ClusterDetector().detect(identical_trio, edges, 0.9)
        assert cluster.bounds == ClusterBounds(center=(0.0, 0.0), radius=0.0)

    def test_cluster_bounds_padding(self):
        pts = np.array([[0.0, 0.0], [6.0, 8.0]])
        bounds = cluster_bounds(pts, padding=2.0)
        assert bounds.center == (3.0, 4.0)
        assert bounds.radius == pytest.approx(10.0)


class TestFusion:
    def test_cluster_seed(self):
        members = [
            make_subject("P3", semantic=(0.25, -0.25, 0.0, 0.0, 0.0, 9.0)),
            make_subject("P10", semantic=(0.5,)),
        ]
        # (300 + 50) × 1 + (1000 + 50) × 2
        assert cluster_seed(members) == 2450

    def test_gradient_stops(self):
        one = gradient_stops(["#FF0000"], 0.4)
        assert [s.offset for s in one] == [0.0, 0.5, 1.0]
        assert one[0].opacity == pytest.approx(0.24)
        assert one[-1].opacity == pytest.approx(0.06)

        two = gradient_stops(["#FF0000", "#0000FF"])
        assert [s.color for s in two] == ["#FF0000", "#0000FF", "#0000FF"]

        many = gradient_stops([f"#0000{i:02X}" for i in range(8)])
        assert len(many) == 5
        assert many[0].offset == 0.0 and many[-1].offset == 1.0
        assert many[0].color == "#000000" and many[-1].color == "#000007"
        opacities = [s.opacity for s in many]
        assert opacities == sorted(opacities, reverse=True)

        assert gradient_stops([]) == ()

    def test_stop_css(self):
        (stop, *_) = gradient_stops(["#FF8000"], 0.5)
        assert stop.css == "rgba(255, 128, 0, 0.3)"

    def test_fuse_shape(self, two_groups):
        subjects, _ = two_groups
        bounds = ClusterBounds(center=(10.0, 20.0), radius=50.0)
        synth = FusionShapeSynthesizer()
        shape = synth.fuse(bounds, subjects[:2], cluster_id=4)

        assert shape.points.shape == (32, 2)
        assert shape.cluster_id == 4
        # No emotion vectors → average peak 0.5
        assert shape.softness == pytest.approx(0.17)
        dist = np.hypot(shape.points[:, 0] - 10.0, shape.points[:, 1] - 20.0)
        assert np.all(dist >= 50.0 * (0.94 - shape.softness) - 1e-9)
        assert np.all(dist <= 50.0 * (0.94 + shape.softness) + 1e-9)
        # #FF0000 and #0000FF average
        assert shape.stroke_color == "#7f007f"
        assert outline_polygon(shape.points).area > 0

    def test_fuse_is_deterministic(self, two_groups):
        subjects, _ = two_groups
        bounds = ClusterBounds(center=(0.0, 0.0), radius=30.0)
        a = FusionShapeSynthesizer().fuse(bounds, subjects)
        b = FusionShapeSynthesizer().fuse(bounds, subjects)
        assert a.points.tobytes() == b.points.tobytes()
        assert a.seed == b.seed


def test_layer3_pipeline_orders_fusion_largest_first(two_groups):
    subjects, positions = two_groups
    ctx = EngineContext(subjects=subjects, positions=positions, similarity_threshold=0.95)
    ctx = Pipeline().run(ctx)

    assert ctx.errors == {}
    assert [c.members for c in ctx.clusters] == [(0, 1), (2, 3)]
    assert [s.cluster_id for s in ctx.fusion_shapes] == [1, 0]
    assert ctx.fusion_shapes[0].bounds.radius > ctx.fusion_shapes[1].bounds.radius
    assert ctx.glyphs["b2"].features["cluster_id"] == 1
    assert ctx.glyphs["a1"].features["cluster_size"] == 2


def test_cluster_threshold_is_relaxed():
    subjects = [make_subject("x"), make_subject("y")]
    ctx = EngineContext(subjects=subjects, similarity_threshold=0.95)
    assert ctx.cluster_threshold == pytest.approx(0.855)
    ctx.edges = [_edge(0, 1, 0.906)]
    Pipeline().run_layer(ctx, Layer.FUSION)
    assert len(ctx.clusters) == 1
