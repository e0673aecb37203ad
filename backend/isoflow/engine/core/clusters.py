"""Cluster detection — BFS connected components over strong similarity edges."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from isoflow.engine.core.similarity import SimilarityEdge
from isoflow.engine.core.subject import Subject
from isoflow.utils.geometry import centroid, max_distance_from

logger = logging.getLogger(__name__)

CLUSTER_PADDING = 1.3


@dataclass(frozen=True)
class ClusterBounds:
    center: tuple[float, float]
    radius: float


@dataclass(frozen=True)
class Cluster:
    cluster_id: int
    # Subject indices in BFS discovery order
    members: tuple[int, ...]
    bounds: ClusterBounds

    @property
    def size(self) -> int:
        return len(self.members)


def cluster_bounds(
    points: np.ndarray,
    padding: float = CLUSTER_PADDING,
) -> ClusterBounds:
    """Centroid of member positions; radius = padding × max centroid distance."""
    center = centroid(points)
    return ClusterBounds(center=center, radius=max_distance_from(points, center) * padding)


def _adjacency(n: int, edges: Sequence[SimilarityEdge], threshold: float) -> list[list[int]]:
    """Neighbor lists in edge-list order, restricted to edges ≥ threshold."""
    adjacency: list[list[int]] = [[] for _ in range(n)]
    for e in edges:
        if e.similarity < threshold:
            continue
        if not (0 <= e.source < n and 0 <= e.target < n):
            continue
        adjacency[e.source].append(e.target)
        adjacency[e.target].append(e.source)
    return adjacency


class ClusterDetector:
    def __init__(self, padding: float = CLUSTER_PADDING) -> None:
        self.padding = padding

    def components(self, n: int, edges: Sequence[SimilarityEdge], threshold: float) -> list[list[int]]:
        """Connected components of size ≥ 2, seeded in index order."""
        adjacency = _adjacency(n, edges, threshold)
        visited = [False] * n
        components: list[list[int]] = []

        for start in range(n):
            if visited[start]:
                continue
            visited[start] = True
            component = [start]
            queue = deque([start])
            while queue:
                current = queue.popleft()
                for neighbor in adjacency[current]:
                    if not visited[neighbor]:
                        visited[neighbor] = True
                        component.append(neighbor)
                        queue.append(neighbor)
            if len(component) >= 2:
                components.append(component)
        return components

    def detect(
        self,
        subjects: Sequence[Subject],
        edges: Sequence[SimilarityEdge],
        threshold: float,
        positions: Mapping[str, tuple[float, float]] | None = None,
    ) -> list[Cluster]:
        """Clusters with bounds computed from current positions (missing → origin)."""
        positions = positions or {}
        clusters: list[Cluster] = []
        for cid, members in enumerate(self.components(len(subjects), edges, threshold)):
            pts = np.array(
                [positions.get(subjects[m].id, (0.0, 0.0)) for m in members],
                dtype=np.float64,
            )
            clusters.append(
                Cluster(cluster_id=cid, members=tuple(members), bounds=cluster_bounds(pts, self.padding))
            )

        logger.debug("Cluster detection: %d clusters at threshold %.3f", len(clusters), threshold)
        return clusters
