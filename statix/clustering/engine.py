"""
Hierarchical clustering of the formed input graph.

The inference consumes any ClusteringEngine. AgglomerativeEngine is the
reference engine: average-linkage agglomerative clustering over the link
weights, cut at the distance threshold derived from the scale.

Clusters file format (.cnl):
    # Clusters: <count>, Nodes: <count>, Fuzzy: <0|1>
    <member> <member> ...
"""

import logging
from pathlib import Path
from typing import Protocol

import numpy as np
from sklearn.cluster import AgglomerativeClustering

from statix.graph.models import Graph
from statix.graph.sinks import unsigned_id

from .models import ClusteringOptions

logger = logging.getLogger(__name__)

# Quantile of the link weights dropped by the reduction policy
REDUCTION_QUANTILES = {"none": 0.0, "accurate": 0.25, "mean": 0.5, "severe": 0.75}
# Number of the hierarchy levels output in the multi-level mode
LEVELS_NUM = 4


class ClusteringEngine(Protocol):
    """Builds and outputs the cluster hierarchy of the graph."""

    def cluster(
        self, graph: Graph, output_path: str | Path, options: ClusteringOptions
    ) -> list[list[int]]: ...


def similarity_matrix(graph: Graph, node_ids: list[int]) -> np.ndarray:
    """Symmetric link weights matrix of the graph nodes, without self-weights.

    Duplicated edges (both directions retained by the links cutting) are
    merged taking the heavier one.
    """
    index = {nid: i for i, nid in enumerate(node_ids)}
    sims = np.zeros((len(node_ids), len(node_ids)))
    for source, target, weight in graph.edges():
        i, j = index[source], index[target]
        if i == j:
            continue
        if weight > sims[i, j]:
            sims[i, j] = sims[j, i] = weight
    return sims


class AgglomerativeEngine:
    """Average-linkage agglomerative clustering of the graph nodes."""

    def cluster(
        self, graph: Graph, output_path: str | Path, options: ClusteringOptions
    ) -> list[list[int]]:
        """Cluster the graph nodes and save the clusters.

        Args:
            graph: Input graph
            output_path: Clusters file name
            options: Clustering options

        Returns:
            Output clusters as lists of the member ids
        """
        node_ids = list(graph.nodes)
        threshold = 1.0 / (1.0 + options.scale)
        if options.multilevel:
            thresholds = np.linspace(threshold, 1.0, LEVELS_NUM + 1)[:-1].tolist()
        else:
            thresholds = [threshold]

        sims = self._reduce(
            similarity_matrix(graph, node_ids),
            options.reduction,
            options.reduce_by_weight,
        )
        clusters: list[list[int]] = []
        seen: set[frozenset[int]] = set()
        for level, dist_max in enumerate(thresholds):
            level_clusters = self._cut(sims, node_ids, dist_max)
            logger.info(
                f"Level {level}: {len(level_clusters)} clusters (distance < {dist_max:.3g})"
            )
            for members in level_clusters:
                if options.filter_members:
                    members = [m for m in members if m >= 0]
                key = frozenset(members)
                if members and key not in seen:
                    seen.add(key)
                    clusters.append(members)

        self._save(clusters, len(node_ids), options.multilevel, output_path)
        return clusters

    def _reduce(
        self, sims: np.ndarray, reduction: str, by_weight: bool = False
    ) -> np.ndarray:
        """Drop the lightest links according to the reduction policy.

        By default each node drops its own lightest links and a link is kept
        while either of its nodes keeps it, so sparsely linked nodes retain
        their links. Reduction by weight applies a single weight quantile to
        the whole graph instead.
        """
        quantile = REDUCTION_QUANTILES[reduction]
        if not quantile or not (sims > 0).any():
            return sims
        if by_weight:
            floor = np.quantile(sims[sims > 0], quantile)
            return np.where(sims >= floor, sims, 0.0)

        floors = np.array(
            [
                np.quantile(row[row > 0], quantile) if (row > 0).any() else np.inf
                for row in sims
            ]
        )
        keep = sims >= floors[:, None]
        return np.where(keep | keep.T, sims, 0.0)

    def _cut(
        self, sims: np.ndarray, node_ids: list[int], dist_max: float
    ) -> list[list[int]]:
        """Clusters of the nodes merged below the distance threshold."""
        if len(node_ids) < 2:
            return [list(node_ids)] if node_ids else []

        wmax = sims.max()
        distances = 1.0 - (sims / wmax if wmax > 0 else sims)
        np.fill_diagonal(distances, 0.0)
        labels = AgglomerativeClustering(
            n_clusters=None,
            metric="precomputed",
            linkage="average",
            distance_threshold=dist_max,
        ).fit_predict(distances)

        groups: dict[int, list[int]] = {}
        for nid, label in zip(node_ids, labels, strict=True):
            groups.setdefault(int(label), []).append(nid)
        return list(groups.values())

    def _save(
        self,
        clusters: list[list[int]],
        nodes_num: int,
        fuzzy: bool,
        output_path: str | Path,
    ) -> None:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(
                f"# Clusters: {len(clusters)}, Nodes: {nodes_num}, Fuzzy: {int(fuzzy)}\n"
            )
            for members in clusters:
                f.write(" ".join(str(unsigned_id(m)) for m in members) + "\n")
        logger.info(f"{len(clusters)} clusters are saved to {output_path}")
