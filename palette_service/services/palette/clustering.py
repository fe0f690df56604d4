"""
Cluster partitioning: seeded Lloyd k-means over normalized features.

Initialization policy: k-means++ seeding drawn from a generator seeded with
the caller's integer seed, a single initialization (``n_init=1``), and
``tol=0`` so Lloyd iterations stop exactly when assignments stop changing
or when ``max_iter`` is reached. A fresh estimator is built per call, so no
random state is shared between concurrent invocations. Nearest-centroid ties
resolve to the lowest cluster index (argmin semantics).
"""

import warnings
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from palette_service.utils.logging import get_logger

from .errors import ComputationFailure
from .validation import MAX_CLUSTERS, validate_cluster_count

DEFAULT_SEED = 42
DEFAULT_MAX_ITER = 300

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClusterAssignment:
    """Cluster label per input row, in input order."""
    labels: Tuple[int, ...]
    n_clusters: int
    n_iter: int
    converged: bool
    inertia: float

    def sizes(self) -> Tuple[int, ...]:
        """Member count for every label 0..k-1 (unused labels count 0)."""
        counts = np.bincount(np.asarray(self.labels, dtype=np.int64), minlength=self.n_clusters)
        return tuple(int(c) for c in counts[:self.n_clusters])


def _fit(X: np.ndarray, k: int, seed: int, max_iter: int) -> KMeans:
    kmeans = KMeans(
        n_clusters=k,
        init="k-means++",
        n_init=1,
        max_iter=max_iter,
        tol=0.0,
        algorithm="lloyd",
        random_state=int(seed)
    )

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", ConvergenceWarning)
            kmeans.fit(X)
    except (ValueError, FloatingPointError, MemoryError) as e:
        raise ComputationFailure("clustering", str(e)) from e

    for w in caught:
        if issubclass(w.category, ConvergenceWarning):
            logger.debug(f"k-means degeneracy: {w.message}", extra={"k": k, "n_points": X.shape[0]})
        else:
            warnings.warn(w.message, w.category)
    return kmeans


def _converged_at_bound(X: np.ndarray, k: int, seed: int, max_iter: int) -> bool:
    """
    Whether a run that used all `max_iter` iterations stopped on a stable assignment.

    Lloyd's strict stop and the iteration bound look the same from `n_iter_`
    alone. Refitting with one more iteration from the same seed replays the
    identical iterations; it stops within `max_iter` only if the bounded run
    had already converged.
    """
    return int(_fit(X, k, seed, max_iter + 1).n_iter_) <= max_iter


def partition(features: np.ndarray,
              k: int,
              seed: int = DEFAULT_SEED,
              max_iter: int = DEFAULT_MAX_ITER,
              max_clusters: int = MAX_CLUSTERS) -> ClusterAssignment:
    """
    Assign each feature row to one of k clusters.

    Args:
        features: (N, 3) normalized features
        k: Number of clusters
        seed: Random seed for k-means++ initialization
        max_iter: Lloyd iteration bound
        max_clusters: Policy upper bound on k

    Returns:
        ClusterAssignment with labels in [0, k-1]

    Raises:
        InvalidClusterCount: if k is out of range
        ComputationFailure: if features are non-finite or k-means fails
    """
    X = np.asarray(features, dtype=np.float64).reshape(-1, 3)
    n_points = X.shape[0]
    k = validate_cluster_count(k, n_points, max_clusters)

    if not np.all(np.isfinite(X)):
        raise ComputationFailure("clustering", "non-finite normalized feature")

    if k == 1:
        # Single cluster: no iterations needed
        centroid = X.mean(axis=0)
        inertia = float(np.sum((X - centroid) ** 2))
        return ClusterAssignment(tuple([0] * n_points), 1, 0, True, inertia)

    kmeans = _fit(X, k, seed, max_iter)
    labels = kmeans.labels_

    n_iter = int(kmeans.n_iter_)
    converged = n_iter < max_iter or _converged_at_bound(X, k, seed, max_iter)
    if not converged:
        logger.warning(
            f"k-means reached max_iter={max_iter} without converging; using last assignment",
            extra={"k": k, "n_points": n_points, "seed": seed}
        )

    return ClusterAssignment(
        labels=tuple(int(label) for label in labels),
        n_clusters=k,
        n_iter=n_iter,
        converged=converged,
        inertia=float(kmeans.inertia_)
    )
