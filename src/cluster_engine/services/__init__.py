"""Engine services: health analysis, matching, recomputation and analytics."""

from .analytics import ClusterAnalyticsSummary, summarize_clusters
from .cluster_analyzer import ClusterAnalyzer
from .cluster_matcher import ClusterMatch, ClusterMatcher
from .recompute import (
    ClusterRecomputer,
    RecomputeReport,
    RecomputeScheduler,
    compute_centroid,
    compute_coherence,
)

__all__ = [
    "ClusterAnalyticsSummary",
    "ClusterAnalyzer",
    "ClusterMatch",
    "ClusterMatcher",
    "ClusterRecomputer",
    "RecomputeReport",
    "RecomputeScheduler",
    "compute_centroid",
    "compute_coherence",
    "summarize_clusters",
]
