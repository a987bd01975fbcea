"""Content clustering engine.

Groups content items into clusters by embedding similarity, keeps each
cluster's metrics and quality consistent, and reports when a cluster should be
merged, split, recomputed or archived.
"""

from cluster_engine.core.errors import DimensionMismatchError, ValidationError
from cluster_engine.domain.models import (
    AssignmentDecision,
    Cluster,
    ClusterAnalysis,
    ClusterAssignment,
    ClusterConfig,
    ClusterQuality,
    ClusterStatistics,
    ClusterStatus,
    ClusterType,
    classify,
    validate_assignment,
)
from cluster_engine.services import ClusterAnalyzer

__version__ = "0.1.0"

__all__ = [
    "AssignmentDecision",
    "Cluster",
    "ClusterAnalysis",
    "ClusterAnalyzer",
    "ClusterAssignment",
    "ClusterConfig",
    "ClusterQuality",
    "ClusterStatistics",
    "ClusterStatus",
    "ClusterType",
    "DimensionMismatchError",
    "ValidationError",
    "classify",
    "validate_assignment",
]
