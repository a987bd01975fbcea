"""Domain models for the clustering engine."""

from .config import DEFAULT_CLUSTER_CONFIG, ClusterConfig
from .statistics import ClusterStatistics
from .cluster import (
    Cluster,
    ClusterQuality,
    ClusterSnapshot,
    ClusterStatus,
    ClusterType,
    quality_level_for,
    quality_score_for,
    size_score_for,
)
from .analysis import (
    ClusterAnalysis,
    ClusterIssue,
    ClusterRecommendation,
    IssueSeverity,
    IssueType,
    RecommendationType,
)
from .assignment import (
    AUTO_ASSIGN_THRESHOLD,
    MANUAL_REVIEW_THRESHOLD,
    AssignmentDecision,
    ClusterAssignment,
    classify,
    validate_assignment,
)

__all__ = [
    # Assignment
    "AUTO_ASSIGN_THRESHOLD",
    "AssignmentDecision",
    # Cluster
    "Cluster",
    # Analysis
    "ClusterAnalysis",
    "ClusterAssignment",
    # Config
    "ClusterConfig",
    "ClusterIssue",
    "ClusterQuality",
    "ClusterRecommendation",
    "ClusterSnapshot",
    "ClusterStatistics",
    "ClusterStatus",
    "ClusterType",
    "DEFAULT_CLUSTER_CONFIG",
    "IssueSeverity",
    "IssueType",
    "MANUAL_REVIEW_THRESHOLD",
    "RecommendationType",
    "classify",
    "quality_level_for",
    "quality_score_for",
    "size_score_for",
    "validate_assignment",
]
