"""Aggregate analytics over a set of clusters."""

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field

from cluster_engine.domain.models.cluster import Cluster, ClusterQuality, ClusterStatus, ClusterType


class ClusterAnalyticsSummary(BaseModel):
    """Population-level view of cluster health."""

    total_clusters: int = 0
    active_clusters: int = 0
    average_size: float = 0.0
    average_coherence: float = 0.0
    average_density: float = 0.0
    stale_clusters: int = 0
    quality_distribution: dict[ClusterQuality, int] = Field(
        default_factory=lambda: dict.fromkeys(ClusterQuality, 0)
    )
    type_distribution: dict[ClusterType, int] = Field(default_factory=lambda: dict.fromkeys(ClusterType, 0))


def summarize_clusters(clusters: Iterable[Cluster], now: datetime | None = None) -> ClusterAnalyticsSummary:
    """Count, average and bucket clusters by quality and type."""
    clusters = list(clusters)
    summary = ClusterAnalyticsSummary()
    if not clusters:
        return summary

    total = len(clusters)
    summary.total_clusters = total
    summary.active_clusters = sum(1 for cluster in clusters if cluster.status is ClusterStatus.ACTIVE)
    summary.average_size = sum(cluster.size for cluster in clusters) / total
    summary.average_coherence = sum(cluster.coherence for cluster in clusters) / total
    summary.average_density = sum(cluster.density for cluster in clusters) / total
    summary.stale_clusters = sum(1 for cluster in clusters if cluster.is_stale(now))

    for cluster in clusters:
        summary.quality_distribution[cluster.quality] += 1
        summary.type_distribution[cluster.type] += 1

    return summary
