"""Cluster health analysis.

Detects coherence, density, size and staleness problems on a cluster and turns
them into issues and maintenance recommendations, alongside four component
scores:

- coherence_score: the cluster's coherence
- density_score: the cluster's density
- diversity_score: min(topics / max_topics, 1) * 0.8 + 0.2, or 0 without topics
- stability_score: 0.5 * min(age_days / 30, 1) + 0.5 * (1 - |growth_rate|)

The analyzer is read-only: it never mutates the cluster, so it can run
concurrently with other analyses of the same snapshot.
"""

from datetime import datetime

from cluster_engine.core import constants as c
from cluster_engine.core.logging import get_logger
from cluster_engine.domain import vector_ops
from cluster_engine.domain.models.analysis import (
    ClusterAnalysis,
    ClusterIssue,
    ClusterRecommendation,
    IssueSeverity,
    IssueType,
    RecommendationType,
)
from cluster_engine.domain.models.cluster import Cluster, quality_level_for, quality_score_for
from cluster_engine.domain.models.config import ClusterConfig
from cluster_engine.domain.models.utils import ensure_aware, hours_between, utc_now

logger = get_logger(__name__)


class ClusterAnalyzer:
    """Stateless health checker.

    Uses the cluster's own config unless one is passed here. Output for a given
    cluster, config and ``now`` is fully deterministic.
    """

    def __init__(self, config: ClusterConfig | None = None):
        self.config = config

    def analyze(self, cluster: Cluster, now: datetime | None = None) -> ClusterAnalysis:
        config = self.config or cluster.config
        now = ensure_aware(now) if now else utc_now()
        stale = self.is_stale(cluster, now, config)
        score = quality_score_for(cluster.coherence, cluster.density, cluster.size, cluster.avg_engagement, config)

        issues: list[ClusterIssue] = []
        recommendations: list[ClusterRecommendation] = []

        if cluster.coherence < config.low_coherence_threshold:
            issues.append(
                ClusterIssue(
                    type=IssueType.LOW_COHERENCE,
                    severity=IssueSeverity.HIGH,
                    description=f"Cluster coherence is {cluster.coherence:.2f}, below threshold",
                    suggested_action="Consider recomputing cluster or splitting into sub-clusters",
                    metadata={"threshold": config.low_coherence_threshold},
                )
            )
            confidence = config.recompute_recommendation_confidence
            if stale:
                confidence += config.stale_recompute_confidence_bonus
            recommendations.append(
                ClusterRecommendation(
                    type=RecommendationType.RECOMPUTE,
                    reason="Low coherence detected",
                    confidence=vector_ops.clamp(confidence),
                )
            )

        if cluster.density < config.low_density_threshold:
            issues.append(
                ClusterIssue(
                    type=IssueType.LOW_DENSITY,
                    severity=IssueSeverity.MEDIUM,
                    description=f"Cluster density is {cluster.density:.2f}, below threshold",
                    suggested_action="Consider merging with similar clusters",
                    metadata={"threshold": config.low_density_threshold},
                )
            )

        if cluster.size > config.oversized_threshold:
            issues.append(
                ClusterIssue(
                    type=IssueType.OVERSIZED,
                    severity=IssueSeverity.MEDIUM,
                    description=f"Cluster has {cluster.size} members, exceeds recommended size",
                    suggested_action="Consider splitting cluster",
                    metadata={"threshold": config.oversized_threshold},
                )
            )
            recommendations.append(
                ClusterRecommendation(
                    type=RecommendationType.SPLIT,
                    reason="Cluster is too large",
                    confidence=config.split_recommendation_confidence,
                )
            )
        elif cluster.size < config.undersized_threshold:
            issues.append(
                ClusterIssue(
                    type=IssueType.UNDERSIZED,
                    severity=IssueSeverity.LOW,
                    description=f"Cluster has only {cluster.size} members",
                    suggested_action="Consider merging with similar clusters or archiving",
                    metadata={"threshold": config.undersized_threshold},
                )
            )
            recommendations.append(
                ClusterRecommendation(
                    type=RecommendationType.MERGE,
                    reason="Cluster is too small",
                    confidence=config.merge_recommendation_confidence,
                )
            )

        if stale:
            issues.append(
                ClusterIssue(
                    type=IssueType.STALE,
                    severity=IssueSeverity.MEDIUM,
                    description="Cluster hasn't been recomputed recently",
                    suggested_action="Recompute cluster centroid",
                    metadata={"stale_threshold_hours": config.stale_threshold_hours},
                )
            )
            recommendations.append(
                ClusterRecommendation(
                    type=RecommendationType.RECOMPUTE,
                    reason="Cluster is stale",
                    confidence=vector_ops.clamp(
                        config.recompute_recommendation_confidence + config.stale_recompute_confidence_bonus
                    ),
                )
            )

        analysis = ClusterAnalysis(
            cluster_id=cluster.id,
            quality=quality_level_for(score, config),
            quality_score=score,
            coherence_score=cluster.coherence,
            density_score=cluster.density,
            diversity_score=self.diversity_score(len(cluster.topics), config),
            stability_score=self.stability_score(cluster, now),
            issues=issues[: config.max_issues],
            recommendations=recommendations[: config.max_recommendations],
            analyzed_at=now,
        )
        logger.debug(
            "Cluster analyzed",
            cluster_id=cluster.id,
            issues=[issue.type.value for issue in analysis.issues],
            recommendations=[r.type.value for r in analysis.recommendations],
        )
        return analysis

    @staticmethod
    def is_stale(cluster: Cluster, now: datetime, config: ClusterConfig) -> bool:
        last = cluster.last_recomputed_at
        if last is None:
            return True
        return hours_between(last, now) > config.stale_threshold_hours

    @staticmethod
    def diversity_score(topic_count: int, config: ClusterConfig) -> float:
        if topic_count == 0:
            return 0.0
        ratio = min(topic_count / max(config.max_topics, 1), 1.0)
        return ratio * (1.0 - c.DIVERSITY_SCORE_FLOOR) + c.DIVERSITY_SCORE_FLOOR

    @staticmethod
    def stability_score(cluster: Cluster, now: datetime) -> float:
        age_days = max(0.0, hours_between(cluster.created_at, now) / 24.0)
        age_score = min(age_days / c.STABILITY_MATURITY_DAYS, 1.0)
        growth_stability = 1.0 - abs(cluster.statistics.growth_rate)
        return vector_ops.clamp(age_score * 0.5 + growth_stability * 0.5)
