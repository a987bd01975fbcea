"""Cluster policy configuration."""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cluster_engine.core import constants as c

WEIGHT_TOLERANCE = 1e-6


class ClusterConfig(BaseModel):
    """Immutable policy values injected into every cluster computation.

    Defaults reproduce the tuned production values. A cluster may carry its own
    copy; build it with ``with_overrides``, since ``model_copy(update=...)``
    skips validation.

    The size bounds and lifecycle fields (``min_size``, ``max_size``,
    ``quality_threshold``, ``auto_archive``, ``auto_merge``, ``merge_threshold``)
    are policy for callers that archive or merge clusters. The engine validates
    and carries them but never acts on them itself; ``ClusterAnalyzer`` does
    not emit ARCHIVE recommendations.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Size bounds
    min_size: int = Field(default=c.MIN_SIZE, ge=0)
    max_size: int = Field(default=c.MAX_SIZE, ge=1)
    optimal_min_size: int = Field(default=c.OPTIMAL_MIN_SIZE, ge=1)
    optimal_max_size: int = Field(default=c.OPTIMAL_MAX_SIZE, ge=1)

    # Scheduling
    recompute_interval_hours: float = Field(default=c.RECOMPUTE_INTERVAL_HOURS, gt=0)
    stale_threshold_hours: float = Field(default=c.STALE_THRESHOLD_HOURS, gt=0)

    # Lifecycle policy, applied by callers
    quality_threshold: float = Field(default=c.QUALITY_THRESHOLD, ge=0, le=1)
    auto_archive: bool = c.AUTO_ARCHIVE
    auto_merge: bool = c.AUTO_MERGE
    merge_threshold: float = Field(default=c.MERGE_THRESHOLD, ge=0, le=1)
    max_topics: int = Field(default=c.MAX_TOPICS, ge=1)

    # Quality score
    coherence_weight: float = Field(default=c.COHERENCE_WEIGHT, ge=0, le=1)
    density_weight: float = Field(default=c.DENSITY_WEIGHT, ge=0, le=1)
    size_weight: float = Field(default=c.SIZE_WEIGHT, ge=0, le=1)
    engagement_weight: float = Field(default=c.ENGAGEMENT_WEIGHT, ge=0, le=1)
    size_score_min: float = Field(default=c.SIZE_SCORE_MIN, ge=0, le=1)
    engagement_cap: float = Field(default=c.ENGAGEMENT_CAP, gt=0, le=1)
    medium_quality_threshold: float = Field(default=c.MEDIUM_QUALITY_THRESHOLD, ge=0, le=1)
    high_quality_threshold: float = Field(default=c.HIGH_QUALITY_THRESHOLD, ge=0, le=1)
    excellent_quality_threshold: float = Field(default=c.EXCELLENT_QUALITY_THRESHOLD, ge=0, le=1)

    # Health analysis
    low_coherence_threshold: float = Field(default=c.LOW_COHERENCE_THRESHOLD, ge=0, le=1)
    low_density_threshold: float = Field(default=c.LOW_DENSITY_THRESHOLD, ge=0, le=1)
    oversized_threshold: int = Field(default=c.OVERSIZED_THRESHOLD, ge=1)
    undersized_threshold: int = Field(default=c.UNDERSIZED_THRESHOLD, ge=0)
    merge_recommendation_confidence: float = Field(default=c.MERGE_RECOMMENDATION_CONFIDENCE, ge=0, le=1)
    split_recommendation_confidence: float = Field(default=c.SPLIT_RECOMMENDATION_CONFIDENCE, ge=0, le=1)
    recompute_recommendation_confidence: float = Field(
        default=c.RECOMPUTE_RECOMMENDATION_CONFIDENCE, ge=0, le=1
    )
    stale_recompute_confidence_bonus: float = Field(default=c.STALE_RECOMPUTE_CONFIDENCE_BONUS, ge=0, le=1)
    max_issues: int = Field(default=c.MAX_ISSUES_PER_ANALYSIS, ge=0)
    max_recommendations: int = Field(default=c.MAX_RECOMMENDATIONS_PER_ANALYSIS, ge=0)

    # Assignment policy
    auto_assign_threshold: float = Field(default=c.AUTO_ASSIGN_THRESHOLD, ge=0, le=1)
    manual_review_threshold: float = Field(default=c.MANUAL_REVIEW_THRESHOLD, ge=0, le=1)

    @model_validator(mode="after")
    def check_consistency(self) -> Self:
        weights = self.coherence_weight + self.density_weight + self.size_weight + self.engagement_weight
        if abs(weights - 1.0) > WEIGHT_TOLERANCE:
            raise ValueError(f"quality weights must sum to 1.0, got {weights:.6f}")
        if self.optimal_min_size > self.optimal_max_size:
            raise ValueError("optimal_min_size must not exceed optimal_max_size")
        if self.min_size > self.max_size:
            raise ValueError("min_size must not exceed max_size")
        if not (
            self.medium_quality_threshold
            <= self.high_quality_threshold
            <= self.excellent_quality_threshold
        ):
            raise ValueError("quality thresholds must be ascending (medium <= high <= excellent)")
        if self.manual_review_threshold > self.auto_assign_threshold:
            raise ValueError("manual_review_threshold must not exceed auto_assign_threshold")
        return self

    def with_overrides(self, **overrides) -> "ClusterConfig":
        """Return a validated copy with the given fields replaced."""
        return ClusterConfig.model_validate({**self.model_dump(), **overrides})


DEFAULT_CLUSTER_CONFIG = ClusterConfig()
