"""Health analysis results for a cluster."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cluster_engine.domain.models.cluster import ClusterQuality


class IssueType(str, Enum):
    """Health problems the analyzer can detect, in detection order."""

    LOW_COHERENCE = "low_coherence"
    LOW_DENSITY = "low_density"
    OVERSIZED = "oversized"
    UNDERSIZED = "undersized"
    STALE = "stale"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecommendationType(str, Enum):
    MERGE = "merge"
    SPLIT = "split"
    RECOMPUTE = "recompute"
    ARCHIVE = "archive"  # produced by callers applying the lifecycle policy


class ClusterIssue(BaseModel):
    """A detected health problem."""

    model_config = ConfigDict(frozen=True)

    type: IssueType
    severity: IssueSeverity
    description: str
    suggested_action: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ClusterRecommendation(BaseModel):
    """A suggested maintenance action for the caller to act on."""

    model_config = ConfigDict(frozen=True)

    type: RecommendationType
    reason: str
    confidence: float = Field(ge=0, le=1)
    target_cluster_ids: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ClusterAnalysis(BaseModel):
    """Analysis result for one cluster snapshot."""

    model_config = ConfigDict(frozen=True)

    cluster_id: str
    quality: ClusterQuality
    quality_score: float = Field(ge=0, le=1)

    # Component scores
    coherence_score: float = Field(ge=0, le=1)
    density_score: float = Field(ge=0, le=1)
    diversity_score: float = Field(ge=0, le=1)
    stability_score: float = Field(ge=0, le=1)

    issues: list[ClusterIssue] = Field(default_factory=list)
    recommendations: list[ClusterRecommendation] = Field(default_factory=list)
    analyzed_at: datetime

    @property
    def issue_types(self) -> list[IssueType]:
        return [issue.type for issue in self.issues]

    @property
    def recommendation_types(self) -> list[RecommendationType]:
        return [recommendation.type for recommendation in self.recommendations]

    @property
    def is_healthy(self) -> bool:
        """True when no issue was detected."""
        return not self.issues
