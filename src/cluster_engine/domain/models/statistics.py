"""Cluster statistics record."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cluster_engine.domain.models.utils import utc_now


class ClusterStatistics(BaseModel):
    """Aggregate interaction statistics for a cluster's members.

    Updated wholesale by the caller through ``Cluster.update_statistics`` or
    incrementally by membership changes.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    total_members: int = Field(default=0, ge=0)
    active_members: int = Field(default=0, ge=0)
    total_interactions: int = Field(default=0, ge=0)

    avg_views_per_member: float = Field(default=0.0, ge=0)
    avg_likes_per_member: float = Field(default=0.0, ge=0)
    avg_comments_per_member: float = Field(default=0.0, ge=0)
    avg_shares_per_member: float = Field(default=0.0, ge=0)

    engagement_rate: float = Field(default=0.0, ge=0, le=1)
    growth_rate: float = Field(default=0.0, ge=-1, le=1)  # relative change per period
    retention_rate: float = Field(default=0.0, ge=0, le=1)

    last_calculated_at: datetime = Field(default_factory=utc_now)
