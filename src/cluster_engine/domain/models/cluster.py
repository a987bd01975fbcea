"""Cluster aggregate: centroid, membership and derived quality."""

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from cluster_engine.core import constants as c
from cluster_engine.core.errors import DimensionMismatchError, ValidationError
from cluster_engine.core.logging import get_logger
from cluster_engine.domain import vector_ops
from cluster_engine.domain.models.config import ClusterConfig
from cluster_engine.domain.models.statistics import ClusterStatistics
from cluster_engine.domain.models.utils import ensure_aware, hours_between, utc_now

logger = get_logger(__name__)


class ClusterStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class ClusterQuality(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXCELLENT = "excellent"


class ClusterType(str, Enum):
    """How the cluster's members were grouped. Fixed at creation."""

    CONTENT_BASED = "content_based"
    BEHAVIOR_BASED = "behavior_based"
    HYBRID = "hybrid"
    TEMPORAL = "temporal"


# ---------------------------------------------------------------------------
# Quality scoring
# ---------------------------------------------------------------------------


def size_score_for(size: int, config: ClusterConfig) -> float:
    """1.0 inside the optimal size band, decaying towards the configured floor outside it."""
    if config.optimal_min_size <= size <= config.optimal_max_size:
        return 1.0
    if size <= 0:
        return config.size_score_min
    if size < config.optimal_min_size:
        ratio = size / config.optimal_min_size
    else:
        ratio = config.optimal_max_size / size
    return max(config.size_score_min, ratio)


def quality_score_for(
    coherence: float,
    density: float,
    size: int,
    avg_engagement: float,
    config: ClusterConfig,
) -> float:
    """Weighted quality score in [0, 1].

    score = coherence*Wc + density*Wd + size_score*Ws + min(engagement, cap)*We
    """
    engagement_score = min(avg_engagement, config.engagement_cap)
    score = (
        coherence * config.coherence_weight
        + density * config.density_weight
        + size_score_for(size, config) * config.size_weight
        + engagement_score * config.engagement_weight
    )
    return vector_ops.clamp(score)


def quality_level_for(score: float, config: ClusterConfig) -> ClusterQuality:
    if score >= config.excellent_quality_threshold:
        return ClusterQuality.EXCELLENT
    if score >= config.high_quality_threshold:
        return ClusterQuality.HIGH
    if score >= config.medium_quality_threshold:
        return ClusterQuality.MEDIUM
    return ClusterQuality.LOW


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_dimension(dimension: Any) -> int:
    if isinstance(dimension, bool) or not isinstance(dimension, int):
        raise ValidationError.for_field(
            "Dimension must be an integer", field="dimension", actual_value=dimension
        )
    if not c.MIN_DIMENSION <= dimension <= c.MAX_DIMENSION:
        raise ValidationError.for_field(
            f"Invalid dimension: must be between {c.MIN_DIMENSION} and {c.MAX_DIMENSION}",
            field="dimension",
            actual_value=dimension,
            constraint=f"{c.MIN_DIMENSION} <= dimension <= {c.MAX_DIMENSION}",
        )
    return dimension


def _check_centroid(centroid: Sequence[float], dimension: int, operation: str) -> vector_ops.Vector:
    if centroid is None or len(centroid) == 0:
        raise ValidationError.for_field("Centroid is required", field="centroid", operation=operation)
    try:
        array = vector_ops.as_array(centroid)
    except (TypeError, ValueError) as e:
        raise ValidationError.for_field(
            "Centroid must contain only numbers", field="centroid", operation=operation
        ) from e
    if array.ndim != 1:
        raise ValidationError.for_field(
            "Centroid must be a flat sequence of numbers",
            field="centroid",
            actual_value=list(array.shape),
            constraint="ndim == 1",
            operation=operation,
        )
    if array.size != dimension:
        raise DimensionMismatchError(expected=dimension, actual=array.size, operation=operation)
    if not vector_ops.is_finite(array):
        raise ValidationError.for_field(
            "Centroid must contain only finite values", field="centroid", operation=operation
        )
    return vector_ops.rescale_if_exceeds(array, c.MAX_CENTROID_MAGNITUDE)


def _check_unit_interval(value: float, field: str, operation: str) -> float:
    if not isinstance(value, int | float) or math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ValidationError.for_field(
            f"{field.capitalize()} must be between 0 and 1",
            field=field,
            actual_value=value,
            constraint="0 <= value <= 1",
            operation=operation,
        )
    return float(value)


def _check_number(value: Any, field: str, operation: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float) or math.isnan(value):
        raise ValidationError.for_field(
            f"{field} must be a number", field=field, actual_value=value, operation=operation
        )
    return float(value)


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def _check_topics(topics: Iterable[str], max_topics: int, field: str, operation: str) -> tuple[str, ...]:
    if isinstance(topics, str):
        raise ValidationError.for_field(
            f"{field} must be a sequence of strings, not a string", field=field, operation=operation
        )
    topics = list(topics)
    if any(not isinstance(topic, str) for topic in topics):
        raise ValidationError.for_field(f"{field} must be strings", field=field, operation=operation)
    unique = _dedupe(topics)
    if len(unique) > max_topics:
        raise ValidationError.for_field(
            f"Too many topics: max {max_topics}, got {len(unique)}",
            field=field,
            actual_value=len(unique),
            constraint=f"len <= {max_topics}",
            operation=operation,
        )
    return unique


def _check_text(value: str | None, field: str, limit: int) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError.for_field(f"{field.capitalize()} must be a string", field=field)
    if len(value) > limit:
        raise ValidationError.for_field(
            f"{field.capitalize()} too long: max {limit} characters",
            field=field,
            actual_value=len(value),
            constraint=f"len <= {limit}",
        )
    return value


def _statistics_from(data: Mapping[str, Any], operation: str) -> ClusterStatistics:
    try:
        return ClusterStatistics.model_validate(dict(data))
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "statistics"
        raise ValidationError.for_field(
            f"Invalid statistics: {field}: {first['msg']}",
            field=field,
            actual_value=first.get("input"),
            operation=operation,
        ) from e


def _default_config() -> ClusterConfig:
    from cluster_engine.core.config import get_settings

    return get_settings().cluster_config()


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class ClusterSnapshot(BaseModel):
    """Immutable copy of every cluster field, for persistence and read-only analysis."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    centroid: tuple[float, ...]
    dimension: int
    size: int = Field(ge=0)
    density: float = Field(ge=0, le=1)
    coherence: float = Field(ge=0, le=1)
    topics: tuple[str, ...] = ()
    dominant_topics: tuple[str, ...] = ()
    avg_engagement: float = Field(default=0.0, ge=0)
    quality: ClusterQuality
    type: ClusterType
    status: ClusterStatus
    statistics: ClusterStatistics
    config: ClusterConfig
    created_at: datetime
    updated_at: datetime
    last_recomputed_at: datetime | None = None


class Cluster:
    """A semantic group of content items.

    All mutators validate new values before committing any of them, so a failed
    call leaves the cluster untouched. Accessors return immutable values or
    copies. Callers must serialize mutations per cluster id; nothing here locks.
    """

    def __init__(
        self,
        *,
        centroid: Sequence[float],
        dimension: int,
        id: str | None = None,
        name: str | None = None,
        description: str | None = None,
        size: int = 0,
        density: float = 0.0,
        coherence: float = 0.0,
        topics: Iterable[str] = (),
        dominant_topics: Iterable[str] = (),
        avg_engagement: float = 0.0,
        type: ClusterType = ClusterType.CONTENT_BASED,
        status: ClusterStatus = ClusterStatus.ACTIVE,
        statistics: ClusterStatistics | Mapping[str, Any] | None = None,
        config: ClusterConfig | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        last_recomputed_at: datetime | None = None,
    ):
        operation = "construct"
        config = config or _default_config()
        cluster_id = id or f"cluster_{uuid4().hex}"

        dimension = _check_dimension(dimension)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ValidationError.for_field("Size must be a non-negative integer", field="size", actual_value=size)
        avg_engagement = _check_number(avg_engagement, "avg_engagement", operation)
        if avg_engagement < 0:
            raise ValidationError.for_field(
                "avg_engagement must be non-negative", field="avg_engagement", actual_value=avg_engagement
            )

        if statistics is None:
            statistics = ClusterStatistics()
        elif isinstance(statistics, ClusterStatistics):
            statistics = statistics.model_copy()
        else:
            statistics = _statistics_from(statistics, operation)

        created_at = ensure_aware(created_at) if created_at else utc_now()

        self._id = cluster_id
        default_name = f"Cluster {cluster_id.removeprefix('cluster_')[:8]}"
        self._name = _check_text(name, "name", c.MAX_NAME_LENGTH) or default_name
        self._description = _check_text(description, "description", c.MAX_DESCRIPTION_LENGTH)
        self._dimension = dimension
        self._centroid = _check_centroid(centroid, dimension, operation)
        self._size = size
        self._density = _check_unit_interval(density, "density", operation)
        self._coherence = _check_unit_interval(coherence, "coherence", operation)
        self._topics = _check_topics(topics, config.max_topics, "topics", operation)
        self._dominant_topics = _check_topics(dominant_topics, config.max_topics, "dominant_topics", operation)
        self._avg_engagement = avg_engagement
        self._type = ClusterType(type)
        self._status = ClusterStatus(status)
        self._statistics = statistics
        self._config = config
        self._created_at = created_at
        self._updated_at = ensure_aware(updated_at) if updated_at else created_at
        self._last_recomputed_at = ensure_aware(last_recomputed_at) if last_recomputed_at else None
        self._quality = self._calculate_quality()

    @classmethod
    def create(
        cls,
        centroid: Sequence[float],
        dimension: int,
        *,
        now: datetime | None = None,
        **fields: Any,
    ) -> "Cluster":
        """Create a new cluster with a fresh id, timestamps and empty statistics."""
        for reserved in ("id", "created_at", "updated_at"):
            if reserved in fields:
                raise ValidationError.for_field(
                    f"{reserved} is assigned on creation", field=reserved, operation="create"
                )
        now = ensure_aware(now) if now else utc_now()
        fields.setdefault("statistics", ClusterStatistics(last_calculated_at=now))
        cluster = cls(centroid=centroid, dimension=dimension, created_at=now, updated_at=now, **fields)
        logger.info(
            f"Created cluster {cluster.id}",
            cluster_id=cluster.id,
            dimension=dimension,
            cluster_type=cluster.type.value,
            quality=cluster.quality.value,
        )
        return cluster

    @classmethod
    def from_snapshot(cls, snapshot: ClusterSnapshot) -> "Cluster":
        """Hydrate a cluster from a full snapshot. Quality is re-derived, not trusted."""
        data = snapshot.model_dump(exclude={"quality"})
        data["statistics"] = snapshot.statistics
        data["config"] = snapshot.config
        return cls(**data)

    # ===== Accessors =====

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def centroid(self) -> tuple[float, ...]:
        return self._centroid

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def size(self) -> int:
        return self._size

    @property
    def density(self) -> float:
        return self._density

    @property
    def coherence(self) -> float:
        return self._coherence

    @property
    def topics(self) -> tuple[str, ...]:
        return self._topics

    @property
    def dominant_topics(self) -> tuple[str, ...]:
        return self._dominant_topics

    @property
    def avg_engagement(self) -> float:
        return self._avg_engagement

    @property
    def quality(self) -> ClusterQuality:
        return self._quality

    @property
    def type(self) -> ClusterType:
        return self._type

    @property
    def status(self) -> ClusterStatus:
        return self._status

    @property
    def statistics(self) -> ClusterStatistics:
        return self._statistics.model_copy()

    @property
    def config(self) -> ClusterConfig:
        return self._config

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def last_recomputed_at(self) -> datetime | None:
        return self._last_recomputed_at

    @property
    def is_archived(self) -> bool:
        return self._status is ClusterStatus.ARCHIVED

    # ===== Derived values =====

    def quality_score(self) -> float:
        return quality_score_for(
            self._coherence, self._density, self._size, self._avg_engagement, self._config
        )

    def _calculate_quality(self) -> ClusterQuality:
        return quality_level_for(self.quality_score(), self._config)

    def is_stale(self, now: datetime | None = None) -> bool:
        """True if the centroid was never recomputed or is older than the stale threshold."""
        if self._last_recomputed_at is None:
            return True
        now = ensure_aware(now) if now else utc_now()
        return hours_between(self._last_recomputed_at, now) > self._config.stale_threshold_hours

    def snapshot(self) -> ClusterSnapshot:
        return ClusterSnapshot(
            id=self._id,
            name=self._name,
            description=self._description,
            centroid=self._centroid,
            dimension=self._dimension,
            size=self._size,
            density=self._density,
            coherence=self._coherence,
            topics=self._topics,
            dominant_topics=self._dominant_topics,
            avg_engagement=self._avg_engagement,
            quality=self._quality,
            type=self._type,
            status=self._status,
            statistics=self._statistics.model_copy(),
            config=self._config,
            created_at=self._created_at,
            updated_at=self._updated_at,
            last_recomputed_at=self._last_recomputed_at,
        )

    # ===== Mutators =====

    def update_centroid(self, new_centroid: Sequence[float], now: datetime | None = None) -> None:
        """Replace the centroid with a freshly computed one.

        Raises:
            DimensionMismatchError: if the vector length differs from ``dimension``.
            ValidationError: if the vector holds non-finite values.
        """
        centroid = _check_centroid(new_centroid, self._dimension, "update_centroid")
        now = ensure_aware(now) if now else utc_now()

        self._centroid = centroid
        self._last_recomputed_at = now
        self._updated_at = now
        self._quality = self._calculate_quality()
        logger.debug(
            "Cluster centroid updated",
            cluster_id=self._id,
            magnitude=round(vector_ops.magnitude(centroid), 6),
        )

    def add_member(self, now: datetime | None = None) -> None:
        if self.is_archived:
            logger.warning(f"Adding member to archived cluster {self._id}", cluster_id=self._id)
        self._apply_membership(self._size + 1, delta=1, now=now)
        logger.debug("Cluster member added", cluster_id=self._id, size=self._size)

    def remove_member(self, now: datetime | None = None) -> bool:
        """Remove one member. Returns False (and changes nothing) on an empty cluster."""
        if self._size == 0:
            logger.debug("Remove on empty cluster ignored", cluster_id=self._id)
            return False
        self._apply_membership(self._size - 1, delta=-1, now=now)
        logger.debug("Cluster member removed", cluster_id=self._id, size=self._size)
        return True

    def _apply_membership(self, new_size: int, delta: int, now: datetime | None) -> None:
        stats = self._statistics
        statistics = stats.model_copy(
            update={
                "total_members": max(0, stats.total_members + delta),
                "active_members": max(0, stats.active_members + delta),
            }
        )
        density = self._density
        if new_size > 0:
            density = min(
                1.0,
                statistics.total_interactions / (new_size * c.INTERACTIONS_PER_MEMBER_FOR_FULL_DENSITY),
            )

        self._size = new_size
        self._statistics = statistics
        self._density = density
        self._updated_at = ensure_aware(now) if now else utc_now()
        self._quality = self._calculate_quality()

    def update_metrics(
        self,
        density: float | None = None,
        coherence: float | None = None,
        avg_engagement: float | None = None,
        now: datetime | None = None,
    ) -> None:
        """Set externally computed metrics, clamping each into its valid range."""
        operation = "update_metrics"
        new_density = self._density
        new_coherence = self._coherence
        new_engagement = self._avg_engagement
        if density is not None:
            new_density = vector_ops.clamp(_check_number(density, "density", operation))
        if coherence is not None:
            new_coherence = vector_ops.clamp(_check_number(coherence, "coherence", operation))
        if avg_engagement is not None:
            new_engagement = max(0.0, _check_number(avg_engagement, "avg_engagement", operation))

        self._density = new_density
        self._coherence = new_coherence
        self._avg_engagement = new_engagement
        self._updated_at = ensure_aware(now) if now else utc_now()
        self._quality = self._calculate_quality()

    def update_topics(
        self,
        topics: Iterable[str],
        dominant_topics: Iterable[str] | None = None,
        now: datetime | None = None,
    ) -> None:
        """Replace the topic set; dominant topics default to the first three."""
        operation = "update_topics"
        new_topics = _check_topics(topics, self._config.max_topics, "topics", operation)
        if dominant_topics is None:
            new_dominant = new_topics[: c.DOMINANT_TOPIC_COUNT]
        else:
            new_dominant = _check_topics(dominant_topics, self._config.max_topics, "dominant_topics", operation)

        self._topics = new_topics
        self._dominant_topics = new_dominant
        self._updated_at = ensure_aware(now) if now else utc_now()

    def update_statistics(
        self,
        stats: Mapping[str, Any] | None = None,
        *,
        now: datetime | None = None,
        **fields: Any,
    ) -> None:
        """Merge partial statistics and stamp ``last_calculated_at``."""
        now = ensure_aware(now) if now else utc_now()
        merged = self._statistics.model_dump()
        merged.update(stats or {})
        merged.update(fields)
        merged["last_calculated_at"] = now
        statistics = _statistics_from(merged, "update_statistics")

        self._statistics = statistics
        self._updated_at = now

    # ===== Status transitions =====

    def archive(self, now: datetime | None = None) -> None:
        self._transition(ClusterStatus.ARCHIVED, now)

    def activate(self, now: datetime | None = None) -> None:
        """Make the cluster active again. Allowed from any status, including ARCHIVED."""
        self._transition(ClusterStatus.ACTIVE, now)

    def deactivate(self, now: datetime | None = None) -> None:
        self._transition(ClusterStatus.INACTIVE, now)

    def _transition(self, status: ClusterStatus, now: datetime | None) -> None:
        previous = self._status
        self._status = status
        self._updated_at = ensure_aware(now) if now else utc_now()
        logger.info(
            f"Cluster {self._id} status {previous.value} -> {status.value}",
            cluster_id=self._id,
            previous_status=previous.value,
            status=status.value,
        )

    def __repr__(self) -> str:
        return (
            f"Cluster(id={self._id!r}, size={self._size}, quality={self._quality.value}, "
            f"status={self._status.value})"
        )
