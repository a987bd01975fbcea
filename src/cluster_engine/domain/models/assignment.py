"""Item-to-cluster assignments and the thresholds that gate them."""

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cluster_engine.core import constants as c
from cluster_engine.core.base import ErrorCode, ValidationErrorDetails
from cluster_engine.core.errors import DimensionMismatchError, ValidationError
from cluster_engine.domain.models.config import ClusterConfig
from cluster_engine.domain.models.utils import utc_now

AUTO_ASSIGN_THRESHOLD = c.AUTO_ASSIGN_THRESHOLD
MANUAL_REVIEW_THRESHOLD = c.MANUAL_REVIEW_THRESHOLD

ASSIGNED_BY_ALGORITHM = "algorithm"
ASSIGNED_BY_MANUAL = "manual"


class AssignmentDecision(str, Enum):
    """What the caller should do with a proposed assignment."""

    AUTO_ASSIGN = "auto_assign"
    MANUAL_REVIEW = "manual_review"
    REJECT = "reject"


class ClusterAssignment(BaseModel):
    """Binding of one content item to one cluster.

    Values are not range-checked on construction so that records produced by
    the similarity search can be inspected before ``validate_assignment``
    decides on them. Use ``ClusterAssignment.create`` to build and validate in
    one step.
    """

    model_config = ConfigDict(frozen=True)

    item_id: str
    cluster_id: str
    similarity: float
    confidence: float
    assigned_at: datetime = Field(default_factory=utc_now)
    assigned_by: str = ASSIGNED_BY_ALGORITHM  # "algorithm", "manual" or a user id
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def create(cls, cluster_dimension: int, **fields: Any) -> "ClusterAssignment":
        assignment = cls(**fields)
        validate_assignment(assignment, cluster_dimension)
        return assignment

    @property
    def is_manual(self) -> bool:
        return self.assigned_by != ASSIGNED_BY_ALGORITHM


def _check_score(value: float, field: str) -> None:
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ValidationError(
            f"Assignment {field} must be between 0 and 1, got {value}",
            details=ValidationErrorDetails(
                source="assignment",
                operation="validate_assignment",
                field=field,
                actual_value=value,
                constraint="0 <= value <= 1",
            ),
            code=ErrorCode.ASSIGNMENT_INVALID,
        )


def _embedding_dimension(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise ValidationError.for_field(
        f"Embedding dimension must be an integer, got {value!r}",
        field="metadata.embedding_dimension",
        actual_value=value,
        operation="validate_assignment",
        source="assignment",
    )


def validate_assignment(assignment: ClusterAssignment, cluster_dimension: int) -> None:
    """Check an assignment against the target cluster.

    Raises:
        ValidationError: similarity or confidence outside [0, 1], or an
            impossible cluster dimension, or non-integer
            ``embedding_dimension`` metadata.
        DimensionMismatchError: the assignment was computed from an embedding
            whose ``embedding_dimension`` metadata differs from the cluster's.
    """
    _check_score(assignment.similarity, "similarity")
    _check_score(assignment.confidence, "confidence")

    if not c.MIN_DIMENSION <= cluster_dimension <= c.MAX_DIMENSION:
        raise ValidationError.for_field(
            f"Invalid cluster dimension {cluster_dimension}",
            field="cluster_dimension",
            actual_value=cluster_dimension,
            operation="validate_assignment",
            source="assignment",
        )

    raw_dimension = assignment.metadata.get("embedding_dimension")
    if raw_dimension is None:
        return
    embedding_dimension = _embedding_dimension(raw_dimension)
    if embedding_dimension != cluster_dimension:
        raise DimensionMismatchError(
            expected=cluster_dimension,
            actual=embedding_dimension,
            operation="validate_assignment",
        )


def classify(similarity: float, config: ClusterConfig | None = None) -> AssignmentDecision:
    """Map a similarity to an assignment decision.

    >= auto-assign threshold (0.8): assign automatically
    >= manual-review threshold (0.6): queue for review
    otherwise: reject
    """
    auto_threshold = config.auto_assign_threshold if config else AUTO_ASSIGN_THRESHOLD
    review_threshold = config.manual_review_threshold if config else MANUAL_REVIEW_THRESHOLD

    if similarity >= auto_threshold:
        return AssignmentDecision.AUTO_ASSIGN
    if similarity >= review_threshold:
        return AssignmentDecision.MANUAL_REVIEW
    return AssignmentDecision.REJECT
