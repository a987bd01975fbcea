"""Conversion between clusters and flat storage records.

Stores keep the centroid as a JSON string; the domain only ever sees the
decoded numeric tuple. This module is the one place the two meet.
"""

import json
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from cluster_engine.core.errors import ValidationError
from cluster_engine.core.logging import get_logger
from cluster_engine.domain.models.cluster import Cluster, ClusterStatus, ClusterType
from cluster_engine.domain.models.config import ClusterConfig
from cluster_engine.domain.models.statistics import ClusterStatistics

logger = get_logger(__name__)

REQUIRED_FIELDS = ("centroid", "dimension")
RECORD_FIELDS = frozenset(
    {
        "id",
        "name",
        "description",
        "centroid",
        "dimension",
        "size",
        "density",
        "coherence",
        "topics",
        "dominant_topics",
        "avg_engagement",
        "type",
        "status",
        "created_at",
        "updated_at",
        "last_recomputed_at",
    }
)


def cluster_to_record(cluster: Cluster) -> dict[str, Any]:
    """Convert to a store-compatible property dict."""
    record = cluster.snapshot().model_dump(mode="json")
    record["centroid"] = json.dumps(list(cluster.centroid))
    return record


def parse_centroid(raw: str | list[float] | tuple[float, ...]) -> list[float]:
    if not isinstance(raw, str):
        return list(raw)
    try:
        values = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError.for_field(
            "Invalid centroid JSON format", field="centroid", operation="from_record", source="records"
        ) from e
    if not isinstance(values, list) or not all(
        isinstance(v, int | float) and not isinstance(v, bool) for v in values
    ):
        raise ValidationError.for_field(
            "Centroid JSON must be an array of numbers",
            field="centroid",
            operation="from_record",
            source="records",
        )
    return values


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value, tz=UTC)
    return datetime.fromisoformat(value)


def cluster_from_record(record: dict[str, Any]) -> Cluster:
    """Hydrate a cluster from a stored record.

    A stored ``quality`` is ignored; it is always re-derived from the metrics.
    Columns the cluster does not know (store bookkeeping such as ``deleted_at``)
    are ignored too. A record without ``centroid`` or ``dimension`` is invalid.
    """
    for key in REQUIRED_FIELDS:
        if record.get(key) is None:
            raise ValidationError.for_field(
                f"Invalid cluster record: missing {key}", field=key, operation="from_record", source="records"
            )

    ignored = sorted(set(record) - RECORD_FIELDS - {"statistics", "config", "quality"})
    if ignored:
        logger.debug("Ignoring unknown record fields", cluster_id=record.get("id"), fields=ignored)

    fields = {key: value for key, value in record.items() if key in RECORD_FIELDS}

    try:
        statistics = ClusterStatistics.model_validate(record.get("statistics") or {})
        config_data = record.get("config")
        config = ClusterConfig.model_validate(config_data) if config_data else None
    except PydanticValidationError as e:
        raise ValidationError.for_field(
            f"Invalid cluster record: {e.errors()[0]['msg']}",
            field=".".join(str(p) for p in e.errors()[0]["loc"]),
            operation="from_record",
            source="records",
        ) from e

    try:
        for key in ("created_at", "updated_at", "last_recomputed_at"):
            if key in fields:
                fields[key] = _parse_datetime(fields[key])
        if "type" in fields:
            fields["type"] = ClusterType(fields["type"])
        if "status" in fields:
            fields["status"] = ClusterStatus(fields["status"])
    except ValueError as e:
        raise ValidationError.for_field(
            f"Invalid cluster record: {e}", field="record", operation="from_record", source="records"
        ) from e

    fields["centroid"] = parse_centroid(fields["centroid"])
    return Cluster(statistics=statistics, config=config, **fields)

