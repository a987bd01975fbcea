"""Tests for the storage record codec."""

import json
from datetime import UTC, datetime

import pytest

from cluster_engine.core.errors import DimensionMismatchError, ValidationError
from cluster_engine.domain.models import ClusterConfig, ClusterQuality, ClusterStatus, ClusterType
from cluster_engine.infrastructure import cluster_from_record, cluster_to_record, parse_centroid
from conftest import DIMENSION, NOW, build_cluster, unit_vector


@pytest.fixture
def record():
    return {
        "id": "cluster_0123456789",
        "name": "Sourdough",
        "centroid": json.dumps(unit_vector()),
        "dimension": DIMENSION,
        "size": 12,
        "density": 0.4,
        "coherence": 0.65,
        "topics": ["bread", "baking"],
        "dominant_topics": ["bread"],
        "avg_engagement": 0.3,
        "type": "hybrid",
        "status": "inactive",
        "statistics": {"total_members": 12, "total_interactions": 480},
        "created_at": "2025-05-01T08:00:00+00:00",
        "updated_at": "2025-05-30T08:00:00+00:00",
        "last_recomputed_at": "2025-05-31T08:00:00",
    }


class TestClusterToRecord:
    def test_centroid_is_a_json_string(self, cluster):
        record = cluster_to_record(cluster)

        assert isinstance(record["centroid"], str)
        assert json.loads(record["centroid"]) == list(cluster.centroid)

    def test_enums_and_datetimes_are_plain_values(self, cluster):
        record = cluster_to_record(cluster)

        assert record["status"] == "active"
        assert record["type"] == "content_based"
        assert record["quality"] == cluster.quality.value
        assert isinstance(record["created_at"], str)

    def test_round_trip(self, cluster):
        cluster.update_topics(["python", "rust"])
        cluster.update_statistics(total_interactions=120, now=NOW)

        restored = cluster_from_record(cluster_to_record(cluster))

        assert restored.snapshot() == cluster.snapshot()


class TestClusterFromRecord:
    def test_hydrates_fields(self, record):
        cluster = cluster_from_record(record)

        assert cluster.id == "cluster_0123456789"
        assert cluster.centroid == tuple(unit_vector())
        assert cluster.type is ClusterType.HYBRID
        assert cluster.status is ClusterStatus.INACTIVE
        assert cluster.topics == ("bread", "baking")
        assert cluster.statistics.total_interactions == 480
        assert cluster.created_at == datetime(2025, 5, 1, 8, tzinfo=UTC)

    def test_naive_timestamps_are_utc(self, record):
        cluster = cluster_from_record(record)

        assert cluster.last_recomputed_at == datetime(2025, 5, 31, 8, tzinfo=UTC)

    def test_epoch_timestamps(self, record):
        record["created_at"] = 0

        assert cluster_from_record(record).created_at == datetime(1970, 1, 1, tzinfo=UTC)

    def test_stored_quality_is_ignored(self, record):
        record["quality"] = "excellent"

        cluster = cluster_from_record(record)

        # 0.65*.35 + 0.4*.25 + 1.0*.20 + 0.3*.20
        assert cluster.quality_score() == pytest.approx(0.5875)
        assert cluster.quality is ClusterQuality.MEDIUM

    def test_record_is_not_modified(self, record):
        original = dict(record)

        cluster_from_record(record)

        assert record == original

    def test_centroid_list_is_accepted(self, record):
        record["centroid"] = unit_vector(axis=1)

        assert cluster_from_record(record).centroid == tuple(unit_vector(axis=1))

    def test_invalid_status(self, record):
        record["status"] = "deleted"

        with pytest.raises(ValidationError, match="Invalid cluster record"):
            cluster_from_record(record)

    def test_invalid_statistics(self, record):
        record["statistics"] = {"engagement_rate": 3}

        with pytest.raises(ValidationError) as exc_info:
            cluster_from_record(record)

        assert exc_info.value.details.field == "engagement_rate"

    def test_unknown_columns_are_ignored(self, record):
        record["deleted_at"] = None
        record["tenant"] = "acme"

        cluster = cluster_from_record(record)

        assert cluster.id == record["id"]
        assert cluster.size == 12

    @pytest.mark.parametrize("key", ["centroid", "dimension"])
    def test_missing_required_field(self, record, key):
        del record[key]

        with pytest.raises(ValidationError, match=f"missing {key}") as exc_info:
            cluster_from_record(record)

        assert exc_info.value.details.field == key

    def test_centroid_dimension_mismatch(self, record):
        record["centroid"] = json.dumps([0.1] * (DIMENSION - 1))

        with pytest.raises(DimensionMismatchError):
            cluster_from_record(record)

    def test_record_config(self, record):
        record["config"] = {"stale_threshold_hours": 12}

        cluster = cluster_from_record(record)

        assert cluster.config.stale_threshold_hours == 12
        assert cluster.is_stale(NOW)


class TestParseCentroid:
    def test_json_array(self):
        assert parse_centroid("[0.5, -1, 2.25]") == [0.5, -1, 2.25]

    @pytest.mark.parametrize("raw", ["not json", "[0.1, ", '{"a": 1}', '["x", 1]', "[true, 0.5]"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_centroid(raw)

        assert exc_info.value.details.field == "centroid"

    def test_sequence_passthrough(self):
        assert parse_centroid((0.1, 0.2)) == [0.1, 0.2]


def test_round_trip_keeps_cluster_config():
    cluster = build_cluster(config=ClusterConfig().with_overrides(max_topics=3))

    restored = cluster_from_record(cluster_to_record(cluster))

    assert restored.config.max_topics == 3
