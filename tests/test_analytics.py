"""Tests for population-level cluster analytics."""

from datetime import timedelta

import pytest

from cluster_engine.domain.models import ClusterQuality, ClusterType
from cluster_engine.services import summarize_clusters
from conftest import NOW, build_cluster


def test_empty_population():
    summary = summarize_clusters([], now=NOW)

    assert summary.total_clusters == 0
    assert summary.average_size == 0.0
    assert summary.quality_distribution == dict.fromkeys(ClusterQuality, 0)
    assert summary.type_distribution == dict.fromkeys(ClusterType, 0)


def test_summary():
    excellent = build_cluster(coherence=0.9, density=0.8, size=100, avg_engagement=0.9)
    low = build_cluster(size=2, type=ClusterType.TEMPORAL, last_recomputed_at=NOW - timedelta(days=5))
    archived = build_cluster(coherence=0.6, density=0.4, size=48, avg_engagement=0.5)
    archived.archive()

    summary = summarize_clusters([excellent, low, archived], now=NOW)

    assert summary.total_clusters == 3
    assert summary.active_clusters == 2
    assert summary.average_size == pytest.approx(50.0)
    assert summary.average_coherence == pytest.approx(0.5)
    assert summary.average_density == pytest.approx(0.4)
    assert summary.stale_clusters == 1
    assert summary.quality_distribution == {
        ClusterQuality.LOW: 1,
        ClusterQuality.MEDIUM: 0,
        ClusterQuality.HIGH: 1,
        ClusterQuality.EXCELLENT: 1,
    }
    assert summary.type_distribution[ClusterType.CONTENT_BASED] == 2
    assert summary.type_distribution[ClusterType.TEMPORAL] == 1


def test_accepts_any_iterable():
    summary = summarize_clusters((build_cluster() for _ in range(4)), now=NOW)

    assert summary.total_clusters == 4
    assert summary.quality_distribution[ClusterQuality.LOW] == 4
