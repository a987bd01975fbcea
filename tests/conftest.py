"""Shared fixtures for the clustering engine tests."""

from datetime import UTC, datetime, timedelta

import pytest

from cluster_engine.domain.models import Cluster, ClusterConfig

DIMENSION = 32
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def unit_vector(dimension: int = DIMENSION, axis: int = 0) -> list[float]:
    """One-hot vector along ``axis``."""
    vector = [0.0] * dimension
    vector[axis] = 1.0
    return vector


def build_cluster(**overrides) -> Cluster:
    """Cluster recomputed one hour before NOW, created a week earlier."""
    fields = {
        "centroid": unit_vector(),
        "dimension": DIMENSION,
        "config": ClusterConfig(),
        "created_at": NOW - timedelta(days=7),
        "last_recomputed_at": NOW - timedelta(hours=1),
    }
    fields.update(overrides)
    return Cluster(**fields)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def config() -> ClusterConfig:
    return ClusterConfig()


@pytest.fixture
def cluster() -> Cluster:
    return build_cluster(name="Gardening", coherence=0.7, density=0.5, size=50)
