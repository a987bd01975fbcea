"""Tests for ClusterMatcher ranking and assignment proposals."""

import math

import pytest

from cluster_engine.domain.models import AssignmentDecision, validate_assignment
from cluster_engine.services import ClusterMatcher
from conftest import DIMENSION, NOW, build_cluster, unit_vector


def angled_vector(similarity: float, dimension: int = DIMENSION) -> list[float]:
    """Unit vector whose cosine similarity with axis 0 is ``similarity``."""
    vector = [0.0] * dimension
    vector[0] = similarity
    vector[1] = math.sqrt(1.0 - similarity**2)
    return vector


@pytest.fixture
def clusters():
    return [
        build_cluster(id="cluster_auto", centroid=angled_vector(0.9)),
        build_cluster(id="cluster_review", centroid=angled_vector(0.7)),
        build_cluster(id="cluster_weak", centroid=angled_vector(0.55)),
        build_cluster(id="cluster_far", centroid=angled_vector(0.2)),
    ]


class TestMatch:
    def test_ranked_by_similarity(self, clusters):
        matches = ClusterMatcher().match(unit_vector(), clusters)

        assert [m.cluster_id for m in matches] == ["cluster_auto", "cluster_review", "cluster_weak"]
        assert [m.decision for m in matches] == [
            AssignmentDecision.AUTO_ASSIGN,
            AssignmentDecision.MANUAL_REVIEW,
            AssignmentDecision.REJECT,
        ]
        assert matches[0].similarity == pytest.approx(0.9)

    def test_min_similarity(self, clusters):
        matches = ClusterMatcher(min_similarity=0.65).match(unit_vector(), clusters)

        assert [m.cluster_id for m in matches] == ["cluster_auto", "cluster_review"]

    def test_max_results(self, clusters):
        matches = ClusterMatcher(min_similarity=0.0, max_results=2).match(unit_vector(), clusters)

        assert len(matches) == 2

    def test_ties_break_on_cluster_id(self):
        clusters = [build_cluster(id=cid, centroid=unit_vector()) for cid in ("cluster_b", "cluster_a")]

        matches = ClusterMatcher().match(unit_vector(), clusters)

        assert [m.cluster_id for m in matches] == ["cluster_a", "cluster_b"]

    def test_skips_inactive_clusters(self, clusters):
        clusters[0].archive()
        clusters[1].deactivate()

        matches = ClusterMatcher().match(unit_vector(), clusters)

        assert [m.cluster_id for m in matches] == ["cluster_weak"]

    def test_skips_other_dimensions(self):
        wide = build_cluster(id="cluster_wide", centroid=unit_vector(64), dimension=64)
        narrow = build_cluster(id="cluster_narrow")

        matches = ClusterMatcher().match(unit_vector(), [wide, narrow])

        assert [m.cluster_id for m in matches] == ["cluster_narrow"]

    def test_opposite_vectors_clamp_to_zero(self):
        opposite = [-1.0] + [0.0] * (DIMENSION - 1)
        cluster = build_cluster(centroid=opposite)

        matches = ClusterMatcher(min_similarity=0.0).match(unit_vector(), [cluster])

        assert matches[0].similarity == 0.0

    def test_no_clusters(self):
        assert ClusterMatcher().match(unit_vector(), []) == []


class TestProposeAssignment:
    def test_best_match(self, clusters):
        assignment = ClusterMatcher().propose_assignment("item-1", unit_vector(), clusters, assigned_at=NOW)

        assert assignment is not None
        assert assignment.item_id == "item-1"
        assert assignment.cluster_id == "cluster_auto"
        assert assignment.similarity == pytest.approx(0.9)
        assert assignment.confidence == assignment.similarity
        assert assignment.assigned_at == NOW
        assert assignment.metadata == {"decision": "auto_assign", "embedding_dimension": DIMENSION}

    def test_review_match_when_no_auto_match(self, clusters):
        assignment = ClusterMatcher().propose_assignment("item-1", unit_vector(), clusters[1:])

        assert assignment.cluster_id == "cluster_review"
        assert assignment.metadata["decision"] == "manual_review"

    def test_none_when_all_rejected(self, clusters):
        assert ClusterMatcher().propose_assignment("item-1", unit_vector(), clusters[2:]) is None

    def test_proposal_passes_validation(self, clusters):
        assignment = ClusterMatcher().propose_assignment("item-1", unit_vector(), clusters)

        validate_assignment(assignment, cluster_dimension=DIMENSION)
