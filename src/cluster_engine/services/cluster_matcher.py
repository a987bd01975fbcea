"""Brute-force matching of an embedding against candidate clusters.

This is a linear scan over the clusters the caller passes in, intended for the
short candidate lists an upstream similarity search returns. It is not an
index.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from cluster_engine.core import constants as c
from cluster_engine.core.logging import get_logger
from cluster_engine.domain import vector_ops
from cluster_engine.domain.models.assignment import (
    ASSIGNED_BY_ALGORITHM,
    AssignmentDecision,
    ClusterAssignment,
    classify,
)
from cluster_engine.domain.models.cluster import Cluster, ClusterStatus
from cluster_engine.domain.models.config import ClusterConfig

logger = get_logger(__name__)


class ClusterMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    cluster_id: str
    similarity: float
    decision: AssignmentDecision


class ClusterMatcher:
    """Ranks active clusters by cosine similarity between an embedding and each centroid."""

    def __init__(
        self,
        min_similarity: float = c.MIN_MATCH_SIMILARITY,
        max_results: int = c.MAX_MATCH_RESULTS,
        config: ClusterConfig | None = None,
    ):
        self.min_similarity = min_similarity
        self.max_results = max_results
        self.config = config

    def match(self, embedding: Sequence[float], clusters: Iterable[Cluster]) -> list[ClusterMatch]:
        matches: list[ClusterMatch] = []
        skipped_dimension = 0

        for cluster in clusters:
            if cluster.status is not ClusterStatus.ACTIVE:
                continue
            if cluster.dimension != len(embedding):
                skipped_dimension += 1
                continue

            similarity = vector_ops.clamp(vector_ops.cosine_similarity(embedding, cluster.centroid))
            if similarity < self.min_similarity:
                continue
            matches.append(
                ClusterMatch(
                    cluster_id=cluster.id,
                    similarity=similarity,
                    decision=classify(similarity, self.config or cluster.config),
                )
            )

        if skipped_dimension:
            logger.debug(
                f"Skipped {skipped_dimension} clusters with a different dimension",
                embedding_dimension=len(embedding),
            )

        matches.sort(key=lambda m: (-m.similarity, m.cluster_id))
        return matches[: self.max_results]

    def propose_assignment(
        self,
        item_id: str,
        embedding: Sequence[float],
        clusters: Iterable[Cluster],
        assigned_at: datetime | None = None,
    ) -> ClusterAssignment | None:
        """Assignment to the best match, or None if every candidate is rejected.

        Confidence is the match similarity; the decision is recorded in metadata.
        """
        for match in self.match(embedding, clusters):
            if match.decision is AssignmentDecision.REJECT:
                continue
            fields = {
                "item_id": item_id,
                "cluster_id": match.cluster_id,
                "similarity": match.similarity,
                "confidence": match.similarity,
                "assigned_by": ASSIGNED_BY_ALGORITHM,
                "metadata": {
                    "decision": match.decision.value,
                    "embedding_dimension": len(embedding),
                },
            }
            if assigned_at is not None:
                fields["assigned_at"] = assigned_at
            return ClusterAssignment.create(len(embedding), **fields)
        return None
