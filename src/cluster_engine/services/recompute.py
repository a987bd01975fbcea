"""Centroid recomputation and the stale-cluster sweep.

The aggregate never schedules itself. ``ClusterRecomputer.sweep`` is the unit
of work an external loop runs: find stale clusters, rebuild their centroid and
coherence from current member embeddings, hand them back to the store.
``RecomputeScheduler`` is that loop, driven by APScheduler.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

import numpy as np
from apscheduler.schedulers.background import BackgroundScheduler
from sklearn.metrics.pairwise import cosine_similarity

from cluster_engine.core.base import ApplicationError, ErrorLevel
from cluster_engine.core.config import get_settings
from cluster_engine.core.decorators import with_error_handling
from cluster_engine.core.errors import DimensionMismatchError, ValidationError
from cluster_engine.core.logging import get_logger, log_context
from cluster_engine.domain import vector_ops
from cluster_engine.domain.models.cluster import Cluster
from cluster_engine.domain.models.utils import ensure_aware, utc_now
from cluster_engine.domain.services import ClusterStore, MemberEmbeddingSource

logger = get_logger(__name__)

SWEEP_JOB_ID = "stale_cluster_sweep"


def _as_matrix(embeddings: Sequence[Sequence[float]]) -> np.ndarray:
    try:
        matrix = np.asarray(embeddings, dtype=np.float64)
    except ValueError as e:
        raise ValidationError.for_field(
            "Member embeddings must all have the same dimension",
            field="embeddings",
            operation="recompute",
            source="recompute",
        ) from e
    if matrix.ndim != 2 or matrix.shape[0] == 0:
        raise ValidationError.for_field(
            "At least one member embedding is required",
            field="embeddings",
            actual_value=len(embeddings),
            operation="recompute",
            source="recompute",
        )
    if not np.all(np.isfinite(matrix)):
        raise ValidationError.for_field(
            "Member embeddings must contain only finite values",
            field="embeddings",
            operation="recompute",
            source="recompute",
        )
    return matrix


def compute_centroid(embeddings: Sequence[Sequence[float]]) -> tuple[float, ...]:
    """Mean of the member embeddings."""
    return vector_ops.mean_vector(_as_matrix(embeddings))


def compute_coherence(centroid: Sequence[float], embeddings: Sequence[Sequence[float]]) -> float:
    """Mean cosine similarity of members to the centroid, clamped to [0, 1]."""
    if len(embeddings) == 0:
        return 0.0
    matrix = _as_matrix(embeddings)
    if matrix.shape[1] != len(centroid):
        raise DimensionMismatchError(expected=len(centroid), actual=matrix.shape[1], operation="compute_coherence")
    # Zero vectors give nan from sklearn's normalisation; treat them as dissimilar
    similarities = np.nan_to_num(cosine_similarity(matrix, vector_ops.as_array(centroid).reshape(1, -1)))
    return vector_ops.clamp(float(similarities.mean()))


@dataclass
class RecomputeReport:
    """Outcome of one sweep."""

    sweep_id: str
    started_at: datetime
    recomputed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def examined(self) -> int:
        return len(self.recomputed) + len(self.skipped) + len(self.failed)


class ClusterRecomputer:
    """Rebuilds stale clusters from their member embeddings."""

    def __init__(self, store: ClusterStore, embeddings: MemberEmbeddingSource):
        self.store = store
        self.embeddings = embeddings

    def recompute(self, cluster: Cluster, now: datetime | None = None) -> bool:
        """Recompute one cluster in place. Returns False when it has no members to learn from.

        The cluster is only touched after both centroid and coherence have been
        computed, so a failure leaves it as it was.
        """
        vectors = self.embeddings.embeddings_for(cluster.id)
        if len(vectors) == 0:
            return False

        centroid = compute_centroid(vectors)
        if len(centroid) != cluster.dimension:
            raise DimensionMismatchError(
                expected=cluster.dimension, actual=len(centroid), operation="recompute"
            )
        coherence = compute_coherence(centroid, vectors)

        cluster.update_centroid(centroid, now=now)
        cluster.update_metrics(coherence=coherence, now=now)
        return True

    def sweep(self, now: datetime | None = None) -> RecomputeReport:
        """Recompute every non-archived stale cluster in the store."""
        now = ensure_aware(now) if now else utc_now()
        report = RecomputeReport(sweep_id=uuid4().hex[:12], started_at=now)

        with log_context(sweep_id=report.sweep_id):
            for cluster in self.store.list_clusters():
                if cluster.is_archived or not cluster.is_stale(now):
                    continue
                try:
                    recomputed = self.recompute(cluster, now=now)
                except ApplicationError as e:
                    logger.warning(
                        f"Recompute failed for cluster {cluster.id}: {e.message}",
                        cluster_id=cluster.id,
                        error_code=e.code.value,
                    )
                    report.failed[cluster.id] = e.message
                    continue

                if not recomputed:
                    report.skipped.append(cluster.id)
                    continue

                self.store.save(cluster)
                report.recomputed.append(cluster.id)

        logger.info(
            f"Stale cluster sweep recomputed {len(report.recomputed)} of {report.examined} clusters",
            sweep_id=report.sweep_id,
            skipped=len(report.skipped),
            failed=len(report.failed),
        )
        return report


class RecomputeScheduler:
    """Background loop running ``ClusterRecomputer.sweep`` on a fixed interval."""

    def __init__(
        self,
        recomputer: ClusterRecomputer,
        interval_hours: float | None = None,
        scheduler: BackgroundScheduler | None = None,
    ):
        self.recomputer = recomputer
        self.interval_hours = interval_hours or get_settings().cluster_config().recompute_interval_hours
        self.scheduler = scheduler or BackgroundScheduler(timezone="UTC")
        self.last_report: RecomputeReport | None = None
        self._setup_jobs()

    def _setup_jobs(self) -> None:
        self.scheduler.add_job(
            self.run_sweep,
            "interval",
            hours=self.interval_hours,
            id=SWEEP_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

    @with_error_handling(error_level=ErrorLevel.WARNING, reraise=False)
    def run_sweep(self) -> RecomputeReport:
        """Job body; errors are logged so the scheduler keeps running."""
        self.last_report = self.recomputer.sweep()
        return self.last_report

    def start(self) -> None:
        if not get_settings().recompute_sweep_enabled:
            logger.info("Stale cluster sweep disabled by configuration")
            return
        self.scheduler.start()
        logger.info(f"RecomputeScheduler started - sweeping every {self.interval_hours}h")

    def shutdown(self, wait: bool = True) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info("RecomputeScheduler shutdown complete")
