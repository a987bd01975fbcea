"""Domain service protocols for the engine's external collaborators."""

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from cluster_engine.domain.models.cluster import Cluster


@runtime_checkable
class ClusterStore(Protocol):
    """Persistence boundary owned by the caller."""

    def list_clusters(self) -> Iterable[Cluster]:
        """Return hydrated clusters to consider for maintenance."""
        ...

    def save(self, cluster: Cluster) -> None:
        """Persist a mutated cluster."""
        ...


@runtime_checkable
class MemberEmbeddingSource(Protocol):
    """Supplies the current member embeddings of a cluster."""

    def embeddings_for(self, cluster_id: str) -> Sequence[Sequence[float]]:
        ...
