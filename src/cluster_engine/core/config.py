"""Configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from cluster_engine.domain.models.config import ClusterConfig

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Engine settings loaded from the environment.

    Cluster policy overrides use the nested delimiter, e.g.
    ``CLUSTER_ENGINE_CLUSTER__STALE_THRESHOLD_HOURS=48``.
    """

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    service_name: str = Field(default="cluster-engine", description="Service name reported to Logfire")

    # Scheduling
    recompute_sweep_enabled: bool = Field(default=True, description="Run the periodic stale-cluster sweep")

    # Global default policy for clusters created without an explicit config
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)

    model_config = SettingsConfigDict(
        env_prefix="CLUSTER_ENGINE_",
        env_file=".env",
        extra="ignore",
        env_nested_delimiter="__",
    )

    def cluster_config(self) -> ClusterConfig:
        """Get the global default cluster policy."""
        return self.cluster


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    try:
        return Settings()
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid cluster engine configuration: {e.error_count()} error(s)",
            details={"source": "settings", "operation": "load"},
        ) from e
