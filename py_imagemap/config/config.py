from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalysisSettings(BaseSettings):
    """Analysis settings pulled from IMAGEMAP_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="IMAGEMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Clustering
    color_cluster_count: int = Field(
        default=5, ge=1, le=64, description="Number of K-Means color clusters"
    )
    kmeans_max_iterations: int = Field(
        default=100, ge=1, description="K-Means iteration cap"
    )
    kmeans_convergence_threshold: float = Field(
        default=0.001, gt=0, description="Centroid movement below which K-Means stops"
    )

    # Height bands
    height_level_count: int = Field(
        default=4, ge=1, le=256, description="Number of height bands"
    )
    use_adaptive_heights: bool = Field(
        default=True, description="Histogram-equalized bands instead of equal-width"
    )

    # Edge detection
    edge_threshold: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Edge magnitude gate"
    )

    # Random seed
    use_random_seed: bool = Field(
        default=True, description="Draw a fresh seed for every run"
    )
    seed: int = Field(default=12345, description="Fixed seed when use_random_seed is off")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="json", description="Logging format (json or console)"
    )

    @property
    def effective_seed(self) -> Optional[int]:
        """Seed to pass to clustering; None requests a non-deterministic run."""
        if self.use_random_seed:
            return None
        return self.seed


# Instantiate singleton settings object
settings = AnalysisSettings()
