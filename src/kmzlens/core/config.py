"""
Configuration settings for kmzlens.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings with environment variable support.

    Attributes:
        cluster_max_distance_km: Default proximity threshold for point clustering
        max_archive_size_mb: Largest KMZ archive accepted by the parser
        api_v1_prefix: URL prefix for the HTTP API routers
        cors_origins: Comma separated list of allowed CORS origins
        environment: Deployment environment
        log_level: Explicit log level, derived from environment when unset
        log_file: Rotating log file written in addition to the console
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="KMZLENS_",
    )

    # Analytics settings
    cluster_max_distance_km: float = 1.0

    # Parser settings
    max_archive_size_mb: int = 50

    # API settings
    api_v1_prefix: str = "/api/v1"
    port: int = 8000

    # CORS settings
    cors_origins: str = "http://localhost:5173,http://localhost:3000,http://localhost:4173"

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Optional[str] = None
    log_file: Optional[Path] = None

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def max_archive_size_bytes(self) -> int:
        """Get max archive size in bytes."""
        return self.max_archive_size_mb * 1024 * 1024


# Global settings instance
settings = Settings()
