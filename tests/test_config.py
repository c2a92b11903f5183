"""
Tests for configuration module.
"""

import pytest

from kmzlens.core.config import Settings


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self) -> None:
        settings = Settings()

        assert settings.cluster_max_distance_km == 1.0
        assert settings.max_archive_size_mb == 50
        assert settings.api_v1_prefix == "/api/v1"
        assert settings.environment == "development"
        assert settings.log_level is None

    def test_max_archive_size_bytes(self) -> None:
        settings = Settings(max_archive_size_mb=10)

        assert settings.max_archive_size_bytes == 10 * 1024 * 1024

    def test_cors_origins_list(self) -> None:
        settings = Settings(cors_origins="http://a.test, http://b.test")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_environment_variables(self, monkeypatch) -> None:
        """Test values are read from KMZLENS_ prefixed variables."""
        monkeypatch.setenv("KMZLENS_CLUSTER_MAX_DISTANCE_KM", "2.5")
        monkeypatch.setenv("KMZLENS_ENVIRONMENT", "production")

        settings = Settings()

        assert settings.cluster_max_distance_km == 2.5
        assert settings.environment == "production"

    def test_invalid_environment(self) -> None:
        with pytest.raises(ValueError):
            Settings(environment="testing")
