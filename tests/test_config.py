"""Tests for analysis settings."""

import os

import pytest
from pydantic import ValidationError

from py_imagemap.config.config import AnalysisSettings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host IMAGEMAP_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("IMAGEMAP_"):
            monkeypatch.delenv(name)


class TestAnalysisSettings:
    """Test settings defaults, validation and environment loading."""

    def test_defaults(self):
        settings = AnalysisSettings(_env_file=None)

        assert settings.color_cluster_count == 5
        assert settings.height_level_count == 4
        assert settings.edge_threshold == 0.1
        assert settings.use_adaptive_heights is True
        assert settings.kmeans_max_iterations == 100
        assert settings.kmeans_convergence_threshold == 0.001
        assert settings.log_format == "json"

    def test_random_seed(self):
        settings = AnalysisSettings(_env_file=None)
        assert settings.effective_seed is None

    def test_fixed_seed(self):
        settings = AnalysisSettings(_env_file=None, use_random_seed=False, seed=42)
        assert settings.effective_seed == 42

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("IMAGEMAP_COLOR_CLUSTER_COUNT", "7")
        monkeypatch.setenv("IMAGEMAP_USE_ADAPTIVE_HEIGHTS", "false")

        settings = AnalysisSettings(_env_file=None)

        assert settings.color_cluster_count == 7
        assert settings.use_adaptive_heights is False

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("IMAGEMAP_HEIGHT_LEVEL_COUNT=5\nIMAGEMAP_EDGE_THRESHOLD=0.3\n")

        settings = AnalysisSettings(_env_file=env_file)

        assert settings.height_level_count == 5
        assert settings.edge_threshold == 0.3

    @pytest.mark.parametrize(
        "field, value",
        [
            ("color_cluster_count", 0),
            ("height_level_count", 0),
            ("edge_threshold", 1.5),
            ("kmeans_max_iterations", 0),
            ("kmeans_convergence_threshold", 0.0),
            ("log_format", "xml"),
        ],
    )
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            AnalysisSettings(_env_file=None, **{field: value})
