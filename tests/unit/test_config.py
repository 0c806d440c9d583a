"""
Unit tests for settings loading and validation.
"""

import pytest
from pydantic import ValidationError

from delve.core.config import DelveSettings, get_settings, load_pyproject_defaults, reset_settings
from delve.models.enums import LogLevel, QualityReview


class TestDelveSettings:
    """Tests for DelveSettings."""

    def test_defaults(self):
        settings = DelveSettings()

        assert settings.default_model == "openai/gpt-4o-mini"
        assert settings.decision_model is None
        assert settings.max_iterations == 30
        assert settings.max_parallel_execution == 3
        assert settings.quality_review == QualityReview.DELIVERABLE
        assert settings.log_level == LogLevel.INFO
        assert settings.enable_rich_console is False  # set by the autouse fixture

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DELVE_MAX_ITERATIONS", "12")
        monkeypatch.setenv("DELVE_QUALITY_REVIEW", "all")

        settings = DelveSettings()

        assert settings.max_iterations == 12
        assert settings.quality_review == QualityReview.ALL

    def test_init_kwargs_beat_env(self, monkeypatch):
        monkeypatch.setenv("DELVE_BREADTH", "5")

        assert DelveSettings(breadth=2).breadth == 2

    @pytest.mark.parametrize(
        "field",
        ["max_iterations", "max_parallel_execution", "breadth", "depth", "search_results", "max_tool_rounds"],
    )
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValidationError):
            DelveSettings(**{field: 0})

    def test_fallback_model_list(self):
        settings = DelveSettings(fallback_models=" anthropic/claude-3-haiku , ,openai/gpt-4o ")

        assert settings.fallback_model_list() == ["anthropic/claude-3-haiku", "openai/gpt-4o"]
        assert DelveSettings().fallback_model_list() == []

    def test_completion_options_ignore_none(self):
        settings = DelveSettings(default_model="openai/gpt-4o", breadth=4)

        options = settings.completion_options(model=None, depth=5, quality_review=None)

        assert options.model == "openai/gpt-4o"
        assert options.breadth == 4
        assert options.depth == 5
        assert options.quality_review == QualityReview.DELIVERABLE
        assert options.engine == "openai"

    def test_global_settings_cached(self):
        first = get_settings()

        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first


class TestPyprojectSource:
    """Tests for the [tool.delve] pyproject.toml section."""

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert load_pyproject_defaults() == {}

    def test_tool_section_loaded(self, tmp_path, monkeypatch):
        (tmp_path / "pyproject.toml").write_text(
            '[tool.delve]\nmax_iterations = 7\ndefault_model = "anthropic/claude-3-haiku"\n'
        )
        monkeypatch.chdir(tmp_path)

        settings = DelveSettings()

        assert settings.max_iterations == 7
        assert settings.default_model == "anthropic/claude-3-haiku"

    def test_env_beats_pyproject(self, tmp_path, monkeypatch):
        (tmp_path / "pyproject.toml").write_text("[tool.delve]\nmax_iterations = 7\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DELVE_MAX_ITERATIONS", "9")

        assert DelveSettings().max_iterations == 9

    def test_invalid_toml_ignored(self, tmp_path, monkeypatch):
        (tmp_path / "pyproject.toml").write_text("[tool.delve\nbroken")
        monkeypatch.chdir(tmp_path)

        assert load_pyproject_defaults() == {}
