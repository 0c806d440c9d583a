"""
Unit tests for configuration export/import.
"""

import pytest
import yaml

from delve.core.config import DelveSettings
from delve.exceptions import ConfigurationError
from delve.models.enums import QualityReview
from delve.utils.config_export import export_config, import_config


def test_export_writes_yaml(tmp_path):
    settings = DelveSettings(max_iterations=12, quality_review=QualityReview.ALL)

    path = export_config(settings, tmp_path / "nested" / "config.yaml")

    data = yaml.safe_load(path.read_text())
    assert data["max_iterations"] == 12
    assert data["quality_review"] == "all"
    assert "decision_model" not in data


def test_export_default_location(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    path = export_config(DelveSettings())

    assert (tmp_path / ".delve" / "config.yaml").exists()
    assert str(path) == ".delve/config.yaml"


def test_export_then_import(tmp_path):
    path = export_config(DelveSettings(breadth=5, fallback_models="a/b"), tmp_path / "config.yaml")

    settings = import_config(path)

    assert settings.breadth == 5
    assert settings.fallback_model_list() == ["a/b"]


def test_import_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        import_config(tmp_path / "absent.yaml")


def test_import_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert import_config(path).max_iterations == 30


def test_export_only_changed(tmp_path):
    path = export_config(DelveSettings(breadth=5), tmp_path / "config.yaml", only_changed=True)

    data = yaml.safe_load(path.read_text())
    assert data["breadth"] == 5
    assert "max_iterations" not in data


def test_import_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")

    with pytest.raises(ConfigurationError, match="mapping"):
        import_config(path)


def test_import_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("breadth: 4\nnot_a_setting: 1\n")

    assert import_config(path).breadth == 4


def test_import_invalid_value_names_field(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("max_iterations: 0\n")

    with pytest.raises(ConfigurationError) as exc_info:
        import_config(path)

    assert exc_info.value.field == "max_iterations"
    assert exc_info.value.value == 0
    assert "max_iterations must be >= 1" in str(exc_info.value)
