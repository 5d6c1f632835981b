"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from survey_mapper.config import ConfigLoader, MapperSettings
from survey_mapper.domain.entities import AutoMappingConfig, SimilarityMetric
from survey_mapper.domain.exceptions import InvalidConfigError


class TestMapperSettings:
    """Test suite for MapperSettings."""

    def test_default_settings(self):
        settings = MapperSettings()

        assert settings.store_path == Path("survey_mappings.json")
        assert settings.min_confidence == 0.8
        assert settings.similarity_metric == "dice"
        assert settings.progress_every == 10
        assert settings.max_workers == 1
        assert settings.use_processes is False

    def test_settings_are_immutable(self):
        settings = MapperSettings()

        with pytest.raises(Exception):  # FrozenInstanceError
            settings.min_confidence = 0.5

    def test_validation_min_confidence(self):
        MapperSettings(min_confidence=0.0)
        MapperSettings(min_confidence=1.0)

        with pytest.raises(ValueError, match="min_confidence must be between"):
            MapperSettings(min_confidence=-0.1)
        with pytest.raises(ValueError, match="min_confidence must be between"):
            MapperSettings(min_confidence=1.5)

    def test_validation_counts(self):
        with pytest.raises(ValueError, match="progress_every must be positive"):
            MapperSettings(progress_every=0)
        with pytest.raises(ValueError, match="max_workers must be positive"):
            MapperSettings(max_workers=0)

    def test_validation_metric(self):
        with pytest.raises(ValueError, match="Unknown similarity_metric"):
            MapperSettings(similarity_metric="cosine")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MAPPING_STORE_PATH", "/env/mappings.json")
        monkeypatch.setenv("MIN_CONFIDENCE", "0.65")
        monkeypatch.setenv("SIMILARITY_METRIC", "token_set")
        monkeypatch.setenv("PROGRESS_EVERY", "25")
        monkeypatch.setenv("MAX_WORKERS", "3")
        monkeypatch.setenv("USE_PROCESSES", "yes")

        settings = MapperSettings.from_env()

        assert settings.store_path == Path("/env/mappings.json")
        assert settings.min_confidence == 0.65
        assert settings.similarity_metric == "token_set"
        assert settings.progress_every == 25
        assert settings.max_workers == 3
        assert settings.use_processes is True

    def test_from_env_rejects_out_of_range_threshold(self, monkeypatch):
        monkeypatch.setenv("MIN_CONFIDENCE", "1.2")

        with pytest.raises(ValueError, match="min_confidence"):
            MapperSettings.from_env()

    def test_auto_mapping_config_uses_settings(self):
        settings = MapperSettings(min_confidence=0.7, similarity_metric="indel")

        config = settings.auto_mapping_config()

        assert isinstance(config, AutoMappingConfig)
        assert config.confidence_threshold == 0.7
        assert config.similarity_metric is SimilarityMetric.INDEL

    def test_auto_mapping_config_overrides(self):
        config = MapperSettings().auto_mapping_config(
            confidence_threshold=0.95, use_synonyms=False
        )

        assert config.confidence_threshold == 0.95
        assert config.use_synonyms is False
        assert config.use_fuzzy_matching is True

    def test_auto_mapping_config_rejects_bad_override(self):
        with pytest.raises(InvalidConfigError):
            MapperSettings().auto_mapping_config(confidence_threshold=2.0)


class TestConfigLoader:
    """Test suite for ConfigLoader."""

    def test_load_with_no_toml_file(self):
        settings = ConfigLoader.load(config_file=Path("/nonexistent/config.toml"))

        assert settings.min_confidence == 0.8
        assert settings.progress_every == 10

    def test_load_from_toml(self, tmp_path: Path):
        toml_file = tmp_path / "survey_mapper.toml"
        toml_file.write_text("""
[paths]
store_path = "/toml/mappings.json"

[default]
min_confidence = 0.9
similarity_metric = "indel"

[worker]
progress_every = 5
max_workers = 2
use_processes = true
""")

        settings = ConfigLoader.load(config_file=toml_file)

        assert settings.store_path == Path("/toml/mappings.json")
        assert settings.min_confidence == 0.9
        assert settings.similarity_metric == "indel"
        assert settings.progress_every == 5
        assert settings.max_workers == 2
        assert settings.use_processes is True

    def test_load_toml_with_partial_config(self, tmp_path: Path):
        toml_file = tmp_path / "survey_mapper.toml"
        toml_file.write_text("""
[default]
min_confidence = 0.75
""")

        settings = ConfigLoader.load(config_file=toml_file)

        assert settings.min_confidence == 0.75
        assert settings.progress_every == 10
        assert settings.store_path == Path("survey_mappings.json")

    def test_toml_overrides_environment(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MIN_CONFIDENCE", "0.6")
        monkeypatch.setenv("MAX_WORKERS", "4")
        toml_file = tmp_path / "survey_mapper.toml"
        toml_file.write_text("""
[default]
min_confidence = 0.85
""")

        settings = ConfigLoader.load(config_file=toml_file)

        assert settings.min_confidence == 0.85
        assert settings.max_workers == 4

    def test_invalid_toml_warns_and_keeps_env_settings(self, tmp_path: Path):
        toml_file = tmp_path / "survey_mapper.toml"
        toml_file.write_text("[default\nmin_confidence = ")

        with pytest.warns(UserWarning, match="Failed to load config"):
            settings = ConfigLoader.load(config_file=toml_file)

        assert settings.min_confidence == 0.8

    def test_invalid_value_warns(self, tmp_path: Path):
        toml_file = tmp_path / "survey_mapper.toml"
        toml_file.write_text("""
[worker]
max_workers = "many"
""")

        with pytest.warns(UserWarning, match="Failed to load config"):
            settings = ConfigLoader.load(config_file=toml_file)

        assert settings.max_workers == 1
