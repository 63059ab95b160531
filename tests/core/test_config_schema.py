"""Tests for fitpulse.core.config_schema and Config.validated()."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fitpulse.core.config import Config
from fitpulse.core.config_schema import FitpulseConfig, IngestConfig, LoggingConfig
from fitpulse.core.exceptions import ConfigurationError


@pytest.mark.smoke
class TestConfigSchema:
    def test_valid_config_roundtrip(self):
        data = {
            "paths": {"data_dir": "/tmp/fp-data", "records_dir": "/tmp/fp-data/records"},
            "ingest": {"alias_store_path": "/tmp/fp-data/aliases.json", "match_threshold": 0.75, "learn": False},
            "logging": {"level": "info", "to_file": True},
        }
        cfg = FitpulseConfig.model_validate(data)
        assert cfg.paths.data_dir == Path("/tmp/fp-data")
        assert cfg.paths.records_dir == Path("/tmp/fp-data/records")
        assert cfg.ingest.alias_store_path == Path("/tmp/fp-data/aliases.json")
        assert cfg.ingest.match_threshold == 0.75
        assert cfg.ingest.fuzzy_threshold == 0.7
        assert cfg.ingest.learn is False
        assert cfg.logging.level == "INFO"
        assert cfg.logging.to_file is True

    def test_defaults_populate(self):
        cfg = FitpulseConfig()
        assert cfg.paths.data_dir is not None
        assert cfg.ingest.match_threshold == 0.6
        assert cfg.ingest.learn is True
        assert cfg.logging.level == "WARNING"

    def test_path_expansion(self):
        cfg = FitpulseConfig.model_validate({"paths": {"data_dir": "~/.fitpulse-data"}})
        assert not str(cfg.paths.data_dir).startswith("~")

    def test_extra_sections_allowed(self):
        cfg = FitpulseConfig.model_validate({"dashboard": {"theme": "dark"}})
        assert cfg.model_extra["dashboard"] == {"theme": "dark"}

    @pytest.mark.parametrize("value", [0, -0.1, 1.5])
    def test_threshold_range(self, value):
        with pytest.raises(ValidationError):
            IngestConfig(match_threshold=value)

    def test_threshold_upper_bound_inclusive(self):
        assert IngestConfig(fuzzy_threshold=1).fuzzy_threshold == 1.0

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="loud")


class TestValidated:
    def test_defaults_validate(self, tmp_dir):
        cfg = Config(data_dir=tmp_dir).validated()
        assert cfg.paths.data_dir == Path(tmp_dir)
        assert cfg.ingest.alias_store_path == Path(tmp_dir) / "learned_aliases.json"

    def test_invalid_value_raises_configuration_error(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("ingest.fuzzy_threshold", 3)
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            config.validated()
