"""Unit tests for configuration management."""

import pytest
from omegaconf.errors import OmegaConfBaseException

from vgccorner.config import (
    CONFIG_DIR,
    DEFAULT_MAX_HP,
    HP_WEIGHT,
    TEAM_WEIGHT,
    AnalysisConfig,
    LoggingConfig,
    ParserConfig,
    ScoringConfig,
    load_config,
    save_config,
)


class TestAnalysisConfig:
    """Tests for config dataclasses."""

    def test_default_config(self):
        """Test creating config with defaults."""
        config = AnalysisConfig()

        assert config.scoring.momentum_margin == 5.0
        assert config.scoring.turning_point_threshold == 15.0
        assert config.scoring.ko_significance == 8
        assert config.parser.max_log_bytes is None
        assert config.logging.level == "INFO"

    def test_fixed_constants(self):
        """Scoring constants are fixed."""
        assert DEFAULT_MAX_HP == 100
        assert HP_WEIGHT == 0.6
        assert TEAM_WEIGHT == 0.4

    def test_sub_configs(self):
        """Test sub-config defaults."""
        assert ScoringConfig().momentum_margin == 5.0
        assert ParserConfig().max_log_bytes is None
        assert "{message}" in LoggingConfig().format


class TestConfigLoading:
    """Tests for loading and saving config."""

    def test_load_defaults(self):
        """Loading without a file gives the defaults."""
        config = load_config()

        assert isinstance(config, AnalysisConfig)
        assert config == AnalysisConfig()

    def test_load_shipped_default_file(self):
        """The shipped YAML matches the dataclass defaults."""
        config = load_config(CONFIG_DIR / "default.yaml")

        assert config == AnalysisConfig()

    def test_overrides(self):
        """Dotlist overrides are merged and typed."""
        config = load_config(overrides=[
            "scoring.turning_point_threshold=20",
            "parser.max_log_bytes=1000000",
            "logging.level=DEBUG",
        ])

        assert config.scoring.turning_point_threshold == 20.0
        assert config.parser.max_log_bytes == 1000000
        assert config.logging.level == "DEBUG"

    def test_unknown_key_rejected(self):
        """Keys outside the schema are rejected."""
        with pytest.raises(OmegaConfBaseException):
            load_config(overrides=["scoring.not_a_key=1"])

    def test_bad_type_rejected(self):
        """Values that do not fit the schema type are rejected."""
        with pytest.raises(OmegaConfBaseException):
            load_config(overrides=["scoring.ko_significance=lots"])

    def test_save_and_load(self, temp_dir):
        """Saved configs load back unchanged."""
        config = AnalysisConfig(scoring=ScoringConfig(momentum_margin=7.5))
        path = temp_dir / "nested" / "config.yaml"

        save_config(config, path)
        loaded = load_config(path)

        assert path.exists()
        assert loaded.scoring.momentum_margin == 7.5
        assert loaded == config
