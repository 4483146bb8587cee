# tests/test_config.py
"""Tests for RecordSchemaConfig, the Pydantic Settings source of truth."""

import pytest
from pydantic import ValidationError


class TestRecordSchemaConfig:
    """Test RecordSchemaConfig defaults and overrides."""

    def test_default_values(self, tmp_path):
        """Config should have sensible defaults without any env vars."""
        from recordschema.config import RecordSchemaConfig

        cfg = RecordSchemaConfig()
        assert cfg.name_prefix == "#/$defs/"
        assert cfg.json_tag == "json"
        assert cfg.schema_tag == "jsonschema"
        assert cfg.description_tag == "jsonschema_description"
        assert cfg.unknown_directives == "ignore"
        assert cfg.log_level == "WARNING"
        assert cfg.home_dir == tmp_path / "home"

    def test_env_override(self, monkeypatch):
        """Environment variables with RECORDSCHEMA_ prefix override defaults."""
        from recordschema.config import RecordSchemaConfig

        monkeypatch.setenv("RECORDSCHEMA_NAME_PREFIX", "#/definitions/")
        monkeypatch.setenv("RECORDSCHEMA_UNKNOWN_DIRECTIVES", "reject")
        cfg = RecordSchemaConfig()
        assert cfg.name_prefix == "#/definitions/"
        assert cfg.unknown_directives == "reject"

    def test_explicit_arguments_win(self, monkeypatch):
        """Constructor arguments beat env vars."""
        from recordschema.config import RecordSchemaConfig

        monkeypatch.setenv("RECORDSCHEMA_JSON_TAG", "from-env")
        assert RecordSchemaConfig(json_tag="explicit").json_tag == "explicit"

    def test_derived_log_dir(self):
        """log_dir derives from home_dir."""
        from recordschema.config import RecordSchemaConfig

        cfg = RecordSchemaConfig()
        assert cfg.log_dir == cfg.home_dir / "logs"

    def test_invalid_unknown_directive_policy(self):
        """Only ignore and reject are accepted."""
        from recordschema.config import RecordSchemaConfig

        with pytest.raises(ValidationError):
            RecordSchemaConfig(unknown_directives="warn")


class TestGetConfig:
    """The cached config singleton."""

    def test_singleton(self):
        """get_config returns the same object."""
        from recordschema.config import get_config

        assert get_config() is get_config()

    def test_cache_clear_picks_up_env(self, monkeypatch):
        """cache_clear re-reads the environment."""
        from recordschema.config import get_config

        first = get_config()
        monkeypatch.setenv("RECORDSCHEMA_LOG_LEVEL", "DEBUG")
        assert get_config().log_level == first.log_level
        get_config.cache_clear()
        assert get_config().log_level == "DEBUG"
