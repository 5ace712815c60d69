"""
Unit tests for the configuration system.

Tests defaults, JSON and YAML files, environment overrides and the
global configuration accessors.
"""

import json

import pytest
import yaml
from unittest.mock import patch

from deriving.utils.config import (
    CodegenConfig,
    DerivingConfig,
    get_config,
    load_config,
    set_config,
)
from deriving.utils.constants import DEFAULT_QUOTE_PREFIX, DEFAULT_RUNTIME_MODULE


class TestDefaults:
    """Test default configuration values."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = DerivingConfig(str(tmp_path / "absent.json"))
        assert config.codegen == CodegenConfig()
        assert config.codegen.quote_prefix == DEFAULT_QUOTE_PREFIX
        assert config.codegen.runtime_module == DEFAULT_RUNTIME_MODULE
        assert config.codegen.inline_prefix == "derive."
        assert config.registry.reject_duplicates is False
        assert config.logging.level == "INFO"

    def test_to_dict(self, tmp_path):
        data = DerivingConfig(str(tmp_path / "absent.json")).to_dict()
        assert data["version"] == "1.0"
        assert set(data) == {"version", "codegen", "registry", "logging"}
        assert data["codegen"]["poly_prefix"] == "poly_"


class TestConfigFiles:
    """Test loading configuration files."""

    def test_json_file(self, tmp_path):
        path = tmp_path / "deriving.json"
        path.write_text(json.dumps({
            "codegen": {"quote_prefix": "_q", "runtime_module": "Rt"},
            "registry": {"reject_duplicates": True},
        }))
        config = load_config(str(path))
        assert config.codegen.quote_prefix == "_q"
        assert config.codegen.runtime_module == "Rt"
        assert config.codegen.poly_prefix == "poly_"
        assert config.registry.reject_duplicates is True

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "deriving.yaml"
        path.write_text(yaml.safe_dump({
            "codegen": {"poly_prefix": "p_", "warning_spec": "-32"},
            "logging": {"level": "DEBUG"},
        }))
        config = load_config(str(path))
        assert config.codegen.poly_prefix == "p_"
        assert config.codegen.warning_spec == "-32"
        assert config.logging.level == "DEBUG"

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(str(path)).codegen == CodegenConfig()

    def test_malformed_file_falls_back(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with patch("deriving.utils.config.logger") as mock_logger:
            config = load_config(str(path))
        mock_logger.error.assert_called_once()
        assert config.codegen == CodegenConfig()

    def test_config_file_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"codegen": {"toplevel_name": "<repl>"}}))
        monkeypatch.setenv("DERIVING_CONFIG", str(path))
        assert DerivingConfig().codegen.toplevel_name == "<repl>"

    def test_save_config_round_trip(self, tmp_path):
        path = tmp_path / "saved.json"
        config = DerivingConfig(str(path))
        config.codegen.quote_prefix = "_s"
        config.save_config()
        assert load_config(str(path)).codegen.quote_prefix == "_s"


class TestEnvironmentOverrides:
    """Test environment variable overrides."""

    @pytest.mark.parametrize("value,expected", [
        ("1", True), ("true", True), ("YES", True), ("0", False), ("", False),
    ])
    def test_strict_registry(self, tmp_path, monkeypatch, value, expected):
        monkeypatch.setenv("DERIVING_STRICT_REGISTRY", value)
        config = DerivingConfig(str(tmp_path / "absent.json"))
        assert config.registry.reject_duplicates is expected


class TestGlobalConfig:
    """Test the global accessors."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_set_config(self, tmp_path):
        custom = DerivingConfig(str(tmp_path / "absent.json"))
        set_config(custom)
        assert get_config() is custom

    def test_set_config_none_resets(self):
        first = get_config()
        set_config(None)
        assert get_config() is not first

    def test_apply_logging(self, tmp_path):
        config = DerivingConfig(str(tmp_path / "absent.json"))
        config.logging.level = "DEBUG"
        config.logging.enable_file_logging = True
        config.logging.log_file = str(tmp_path / "out.log")
        with patch("deriving.utils.config.setup_logging") as mock_setup:
            config.apply_logging()
        mock_setup.assert_called_once_with(level="DEBUG", log_file=str(tmp_path / "out.log"))
