"""
Unit tests for configuration loading.

Tests the config.py module which handles YAML loading, defaults and the
accepted config forms.
"""
import pytest
from pathlib import Path
from mdtex.config import (
    Config,
    PreviewConfig,
    load_config,
    load_config_from_dict,
    resolve_config,
)


class TestConfigDefaults:
    """Test default configuration values."""

    def test_preview_config_defaults(self):
        """Default PreviewConfig has expected values."""
        preview = PreviewConfig()
        assert preview.debounce_seconds == 0.8
        assert preview.max_macro_depth == 32
        assert preview.styles is True
        assert preview.packages == []

    def test_config_defaults(self):
        config = Config()
        assert isinstance(config.preview, PreviewConfig)

    def test_packages_not_shared(self):
        """Each config gets its own package list."""
        a, b = PreviewConfig(), PreviewConfig()
        a.packages.append("tikz")
        assert b.packages == []


class TestConfigLoading:
    """Test loading configuration from YAML files."""

    def test_load_config_missing_file(self):
        """Missing config file returns defaults."""
        config = load_config(Path("/nonexistent/config.yaml"))
        assert config.preview.debounce_seconds == 0.8

    def test_load_config_none_path(self):
        config = load_config(None)
        assert isinstance(config.preview, PreviewConfig)

    def test_load_config_from_temp_file(self, temp_config):
        """Load config from temporary YAML file."""
        config = load_config(temp_config)
        assert config.preview.debounce_seconds == 0.1
        assert config.preview.styles is False
        assert config.preview.packages == ["tikz"]
        assert config.preview.max_macro_depth == 32  # Default kept

    def test_load_empty_file(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        assert load_config(config_path) == Config()


class TestConfigFromDict:
    """Test building config from mappings."""

    def test_unknown_keys_ignored(self):
        config = load_config_from_dict({"preview": {"styles": False, "colour": "red"}, "other": 1})
        assert config.preview.styles is False

    def test_packages_coerced_to_strings(self):
        config = load_config_from_dict({"preview": {"packages": ["tikz", 3]}})
        assert config.preview.packages == ["tikz", "3"]

    def test_empty_preview_section(self):
        assert load_config_from_dict({"preview": None}) == Config()

    def test_non_mapping_rejected(self):
        with pytest.raises(TypeError, match="mapping"):
            load_config_from_dict(["preview"])

    def test_non_mapping_section_rejected(self):
        with pytest.raises(TypeError, match="'preview'"):
            load_config_from_dict({"preview": "fast"})


class TestResolveConfig:
    """Test the accepted config forms."""

    def test_none(self):
        assert resolve_config(None) == Config()

    def test_config_passthrough(self):
        config = Config(preview=PreviewConfig(styles=False))
        assert resolve_config(config) is config

    def test_mapping(self):
        assert resolve_config({"preview": {"max_macro_depth": 4}}).preview.max_macro_depth == 4

    def test_path_and_string(self, temp_config):
        assert resolve_config(temp_config).preview.styles is False
        assert resolve_config(str(temp_config)).preview.styles is False

    def test_invalid_type(self):
        with pytest.raises(TypeError):
            resolve_config(42)
