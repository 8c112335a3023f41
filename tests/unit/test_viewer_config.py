"""Unit tests for configuration system."""

from pathlib import Path

import pytest
import yaml

from notice_viewer.config import (
    SdkConfig,
    TransformConfig,
    TranslatorConfig,
    ViewerConfig,
    create_default_config,
    find_config_file,
    load_config,
    load_config_from_dict,
    substitute_env_vars,
)
from notice_viewer.models import DecimalFormat


class TestSubstituteEnvVars:
    """Tests for environment variable substitution."""

    def test_substitute_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env var in string."""
        monkeypatch.setenv("SDK_HOME", "/opt/sdk")

        assert substitute_env_vars("${SDK_HOME}/eforms") == "/opt/sdk/eforms"

    def test_substitute_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env vars in dictionaries and lists."""
        monkeypatch.setenv("ROOT", "/data")

        result = substitute_env_vars({"sdk": {"root": "${ROOT}"}, "list": ["${ROOT}", 1]})

        assert result == {"sdk": {"root": "/data"}, "list": ["/data", 1]}

    def test_missing_env_var_raises(self) -> None:
        """Test that missing env var raises ValueError."""
        with pytest.raises(ValueError, match="Environment variable not set"):
            substitute_env_vars("${NOTICE_VIEWER_UNSET_VARIABLE}")


class TestConfigDataclasses:
    """Tests for configuration validation."""

    def test_defaults(self) -> None:
        config = ViewerConfig()

        assert config.sdk.root == "eforms-sdk"
        assert config.output.xsl_root == "target/output-xsl"
        assert config.templates.escape_free_text is True
        assert config.transform.encoding == "UTF-8"
        assert config.default_language == "en"
        assert config.config_path is None

    def test_template_extension_needs_dot(self) -> None:
        with pytest.raises(ValueError, match="must start with"):
            SdkConfig(template_extension="efx")

    def test_unknown_encoding(self) -> None:
        with pytest.raises(ValueError, match="Unknown output encoding"):
            TransformConfig(encoding="no-such-encoding")

    def test_invalid_separators(self) -> None:
        with pytest.raises(ValueError, match="must differ"):
            TranslatorConfig(decimal_separator=",", grouping_separator=",")

    def test_decimal_format(self) -> None:
        config = TranslatorConfig(decimal_separator=",", grouping_separator=".")

        assert config.decimal_format == DecimalFormat(",", ".")

    def test_default_language_two_letters(self) -> None:
        with pytest.raises(ValueError, match="two letter code"):
            ViewerConfig(default_language="eng")


class TestLoadConfigFromDict:
    """Tests for dictionary loading."""

    def test_empty(self) -> None:
        """Test that an empty dict yields defaults."""
        assert load_config_from_dict({}) == ViewerConfig()

    def test_partial_sections(self) -> None:
        """Test that missing keys keep their defaults."""
        config = load_config_from_dict(
            {
                "sdk": {"root": "/srv/sdk"},
                "templates": {"escape_free_text": False},
                "transform": {"profile": True},
                "default_language": "fr",
            }
        )

        assert config.sdk.root == "/srv/sdk"
        assert config.sdk.template_extension == ".efx"
        assert config.templates.escape_free_text is False
        assert config.transform.profile is True
        assert config.transform.encoding == "UTF-8"
        assert config.default_language == "fr"

    def test_empty_section(self) -> None:
        """Test that a section without keys is accepted."""
        config = load_config_from_dict({"output": None})

        assert config.output.html_root == "target/output-html"


class TestLoadConfig:
    """Tests for file loading and discovery."""

    def test_explicit_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("output:\n  xsl_root: cache/xsl\n", encoding="utf-8")

        config = load_config(config_file)

        assert config.output.xsl_root == "cache/xsl"
        assert config.config_path == config_file

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_discovery_order(self, tmp_path: Path) -> None:
        """Test that .notice-viewer/config.yaml wins over notice-viewer.yaml."""
        (tmp_path / "notice-viewer.yaml").write_text("{}", encoding="utf-8")
        assert find_config_file(tmp_path) == (tmp_path / "notice-viewer.yaml").resolve()

        config_dir = tmp_path / ".notice-viewer"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("{}", encoding="utf-8")
        assert find_config_file(tmp_path) == (config_dir / "config.yaml").resolve()

    def test_no_config_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        assert load_config() == ViewerConfig()

    def test_default_config_round_trip(self) -> None:
        """Test that the generated default config loads cleanly."""
        data = yaml.safe_load(create_default_config())
        config = load_config_from_dict(data)

        assert config.templates.root == ".notice-viewer/templates"
        assert config.translator.decimal_format == DecimalFormat()
