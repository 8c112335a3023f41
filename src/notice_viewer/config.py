"""Notice Viewer configuration system.

Configuration is YAML-based with per-run CLI overrides (--sdk-root,
--templates-root, --output, --profile). Supports environment variable
substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.notice-viewer/config.yaml
3. ./notice-viewer.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from notice_viewer.models.options import DecimalFormat

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class SdkConfig:
    """eForms SDK resources.

    Attributes:
        root: Directory with one sub-directory per SDK version
        template_extension: File extension of view templates
    """

    root: str = "eforms-sdk"
    template_extension: str = ".efx"

    def __post_init__(self) -> None:
        """Validate SDK configuration."""
        if not self.template_extension.startswith("."):
            raise ValueError(
                f"Template extension must start with '.' (got {self.template_extension!r})"
            )


@dataclass
class TemplatesConfig:
    """Stylesheet templates (Jinja2).

    Attributes:
        root: External templates directory, populated with the bundled
            templates on first use (None: bundled templates only)
        escape_free_text: XML-escape free text of view templates
    """

    root: str | None = None
    escape_free_text: bool = True


@dataclass
class OutputConfig:
    """Output locations.

    Attributes:
        xsl_root: Directory of compiled stylesheets (the artifact cache)
        html_root: Directory of generated HTML files
    """

    xsl_root: str = "target/output-xsl"
    html_root: str = "target/output-html"


@dataclass
class TranslatorConfig:
    """Number formatting of generated stylesheets.

    Attributes:
        decimal_separator: Decimal separator character
        grouping_separator: Digit grouping character
    """

    decimal_separator: str = "."
    grouping_separator: str = ","

    def __post_init__(self) -> None:
        """Validate the separators."""
        DecimalFormat(self.decimal_separator, self.grouping_separator)

    @property
    def decimal_format(self) -> DecimalFormat:
        return DecimalFormat(self.decimal_separator, self.grouping_separator)


@dataclass
class TransformConfig:
    """XSLT execution settings.

    Attributes:
        encoding: Character encoding of the HTML output
        profile: Record an execution profile for each transformation
        profile_dir: Directory for profiles (default: next to the stylesheet)
    """

    encoding: str = "UTF-8"
    profile: bool = False
    profile_dir: str | None = None

    def __post_init__(self) -> None:
        """Validate transform configuration."""
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unknown output encoding: {self.encoding}") from e


@dataclass
class ViewerConfig:
    """Top-level Notice Viewer configuration.

    Attributes:
        sdk: SDK resource locations
        templates: Stylesheet template settings
        output: Output locations
        translator: Number formatting
        transform: XSLT execution settings
        default_language: Language used when a notice declares none
    """

    sdk: SdkConfig = field(default_factory=SdkConfig)
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    translator: TranslatorConfig = field(default_factory=TranslatorConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    default_language: str = "en"

    _config_path: Path | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate the default language."""
        if len(self.default_language) != 2 or not self.default_language.isalpha():
            raise ValueError(
                f"Default language must be a two letter code (got {self.default_language!r})"
            )

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax. Example: ${SDK_ROOT} -> value of SDK_ROOT

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_PATTERN.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.notice-viewer/config.yaml
    2. ./notice-viewer.yaml
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".notice-viewer" / "config.yaml",
        start_path / "notice-viewer.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> ViewerConfig:
    """Load configuration from a dictionary.

    Unknown keys are ignored; missing keys keep their defaults.
    """
    data = substitute_env_vars(data)

    config = ViewerConfig(default_language=data.get("default_language", "en"))

    if "sdk" in data:
        sdk_data = data["sdk"] or {}
        config.sdk = SdkConfig(
            root=sdk_data.get("root", config.sdk.root),
            template_extension=sdk_data.get(
                "template_extension", config.sdk.template_extension
            ),
        )

    if "templates" in data:
        templates_data = data["templates"] or {}
        config.templates = TemplatesConfig(
            root=templates_data.get("root", config.templates.root),
            escape_free_text=templates_data.get(
                "escape_free_text", config.templates.escape_free_text
            ),
        )

    if "output" in data:
        output_data = data["output"] or {}
        config.output = OutputConfig(
            xsl_root=output_data.get("xsl_root", config.output.xsl_root),
            html_root=output_data.get("html_root", config.output.html_root),
        )

    if "translator" in data:
        translator_data = data["translator"] or {}
        config.translator = TranslatorConfig(
            decimal_separator=translator_data.get(
                "decimal_separator", config.translator.decimal_separator
            ),
            grouping_separator=translator_data.get(
                "grouping_separator", config.translator.grouping_separator
            ),
        )

    if "transform" in data:
        transform_data = data["transform"] or {}
        config.transform = TransformConfig(
            encoding=transform_data.get("encoding", config.transform.encoding),
            profile=transform_data.get("profile", config.transform.profile),
            profile_dir=transform_data.get("profile_dir", config.transform.profile_dir),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> ViewerConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        ViewerConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = ViewerConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content."""
    return '''# Notice Viewer Configuration

# eForms SDK resources: <root>/<major.minor>/view-templates, translations
sdk:
  root: "eforms-sdk"
  template_extension: ".efx"

# Stylesheet templates (Jinja2), copied here on first use
templates:
  root: ".notice-viewer/templates"
  escape_free_text: true

# Output locations (xsl_root is the compiled stylesheet cache)
output:
  xsl_root: "target/output-xsl"
  html_root: "target/output-html"

# Number formatting of generated stylesheets
translator:
  decimal_separator: "."
  grouping_separator: ","

# XSLT execution
transform:
  encoding: "UTF-8"
  profile: false
  # profile_dir: "target/xslt-profiles"

default_language: "en"
'''
