"""Notice Viewer CLI interface.

Commands:
- render: Render a base64-encoded notice to HTML (or only compile its XSL)
- init: Initialize Notice Viewer configuration and templates

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import base64
import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from notice_viewer import __version__
from notice_viewer.utils.logging import configure_from_cli, get_logger
from notice_viewer.config import ViewerConfig, create_default_config, load_config
from notice_viewer.exceptions import NoticeViewerError

app = typer.Typer(
    name="notice-viewer",
    help="Render eForms notices to HTML",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: ViewerConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"notice-viewer {__version__}")
        raise typer.Exit()


def validate_language(value: str) -> str:
    """Accept two letter language codes only."""
    if not value or len(value) != 2 or not value.isalpha():
        raise typer.BadParameter(
            f"expecting two letter code like 'en', 'fr', ..., but found '{value}'"
        )
    return value.lower()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Notice Viewer - HTML views of eForms notices."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


# =============================================================================
# render command
# =============================================================================


def _apply_overrides(
    config: ViewerConfig,
    sdk_root: Path | None,
    templates_root: Path | None,
    profile: bool,
) -> ViewerConfig:
    """Apply per-run CLI overrides to the loaded configuration."""
    if sdk_root is not None:
        config = replace(config, sdk=replace(config.sdk, root=str(sdk_root)))
    if templates_root is not None:
        config = replace(config, templates=replace(config.templates, root=str(templates_root)))
    if profile:
        config = replace(config, transform=replace(config.transform, profile=True))
    return config


@app.command()
def render(
    language: Annotated[
        str,
        typer.Argument(
            help="Two letter language code",
            callback=validate_language,
        ),
    ],
    notice: Annotated[
        str | None,
        typer.Argument(help="Notice XML as base64 string"),
    ] = None,
    view_id: Annotated[
        str | None,
        typer.Option("--view-id", "-i", help="View ID to use (default: notice subtype)"),
    ] = None,
    sdk_version: Annotated[
        str | None,
        typer.Option("--sdk-version", "-s", help="SDK version (with --only-xsl)"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Also write the HTML to this file"),
    ] = None,
    sdk_root: Annotated[
        Path | None,
        typer.Option("--sdk-root", "-r", help="SDK resources root folder"),
    ] = None,
    templates_root: Annotated[
        Path | None,
        typer.Option("--templates-root", "-t", help="Stylesheet templates root folder"),
    ] = None,
    profile: Annotated[
        bool,
        typer.Option("--profile", "-p", help="Enable XSLT profiling"),
    ] = False,
    only_xsl: Annotated[
        bool,
        typer.Option("--only-xsl", "-x", help="Generate only the XSL file"),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Rebuild the XSL even if it is cached"),
    ] = False,
) -> None:
    """Render a notice to HTML.

    Prints the HTML as a base64 string. With --only-xsl, compiles the view
    template of --view-id / --sdk-version and prints the XSL path.

    Exit codes:
        0: Success
        1: Rendering failed
    """
    from notice_viewer.models import NoticeDocument
    from notice_viewer.viewer import NoticeViewer

    config = _apply_overrides(_config or ViewerConfig(), sdk_root, templates_root, profile)
    viewer = NoticeViewer(config)

    if only_xsl:
        if not sdk_version or not view_id:
            _logger.error("--only-xsl requires --sdk-version and --view-id")
            raise typer.Exit(1)

        try:
            xsl_path = viewer.generate_xsl_file(sdk_version, view_id, language, force)
        except (NoticeViewerError, OSError) as e:
            _logger.error(f"XSL generation failed: {e}")
            raise typer.Exit(1)

        typer.echo(str(xsl_path))
        raise typer.Exit(0)

    if not notice:
        _logger.error("Missing notice: pass the notice XML as a base64 string")
        raise typer.Exit(1)

    try:
        document = NoticeDocument.from_base64(notice)
        if output is not None:
            html_path = viewer.generate_html_file(
                document, language, view_id, output_path=output, force_build=force
            )
            html = html_path.read_bytes()
        else:
            html = viewer.generate_html_string(
                document, language, view_id, force_build=force
            ).encode(config.transform.encoding)
    except (NoticeViewerError, OSError, ValueError) as e:
        _logger.error(f"Rendering failed: {e}")
        raise typer.Exit(1)

    _logger.structured(
        logging.INFO,
        "Rendered notice",
        sdk_version=document.sdk_version,
        view_id=view_id or document.subtype,
        language=language,
        size=len(html),
    )
    typer.echo(base64.b64encode(html).decode("ascii"))
    raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize Notice Viewer configuration.

    Creates .notice-viewer/config.yaml and copies the bundled stylesheet
    templates to .notice-viewer/templates for customisation.
    """
    from notice_viewer.templates import provision_templates

    config_dir = Path(".notice-viewer")
    config_dir.mkdir(exist_ok=True)
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    templates_dir = config_dir / "templates"
    if not provision_templates(templates_dir):
        _logger.warning("Bundled templates will be used")

    typer.echo("Notice Viewer configuration initialized")
    typer.echo(f"   Config: {config_file}")
    typer.echo(f"   Templates: {templates_dir}/")
    raise typer.Exit(0)


if __name__ == "__main__":
    app()
