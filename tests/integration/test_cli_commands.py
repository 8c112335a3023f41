"""Integration tests for Notice Viewer CLI commands.

These tests exercise the CLI against the sample SDK and notice.
"""

import base64
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from notice_viewer import __version__
from notice_viewer.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command in an empty directory (no config, relative outputs)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop handlers bound to the runner's streams once a command finishes."""
    logger = logging.getLogger("notice_viewer")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def last_line(output: str) -> str:
    return output.strip().splitlines()[-1]


class TestRender:
    """Integration tests for `notice-viewer render`."""

    def test_prints_base64_html(self, sdk_root: Path, notice_base64: str) -> None:
        """Test that the rendered HTML is printed as base64."""
        result = runner.invoke(
            app,
            ["--quiet", "render", "en", notice_base64, "--sdk-root", str(sdk_root)],
        )

        assert result.exit_code == 0, f"Command failed: {result.output}"
        html = base64.b64decode(last_line(result.stdout)).decode("utf-8")
        assert 'lang="en"' in html
        assert "Contract notice" in html
        assert "Road maintenance" in html

    def test_output_file(self, sdk_root: Path, notice_base64: str, work_dir: Path) -> None:
        """Test that --output also writes the HTML to a file."""
        output = work_dir / "html" / "notice.html"

        result = runner.invoke(
            app,
            ["--quiet", "render", "fr", notice_base64, "-r", str(sdk_root), "-o", str(output)],
        )

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert output.read_bytes() == base64.b64decode(last_line(result.stdout))
        assert "Date d'envoi de l'avis" in output.read_text(encoding="utf-8")

    def test_only_xsl(self, sdk_root: Path, work_dir: Path) -> None:
        """Test that --only-xsl compiles the view template and prints its path."""
        result = runner.invoke(
            app,
            ["--quiet", "render", "en", "-x", "-s", "eforms-sdk-1.8", "-i", "29", "-r", str(sdk_root)],
        )

        assert result.exit_code == 0, f"Command failed: {result.output}"
        xsl_path = Path(last_line(result.stdout))
        assert xsl_path.resolve() == (work_dir / "target" / "output-xsl" / "1.8" / "29.xsl").resolve()
        assert xsl_path.is_file()

    def test_only_xsl_requires_version_and_view(self, sdk_root: Path) -> None:
        result = runner.invoke(app, ["render", "en", "--only-xsl", "-r", str(sdk_root)])

        assert result.exit_code == 1

    def test_force_rebuild(self, sdk_root: Path, work_dir: Path) -> None:
        """Test that --force recompiles an existing stylesheet."""
        xsl_path = work_dir / "target" / "output-xsl" / "1.8" / "29.xsl"
        xsl_path.parent.mkdir(parents=True)
        xsl_path.write_text("stale", encoding="utf-8")
        args = ["render", "en", "-x", "-s", "1.8", "-i", "29", "-r", str(sdk_root)]

        runner.invoke(app, args)
        assert xsl_path.read_text(encoding="utf-8") == "stale"

        result = runner.invoke(app, [*args, "--force"])
        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert "xsl:stylesheet" in xsl_path.read_text(encoding="utf-8")

    @pytest.mark.parametrize("language", ["eng", "e", "1a"])
    def test_invalid_language(self, language: str, notice_base64: str) -> None:
        """Test that only two letter languages are accepted."""
        result = runner.invoke(app, ["render", language, notice_base64])

        assert result.exit_code == 2

    def test_missing_notice(self, sdk_root: Path) -> None:
        result = runner.invoke(app, ["render", "en", "-r", str(sdk_root)])

        assert result.exit_code == 1

    def test_invalid_base64(self, sdk_root: Path) -> None:
        result = runner.invoke(app, ["render", "en", "%%%", "-r", str(sdk_root)])

        assert result.exit_code == 1

    def test_unknown_view(self, sdk_root: Path, notice_base64: str) -> None:
        result = runner.invoke(
            app, ["render", "en", notice_base64, "-i", "99", "-r", str(sdk_root)]
        )

        assert result.exit_code == 1

    def test_profile(self, sdk_root: Path, notice_base64: str, work_dir: Path) -> None:
        """Test that --profile writes an execution profile next to the stylesheet."""
        result = runner.invoke(
            app, ["--quiet", "render", "en", notice_base64, "-p", "-r", str(sdk_root)]
        )

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert (work_dir / "target" / "output-xsl" / "1.8" / "29-profile.xml").is_file()


class TestInit:
    """Integration tests for `notice-viewer init`."""

    def test_creates_config_and_templates(self, work_dir: Path) -> None:
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert (work_dir / ".notice-viewer" / "config.yaml").is_file()
        assert (work_dir / ".notice-viewer" / "templates" / "fragments.xsl.j2").is_file()
        assert (work_dir / ".notice-viewer" / "templates" / "stylesheet.xsl.j2").is_file()

    def test_existing_config_needs_force(self) -> None:
        assert runner.invoke(app, ["init"]).exit_code == 0
        assert runner.invoke(app, ["init"]).exit_code == 1
        assert runner.invoke(app, ["init", "--force"]).exit_code == 0

    def test_generated_config_is_used(self, sdk_root: Path, notice_base64: str) -> None:
        """Test that render picks up the initialized config and templates."""
        runner.invoke(app, ["init"])

        result = runner.invoke(
            app, ["--quiet", "render", "en", notice_base64, "-r", str(sdk_root)]
        )

        assert result.exit_code == 0, f"Command failed: {result.output}"


class TestGlobalOptions:
    """Tests for global CLI options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_config_file(self, work_dir: Path) -> None:
        result = runner.invoke(app, ["--config", str(work_dir / "missing.yaml"), "init"])

        assert result.exit_code == 2
