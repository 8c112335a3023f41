"""Shared pytest fixtures for Notice Viewer tests.

Fixtures are organized by category:
- Path fixtures: the sample SDK tree and notices under tests/fixtures
- Notice fixtures: raw and parsed sample notices
- Configuration fixtures: configs writing into tmp_path
"""

import base64
from pathlib import Path

import pytest

from notice_viewer.config import OutputConfig, SdkConfig, ViewerConfig
from notice_viewer.models import NoticeDocument, TemplateOptions

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sdk_root(fixtures_dir: Path) -> Path:
    """Return the sample SDK root (one version: 1.8)."""
    return fixtures_dir / "sdk"


@pytest.fixture
def view_template(sdk_root: Path) -> Path:
    """Return the view template of subtype 29."""
    return sdk_root / "1.8" / "view-templates" / "29.efx"


@pytest.fixture
def translations_dir(sdk_root: Path) -> Path:
    """Return the label files of SDK 1.8."""
    return sdk_root / "1.8" / "translations"


# =============================================================================
# Notice Fixtures
# =============================================================================


@pytest.fixture
def notice_xml(fixtures_dir: Path) -> bytes:
    """Return the raw XML of a contract notice (SDK 1.8, subtype 29, ENG + FRA)."""
    return (fixtures_dir / "notices" / "cn-29.xml").read_bytes()


@pytest.fixture
def notice_base64(notice_xml: bytes) -> str:
    """Return the sample notice as a base64 string."""
    return base64.b64encode(notice_xml).decode("ascii")


@pytest.fixture
def notice(notice_xml: bytes) -> NoticeDocument:
    """Return the parsed sample notice."""
    return NoticeDocument.from_xml(notice_xml)


@pytest.fixture
def english_options() -> TemplateOptions:
    """Return options rendering in English with French fallback."""
    return TemplateOptions.create("en", ["fr"])


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def viewer_config(sdk_root: Path, tmp_path: Path) -> ViewerConfig:
    """Return a config reading the sample SDK and writing into tmp_path."""
    return ViewerConfig(
        sdk=SdkConfig(root=str(sdk_root)),
        output=OutputConfig(
            xsl_root=str(tmp_path / "output-xsl"),
            html_root=str(tmp_path / "output-html"),
        ),
    )
