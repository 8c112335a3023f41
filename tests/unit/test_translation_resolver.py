"""Unit tests for transformation resource resolution."""

from pathlib import Path

import pytest
from lxml import etree

from notice_viewer.xsl import TranslationResolver
from notice_viewer.xsl.resolver import read_properties, resource_name


def labels(table: bytes) -> dict[str, str]:
    """Map a label table to {key: text}."""
    root = etree.fromstring(table)
    return {entry.get("key"): entry.text for entry in root.iter("entry")}


class TestResourceName:
    """Tests for logical id normalisation."""

    @pytest.mark.parametrize(
        "url",
        [
            "labels.xml",
            "/srv/xsl/1.8/labels.xml",
            "file:///srv/xsl/1.8/labels.xml",
            "file:///srv/my%20xsl/labels.xml",
        ],
    )
    def test_file_name(self, url: str) -> None:
        assert resource_name(url) == "labels.xml"


class TestReadProperties:
    """Tests for properties XML parsing."""

    def test_reads_entries(self, translations_dir: Path) -> None:
        """Test that entries are read without fetching the DOCTYPE."""
        entries = dict(read_properties(translations_dir / "code_en.xml"))

        assert entries["notice|name|cn"] == "Contract notice"
        assert entries["contract-nature|name|works"] == "Works"


class TestTranslationResolver:
    """Tests for TranslationResolver."""

    def test_label_table_merges_files(self, translations_dir: Path) -> None:
        """Test that all label files of a language are merged."""
        resolver = TranslationResolver(translations_dir, ["en"])

        table = labels(resolver.resolve("labels.xml", None))

        assert table["notice|name|cn"] == "Contract notice"
        assert table["field|name|BT-05-notice"] == "Notice Dispatch Date"

    def test_first_language_wins(self, translations_dir: Path) -> None:
        """Test fallback precedence across languages."""
        resolver = TranslationResolver(translations_dir, ["fr", "en"])

        table = labels(resolver.resolve("file:///any/where/labels.xml", "file:///x.xsl"))

        assert table["field|name|BT-05-notice"] == "Date d'envoi de l'avis"
        assert table["field|name|BT-02-notice"] == "Type d'avis"
        assert table["notice|name|cn"] == "Contract notice"

    def test_secondary_language_fills_gaps(self, translations_dir: Path) -> None:
        """Test that keys missing in the primary language come from fallbacks."""
        resolver = TranslationResolver(translations_dir, ["en", "fr"])

        table = labels(resolver.label_table())

        assert table["field|name|BT-05-notice"] == "Notice Dispatch Date"
        assert table["field|name|BT-02-notice"] == "Type d'avis"

    def test_unknown_language(self, translations_dir: Path) -> None:
        """Test that languages without label files resolve to nothing."""
        resolver = TranslationResolver(translations_dir, ["xx"])

        assert resolver.resolve("labels.xml", None) is None

    def test_artifact_dir_resource(self, translations_dir: Path, tmp_path: Path) -> None:
        """Test that sibling stylesheets are served from the artifact directory."""
        include = tmp_path / "common.xsl"
        include.write_text("<xsl/>", encoding="utf-8")
        resolver = TranslationResolver(translations_dir, ["en"], artifact_dir=tmp_path)

        assert resolver.resolve("common.xsl", None) == include
        assert resolver.resolve("other.xsl", None) is None

    def test_unknown_resource_without_artifact_dir(self, translations_dir: Path) -> None:
        resolver = TranslationResolver(translations_dir, ["en"])

        assert resolver.resolve("common.xsl", None) is None
