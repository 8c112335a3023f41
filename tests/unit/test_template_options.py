"""Unit tests for translation options."""

from dataclasses import FrozenInstanceError

import pytest

from notice_viewer.models import DecimalFormat, TemplateOptions


class TestDecimalFormat:
    """Tests for DecimalFormat validation."""

    def test_defaults(self) -> None:
        fmt = DecimalFormat()

        assert fmt.decimal_separator == "."
        assert fmt.grouping_separator == ","

    def test_single_character_required(self) -> None:
        """Test that separators must be single characters."""
        with pytest.raises(ValueError, match="single character"):
            DecimalFormat(decimal_separator="..")

    def test_separators_must_differ(self) -> None:
        """Test that equal separators are rejected."""
        with pytest.raises(ValueError, match="must differ"):
            DecimalFormat(",", ",")


class TestTemplateOptions:
    """Tests for TemplateOptions."""

    def test_create_orders_and_deduplicates(self) -> None:
        """Test that fallbacks keep order without duplicates or the primary language."""
        options = TemplateOptions.create("fr", ["en", "fr", "de", "en", ""])

        assert options.secondary_languages == ("en", "de")
        assert options.fallback_languages == ("fr", "en", "de")

    def test_create_default_decimal_format(self) -> None:
        assert TemplateOptions.create("en").decimal_format == DecimalFormat()

    def test_immutable(self) -> None:
        """Test that options cannot change after creation."""
        options = TemplateOptions.create("en")

        with pytest.raises(FrozenInstanceError):
            options.primary_language = "fr"  # type: ignore[misc]
