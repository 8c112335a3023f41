"""Translation options passed to the view template translator."""

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DecimalFormat:
    """Numeric formatting symbols declared in generated stylesheets.

    Attributes:
        decimal_separator: Character separating integer and fraction digits
        grouping_separator: Character separating digit groups
    """

    decimal_separator: str = "."
    grouping_separator: str = ","

    def __post_init__(self) -> None:
        """Validate the separators."""
        for name in ("decimal_separator", "grouping_separator"):
            value = getattr(self, name)
            if len(value) != 1:
                raise ValueError(f"{name} must be a single character (got {value!r})")
        if self.decimal_separator == self.grouping_separator:
            raise ValueError(
                f"Decimal and grouping separators must differ (both {self.decimal_separator!r})"
            )


@dataclass(frozen=True)
class TemplateOptions:
    """Options for one translation / rendering request.

    Secondary languages are ordered: their order is the fallback precedence
    of label lookup. They never repeat the primary language.

    Attributes:
        primary_language: Two letter code of the requested language
        secondary_languages: Fallback languages, most preferred first
        decimal_format: Numeric formatting symbols
    """

    primary_language: str
    secondary_languages: tuple[str, ...] = ()
    decimal_format: DecimalFormat = field(default_factory=DecimalFormat)

    @classmethod
    def create(
        cls,
        primary_language: str,
        secondary_languages: Iterable[str] = (),
        decimal_format: DecimalFormat | None = None,
    ) -> "TemplateOptions":
        """Build options, dropping duplicates and the primary language from fallbacks."""
        ordered = dict.fromkeys(
            lang for lang in secondary_languages if lang and lang != primary_language
        )
        return cls(
            primary_language=primary_language,
            secondary_languages=tuple(ordered),
            decimal_format=decimal_format or DecimalFormat(),
        )

    @property
    def fallback_languages(self) -> tuple[str, ...]:
        """All languages in lookup order, primary first."""
        return (self.primary_language, *self.secondary_languages)
