"""Error taxonomy for notice rendering.

- MetadataExtractionError: required notice fields absent or ambiguous
- TemplateNotFoundError: no view template for a view id / SDK version
- TranslationError: view template could not be translated to XSL
- TransformationError: XSLT engine failure or unresolved resource

I/O failures surface as plain OSError.
"""

from pathlib import Path


class NoticeViewerError(Exception):
    """Base class for all notice viewer errors."""


class MetadataExtractionError(NoticeViewerError):
    """Raised when version or subtype metadata cannot be read from a notice."""

    def __init__(self, field_name: str, message: str) -> None:
        self.field_name = field_name
        super().__init__(f"Cannot extract {field_name} from notice: {message}")


class TemplateNotFoundError(NoticeViewerError):
    """Raised when no view template exists for a view id and SDK version."""

    def __init__(self, view_id: str, sdk_version: str, path: Path) -> None:
        self.view_id = view_id
        self.sdk_version = sdk_version
        self.path = path
        super().__init__(
            f"No view template for view '{view_id}' (SDK {sdk_version}): {path}"
        )


class TranslationError(NoticeViewerError):
    """Raised when a view template contains a syntax error."""

    def __init__(self, template_path: Path, line_number: int, message: str) -> None:
        self.template_path = template_path
        self.line_number = line_number
        super().__init__(f"{template_path}:{line_number}: {message}")


class TransformationError(NoticeViewerError):
    """Raised when applying a stylesheet to a notice fails."""

    def __init__(
        self,
        xsl_path: Path,
        message: str,
        unresolved: list[str] | None = None,
    ) -> None:
        self.xsl_path = xsl_path
        self.unresolved = unresolved or []
        full_message = f"Transformation failed for {xsl_path}: {message}"
        if self.unresolved:
            full_message += f" (unresolved: {', '.join(self.unresolved)})"
        super().__init__(full_message)
