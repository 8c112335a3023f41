"""eForms SDK resource lookup.

The SDK root holds one directory per SDK minor version:

    <sdk root>/
        1.8/
            view-templates/<view id>.efx
            translations/<kind>_<language>.xml
"""

import logging
import re
from pathlib import Path

from notice_viewer.exceptions import TemplateNotFoundError

logger = logging.getLogger(__name__)

VIEW_TEMPLATES_DIR = "view-templates"
TRANSLATIONS_DIR = "translations"

_VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)")


def version_directory(sdk_version: str) -> str:
    """Map a declared SDK version to its directory name.

    "eforms-sdk-1.8.1", "eforms-sdk-1.8" and "1.8" all map to "1.8". Values
    without a major.minor number are returned stripped.
    """
    match = _VERSION_PATTERN.search(sdk_version)
    if match is None:
        return sdk_version.strip()
    return f"{match.group(1)}.{match.group(2)}"


class SdkResources:
    """Locates view templates and translations inside an SDK root."""

    def __init__(self, root: Path, template_extension: str = ".efx") -> None:
        """Initialize SDK resource lookup.

        Args:
            root: SDK root directory
            template_extension: File extension of view templates
        """
        self.root = root
        self.template_extension = template_extension

    def version_root(self, sdk_version: str) -> Path:
        return self.root / version_directory(sdk_version)

    def view_template_path(self, sdk_version: str, view_id: str) -> Path:
        """Return the view template for view_id.

        Raises:
            TemplateNotFoundError: If no such template exists
        """
        path = (
            self.version_root(sdk_version)
            / VIEW_TEMPLATES_DIR
            / f"{view_id}{self.template_extension}"
        )
        if not path.is_file():
            raise TemplateNotFoundError(view_id, sdk_version, path)

        logger.debug("View template for %s (SDK %s): %s", view_id, sdk_version, path)
        return path

    def translations_dir(self, sdk_version: str) -> Path:
        return self.version_root(sdk_version) / TRANSLATIONS_DIR
