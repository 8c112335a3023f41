"""Stylesheet compilation with caching.

A cached stylesheet is reused if and only if it exists and no rebuild is
forced. Otherwise the view template is translated and the result replaces
the cached artifact.
"""

import logging
from pathlib import Path

from notice_viewer.models.options import TemplateOptions
from notice_viewer.translator import TemplateTranslator
from notice_viewer.xsl.cache import ArtifactCache

logger = logging.getLogger(__name__)


class XslGenerator:
    """Compiles view templates to XSL through an ArtifactCache."""

    def __init__(self, cache: ArtifactCache, translator: TemplateTranslator) -> None:
        """Initialize the generator.

        Args:
            cache: Artifact cache (shared by file and string generation)
            translator: View template translator
        """
        self.cache = cache
        self.translator = translator

    def generate_file(
        self,
        sdk_version: str,
        view_id: str,
        template_path: Path,
        options: TemplateOptions,
        force_build: bool = False,
    ) -> Path:
        """Return the compiled stylesheet for (sdk_version, view_id).

        Args:
            sdk_version: SDK version of the template
            view_id: View identifier
            template_path: View template source
            options: Translation options
            force_build: Translate even if a cached stylesheet exists

        Returns:
            Path to the stylesheet

        Raises:
            FileNotFoundError: If template_path does not exist
        """
        with self.cache.lock(sdk_version, view_id):
            if force_build:
                logger.debug("Forced rebuild of XSL for view %s (SDK %s)", view_id, sdk_version)
            else:
                cached = self.cache.get(sdk_version, view_id)
                if cached is not None:
                    logger.debug("Using cached XSL file: %s", cached)
                    return cached

            if not template_path.is_file():
                raise FileNotFoundError(f"View template not found: {template_path}")

            logger.debug("Starting XSL generation using the view template at [%s]", template_path)
            translation = self.translator.translate(template_path, sdk_version, options)
            path = self.cache.put(sdk_version, view_id, translation)

        logger.info("Created XSL file: %s", path)
        return path

    def generate_string(
        self,
        sdk_version: str,
        view_id: str,
        template_path: Path,
        options: TemplateOptions,
        force_build: bool = False,
    ) -> str:
        """Return the compiled stylesheet source, persisting it in the cache."""
        path = self.generate_file(sdk_version, view_id, template_path, options, force_build)
        return path.read_text(encoding="utf-8")
