"""XSL compilation, caching and transformation.

- ArtifactCache: compiled stylesheets on disk, keyed by (SDK version, view id)
- XslGenerator: translate-or-reuse compilation
- TranslationResolver: label tables and included stylesheets
- XslTransformer: applies a stylesheet to a notice
"""

from notice_viewer.xsl.cache import ArtifactCache
from notice_viewer.xsl.generator import XslGenerator
from notice_viewer.xsl.resolver import ResourceResolver, TranslationResolver
from notice_viewer.xsl.runner import XslTransformer

__all__ = [
    "ArtifactCache",
    "ResourceResolver",
    "TranslationResolver",
    "XslGenerator",
    "XslTransformer",
]
