"""Resource resolution during transformation.

Stylesheets load resources by logical id: the label table ("labels.xml") and
any stylesheet they include. A ResourceResolver maps such ids to content; it
is created per transformation and holds no global state.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

from lxml import etree

from notice_viewer.models.notice import secure_parser
from notice_viewer.templates.renderer import LABELS_RESOURCE

logger = logging.getLogger(__name__)

# Resolved content: in-memory XML or a file to read
Resource = bytes | Path


def resource_name(logical_id: str) -> str:
    """Return the file name part of a resource URL or path."""
    return PurePosixPath(unquote(urlparse(logical_id).path)).name


class ResourceResolver(ABC):
    """Maps logical resource ids requested by a stylesheet to content."""

    @abstractmethod
    def resolve(self, logical_id: str, base_url: str | None) -> Resource | None:
        """Resolve a resource.

        Args:
            logical_id: Resource URL as requested (after base URL resolution)
            base_url: URL of the stylesheet being applied

        Returns:
            XML bytes, a file path, or None if the resource is unknown
        """


def read_properties(path: Path) -> Iterator[tuple[str, str]]:
    """Yield (key, text) pairs of a properties XML file.

    Format: <properties><entry key="...">text</entry>...</properties>
    """
    root = etree.parse(str(path), secure_parser()).getroot()
    for entry in root.iter("entry"):
        key = entry.get("key")
        if key is not None:
            yield key, "".join(entry.itertext())


class TranslationResolver(ResourceResolver):
    """Serves label tables by language and sibling stylesheets.

    The label table merges every translations/*_<language>.xml file for each
    language in order: the first language that defines a key wins.
    """

    def __init__(
        self,
        translations_dir: Path,
        languages: Sequence[str],
        artifact_dir: Path | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            translations_dir: Directory of properties XML files
            languages: Label languages, most preferred first
            artifact_dir: Directory of stylesheets that may be included
        """
        self.translations_dir = translations_dir
        self.languages = tuple(languages)
        self.artifact_dir = artifact_dir
        self._labels: bytes | None = None

    def resolve(self, logical_id: str, base_url: str | None) -> Resource | None:
        name = resource_name(logical_id)

        if name == LABELS_RESOURCE:
            return self.label_table()

        if self.artifact_dir is not None:
            candidate = self.artifact_dir / name
            if candidate.is_file():
                logger.debug("Resolved %s to %s", logical_id, candidate)
                return candidate

        logger.debug("Cannot resolve %s (base: %s)", logical_id, base_url)
        return None

    def label_table(self) -> bytes | None:
        """Build the merged label table, or None if no language has labels."""
        if self._labels is not None:
            return self._labels

        entries: dict[str, str] = {}
        sources = 0
        for language in self.languages:
            for path in sorted(self.translations_dir.glob(f"*_{language}.xml")):
                sources += 1
                for key, text in read_properties(path):
                    entries.setdefault(key, text)

        if sources == 0:
            logger.warning(
                "No label files for languages %s in %s",
                ", ".join(self.languages),
                self.translations_dir,
            )
            return None

        properties = etree.Element("properties")
        for key, text in entries.items():
            entry = etree.SubElement(properties, "entry", key=key)
            entry.text = text

        logger.debug(
            "Label table: %d entries from %d files (%s)",
            len(entries),
            sources,
            ", ".join(self.languages),
        )
        self._labels = etree.tostring(properties, encoding="UTF-8", xml_declaration=True)
        return self._labels
