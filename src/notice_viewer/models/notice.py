"""Notice document and metadata extraction.

A NoticeDocument wraps the raw XML of one eForms notice together with the
metadata that drives rendering:
- SDK version (cbc:CustomizationID, exactly one occurrence)
- notice subtype (cbc:SubTypeCode classified with listName="notice-subtype")
- primary and secondary notice languages
"""

import base64
import binascii
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from lxml import etree

from notice_viewer.exceptions import MetadataExtractionError
from notice_viewer.models.languages import to_two_letter
from notice_viewer.models.options import DecimalFormat, TemplateOptions

logger = logging.getLogger(__name__)

# UBL and eForms extension namespaces
NAMESPACES: dict[str, str] = {
    "cbc": "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2",
    "cac": "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2",
    "ext": "urn:oasis:names:specification:ubl:schema:xsd:CommonExtensionComponents-2",
    "efext": "http://data.europa.eu/p27/eforms-ubl-extensions/1",
    "efac": "http://data.europa.eu/p27/eforms-ubl-extension-aggregate-components/1",
    "efbc": "http://data.europa.eu/p27/eforms-ubl-extension-basic-components/1",
}

SUBTYPE_LIST_NAME = "notice-subtype"

_CUSTOMIZATION_ID = f"{{{NAMESPACES['cbc']}}}CustomizationID"
_SUB_TYPE_CODE = f"{{{NAMESPACES['cbc']}}}SubTypeCode"


def secure_parser() -> etree.XMLParser:
    """Create an XML parser that never loads DTDs, entities or network resources."""
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False)


def _text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


def extract_sdk_version(root: etree._Element) -> str:
    """Return the SDK version declared by the notice.

    Raises:
        MetadataExtractionError: If there is not exactly one cbc:CustomizationID
    """
    nodes = list(root.iter(_CUSTOMIZATION_ID))
    if len(nodes) != 1:
        raise MetadataExtractionError(
            "SDK version",
            f"expected exactly one cbc:CustomizationID, found {len(nodes)}",
        )
    version = _text(nodes[0])
    if not version:
        raise MetadataExtractionError("SDK version", "cbc:CustomizationID is empty")
    return version


def extract_subtype(root: etree._Element) -> str:
    """Return the notice subtype code.

    Only cbc:SubTypeCode elements with listName="notice-subtype" count;
    the first one wins.

    Raises:
        MetadataExtractionError: If no classified cbc:SubTypeCode is present
    """
    for node in root.iter(_SUB_TYPE_CODE):
        if node.get("listName") == SUBTYPE_LIST_NAME:
            subtype = _text(node)
            if subtype:
                return subtype
    raise MetadataExtractionError(
        "notice subtype",
        f'no cbc:SubTypeCode with listName="{SUBTYPE_LIST_NAME}"',
    )


def extract_languages(root: etree._Element) -> tuple[str | None, tuple[str, ...]]:
    """Return the primary and additional notice languages as two letter codes."""
    primary_node = root.find("cbc:NoticeLanguageCode", NAMESPACES)
    primary = None
    if primary_node is not None and _text(primary_node):
        primary = to_two_letter(_text(primary_node))

    secondary = tuple(
        to_two_letter(_text(node))
        for node in root.findall("cac:AdditionalNoticeLanguage/cbc:ID", NAMESPACES)
        if _text(node)
    )
    return primary, secondary


@dataclass(frozen=True)
class NoticeDocument:
    """Immutable notice XML plus the metadata derived from it.

    Attributes:
        content: Raw notice XML bytes
        sdk_version: SDK version as declared (stripped)
        subtype: Notice subtype code as declared (stripped)
        root: Parsed notice element the metadata was read from
        primary_language: Notice language (two letter code) if declared
        secondary_languages: Additional notice languages, in document order
    """

    content: bytes
    sdk_version: str
    subtype: str
    root: etree._Element = field(repr=False, compare=False)
    primary_language: str | None = None
    secondary_languages: tuple[str, ...] = ()

    @classmethod
    def from_xml(cls, content: bytes | str) -> "NoticeDocument":
        """Parse notice XML and extract its metadata.

        Raises:
            MetadataExtractionError: If the XML is malformed or required fields are missing
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        try:
            root = etree.fromstring(content, secure_parser())
        except etree.XMLSyntaxError as e:
            raise MetadataExtractionError("notice", f"malformed XML: {e}") from e

        sdk_version = extract_sdk_version(root)
        subtype = extract_subtype(root)
        primary, secondary = extract_languages(root)

        logger.debug(
            "Notice metadata: sdk_version=%s, subtype=%s, languages=%s",
            sdk_version,
            subtype,
            [primary, *secondary],
        )

        return cls(
            content=content,
            sdk_version=sdk_version,
            subtype=subtype,
            primary_language=primary,
            secondary_languages=secondary,
            root=root,
        )

    @classmethod
    def from_base64(cls, payload: str) -> "NoticeDocument":
        """Decode a base64 payload and parse it as notice XML.

        Raises:
            ValueError: If the payload is not valid base64
        """
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Notice payload is not valid base64: {e}") from e
        return cls.from_xml(content)

    @property
    def tree(self) -> etree._ElementTree:
        """Element tree of the notice, for transformation."""
        return self.root.getroottree()

    def template_options(
        self,
        language: str | None = None,
        decimal_format: DecimalFormat | None = None,
        default_language: str = "en",
    ) -> TemplateOptions:
        """Derive the languages to render this notice with.

        A requested language becomes the primary language and the notice's own
        language is demoted to the first fallback. Without a request the
        notice's language is used (or default_language if it declares none).

        Args:
            language: Requested language (two or three letter code)
            decimal_format: Numeric formatting symbols
            default_language: Language used when neither is available
        """
        fallbacks: Iterable[str]
        if language:
            primary = to_two_letter(language)
            fallbacks = [
                *([self.primary_language] if self.primary_language else []),
                *self.secondary_languages,
            ]
        else:
            primary = self.primary_language or default_language
            fallbacks = self.secondary_languages

        return TemplateOptions.create(primary, fallbacks, decimal_format)
