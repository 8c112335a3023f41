"""Apply compiled stylesheets to notices (lxml / libxslt).

Every resource the stylesheet loads goes through the ResourceResolver given
to the run. A resource the resolver cannot provide fails the whole run.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import unquote, urlparse

from lxml import etree

from notice_viewer.config import TransformConfig
from notice_viewer.exceptions import TransformationError
from notice_viewer.models.notice import NoticeDocument, secure_parser
from notice_viewer.xsl.resolver import ResourceResolver

logger = logging.getLogger(__name__)

ACCESS_CONTROL = etree.XSLTAccessControl(
    read_network=False,
    write_file=False,
    create_dir=False,
    write_network=False,
)


def _url_path(url: str) -> Path | None:
    """Local file path of a plain path or file: URL, else None."""
    parsed = urlparse(url)
    if parsed.scheme not in ("", "file"):
        return None
    return Path(unquote(parsed.path)).resolve()


class _ResolverBridge(etree.Resolver):
    """Adapts a ResourceResolver to lxml's parser resolvers, recording failures.

    The stylesheet itself is loaded through the same parser; requests for it
    are left to lxml so that resolvers only see the resources it references.
    """

    def __init__(self, resolver: ResourceResolver, base_url: str) -> None:
        super().__init__()
        self.resolver = resolver
        self.base_url = base_url
        self.unresolved: list[str] = []

    def resolve(self, system_url, public_id, context):
        if _url_path(system_url) == _url_path(self.base_url):
            return None
        resource = self.resolver.resolve(system_url, self.base_url)
        if resource is None:
            self.unresolved.append(system_url)
            return None
        if isinstance(resource, Path):
            return self.resolve_filename(str(resource), context)
        return self.resolve_string(resource, context, base_url=system_url)


class XslTransformer:
    """Runs one stylesheet over one notice.

    Usage:
        transformer = XslTransformer(TransformConfig(encoding="UTF-8"))
        html = transformer.run(xsl_path, notice, {"language": "en"}, resolver)
    """

    def __init__(self, config: TransformConfig | None = None) -> None:
        """Initialize the transformer.

        Args:
            config: Output encoding and profiling settings
        """
        self.config = config or TransformConfig()

    def run(
        self,
        xsl_path: Path,
        notice: NoticeDocument,
        parameters: Mapping[str, str],
        resolver: ResourceResolver,
    ) -> bytes:
        """Transform a notice and return the serialized HTML.

        Raises:
            TransformationError: If the stylesheet fails or a resource is unresolved
        """
        result = self._apply(xsl_path, notice, parameters, resolver)
        return etree.tostring(
            result,
            method="html",
            encoding=self.config.encoding,
            pretty_print=True,
        )

    def run_to_file(
        self,
        xsl_path: Path,
        notice: NoticeDocument,
        parameters: Mapping[str, str],
        resolver: ResourceResolver,
        output_path: Path,
    ) -> Path:
        """Transform a notice and write the HTML to output_path."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(self.run(xsl_path, notice, parameters, resolver))
        logger.info("Wrote HTML to %s", output_path)
        return output_path

    def _apply(
        self,
        xsl_path: Path,
        notice: NoticeDocument,
        parameters: Mapping[str, str],
        resolver: ResourceResolver,
    ) -> etree._XSLTResultTree:
        xsl_path = xsl_path.resolve()
        bridge = _ResolverBridge(resolver, str(xsl_path))
        parser = secure_parser()
        parser.resolvers.add(bridge)

        try:
            stylesheet = etree.parse(str(xsl_path), parser)
            transform = etree.XSLT(stylesheet, access_control=ACCESS_CONTROL)
        except (OSError, etree.XMLSyntaxError, etree.XSLTParseError) as e:
            raise TransformationError(
                xsl_path, f"cannot load stylesheet: {e}", bridge.unresolved
            ) from e

        xslt_parameters = {
            name: etree.XSLT.strparam(value) for name, value in parameters.items()
        }

        logger.debug("Applying %s with parameters %s", xsl_path, dict(parameters))
        try:
            result = transform(
                notice.tree,
                profile_run=self.config.profile,
                **xslt_parameters,
            )
        except etree.XSLTApplyError as e:
            raise TransformationError(xsl_path, str(e), bridge.unresolved) from e

        if bridge.unresolved:
            raise TransformationError(
                xsl_path, "resources could not be resolved", bridge.unresolved
            )
        if result.getroot() is None:
            raise TransformationError(xsl_path, "transformation produced no output")

        for entry in transform.error_log:
            logger.debug("XSLT: %s", entry)

        if self.config.profile:
            self._write_profile(xsl_path, result)

        return result

    def _write_profile(self, xsl_path: Path, result: etree._XSLTResultTree) -> Path:
        profile_dir = Path(self.config.profile_dir) if self.config.profile_dir else xsl_path.parent
        profile_dir.mkdir(parents=True, exist_ok=True)
        profile_path = profile_dir / f"{xsl_path.stem}-profile.xml"
        profile_path.write_bytes(etree.tostring(result.xslt_profile, pretty_print=True))
        logger.info("Wrote XSLT profile to %s", profile_path)
        return profile_path
