"""Notice rendering facade.

NoticeViewer ties the pipeline together for one request:

1. Read SDK version, subtype and languages from the notice
2. Locate the view template (view id defaults to the subtype)
3. Compile it to XSL, or reuse the cached stylesheet
4. Apply the stylesheet with a resolver serving label tables by language
"""

import logging
from pathlib import Path

from notice_viewer.config import ViewerConfig
from notice_viewer.models.notice import NoticeDocument
from notice_viewer.models.options import TemplateOptions
from notice_viewer.sdk import SdkResources
from notice_viewer.templates import XsltRenderer, create_environment
from notice_viewer.translator import TemplateTranslator, ViewTemplateTranslator
from notice_viewer.xsl import (
    ArtifactCache,
    TranslationResolver,
    XslGenerator,
    XslTransformer,
)

logger = logging.getLogger(__name__)


class NoticeViewer:
    """Renders notices to HTML.

    Usage:
        viewer = NoticeViewer(load_config())
        notice = NoticeDocument.from_xml(xml_bytes)
        html = viewer.generate_html_string(notice, language="fr")
    """

    def __init__(
        self,
        config: ViewerConfig | None = None,
        translator: TemplateTranslator | None = None,
        cache: ArtifactCache | None = None,
        transformer: XslTransformer | None = None,
    ) -> None:
        """Initialize the viewer.

        Args:
            config: Viewer configuration (defaults if None)
            translator: View template translator (ViewTemplateTranslator if None)
            cache: Stylesheet cache (rooted at output.xsl_root if None)
            transformer: XSLT runner (configured from transform settings if None)
        """
        self.config = config or ViewerConfig()
        self.sdk = SdkResources(Path(self.config.sdk.root), self.config.sdk.template_extension)

        if translator is None:
            translator = self._default_translator()

        self.generator = XslGenerator(
            cache or ArtifactCache(Path(self.config.output.xsl_root)),
            translator,
        )
        self.transformer = transformer or XslTransformer(self.config.transform)

    def _default_translator(self) -> ViewTemplateTranslator:
        templates = self.config.templates
        environment = create_environment(Path(templates.root) if templates.root else None)

        def renderer_factory(options: TemplateOptions) -> XsltRenderer:
            return XsltRenderer(
                options,
                environment=environment,
                escape_free_text=templates.escape_free_text,
            )

        return ViewTemplateTranslator(renderer_factory)

    def generate_xsl_file(
        self,
        sdk_version: str,
        view_id: str,
        language: str | None = None,
        force_build: bool = False,
    ) -> Path:
        """Compile the view template of view_id without rendering a notice.

        Raises:
            TemplateNotFoundError: If no view template exists
        """
        options = TemplateOptions.create(
            language or self.config.default_language,
            decimal_format=self.config.translator.decimal_format,
        )
        template_path = self.sdk.view_template_path(sdk_version, view_id)
        return self.generator.generate_file(
            sdk_version, view_id, template_path, options, force_build
        )

    def generate_html_string(
        self,
        notice: NoticeDocument,
        language: str | None = None,
        view_id: str | None = None,
        force_build: bool = False,
    ) -> str:
        """Render a notice and return the HTML as text."""
        xsl_path, options, _ = self._compile(notice, language, view_id, force_build)
        html = self.transformer.run(
            xsl_path,
            notice,
            self._parameters(options),
            self._resolver(notice, options, xsl_path),
        )
        return html.decode(self.config.transform.encoding)

    def generate_html_file(
        self,
        notice: NoticeDocument,
        language: str | None = None,
        view_id: str | None = None,
        output_path: Path | None = None,
        force_build: bool = False,
    ) -> Path:
        """Render a notice to a file.

        Args:
            notice: Notice to render
            language: Requested language (notice language if None)
            view_id: View to render (notice subtype if None)
            output_path: Target file (default: <html root>/<view id>-<language>.html)
            force_build: Recompile the stylesheet even if cached

        Returns:
            Path to the HTML file
        """
        xsl_path, options, resolved_view_id = self._compile(notice, language, view_id, force_build)
        if output_path is None:
            output_path = self.default_output_path(resolved_view_id, options.primary_language)

        return self.transformer.run_to_file(
            xsl_path,
            notice,
            self._parameters(options),
            self._resolver(notice, options, xsl_path),
            output_path,
        )

    def default_output_path(self, view_id: str, language: str) -> Path:
        return Path(self.config.output.html_root) / f"{view_id}-{language}.html"

    def _compile(
        self,
        notice: NoticeDocument,
        language: str | None,
        view_id: str | None,
        force_build: bool,
    ) -> tuple[Path, TemplateOptions, str]:
        view_id = view_id or notice.subtype
        options = notice.template_options(
            language,
            decimal_format=self.config.translator.decimal_format,
            default_language=self.config.default_language,
        )
        logger.info(
            "Rendering view %s (SDK %s) in %s",
            view_id,
            notice.sdk_version,
            ", ".join(options.fallback_languages),
        )

        template_path = self.sdk.view_template_path(notice.sdk_version, view_id)
        xsl_path = self.generator.generate_file(
            notice.sdk_version, view_id, template_path, options, force_build
        )
        return xsl_path, options, view_id

    def _parameters(self, options: TemplateOptions) -> dict[str, str]:
        return {"language": options.primary_language}

    def _resolver(
        self,
        notice: NoticeDocument,
        options: TemplateOptions,
        xsl_path: Path,
    ) -> TranslationResolver:
        return TranslationResolver(
            self.sdk.translations_dir(notice.sdk_version),
            options.fallback_languages,
            artifact_dir=xsl_path.parent,
        )
