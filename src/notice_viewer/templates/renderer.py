"""XSL rendering primitives.

XsltRenderer turns the structural requests of a view template translator
(value reference, label, free text, named block, block call) into XSL
fragments and assembles them into one stylesheet. Fragments are Jinja2
macros with XML autoescaping, so every interpolated path or key yields
well-formed markup.

One renderer instance is one rendering session: the counter naming the
variables of computed labels is owned by the instance.
"""

import itertools
import logging
from collections.abc import Sequence
from pathlib import Path

from jinja2 import Environment

from notice_viewer.models.notice import NAMESPACES
from notice_viewer.models.options import TemplateOptions
from notice_viewer.templates.provision import (
    FRAGMENTS_TEMPLATE,
    STYLESHEET_TEMPLATE,
    create_environment,
)

logger = logging.getLogger(__name__)

# Logical id of the label table; the resolver picks the language at run time
LABELS_RESOURCE = "labels.xml"
DECIMAL_FORMAT_NAME = "notice"


class XsltRenderer:
    """Renders view template structures to XSL.

    Usage:
        renderer = XsltRenderer(options)
        body = renderer.render_call_template("block-1", "/*")
        block = renderer.render_template("block-1", "1", renderer.render_value_reference("cbc:ID"))
        xsl = renderer.render_file(body, [block])
    """

    def __init__(
        self,
        options: TemplateOptions | None = None,
        environment: Environment | None = None,
        escape_free_text: bool = True,
        templates_root: Path | None = None,
    ) -> None:
        """Initialize a rendering session.

        Args:
            options: Translation options (decimal format is declared in the stylesheet)
            environment: Jinja2 environment; created from templates_root if None
            escape_free_text: XML-escape free text (False inserts it verbatim)
            templates_root: External templates directory for a new environment
        """
        self.options = options or TemplateOptions(primary_language="en")
        self.escape_free_text = escape_free_text
        self._env = environment or create_environment(templates_root)
        self._fragments = self._env.get_template(FRAGMENTS_TEMPLATE).module
        self._label_counter = itertools.count(1)

    def _fragment(self, macro: str, *args: object) -> str:
        return str(getattr(self._fragments, macro)(*args)).strip()

    def render_file(self, body: str, templates: Sequence[str] = ()) -> str:
        """Assemble the complete stylesheet.

        Args:
            body: Fragment placed in the root template's HTML body
            templates: Named blocks, emitted after the root template in order

        Returns:
            XSL stylesheet source
        """
        stylesheet = self._env.get_template(STYLESHEET_TEMPLATE).render(
            namespaces=NAMESPACES,
            decimal_format=self.options.decimal_format,
            decimal_format_name=DECIMAL_FORMAT_NAME,
            labels_resource=LABELS_RESOURCE,
            body=body,
            templates=list(templates),
        )
        logger.debug("Rendered stylesheet with %d named templates", len(templates))
        return stylesheet

    def render_value_reference(self, path: str) -> str:
        """Output the value of path, styled as a value."""
        return self._fragment("value_reference", path)

    def render_label_from_key(self, key: str) -> str:
        """Output the label for key, or a "Label not found" placeholder."""
        return self._fragment("label_from_key", key)

    def render_label_from_expression(self, expression: str) -> str:
        """Output the label whose key is computed by expression.

        The key is bound to a variable named label<N>, N unique within this session.
        """
        name = f"label{next(self._label_counter)}"
        return self._fragment("label_from_expression", name, expression)

    def render_free_text(self, text: str) -> str:
        """Output literal text."""
        return self._fragment("free_text", text, self.escape_free_text)

    def render_template(self, name: str, number: str, content: str) -> str:
        """Define a named block that prints its number before content."""
        return self._fragment("named_template", name, number, content)

    def render_call_template(self, name: str, context: str) -> str:
        """Invoke the named block once for every node selected by context."""
        return self._fragment("call_template", name, context)
