"""View template translation (template source -> XSL).

TemplateTranslator is the seam between the compiler and a template language.
ViewTemplateTranslator implements a small line-oriented view template format:

    // comment
    {/*} #{notice|name} ${cbc:ID}
        {cbc:IssueDate} #{field|name|BT-05-notice}: ${.}
        {cac:ProcurementProject} #[concat('code|name|', cbc:ProcurementTypeCode)]

Each line is a block: a context path in braces followed by content. Indented
lines are child blocks evaluated within their parent's context. Content tokens:
- ${path}         value of path
- #{key}          label looked up by key
- #[expression]   label looked up by the value of expression
- anything else   free text
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from notice_viewer.exceptions import TranslationError
from notice_viewer.models.options import TemplateOptions
from notice_viewer.templates.renderer import XsltRenderer

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"

# opening token -> (closing delimiter, token kind)
_TOKENS = {
    "${": ("}", "value"),
    "#{": ("}", "label"),
    "#[": ("]", "dynamic-label"),
}


class TemplateTranslator(ABC):
    """Translates a view template file into an XSL stylesheet."""

    @abstractmethod
    def translate(
        self,
        template_path: Path,
        sdk_version: str,
        options: TemplateOptions,
    ) -> str:
        """Translate a view template.

        Args:
            template_path: View template source file
            sdk_version: SDK version the template belongs to
            options: Translation options

        Returns:
            XSL stylesheet source

        Raises:
            FileNotFoundError: If template_path does not exist
        """


@dataclass
class Block:
    """One template line and its nested lines."""

    line_number: int
    indent: int
    context: str
    content: str
    children: list["Block"] = field(default_factory=list)
    number: str = ""

    @property
    def name(self) -> str:
        return "block-" + self.number.replace(".", "-")


def _scan_delimited(text: str, start: int, closing: str) -> int:
    """Return the index of the delimiter closing the token opened before start.

    Nested brackets of the same kind and quoted strings are skipped.
    Returns -1 if the token is not closed.
    """
    opening = "{" if closing == "}" else "["
    depth = 0
    quote: str | None = None
    for index in range(start, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == opening:
            depth += 1
        elif char == closing:
            if depth == 0:
                return index
            depth -= 1
    return -1


def tokenize(content: str) -> Iterator[tuple[str, str]]:
    """Split block content into (kind, text) tokens.

    Raises:
        ValueError: If a token is not closed
    """
    text_start = 0
    index = 0
    while index < len(content):
        opener = content[index : index + 2]
        if opener not in _TOKENS:
            index += 1
            continue

        closing, kind = _TOKENS[opener]
        end = _scan_delimited(content, index + 2, closing)
        if end < 0:
            raise ValueError(f"unclosed '{opener}' at column {index + 1}")

        if index > text_start:
            yield "text", content[text_start:index]
        yield kind, content[index + 2 : end].strip()
        index = text_start = end + 1

    if text_start < len(content):
        yield "text", content[text_start:]


class ViewTemplateTranslator(TemplateTranslator):
    """Translates line-oriented view templates with an XsltRenderer session."""

    def __init__(
        self,
        renderer_factory: Callable[[TemplateOptions], XsltRenderer] | None = None,
    ) -> None:
        """Initialize the translator.

        Args:
            renderer_factory: Creates the renderer for one translation
                (defaults to XsltRenderer with bundled templates)
        """
        self._renderer_factory = renderer_factory or (lambda options: XsltRenderer(options))

    def translate(
        self,
        template_path: Path,
        sdk_version: str,
        options: TemplateOptions,
    ) -> str:
        if not template_path.is_file():
            raise FileNotFoundError(f"View template not found: {template_path}")

        logger.debug("Translating view template %s (SDK %s)", template_path, sdk_version)
        source = template_path.read_text(encoding="utf-8")
        blocks = self.parse(source, template_path)
        renderer = self._renderer_factory(options)

        body = "\n".join(
            renderer.render_call_template(block.name, block.context) for block in blocks
        )
        templates = [
            self._render_block(renderer, block, template_path) for block in self._walk(blocks)
        ]
        return renderer.render_file(body, templates)

    def parse(self, source: str, template_path: Path) -> list[Block]:
        """Parse view template source into numbered top-level blocks.

        Raises:
            TranslationError: On malformed lines or inconsistent indentation
        """
        roots: list[Block] = []
        stack: list[Block] = []

        for line_number, raw_line in enumerate(source.splitlines(), start=1):
            stripped = raw_line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                continue

            leading = raw_line[: len(raw_line) - len(raw_line.lstrip())]
            if "\t" in leading:
                raise TranslationError(
                    template_path, line_number, "tabs are not allowed in indentation"
                )

            indent = len(leading)
            block = self._parse_line(stripped, indent, line_number, template_path)

            while stack and stack[-1].indent >= indent:
                popped = stack.pop()
                if popped.indent > indent and (not stack or stack[-1].indent < indent):
                    raise TranslationError(
                        template_path, line_number, "indentation does not match any outer block"
                    )

            siblings = stack[-1].children if stack else roots
            parent_number = stack[-1].number if stack else ""
            position = str(len(siblings) + 1)
            block.number = f"{parent_number}.{position}" if parent_number else position
            siblings.append(block)
            stack.append(block)

        return roots

    def _parse_line(self, line: str, indent: int, line_number: int, template_path: Path) -> Block:
        if not line.startswith("{"):
            raise TranslationError(template_path, line_number, "expected '{context}' at start of line")

        end = _scan_delimited(line, 1, "}")
        if end < 0:
            raise TranslationError(template_path, line_number, "unclosed context '{'")

        context = line[1:end].strip()
        if not context:
            raise TranslationError(template_path, line_number, "empty context path")

        return Block(
            line_number=line_number,
            indent=indent,
            context=context,
            content=line[end + 1 :].strip(),
        )

    def _walk(self, blocks: list[Block]) -> Iterator[Block]:
        for block in blocks:
            yield block
            yield from self._walk(block.children)

    def _render_block(self, renderer: XsltRenderer, block: Block, template_path: Path) -> str:
        try:
            tokens = list(tokenize(block.content))
        except ValueError as e:
            raise TranslationError(template_path, block.line_number, str(e)) from e

        fragments: list[str] = []
        for kind, text in tokens:
            if kind == "value":
                fragments.append(renderer.render_value_reference(text))
            elif kind == "label":
                fragments.append(renderer.render_label_from_key(text))
            elif kind == "dynamic-label":
                fragments.append(renderer.render_label_from_expression(text))
            else:
                fragments.append(renderer.render_free_text(text))

        fragments.extend(
            renderer.render_call_template(child.name, child.context) for child in block.children
        )
        return renderer.render_template(block.name, block.number, "\n".join(fragments))
