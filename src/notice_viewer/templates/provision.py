"""Jinja2 environment for stylesheet generation.

Templates are looked up in an external templates root first, so that
deployments can customise the generated XSL, then in the templates bundled
with the package. The external root is populated with the bundled templates
on first use; existing files are never overwritten.
"""

import logging
from importlib import resources
from pathlib import Path

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    select_autoescape,
)

logger = logging.getLogger(__name__)

STYLESHEET_TEMPLATE = "stylesheet.xsl.j2"
FRAGMENTS_TEMPLATE = "fragments.xsl.j2"
BUNDLED_TEMPLATES = (STYLESHEET_TEMPLATE, FRAGMENTS_TEMPLATE)


def xpath_literal(value: str) -> str:
    """Quote value as an XPath 1.0 string literal.

    XPath 1.0 has no escapes: values holding both quote characters are
    built with concat().
    """
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in value.split("'")) + ")"


def provision_templates(templates_root: Path) -> bool:
    """Copy bundled templates that are missing from templates_root.

    Best effort: failures are logged and reported, never raised.

    Args:
        templates_root: External templates directory

    Returns:
        True if the directory holds every bundled template afterwards
    """
    bundled = resources.files("notice_viewer.templates")
    try:
        templates_root.mkdir(parents=True, exist_ok=True)
        for name in BUNDLED_TEMPLATES:
            target = templates_root / name
            if target.exists():
                continue
            logger.debug("Copying template [package:%s] to [%s]", name, target.resolve())
            target.write_bytes((bundled / name).read_bytes())
    except OSError as e:
        logger.warning("Failed to populate external templates directory [%s]", templates_root)
        logger.debug("The error was: %s", e)
        return False

    return True


def create_environment(templates_root: Path | None = None) -> Environment:
    """Create the Jinja2 environment used by XsltRenderer.

    Args:
        templates_root: Optional external templates directory; bundled
            templates are used alone if it is None or cannot be provisioned

    Returns:
        Configured Jinja2 environment (XML autoescaping enabled)
    """
    loaders: list[BaseLoader] = []
    if templates_root is not None and provision_templates(templates_root):
        logger.debug("Using [%s] as the templates root directory", templates_root)
        loaders.append(FileSystemLoader(templates_root))
    loaders.append(PackageLoader("notice_viewer", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["xsl.j2"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["xpath_literal"] = xpath_literal
    return env
