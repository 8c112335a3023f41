"""Stylesheet templates and XSL rendering.

Jinja2 templates (stylesheet.xsl.j2, fragments.xsl.j2) define the XSL that
view templates are translated to; XsltRenderer drives them.
"""

from notice_viewer.templates.provision import create_environment, provision_templates
from notice_viewer.templates.renderer import LABELS_RESOURCE, XsltRenderer

__all__ = [
    "LABELS_RESOURCE",
    "XsltRenderer",
    "create_environment",
    "provision_templates",
]
