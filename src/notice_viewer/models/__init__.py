"""Notice Viewer data models.

- NoticeDocument: Notice XML plus extracted SDK version, subtype and languages
- TemplateOptions: Languages and number formatting for one render request
- DecimalFormat: Numeric formatting symbols
"""

from notice_viewer.models.notice import NAMESPACES, NoticeDocument
from notice_viewer.models.options import DecimalFormat, TemplateOptions

__all__ = [
    "NAMESPACES",
    "DecimalFormat",
    "NoticeDocument",
    "TemplateOptions",
]
