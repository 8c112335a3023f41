"""Notice Viewer - HTML views of eForms procurement notices.

Notice Viewer renders eForms notices (UBL XML) into human-readable HTML.
A view template is selected by SDK version and notice subtype, translated
into an XSLT stylesheet once per (SDK version, view id), cached on disk and
applied to the notice with language-aware label lookup.

Core principles:
- Compile once: stylesheets are reused until missing or explicitly rebuilt
- Deterministic output: same template and options produce identical bytes
- Explicit resolution: every resource the stylesheet loads goes through a resolver
"""

__version__ = "0.1.0"
__author__ = "Notice Viewer Contributors"
