"""Entry point for running Notice Viewer as a module.

Usage:
    python -m notice_viewer [command] [options]

Example:
    python -m notice_viewer render en "$(base64 -w0 notice.xml)"
    python -m notice_viewer render en --only-xsl --sdk-version 1.8 --view-id 29
"""

from notice_viewer.cli import app

if __name__ == "__main__":
    app()
