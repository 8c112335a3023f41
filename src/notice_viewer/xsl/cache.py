"""On-disk cache of compiled stylesheets.

Artifacts live at <root>/<sdk version dir>/<view id>.xsl. The location depends
on (sdk version, view id) only: two templates compiled under the same key
overwrite each other.
"""

import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from notice_viewer.sdk import version_directory

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = ".xsl"


class ArtifactCache:
    """Stylesheet cache keyed by (sdk version, view id).

    Writes replace the artifact atomically (temporary file + rename). lock()
    serialises compilations of one key within the process; separate processes
    sharing a root are not coordinated (last writer wins).
    """

    def __init__(self, root: Path) -> None:
        """Initialize the cache.

        Args:
            root: Directory holding compiled stylesheets
        """
        self.root = root
        self._locks: dict[tuple[str, str], threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, sdk_version: str, view_id: str) -> Path:
        """Deterministic artifact location for a key."""
        return self.root / version_directory(sdk_version) / f"{view_id}{ARTIFACT_SUFFIX}"

    def get(self, sdk_version: str, view_id: str) -> Path | None:
        """Return the cached artifact, or None if absent."""
        path = self.path_for(sdk_version, view_id)
        return path if path.is_file() else None

    def put(self, sdk_version: str, view_id: str, content: str) -> Path:
        """Store content as the artifact for a key, replacing any previous one."""
        path = self.path_for(sdk_version, view_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{view_id}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

        logger.debug("Stored artifact %s (%d characters)", path, len(content))
        return path

    def invalidate(self, sdk_version: str, view_id: str) -> bool:
        """Remove the artifact for a key.

        Returns:
            True if an artifact was removed
        """
        path = self.path_for(sdk_version, view_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("Invalidated artifact %s", path)
        return True

    @contextmanager
    def lock(self, sdk_version: str, view_id: str) -> Iterator[None]:
        """Hold the in-process lock of a key."""
        key = (version_directory(sdk_version), view_id)
        with self._locks_guard:
            key_lock = self._locks.setdefault(key, threading.Lock())
        with key_lock:
            yield
