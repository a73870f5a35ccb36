"""Local filesystem storage engine.

This module stores files under the configured root directory.
Stored files stay plain sanitized handles so URLs resolve from their path.
"""

from __future__ import annotations

from core.logging_config import get_logger
from files.sanitized_file import SanitizedFile
from store.base import Storage

_LOGGER = get_logger(__name__)


class FileStorage(Storage):
    """Store files below ``config.root / uploader.store_dir()``."""

    def store(self, file: SanitizedFile) -> SanitizedFile:
        """Copy or move a cached file to its store path.

        Args:
            file: Cached file handle.

        Returns:
            Handle on the stored file.
        """
        target = self._local_path(self.uploader.store_path())
        if self.uploader.move_to_store():
            stored = file.move_to(target)
        else:
            stored = file.copy_to(target)
        _LOGGER.debug("file_written", path=str(target), moved=self.uploader.move_to_store())
        return stored

    def retrieve(self, identifier: str) -> SanitizedFile:
        """Return a handle on the stored file for an identifier.

        Args:
            identifier: Identifier persisted by the host.

        Returns:
            Handle on the stored path; it may not exist.
        """
        return SanitizedFile(self._local_path(self.uploader.store_path(identifier)))
