"""Storage engine contract.

This module defines the interface every storage engine implements.
Engines are bound to one uploader instance and address files through it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from files.sanitized_file import SanitizedFile


class Storage:
    """Base storage engine bound to a single uploader instance."""

    def __init__(self, uploader: Any) -> None:
        """Bind the engine to an uploader.

        Args:
            uploader: Uploader whose paths and config address stored files.
        """
        self.uploader = uploader

    def identifier(self) -> str | None:
        """Return the identifier the host persists for the stored file."""
        return self.uploader.filename

    def store(self, file: SanitizedFile) -> Any:
        """Commit a cached file and return the stored file handle."""
        raise NotImplementedError(f"{type(self).__name__} does not implement store()")

    def retrieve(self, identifier: str) -> Any:
        """Return a handle on a previously stored file."""
        raise NotImplementedError(f"{type(self).__name__} does not implement retrieve()")

    def _local_path(self, relative_path: str) -> Path:
        return self.uploader.config.root / relative_path
