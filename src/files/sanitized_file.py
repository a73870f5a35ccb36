"""Sanitized file handle.

This module wraps paths, raw bytes, file-like objects, and storage files
behind one handle with a safe filename and copy/move/delete operations.
"""

from __future__ import annotations

import mimetypes
import os
import shutil
from pathlib import Path
from typing import Any

from core.constants import FILENAME_SANITIZE_PATTERN
from core.errors import OffshootCacheError


class SanitizedFile:
    """Uniform handle over an uploaded or cached file.

    A handle is either backed by a path on disk or by in-memory bytes.
    Storage file objects exposing ``read()`` and ``filename`` are read
    once and kept in memory.
    """

    def __init__(
        self,
        source: Any = None,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> None:
        """Wrap a file source.

        Args:
            source: Path, bytes, file-like object, storage file, or handle.
            filename: Optional filename overriding the source's own name.
            content_type: Optional explicit content type.
        """
        self._path: Path | None = None
        self._content: bytes | None = None
        self._stream: Any = None
        self._content_type = content_type
        self._original_filename = filename
        self._load_source(source)

    def _load_source(self, source: Any) -> None:
        if source is None:
            return
        if isinstance(source, SanitizedFile):
            self._path = source._path
            if source._path is None and source.exists:
                self._content = source._read_memory()
            self._content_type = self._content_type or source._content_type
            self._original_filename = self._original_filename or source.original_filename
            return
        if isinstance(source, (str, os.PathLike)):
            self._path = Path(source)
            return
        if isinstance(source, (bytes, bytearray)):
            self._content = bytes(source)
            return
        source_path = getattr(source, "path", None)
        if isinstance(source_path, (str, os.PathLike)) and Path(source_path).is_file():
            self._path = Path(source_path)
        elif hasattr(source, "read"):
            self._stream = source
        else:
            raise OffshootCacheError(
                f"Unsupported file source of type {type(source).__name__}. "
                "Pass a path, bytes, or an object with read()."
            )
        if self._original_filename is None:
            self._original_filename = _source_filename(source)

    @property
    def original_filename(self) -> str | None:
        """Filename as given by the source, before sanitizing."""
        if self._original_filename:
            return self._original_filename
        if self._path is not None:
            return self._path.name
        return None

    @property
    def filename(self) -> str | None:
        """Sanitized basename safe for cache and store paths."""
        original = self.original_filename
        if not original:
            return None
        return sanitize_filename(original)

    @property
    def path(self) -> str | None:
        """Absolute path when the file lives on disk."""
        if self._path is None:
            return None
        return str(self._path.expanduser().resolve())

    @property
    def exists(self) -> bool:
        if self._path is not None:
            return self._path.exists()
        return self._content is not None or self._stream is not None

    @property
    def size(self) -> int:
        if self._path is not None:
            return self._path.stat().st_size if self._path.exists() else 0
        return len(self._read_memory())

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to cache."""
        if self._path is not None:
            return not self._path.is_file() or self.size == 0
        if self._stream is not None:
            return False
        return not self._content

    @property
    def extension(self) -> str | None:
        filename = self.filename
        if not filename or "." not in filename:
            return None
        return filename.rsplit(".", 1)[-1].lower()

    @property
    def content_type(self) -> str | None:
        if self._content_type:
            return self._content_type
        filename = self.filename
        if not filename:
            return None
        guessed, _ = mimetypes.guess_type(filename)
        return guessed

    def read(self) -> bytes:
        """Return the full file content."""
        if self._path is not None:
            return self._path.read_bytes()
        return self._read_memory()

    def copy_to(self, destination: str | Path) -> "SanitizedFile":
        """Copy content to a destination path.

        Args:
            destination: Target file path; parent directories are created.

        Returns:
            Handle on the copied file.
        """
        target = Path(destination)
        target.parent.mkdir(parents=True, exist_ok=True)
        if self._path is not None:
            shutil.copyfile(self._path, target)
        else:
            target.write_bytes(self._read_memory())
        return SanitizedFile(target, content_type=self._content_type)

    def move_to(self, destination: str | Path) -> "SanitizedFile":
        """Move content to a destination path.

        In-memory sources are written out. This handle follows the move.

        Args:
            destination: Target file path; parent directories are created.

        Returns:
            Handle on the moved file.
        """
        target = Path(destination)
        target.parent.mkdir(parents=True, exist_ok=True)
        if self._path is not None:
            shutil.move(str(self._path), str(target))
        else:
            target.write_bytes(self._read_memory())
        self._path = target
        self._content = None
        self._stream = None
        return SanitizedFile(target, content_type=self._content_type)

    def delete(self) -> None:
        """Delete the on-disk file if present."""
        if self._path is not None and self._path.exists():
            self._path.unlink()

    def _read_memory(self) -> bytes:
        if self._content is None and self._stream is not None:
            data = self._stream.read()
            self._content = data.encode("utf-8") if isinstance(data, str) else bytes(data)
            self._stream = None
        return self._content or b""

    def __repr__(self) -> str:
        location = self.path or "<memory>"
        return f"SanitizedFile({location!r}, filename={self.filename!r})"


def sanitize_filename(name: str) -> str:
    """Strip directories and replace unsafe filename characters.

    Args:
        name: Raw filename, possibly with a Windows or POSIX directory part.

    Returns:
        Basename with characters outside ``[A-Za-z0-9._+-]`` replaced by ``_``.
    """
    basename = name.replace("\\", "/").rsplit("/", 1)[-1]
    sanitized = FILENAME_SANITIZE_PATTERN.sub("_", basename)
    if sanitized.strip(".") == "":
        return "_" + sanitized
    return sanitized


def _source_filename(source: Any) -> str | None:
    for attribute in ("original_filename", "filename", "name"):
        value = getattr(source, attribute, None)
        if isinstance(value, str) and value:
            return os.path.basename(value)
    return None
