"""Unit tests for the local filesystem storage engine."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from core.config import OffshootConfig
from core.errors import OffshootConfigError
from store.engines import resolve_storage
from store.file_storage import FileStorage
from store.s3_storage import S3Storage
from uploader.versions import Uploader


class _PhotoUploader(Uploader):
    pass


_PhotoUploader.version("thumb")


def test_store_copies_cached_file_to_store_path(config: OffshootConfig, source_file: Path) -> None:
    """Storing should copy the cached file under the store dir."""
    uploader = _PhotoUploader(config=config)
    uploader.cache(source_file)
    cached_path = Path(uploader.current_path)

    stored = FileStorage(uploader).store(uploader.file)

    assert Path(stored.path) == config.root / "uploads" / "photo.jpg"
    assert cached_path.exists()


def test_store_moves_when_configured(config: OffshootConfig, source_file: Path) -> None:
    """move_to_store should relocate the cached file instead of copying."""
    uploader = _PhotoUploader(config=replace(config, move_to_store=True))
    uploader.cache(source_file)
    cached_path = Path(uploader.current_path)

    FileStorage(uploader).store(uploader.file)

    assert cached_path.exists() is False


def test_retrieve_prefixes_version_name(config: OffshootConfig) -> None:
    """Versions should resolve identifiers to their prefixed filenames."""
    uploader = _PhotoUploader(config=config)

    retrieved = FileStorage(uploader.thumb).retrieve("photo.jpg")

    assert Path(retrieved.path) == config.root / "uploads" / "thumb_photo.jpg"
    assert retrieved.exists is False


def test_resolve_storage_accepts_names_and_classes() -> None:
    """Engines should resolve from names and pass classes through."""
    assert resolve_storage("file") is FileStorage
    assert resolve_storage("s3") is S3Storage
    assert resolve_storage(FileStorage) is FileStorage
    with pytest.raises(OffshootConfigError):
        resolve_storage("ftp")
