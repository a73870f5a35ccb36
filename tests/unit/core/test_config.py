"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import OffshootConfig
from core.errors import OffshootConfigError


def test_from_env_reads_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve the root directory from environment."""
    monkeypatch.setenv("OFFSHOOT_ROOT", "./.tmp-offshoot")

    config = OffshootConfig.from_env()

    assert config.root.name == ".tmp-offshoot"


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset variables should fall back to documented defaults."""
    for variable in (
        "OFFSHOOT_CACHE_DIR",
        "OFFSHOOT_STORE_DIR",
        "OFFSHOOT_STORAGE",
        "OFFSHOOT_DELETE_TMP_FILE_AFTER_STORAGE",
        "OFFSHOOT_S3_URI",
    ):
        monkeypatch.delenv(variable, raising=False)

    config = OffshootConfig.from_env()

    assert (config.cache_dir, config.store_dir, config.storage) == (
        "uploads/tmp",
        "uploads",
        "file",
    )
    assert config.delete_tmp_file_after_storage is True
    assert config.s3_location is None


def test_from_env_parses_boolean_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    """Boolean flags should accept common truthy and falsy spellings."""
    monkeypatch.setenv("OFFSHOOT_MOVE_TO_CACHE", "yes")
    monkeypatch.setenv("OFFSHOOT_ENABLE_PROCESSING", "0")

    config = OffshootConfig.from_env()

    assert config.move_to_cache is True
    assert config.enable_processing is False


def test_from_env_raises_for_invalid_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a flag that is not a boolean."""
    monkeypatch.setenv("OFFSHOOT_MOVE_TO_STORE", "sometimes")

    with pytest.raises(OffshootConfigError):
        OffshootConfig.from_env()

    assert os.getenv("OFFSHOOT_MOVE_TO_STORE") == "sometimes"


def test_from_env_raises_for_unknown_storage(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject storage engines it cannot resolve."""
    monkeypatch.setenv("OFFSHOOT_STORAGE", "ftp")

    with pytest.raises(OffshootConfigError):
        OffshootConfig.from_env()


def test_from_env_parses_s3_location(monkeypatch: pytest.MonkeyPatch) -> None:
    """S3 URI should be split into bucket and prefix."""
    monkeypatch.setenv("OFFSHOOT_S3_URI", "s3://media-bucket/prod/uploads")

    config = OffshootConfig.from_env()

    assert config.s3_location is not None
    assert (config.s3_location.bucket, config.s3_location.prefix) == (
        "media-bucket",
        "prod/uploads",
    )
