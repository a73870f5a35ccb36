"""Pytest configuration and shared fixtures for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if str(_SRC_PATH) not in sys.path:
    sys.path.insert(0, str(_SRC_PATH))

from core.config import OffshootConfig  # noqa: E402


@pytest.fixture
def config(tmp_path: Path) -> OffshootConfig:
    """Config rooted at the test's temporary directory."""
    return OffshootConfig(root=tmp_path.resolve())


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """An uploaded file living outside the cache and store dirs."""
    incoming = tmp_path / "incoming"
    incoming.mkdir()
    path = incoming / "photo.jpg"
    path.write_bytes(b"original")
    return path
