"""Shared processing steps for uploader tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any


def append_marker(uploader: Any, marker: str) -> None:
    """Append a marker to the uploader's cached file."""
    path = Path(uploader.current_path)
    path.write_bytes(path.read_bytes() + marker.encode("utf-8"))


def read_current(uploader: Any) -> bytes:
    return Path(uploader.current_path).read_bytes()
