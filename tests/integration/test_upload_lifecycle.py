"""Integration tests for the full versioned upload lifecycle."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from offshoot import OffshootConfig, SanitizedFile, Uploader
from tests.uploader_helpers import append_marker


class GalleryUploader(Uploader):
    def is_image(self, file: Any) -> bool:
        return file is not None and file.extension in {"jpg", "png"}


GalleryUploader.version(
    "thumb",
    condition="is_image",
    customize=lambda v: (
        v.process(append_marker, "-thumb"),
        v.version("small", customize=lambda s: s.process(append_marker, "-small")),
    ),
)
GalleryUploader.version(
    "banner", from_version="thumb", customize=lambda v: v.process(append_marker, "-banner")
)


def test_cache_resume_store_and_remove_flow(tmp_path: Path) -> None:
    """Versions should follow the root through cache, store, retrieve, and remove."""
    config = OffshootConfig(root=tmp_path.resolve())
    upload = tmp_path / "incoming" / "Holiday Photo.JPG"
    upload.parent.mkdir()
    upload.write_bytes(b"original")
    record: dict[str, str | None] = {}

    first_request = GalleryUploader(model=record, mounted_as="image", config=config)
    first_request.cache(upload)
    second_request = GalleryUploader(model=record, mounted_as="image", config=config)
    second_request.retrieve_from_cache(first_request.cache_name)
    second_request.store()
    record["image"] = second_request.identifier
    later = GalleryUploader(model=record, mounted_as="image", config=config)
    later.retrieve_from_store(record["image"])

    stored = config.root / "uploads"
    assert record["image"] == "Holiday_Photo.JPG"
    assert (stored / "thumb_Holiday_Photo.JPG").read_bytes() == b"original-thumb"
    assert (stored / "thumb_small_Holiday_Photo.JPG").read_bytes() == b"original-thumb-small"
    assert (stored / "banner_Holiday_Photo.JPG").read_bytes() == b"original-thumb-banner"
    assert later.url("thumb", "small") == "/uploads/thumb_small_Holiday_Photo.JPG"
    assert SanitizedFile(later.banner.current_path).read() == b"original-thumb-banner"

    later.remove()

    assert sorted(path.name for path in stored.iterdir()) == ["tmp"]


def test_non_image_upload_skips_conditional_versions(tmp_path: Path) -> None:
    """A failing condition should skip storing the version but not its use as a source."""
    config = OffshootConfig(root=tmp_path.resolve())
    upload = tmp_path / "notes.txt"
    upload.write_bytes(b"plain text")
    uploader = GalleryUploader(config=config)

    uploader.store(upload)

    assert uploader.url() == "/uploads/notes.txt"
    assert uploader.url("thumb") is None
    assert not (config.root / "uploads" / "thumb_notes.txt").exists()
    banner = config.root / "uploads" / "banner_notes.txt"
    assert banner.read_bytes() == b"plain text-thumb-banner"
