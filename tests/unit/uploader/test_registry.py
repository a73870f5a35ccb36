"""Unit tests for version registration."""

from __future__ import annotations

from dataclasses import replace

from core.config import OffshootConfig
from tests.uploader_helpers import append_marker
from uploader.versions import Uploader


def _build_uploader() -> type[Uploader]:
    class PhotoUploader(Uploader):
        pass

    PhotoUploader.process(append_marker, "-root")
    PhotoUploader.version("thumb", customize=lambda version: version.version("small"))
    return PhotoUploader


def test_version_builds_standalone_subclass() -> None:
    """Each version should be its own subclass with its own name chain."""
    photo = _build_uploader()

    definition = photo.registered_versions()["thumb"]

    assert issubclass(definition.uploader, photo)
    assert definition.uploader is not photo
    assert definition.uploader.__name__ == "PhotoUploaderThumbVersion"
    assert definition.uploader.version_names == ("thumb",)


def test_version_starts_with_empty_registry_and_pipeline() -> None:
    """A version should not share its parent's versions or processors."""
    photo = _build_uploader()
    thumb = photo.registered_versions()["thumb"].uploader
    small = thumb.registered_versions()["small"].uploader

    assert thumb.registered_versions().names() == ("small",)
    assert small.registered_versions().names() == ()
    assert small.version_names == ("thumb", "small")
    assert thumb.processors() == ()
    assert len(photo.processors()) == 1


def test_redefinition_reapplies_customization_and_keeps_options() -> None:
    """A second registration should add steps but ignore new options."""
    photo = _build_uploader()
    photo.version("thumb", customize=lambda version: version.process(append_marker, "-a"))

    definition = photo.version(
        "thumb",
        condition=lambda uploader, version, file: False,
        customize=lambda version: version.process(append_marker, "-b"),
    )

    assert definition.options.condition is None
    assert [step.args for step in definition.uploader.processors()] == [("-a",), ("-b",)]


def test_versions_never_move_to_cache(config: OffshootConfig) -> None:
    """Versions must copy their input even when the root moves uploads."""
    photo = _build_uploader()
    uploader = photo(config=replace(config, move_to_cache=True))

    assert uploader.move_to_cache() is True
    assert uploader.thumb.move_to_cache() is False
    assert uploader.thumb.small.move_to_cache() is False


def test_apply_to_versions_reaches_nested_versions() -> None:
    """Blocks applied to versions should reach every level but not the root."""
    photo = _build_uploader()

    photo.apply_to_versions(lambda version: setattr(version, "storage", "s3"))

    thumb = photo.registered_versions()["thumb"].uploader
    small = thumb.registered_versions()["small"].uploader
    assert (thumb.storage, small.storage) == ("s3", "s3")
    assert photo.storage is None


def test_subclass_registry_does_not_leak_to_parent() -> None:
    """Subclasses should inherit versions without adding to the parent."""
    photo = _build_uploader()

    class AlbumPhotoUploader(photo):
        pass

    AlbumPhotoUploader.version("cover")

    assert AlbumPhotoUploader.registered_versions().names() == ("thumb", "cover")
    assert photo.registered_versions().names() == ("thumb",)


def test_enable_processing_is_inherited_by_versions(config: OffshootConfig) -> None:
    """Versions should follow the processing switch of the class defining them."""
    photo = _build_uploader()
    photo.enable_processing = False

    uploader = photo(config=config)

    assert uploader.thumb.processing_enabled() is False
    assert uploader.processing_enabled() is False
