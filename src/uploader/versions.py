"""Versioned uploader.

This module adds named derivatives ("versions") to the base uploader.
A version is a generated subclass of the uploader that defines it, so it
runs the same lifecycle and may register versions of its own. Cache,
remove, and retrieve cascade depth first; store fans out in parallel.
"""

from __future__ import annotations

from typing import Any, Callable

from core.constants import VERSION_NAME_SEPARATOR
from core.errors import UnknownVersionError
from core.types import VersionCondition, VersionDefinition, VersionOptions
from files.sanitized_file import SanitizedFile
from uploader.base import BaseUploader
from uploader.parallel_store import store_versions
from uploader.registry import VersionRegistry


class Uploader(BaseUploader):
    """Uploader with a tree of named versions.

    Example:
        >>> class AvatarUploader(Uploader):
        ...     pass
        >>> AvatarUploader.version("thumb", customize=lambda v: v.process(resize, 50))
        >>> AvatarUploader.version("small", from_version="thumb")
    """

    version_names: tuple[str, ...] = ()
    _version_registry: VersionRegistry = VersionRegistry()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._version_registry = cls._version_registry.copy()

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._versions: dict[str, Uploader] | None = None

    @classmethod
    def version(
        cls,
        name: str,
        *,
        condition: VersionCondition | None = None,
        from_version: str | None = None,
        customize: Callable[[type[Uploader]], Any] | None = None,
    ) -> VersionDefinition:
        """Register a version, or customize an already registered one.

        Options only take effect on first registration. ``customize`` runs
        against the version class on every call, so processing steps can be
        added incrementally.

        A version is also reachable as ``uploader.<name>`` unless the name
        matches an existing uploader attribute such as ``file`` or ``url``;
        ``uploader[name]`` always returns the version.

        Args:
            name: Version name.
            condition: Callable ``(uploader, version=, file=)`` or method
                name deciding whether the version is generated.
            from_version: Sibling version whose cached output is the input.
            customize: Callable receiving the version class.

        Returns:
            The version definition.
        """
        name = str(name)
        definition = cls._version_registry.get(name)
        if definition is None:
            definition = cls._version_registry.register(
                VersionDefinition(
                    name=name,
                    uploader=cls._build_version(name),
                    options=VersionOptions(condition=condition, from_version=from_version),
                )
            )
        if customize is not None:
            customize(definition.uploader)
        return definition

    @classmethod
    def registered_versions(cls) -> VersionRegistry:
        return cls._version_registry

    @classmethod
    def apply_to_versions(cls, block: Callable[[type[Uploader]], Any]) -> None:
        """Apply ``block`` to every version class, nested ones included."""
        for definition in cls._version_registry.values():
            block(definition.uploader)
            definition.uploader.apply_to_versions(block)

    @classmethod
    def _build_version(cls, name: str) -> type[Uploader]:
        def move_to_cache(self: Uploader) -> bool:
            # Moving would hand the parent's cached file to this version.
            return False

        class_name = f"{cls.__name__}{_camelize(name)}Version"
        namespace = {
            "__module__": cls.__module__,
            "__qualname__": f"{cls.__qualname__}.{class_name}",
            "version_names": cls.version_names + (name,),
            "_processors": (),
            "move_to_cache": move_to_cache,
        }
        version_class = type(class_name, (cls,), namespace)
        version_class._version_registry = VersionRegistry()
        return version_class

    @property
    def versions(self) -> dict[str, Uploader]:
        """Version instances keyed by name, built once per uploader."""
        if self._versions is None:
            self._versions = {
                name: definition.uploader(self.model, self.mounted_as, config=self.config)
                for name, definition in type(self)._version_registry.items()
            }
        return self._versions

    @property
    def version_name(self) -> str | None:
        if not self.version_names:
            return None
        return VERSION_NAME_SEPARATOR.join(self.version_names)

    def version_exists(self, name: str) -> bool:
        """Return whether a version is generated for the current file.

        Unknown names return False instead of raising.
        """
        definition = type(self)._version_registry.get(str(name))
        if definition is None:
            return False
        condition = definition.options.condition
        if condition is None:
            return True
        if callable(condition):
            return bool(condition(self, version=definition.name, file=self.file))
        return bool(getattr(self, condition)(self.file))

    def active_versions(self) -> dict[str, Uploader]:
        return {
            name: version
            for name, version in self.versions.items()
            if self.version_exists(name)
        }

    def url(self, *args: Any) -> str | None:
        """Return the URL of this file or of a (nested) version.

        ``url("thumb", "small")`` resolves through two levels of versions.
        A mapping as first argument is passed on as URL options.

        Raises:
            UnknownVersionError: If a named version is not registered.
        """
        if args and isinstance(args[0], str):
            name = args[0]
            if name not in self.versions:
                raise UnknownVersionError(name, type(self).__name__)
            if not self.version_exists(name):
                return None
            return self.versions[name].url(*args[1:])
        if args:
            return super().url(args[0])
        return super().url()

    def recreate_versions(self, *names: str) -> None:
        """Regenerate versions from the current file without a new upload.

        Versions outside ``names`` keep their current files, including a
        ``from_version`` source that has to be rebuilt to feed a named one.

        Args:
            *names: Versions to regenerate; all versions when empty.
        """
        if names:
            requested = tuple(str(name) for name in names)
            if not self.cached and self.file is not None:
                self._cache_versions(SanitizedFile(self.file), only=requested)
            store_versions(self, None, only=requested)
            return
        if not self.cached:
            self.cache()
        self.store()

    def full_filename(self, for_file: str) -> str:
        return _prefixed(self.version_name, super().full_filename(for_file))

    @property
    def full_original_filename(self) -> str | None:
        original = super().full_original_filename
        if original is None:
            return None
        return _prefixed(self.version_name, original)

    def _after_cache(self, new_file: SanitizedFile) -> None:
        super()._after_cache(new_file)
        self._assign_parent_cache_id()
        self._cache_versions(new_file)

    def _after_store(self, new_file: Any) -> None:
        super()._after_store(new_file)
        store_versions(self, new_file)

    def _after_remove(self) -> None:
        super()._after_remove()
        for version in self.versions.values():
            version.remove()

    def _after_retrieve_from_cache(self, cache_name: str) -> None:
        super()._after_retrieve_from_cache(cache_name)
        for version in self.versions.values():
            version.retrieve_from_cache(cache_name)

    def _after_retrieve_from_store(self, identifier: str) -> None:
        super()._after_retrieve_from_store(identifier)
        for version in self.versions.values():
            version.retrieve_from_store(identifier)

    def _assign_parent_cache_id(self) -> None:
        for version in self.active_versions().values():
            version.parent_cache_id = self.cache_id

    def _cache_versions(self, new_file: SanitizedFile, only: tuple[str, ...] | None = None) -> None:
        processed_parent = SanitizedFile(self.file, filename=new_file.original_filename)
        for name, version in self.active_versions().items():
            if only is not None and name not in only:
                continue
            if version.cached:
                continue
            version.cache_id = self.cache_id
            source, scratch = self._version_source(name, processed_parent, new_file, only)
            try:
                version.cache(source)
            finally:
                if scratch is not None:
                    scratch.remove()

    def _version_source(
        self,
        name: str,
        processed_parent: SanitizedFile,
        new_file: SanitizedFile,
        only: tuple[str, ...] | None = None,
    ) -> tuple[SanitizedFile, Uploader | None]:
        """Return the file a version is cached from.

        A ``from_version`` sibling outside ``only`` is built on a scratch
        instance so the sibling keeps its current file. The caller removes
        the scratch instance once the dependent is cached.
        """
        dependency = type(self)._version_registry[name].options.from_version
        if dependency is None:
            return processed_parent, None
        if dependency not in self.versions:
            raise UnknownVersionError(dependency, type(self).__name__)
        source_version = self.versions[dependency]
        scratch = None
        if not source_version.cached:
            if only is not None and dependency not in only:
                scratch = type(source_version)(self.model, self.mounted_as, config=self.config)
                source_version = scratch
            source_version.cache_id = self.cache_id
            source_version.cache(processed_parent)
        return SanitizedFile(source_version.file, filename=new_file.original_filename), scratch

    def __getitem__(self, name: str) -> Uploader:
        if name not in self.versions:
            raise UnknownVersionError(name, type(self).__name__)
        return self.versions[name]

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_") and name in type(self)._version_registry:
            return self.versions[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")


def _prefixed(version_name: str | None, filename: str) -> str:
    if not version_name:
        return filename
    return f"{version_name}{VERSION_NAME_SEPARATOR}{filename}"


def _camelize(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_") if part) or "Unnamed"
