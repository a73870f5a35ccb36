"""Base uploader lifecycle.

This module owns caching, storing, retrieving, and removing a single file.
Each lifecycle operation finishes with an ``_after_*`` step so subclasses
can extend the sequence explicitly by overriding and calling ``super()``.
"""

from __future__ import annotations

import itertools
import os
import posixpath
import random
import shutil
import threading
import time
from pathlib import Path
from typing import Any, Callable, Mapping
from urllib.parse import urlencode

from core.config import OffshootConfig
from core.constants import (
    CACHE_ID_PATTERN,
    DEFAULT_CACHE_TTL_SECONDS,
    ORIGINAL_FILENAME_PATTERN,
)
from core.errors import OffshootCacheError
from core.logging_config import get_logger
from core.types import ProcessingStep, StepCondition
from files.sanitized_file import SanitizedFile
from store.base import Storage
from store.engines import resolve_storage
from transforms.processing import run_processing_steps

_LOGGER = get_logger(__name__)

_CACHE_COUNTER = itertools.count(1)
_CACHE_COUNTER_LOCK = threading.Lock()


def generate_cache_id() -> str:
    """Build a unique cache id of the form ``<epoch>-<pid>-<counter>-<rand>``."""
    with _CACHE_COUNTER_LOCK:
        counter = next(_CACHE_COUNTER) % 10000
    return f"{int(time.time())}-{os.getpid()}-{counter:04d}-{random.randint(0, 9999):04d}"


class BaseUploader:
    """Single-file uploader bound to a host model and mount point.

    Class attributes:
        storage: Storage engine class or engine name; ``None`` uses config.
        enable_processing: Processing switch; ``None`` uses config.
        default_config: Config shared by instances created without one.
    """

    storage: type[Storage] | str | None = None
    enable_processing: bool | None = None
    default_config: OffshootConfig | None = None
    _processors: tuple[ProcessingStep, ...] = ()

    def __init__(
        self,
        model: Any = None,
        mounted_as: str | None = None,
        config: OffshootConfig | None = None,
    ) -> None:
        """Create an uploader.

        Args:
            model: Host object the file belongs to.
            mounted_as: Host attribute name the uploader is mounted on.
            config: Optional runtime configuration.
        """
        self.model = model
        self.mounted_as = mounted_as
        self._config = config
        self.file: Any = None
        self.cache_id: str | None = None
        self.parent_cache_id: str | None = None
        self.original_filename: str | None = None
        self.filename: str | None = None
        self._storage_engine: Storage | None = None

    @classmethod
    def process(
        cls,
        step: Callable[..., Any] | str,
        *args: Any,
        condition: StepCondition | None = None,
        **kwargs: Any,
    ) -> ProcessingStep:
        """Append a processing step to this class's pipeline.

        Args:
            step: Callable ``step(uploader, *args, **kwargs)`` or method name.
            *args: Positional arguments for the step.
            condition: Optional callable ``(uploader, file)`` or method name.
            **kwargs: Keyword arguments for the step.

        Returns:
            The registered step.
        """
        processing_step = ProcessingStep(step=step, args=args, kwargs=kwargs, condition=condition)
        cls._processors = cls._processors + (processing_step,)
        return processing_step

    @classmethod
    def processors(cls) -> tuple[ProcessingStep, ...]:
        return cls._processors

    @classmethod
    def clean_cached_files(
        cls,
        older_than_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        config: OffshootConfig | None = None,
    ) -> int:
        """Delete cache directories older than a threshold.

        Args:
            older_than_seconds: Minimum cache-id age to delete.
            config: Optional config; defaults to the class or env config.

        Returns:
            Number of cache directories removed.
        """
        resolved = config or cls.default_config or OffshootConfig.from_env()
        cache_root = resolved.cache_root
        if not cache_root.is_dir():
            return 0
        cutoff = time.time() - older_than_seconds
        removed = 0
        for entry in sorted(cache_root.iterdir()):
            if not entry.is_dir() or not CACHE_ID_PATTERN.match(entry.name):
                continue
            if int(entry.name.split("-", 1)[0]) < cutoff:
                shutil.rmtree(entry)
                removed += 1
        _LOGGER.info("cached_files_cleaned", cache_root=str(cache_root), removed=removed)
        return removed

    @property
    def config(self) -> OffshootConfig:
        if self._config is None:
            self._config = type(self).default_config or OffshootConfig.from_env()
        return self._config

    @property
    def storage_engine(self) -> Storage:
        if self._storage_engine is None:
            engine = type(self).storage or self.config.storage
            self._storage_engine = resolve_storage(engine)(self)
        return self._storage_engine

    @property
    def version_name(self) -> str | None:
        return None

    @property
    def cached(self) -> bool:
        return self.cache_id is not None

    @property
    def is_blank(self) -> bool:
        return self.file is None

    @property
    def current_path(self) -> str | None:
        if self.file is None:
            return None
        return self.file.path

    @property
    def identifier(self) -> str | None:
        """Identifier the host persists to retrieve the stored file later."""
        return self.storage_engine.identifier()

    def move_to_cache(self) -> bool:
        return self.config.move_to_cache

    def move_to_store(self) -> bool:
        return self.config.move_to_store

    def processing_enabled(self) -> bool:
        if self.enable_processing is None:
            return self.config.enable_processing
        return self.enable_processing

    def full_filename(self, for_file: str) -> str:
        return for_file

    @property
    def full_original_filename(self) -> str | None:
        return self.original_filename

    def store_dir(self) -> str:
        """Directory, relative to the config root, that stored files go to."""
        return self.config.store_dir

    def store_path(self, for_file: str | None = None) -> str:
        target = for_file if for_file is not None else self.filename
        if target is None:
            raise OffshootCacheError(
                f"{type(self).__name__} has no filename to build a store path from. "
                "Cache a file before storing it."
            )
        return posixpath.join(self.store_dir(), self.full_filename(target))

    @property
    def cache_path(self) -> Path:
        if self.cache_id is None or self.full_original_filename is None:
            raise OffshootCacheError(
                f"{type(self).__name__} is not cached. Call cache() before reading cache_path."
            )
        return self.config.cache_root / self.cache_id / self.full_original_filename

    @property
    def cache_name(self) -> str | None:
        """Token that restores this cache with ``retrieve_from_cache``."""
        if self.cache_id is None or self.full_original_filename is None:
            return None
        return f"{self.cache_id}/{self.full_original_filename}"

    def cache(self, new_file: Any = None) -> None:
        """Copy a file into the cache and run the after-cache steps.

        Args:
            new_file: File source; defaults to the current file.
        """
        source = SanitizedFile(new_file if new_file is not None else self.file)
        if source.is_empty:
            return
        if source.filename is None:
            raise OffshootCacheError(
                f"{type(self).__name__} cannot cache a file without a filename. "
                "Pass a path, a named stream, or SanitizedFile(data, filename=...)."
            )
        previous_state = (self.cache_id, self.original_filename, self.filename)
        if self.cache_id is None:
            self.cache_id = generate_cache_id()
        self.original_filename = source.filename
        self.filename = source.filename
        try:
            target = self.cache_path
            if self.move_to_cache():
                self.file = source.move_to(target)
            else:
                self.file = source.copy_to(target)
        except Exception:
            self.cache_id, self.original_filename, self.filename = previous_state
            raise
        _LOGGER.info(
            "file_cached",
            uploader=type(self).__name__,
            version=self.version_name,
            cache_id=self.cache_id,
            filename=self.filename,
        )
        self._after_cache(source)

    def retrieve_from_cache(self, cache_name: str) -> None:
        """Point this uploader at a previously cached file.

        Args:
            cache_name: Token of the form ``<cache_id>/<original_filename>``.

        Raises:
            OffshootCacheError: If the cache id or filename is malformed.
        """
        cache_id, _, original_filename = str(cache_name).partition("/")
        if not CACHE_ID_PATTERN.match(cache_id):
            raise OffshootCacheError(
                f"Invalid cache id in '{cache_name}'. "
                "Pass the cache_name returned by a previous cache()."
            )
        if not ORIGINAL_FILENAME_PATTERN.match(original_filename):
            raise OffshootCacheError(
                f"Invalid original filename in '{cache_name}'. "
                "Pass the cache_name returned by a previous cache()."
            )
        self.cache_id = cache_id
        self.original_filename = original_filename
        self.filename = original_filename
        self.file = SanitizedFile(self.cache_path)
        self._after_retrieve_from_cache(cache_name)

    def store(self, new_file: Any = None) -> None:
        """Commit the cached file to the storage engine.

        A new file is cached first unless this uploader already holds the
        cache its parent handed down.

        Args:
            new_file: Optional file to cache before storing.
        """
        if new_file is not None and (
            self.cache_id is None or self.cache_id != self.parent_cache_id
        ):
            self.cache(new_file)
        if self.file is None or self.cache_id is None:
            return
        cached_file = self.file
        stored_file = self.storage_engine.store(cached_file)
        if self.config.delete_tmp_file_after_storage and not self.move_to_store():
            cached_file.delete()
        self.file = stored_file
        self.cache_id = None
        _LOGGER.info(
            "file_stored",
            uploader=type(self).__name__,
            version=self.version_name,
            identifier=self.identifier,
        )
        self._after_store(new_file)

    def retrieve_from_store(self, identifier: str) -> None:
        """Point this uploader at a stored file.

        Args:
            identifier: Identifier returned by ``identifier`` after store.
        """
        self.file = self.storage_engine.retrieve(identifier)
        self._after_retrieve_from_store(identifier)

    def remove(self) -> None:
        """Delete the current file and forget the cache."""
        if self.file is not None:
            self.file.delete()
            _LOGGER.info(
                "file_removed",
                uploader=type(self).__name__,
                version=self.version_name,
                path=self.current_path,
            )
        self.file = None
        self.cache_id = None
        self._after_remove()

    def default_url(self) -> str | None:
        """URL used when no file is present. Override to provide a fallback."""
        return None

    def url(self, options: Mapping[str, Any] | None = None) -> str | None:
        """Return the URL of the current file.

        Args:
            options: Optional mapping; ``options["query"]`` adds query params.

        Returns:
            URL string, or ``default_url()`` when there is no file.
        """
        if self.file is None:
            return self.default_url()
        file_url = getattr(self.file, "url", None)
        if callable(file_url):
            return file_url(options)
        if self.file.path is None:
            return None
        url = self._local_url(Path(self.file.path))
        query = (options or {}).get("query")
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def _local_url(self, path: Path) -> str:
        root = self.config.root.expanduser().resolve()
        try:
            relative = "/" + path.relative_to(root).as_posix()
        except ValueError:
            relative = path.as_posix()
        if self.config.asset_host:
            return self.config.asset_host.rstrip("/") + relative
        return relative

    def _after_cache(self, new_file: SanitizedFile) -> None:
        if self.processing_enabled():
            run_processing_steps(self, type(self).processors(), self.file)

    def _after_store(self, new_file: Any) -> None:
        return None

    def _after_remove(self) -> None:
        return None

    def _after_retrieve_from_cache(self, cache_name: str) -> None:
        return None

    def _after_retrieve_from_store(self, identifier: str) -> None:
        return None
