"""Storage engine lookup.

This module maps engine names from configuration onto engine classes.
"""

from __future__ import annotations

from core.constants import SUPPORTED_STORAGE_ENGINES
from core.errors import OffshootConfigError
from store.base import Storage
from store.file_storage import FileStorage
from store.s3_storage import S3Storage

STORAGE_ENGINES: dict[str, type[Storage]] = {
    "file": FileStorage,
    "s3": S3Storage,
}


def resolve_storage(engine: type[Storage] | str) -> type[Storage]:
    """Resolve an engine class from a class or a registered name.

    Args:
        engine: Storage subclass or one of the supported engine names.

    Returns:
        Storage engine class.

    Raises:
        OffshootConfigError: If the name is not a known engine.
    """
    if isinstance(engine, type) and issubclass(engine, Storage):
        return engine
    engine_class = STORAGE_ENGINES.get(str(engine))
    if engine_class is None:
        raise OffshootConfigError(
            f"Unknown storage engine '{engine}': expected one of "
            f"{', '.join(SUPPORTED_STORAGE_ENGINES)} or a Storage subclass."
        )
    return engine_class
