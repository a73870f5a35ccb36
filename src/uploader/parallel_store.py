"""Parallel version store.

This module fans the store operation out to an uploader's active versions,
one worker thread per version, and joins before returning. A failing
version never stops its siblings; failures are raised together afterwards.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Iterable

from core.errors import VersionStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def store_versions(uploader: Any, new_file: Any = None, only: Iterable[str] | None = None) -> None:
    """Store active versions of an uploader concurrently.

    Args:
        uploader: Parent uploader whose versions are stored.
        new_file: File handed to each version's ``store``.
        only: Optional version names to restrict the store to. Names that
            are unknown or inactive are skipped.

    Raises:
        VersionStoreError: If any version failed to store.
    """
    jobs = _select_jobs(uploader.active_versions(), only)
    if not jobs:
        return
    failures: dict[str, BaseException] = {}
    with ThreadPoolExecutor(
        max_workers=len(jobs), thread_name_prefix="offshoot-store"
    ) as executor:
        futures: dict[str, Future[None]] = {
            name: executor.submit(version.store, new_file) for name, version in jobs.items()
        }
        for name, future in futures.items():
            error = future.exception()
            if error is not None:
                failures[name] = error
                _LOGGER.error(
                    "version_store_failed",
                    uploader=type(uploader).__name__,
                    version=name,
                    error=str(error),
                )
    _LOGGER.info(
        "versions_stored",
        uploader=type(uploader).__name__,
        stored=[name for name in jobs if name not in failures],
        failed=sorted(failures),
    )
    if failures:
        first_failure = next(iter(failures.values()))
        raise VersionStoreError(failures) from first_failure


def _select_jobs(active: dict[str, Any], only: Iterable[str] | None) -> dict[str, Any]:
    if only is None:
        return dict(active)
    requested = [str(name) for name in only]
    if not requested:
        return dict(active)
    return {name: active[name] for name in dict.fromkeys(requested) if name in active}
