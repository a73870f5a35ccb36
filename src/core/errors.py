"""Offshoot exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from typing import Mapping


class OffshootError(Exception):
    """Base exception for all Offshoot failures."""


class OffshootConfigError(OffshootError):
    """Raised for invalid runtime configuration."""


class OffshootCacheError(OffshootError):
    """Raised for malformed cache names and cache write failures."""


class OffshootStoreError(OffshootError):
    """Raised for storage backend failures."""


class OffshootProcessingError(OffshootError):
    """Raised when a processing step fails on a cached file."""


class OffshootDependencyError(OffshootError):
    """Raised when an optional runtime dependency is missing."""


class UnknownVersionError(OffshootError):
    """Raised when a version name is not registered on an uploader."""

    def __init__(self, name: str, uploader_name: str) -> None:
        super().__init__(
            f"Version '{name}' doesn't exist on {uploader_name}. "
            "Register it with version() before resolving it."
        )
        self.name = name


class VersionStoreError(OffshootStoreError):
    """Raised after a parallel version store when any worker failed.

    Attributes:
        failures: Failed version names mapped to the raised exception.
    """

    def __init__(self, failures: Mapping[str, BaseException]) -> None:
        names = ", ".join(sorted(failures))
        super().__init__(
            f"Failed to store versions: {names}. "
            "Successful versions were kept; retry with recreate_versions()."
        )
        self.failures = dict(failures)
