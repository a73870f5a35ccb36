"""Public SDK surface for Offshoot.

This module provides a stable import path for uploader users.
It re-exports the uploader classes, storage engines, and typed errors.
"""

from __future__ import annotations

from core.config import OffshootConfig
from core.errors import (
    OffshootCacheError,
    OffshootConfigError,
    OffshootDependencyError,
    OffshootError,
    OffshootProcessingError,
    OffshootStoreError,
    UnknownVersionError,
    VersionStoreError,
)
from core.types import ProcessingStep, VersionDefinition, VersionOptions
from files.sanitized_file import SanitizedFile
from store.base import Storage
from store.file_storage import FileStorage
from store.s3_storage import S3File, S3Storage
from uploader.base import BaseUploader
from uploader.versions import Uploader

__all__ = [
    "BaseUploader",
    "FileStorage",
    "OffshootCacheError",
    "OffshootConfig",
    "OffshootConfigError",
    "OffshootDependencyError",
    "OffshootError",
    "OffshootProcessingError",
    "OffshootStoreError",
    "ProcessingStep",
    "S3File",
    "S3Storage",
    "SanitizedFile",
    "Storage",
    "Uploader",
    "UnknownVersionError",
    "VersionDefinition",
    "VersionOptions",
    "VersionStoreError",
]
