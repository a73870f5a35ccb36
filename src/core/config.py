"""Runtime configuration model for Offshoot.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_ROOT,
    DEFAULT_STORAGE_ENGINE,
    DEFAULT_STORE_DIR,
    FALSE_ENV_VALUES,
    SUPPORTED_STORAGE_ENGINES,
    TRUE_ENV_VALUES,
)
from core.errors import OffshootConfigError
from core.s3_uri import S3Location, parse_s3_uri


@dataclass(frozen=True)
class OffshootConfig:
    """Validated runtime configuration.

    Attributes:
        root: Local root directory that cache and store dirs resolve against.
        cache_dir: Cache directory relative to root.
        store_dir: Default store directory relative to root or bucket prefix.
        storage: Default storage engine name.
        move_to_cache: Move uploaded files into the cache instead of copying.
        move_to_store: Move cached files into the store instead of copying.
        delete_tmp_file_after_storage: Delete cached files once stored.
        enable_processing: Run processing steps while caching.
        asset_host: Optional URL prefix for generated file URLs.
        s3_location: Optional bucket and prefix for the S3 engine.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    root: Path
    cache_dir: str = DEFAULT_CACHE_DIR
    store_dir: str = DEFAULT_STORE_DIR
    storage: str = DEFAULT_STORAGE_ENGINE
    move_to_cache: bool = False
    move_to_store: bool = False
    delete_tmp_file_after_storage: bool = True
    enable_processing: bool = True
    asset_host: str | None = None
    s3_location: S3Location | None = None
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "OffshootConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            OffshootConfigError: If environment values are invalid.
        """
        root_value = os.getenv("OFFSHOOT_ROOT", str(DEFAULT_ROOT))
        storage = os.getenv("OFFSHOOT_STORAGE", DEFAULT_STORAGE_ENGINE)
        if storage not in SUPPORTED_STORAGE_ENGINES:
            raise OffshootConfigError(
                f"Invalid OFFSHOOT_STORAGE value '{storage}': expected one of "
                f"{', '.join(SUPPORTED_STORAGE_ENGINES)}."
            )
        s3_uri = os.getenv("OFFSHOOT_S3_URI")
        return cls(
            root=Path(root_value).expanduser().resolve(),
            cache_dir=os.getenv("OFFSHOOT_CACHE_DIR", DEFAULT_CACHE_DIR),
            store_dir=os.getenv("OFFSHOOT_STORE_DIR", DEFAULT_STORE_DIR),
            storage=storage,
            move_to_cache=_parse_flag("OFFSHOOT_MOVE_TO_CACHE", default=False),
            move_to_store=_parse_flag("OFFSHOOT_MOVE_TO_STORE", default=False),
            delete_tmp_file_after_storage=_parse_flag(
                "OFFSHOOT_DELETE_TMP_FILE_AFTER_STORAGE", default=True
            ),
            enable_processing=_parse_flag("OFFSHOOT_ENABLE_PROCESSING", default=True),
            asset_host=os.getenv("OFFSHOOT_ASSET_HOST") or None,
            s3_location=parse_s3_uri(s3_uri, domain="config") if s3_uri else None,
            s3_region=os.getenv("OFFSHOOT_S3_REGION"),
            s3_profile=os.getenv("OFFSHOOT_S3_PROFILE"),
        )

    @property
    def cache_root(self) -> Path:
        """Absolute cache directory."""
        return self.root / self.cache_dir


def _parse_flag(variable: str, default: bool) -> bool:
    """Parse a boolean environment flag.

    Args:
        variable: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed boolean.

    Raises:
        OffshootConfigError: If the value is not a recognized boolean.
    """
    raw_value = os.getenv(variable)
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if normalized in TRUE_ENV_VALUES:
        return True
    if normalized in FALSE_ENV_VALUES:
        return False
    raise OffshootConfigError(
        f"Invalid {variable} value: expected a boolean, got '{raw_value}'. "
        f"Use one of {', '.join(TRUE_ENV_VALUES + FALSE_ENV_VALUES[:-1])}."
    )
