"""Core constants used across Offshoot modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

import re
from pathlib import Path

DEFAULT_ROOT = Path(".")
DEFAULT_CACHE_DIR = "uploads/tmp"
DEFAULT_STORE_DIR = "uploads"
DEFAULT_STORAGE_ENGINE = "file"
SUPPORTED_STORAGE_ENGINES = ("file", "s3")
VERSION_NAME_SEPARATOR = "_"
CACHE_ID_PATTERN = re.compile(r"\A\d+-\d+-\d{4}-\d{4}\Z")
ORIGINAL_FILENAME_PATTERN = re.compile(r"\A[A-Za-z0-9.\-+_]+\Z")
FILENAME_SANITIZE_PATTERN = re.compile(r"[^A-Za-z0-9.\-+_]")
DEFAULT_CACHE_TTL_SECONDS = 60 * 60 * 24
S3_PUBLIC_HOST_TEMPLATE = "https://{bucket}.s3.amazonaws.com"
DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS = 600
TRUE_ENV_VALUES = ("1", "true", "yes", "on")
FALSE_ENV_VALUES = ("0", "false", "no", "off", "")
