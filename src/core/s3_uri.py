"""S3 URI parsing helpers.

This module centralizes S3 URI parsing for config and store layers.
It keeps URI validation behavior consistent across the codebase.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import OffshootConfigError, OffshootStoreError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    prefix: str

    def key_for(self, relative_path: str) -> str:
        """Join a store-relative path onto the location prefix."""
        if not self.prefix:
            return relative_path.lstrip("/")
        return f"{self.prefix.rstrip('/')}/{relative_path.lstrip('/')}"


def parse_s3_uri(uri: str, domain: str) -> S3Location:
    """Parse and validate an S3 URI.

    The prefix is optional, so ``s3://bucket`` stores objects at the
    bucket root.

    Args:
        uri: URI in format ``s3://bucket/prefix``.
        domain: Error domain string ("config" or "store").

    Returns:
        Parsed bucket and prefix pair.

    Raises:
        OffshootConfigError: For config-domain parse failures.
        OffshootStoreError: For store-domain parse failures.
    """
    if not uri.startswith("s3://"):
        _raise_uri_error(uri, domain)
    stripped_uri = uri.removeprefix("s3://")
    bucket, _, prefix = stripped_uri.partition("/")
    if not bucket:
        _raise_uri_error(uri, domain)
    return S3Location(bucket=bucket, prefix=prefix.strip("/"))


def _raise_uri_error(uri: str, domain: str) -> None:
    """Raise a domain-specific invalid URI error.

    Args:
        uri: Invalid URI value.
        domain: Error domain string.

    Raises:
        OffshootConfigError: For config domain.
        OffshootStoreError: For store domain.
    """
    message = (
        f"Invalid S3 URI '{uri}': expected s3://bucket or s3://bucket/prefix. "
        "Provide at least a bucket name."
    )
    if domain == "config":
        raise OffshootConfigError(message)
    raise OffshootStoreError(message)
