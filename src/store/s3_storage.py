"""S3 storage engine.

This module encapsulates boto3 client creation, uploads, and the lazy
``S3File`` handle returned for stored and retrieved objects.
"""

from __future__ import annotations

import posixpath
import threading
from typing import Any, Mapping

from core.config import OffshootConfig
from core.constants import DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS, S3_PUBLIC_HOST_TEMPLATE
from core.errors import OffshootConfigError, OffshootDependencyError, OffshootStoreError
from core.logging_config import get_logger
from files.sanitized_file import SanitizedFile
from store.base import Storage

_LOGGER = get_logger(__name__)

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")

_SHARED_CLIENTS: dict[OffshootConfig, Any] = {}
_SHARED_CLIENTS_LOCK = threading.Lock()


def create_s3_client(config: OffshootConfig) -> Any:
    """Create boto3 S3 client for the storage engine.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        OffshootDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise OffshootDependencyError(
            "S3 storage requires boto3, but it is not installed. "
            "Install boto3 to store files in s3:// locations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def shared_s3_client(config: OffshootConfig) -> Any:
    """Return the S3 client for a config, creating it on first use.

    Uploaders built with the same config share one client across the
    store worker threads.
    """
    with _SHARED_CLIENTS_LOCK:
        client = _SHARED_CLIENTS.get(config)
        if client is None:
            client = create_s3_client(config)
            _SHARED_CLIENTS[config] = client
        return client


class S3File:
    """Lazy handle on one S3 object."""

    def __init__(self, client: Any, bucket: str, key: str, asset_host: str | None = None) -> None:
        self._client = client
        self.bucket = bucket
        self.key = key
        self._asset_host = asset_host

    @property
    def path(self) -> str:
        return self.key

    @property
    def filename(self) -> str:
        return posixpath.basename(self.key)

    @property
    def exists(self) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=self.key)
        except Exception as error:
            if _is_not_found(error):
                return False
            raise OffshootStoreError(
                f"Failed to inspect s3://{self.bucket}/{self.key}: {error}. "
                "Check AWS credentials and bucket permissions."
            ) from error
        return True

    def read(self) -> bytes:
        """Download the object body."""
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=self.key)
        except Exception as error:
            raise OffshootStoreError(
                f"Failed to read s3://{self.bucket}/{self.key}: {error}. "
                "Check that the object exists and credentials allow reads."
            ) from error
        return response["Body"].read()

    def delete(self) -> None:
        """Delete the object."""
        try:
            self._client.delete_object(Bucket=self.bucket, Key=self.key)
        except Exception as error:
            raise OffshootStoreError(
                f"Failed to delete s3://{self.bucket}/{self.key}: {error}. "
                "Check AWS credentials and retry removal."
            ) from error

    def url(self, options: Mapping[str, Any] | None = None) -> str:
        """Return a public URL, or a presigned one when query params are given.

        Args:
            options: Optional mapping with a ``query`` dict of ``get_object``
                parameters such as ``ResponseContentDisposition``.

        Returns:
            URL string.
        """
        query = dict((options or {}).get("query") or {})
        if query:
            params = {"Bucket": self.bucket, "Key": self.key, **query}
            return self._client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS,
            )
        host = self._asset_host or S3_PUBLIC_HOST_TEMPLATE.format(bucket=self.bucket)
        return f"{host.rstrip('/')}/{self.key}"

    def __repr__(self) -> str:
        return f"S3File('s3://{self.bucket}/{self.key}')"


class S3Storage(Storage):
    """Store files under the configured ``s3://bucket/prefix`` location."""

    def __init__(self, uploader: Any, client: Any = None) -> None:
        super().__init__(uploader)
        location = uploader.config.s3_location
        if location is None:
            raise OffshootConfigError(
                "S3 storage requires OFFSHOOT_S3_URI. "
                "Set it to s3://bucket or s3://bucket/prefix."
            )
        self._location = location
        self._client = client if client is not None else shared_s3_client(uploader.config)

    def store(self, file: SanitizedFile) -> S3File:
        """Upload a cached file to its store key.

        Args:
            file: Cached file handle.

        Returns:
            Handle on the uploaded object.

        Raises:
            OffshootStoreError: If upload fails.
        """
        key = self._location.key_for(self.uploader.store_path())
        extra_args = {"ContentType": file.content_type} if file.content_type else {}
        try:
            if file.path is not None:
                self._client.upload_file(
                    file.path, self._location.bucket, key, ExtraArgs=extra_args or None
                )
            else:
                self._client.put_object(
                    Bucket=self._location.bucket, Key=key, Body=file.read(), **extra_args
                )
        except Exception as error:
            raise OffshootStoreError(
                f"Failed to upload {file.filename} to s3://{self._location.bucket}/{key}: "
                f"{error}. Check AWS credentials and retry the store."
            ) from error
        _LOGGER.debug("object_uploaded", bucket=self._location.bucket, key=key)
        return self._file_for(key)

    def retrieve(self, identifier: str) -> S3File:
        """Return a lazy handle for a stored identifier."""
        return self._file_for(self._location.key_for(self.uploader.store_path(identifier)))

    def _file_for(self, key: str) -> S3File:
        return S3File(
            self._client, self._location.bucket, key, asset_host=self.uploader.config.asset_host
        )


def _is_not_found(error: Exception) -> bool:
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return False
    code = str(response.get("Error", {}).get("Code", ""))
    return code in _NOT_FOUND_CODES
