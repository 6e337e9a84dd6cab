"""Blob store: byte storage keyed by generated storage paths.

This module is the only place that builds or interprets storage keys.
Metadata records carry the key as an opaque string.
"""

import logging
import secrets
import time
from datetime import datetime
from pathlib import PurePosixPath
from typing import Final

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.base import ContentFile
from django.core.files.storage import storages
from django.utils.text import get_valid_filename

from server.apps.files.exceptions import BlobStorageError, NotFoundError
from server.apps.files.infrastructure.storage import BlobStorage

_FALLBACK_NAME: Final = 'file'
_RANDOM_BYTES: Final = 4
_MAX_NAME_LENGTH: Final = 200

logger = logging.getLogger(__name__)


def get_blob_storage() -> BlobStorage:
    """Get the storage backend configured for shop files.

    Returns:
        Storage registered under FILES_STORAGE_ALIAS in STORAGES.
    """
    return storages[settings.FILES_STORAGE_ALIAS]  # type: ignore[return-value]


def ensure_store_ready() -> None:
    """Create the storage root if absent. Idempotent.

    Raises:
        BlobStorageError: If the root cannot be created.
    """
    try:
        get_blob_storage().ensure_ready()
    except Exception as error:
        logger.exception('Blob storage is not available')
        raise BlobStorageError(f'Storage unavailable: {error}') from error


def generate_storage_key(original_name: str) -> str:
    """Generate a collision resistant storage key.

    Combines a nanosecond timestamp, a random component and a sanitized
    version of the client filename, so concurrent uploads of the same
    name never share a key.

    Args:
        original_name: Filename supplied by the client.

    Returns:
        Storage key (e.g., '1735290035123456789-9f86d081-invoice.pdf').
    """
    try:
        safe_name = get_valid_filename(PurePosixPath(original_name).name)
    except SuspiciousFileOperation:
        safe_name = _FALLBACK_NAME
    return '{timestamp}-{token}-{name}'.format(
        timestamp=time.time_ns(),
        token=secrets.token_hex(_RANDOM_BYTES),
        name=safe_name[-_MAX_NAME_LENGTH:],
    )


def blob_filename(path: str) -> str:
    """Extract the stored filename from a storage key.

    Args:
        path: Storage key returned by write_blob.

    Returns:
        Filename part of the key.
    """
    return PurePosixPath(path).name


def write_blob(original_name: str, content: bytes) -> str:
    """Persist bytes under a freshly generated key.

    Args:
        original_name: Filename supplied by the client.
        content: Blob bytes.

    Returns:
        Storage key of the written blob.

    Raises:
        BlobStorageError: If the write fails (disk full, permissions...).
    """
    storage = get_blob_storage()
    key = generate_storage_key(original_name)
    try:
        return storage.save(key, ContentFile(content))
    except Exception as error:
        raise BlobStorageError(f'Failed to store file: {error}') from error


def blob_exists(path: str) -> bool:
    """Check whether a blob is present at the storage key.

    Args:
        path: Storage key.

    Returns:
        True if the blob exists.

    Raises:
        BlobStorageError: If the storage cannot be queried.
    """
    try:
        return get_blob_storage().exists(path)
    except Exception as error:
        raise BlobStorageError(f'Failed to check file: {error}') from error


def read_blob(path: str) -> bytes:
    """Read blob bytes.

    Args:
        path: Storage key.

    Returns:
        Blob content.

    Raises:
        NotFoundError: If no blob exists at the key.
        BlobStorageError: If reading fails.
    """
    storage = get_blob_storage()
    if not blob_exists(path):
        logger.warning('Blob never written or already removed: %s', path)
        raise NotFoundError('File', path)

    try:
        with storage.open(path, 'rb') as blob:
            return blob.read()
    except FileNotFoundError as error:
        logger.warning('Blob removed while reading: %s', path)
        raise NotFoundError('File', path) from error
    except Exception as error:
        logger.exception('Failed to read blob: %s', path)
        raise BlobStorageError(f'Failed to read file: {error}') from error


def delete_blob(path: str) -> None:
    """Delete blob, ignoring blobs that are already gone.

    Metadata and blobs may have drifted apart after an earlier partial
    failure, so a missing blob is not an error.

    Args:
        path: Storage key.

    Raises:
        BlobStorageError: If the storage fails to delete an existing blob.
    """
    storage = get_blob_storage()
    if not blob_exists(path):
        logger.warning('Blob not found in storage (already deleted?): %s', path)
        return

    try:
        storage.delete(path)
    except Exception as error:
        raise BlobStorageError(f'Failed to delete file: {error}') from error


def list_blobs() -> list[str]:
    """List storage keys present at the storage root.

    Returns:
        Storage keys, empty if the root does not exist yet.

    Raises:
        BlobStorageError: If the storage cannot be listed.
    """
    storage = get_blob_storage()
    try:
        _, filenames = storage.listdir('')
    except FileNotFoundError:
        return []
    except Exception as error:
        logger.exception('Failed to list blobs')
        raise BlobStorageError(f'Failed to list files: {error}') from error
    return list(filenames)


def blob_modified_at(path: str) -> datetime:
    """Last modification time of a blob (aware when USE_TZ is on).

    Raises:
        NotFoundError: If the blob is gone.
        BlobStorageError: If the storage cannot be queried.
    """
    try:
        return get_blob_storage().get_modified_time(path)
    except FileNotFoundError as error:
        raise NotFoundError('File', path) from error
    except Exception as error:
        if not blob_exists(path):
            raise NotFoundError('File', path) from error
        raise BlobStorageError(
            f'Failed to read file time: {error}',
        ) from error
