"""Business logic for file operations.

Metadata (database) and blobs (storage) are written in a fixed order
without a spanning transaction:

- upload writes the blob first, then the record. A failed record write
  leaves an orphaned blob, removed later by `cleanup_orphaned_blobs`.
- delete removes the blob first (best effort), then the record. A blob
  that cannot be removed never blocks the record deletion.
"""

import dataclasses
import logging
from typing import BinaryIO

from django.core.exceptions import ValidationError
from django.core.files.base import File as DjangoFile

from server.apps.files.exceptions import (
    BlobStorageError,
    FileManagerError,
    NotFoundError,
)
from server.apps.files.infrastructure import blobs, records
from server.apps.files.infrastructure.metadata import resolve_mime_type
from server.apps.files.models import File, Folder

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Download:
    """Blob content with the headers needed to serve it."""

    content: bytes
    mime_type: str
    filename: str
    size: int


def upload_file(  # noqa: WPS211
    shop: str,
    upload: BinaryIO | DjangoFile | bytes | None,
    *,
    original_name: str | None = None,
    mime_type: str | None = None,
    folder_id: object = None,
) -> File:
    """Store uploaded bytes and create the file record.

    Args:
        shop: Tenant identifier.
        upload: Uploaded file (Django UploadedFile, file-like or bytes).
        original_name: Client filename, defaults to `upload.name`.
        mime_type: Client MIME type, defaults to `upload.content_type`.
        folder_id: Optional folder of the same shop.

    Returns:
        Created File instance.

    Raises:
        ValidationError: If no payload or no usable filename was provided.
        NotFoundError: If the folder does not belong to the shop.
        BlobStorageError: If reading the upload or writing the blob fails
            (no record created).
        MetadataStoreError: If the record write fails (blob orphaned).
    """
    if upload is None:
        raise ValidationError('No file provided')

    original_name = original_name or getattr(upload, 'name', None)
    if not original_name:
        raise ValidationError('File name is required')
    max_length = File._meta.get_field('original_name').max_length
    if len(original_name) > max_length:
        raise ValidationError(
            f'File name is longer than {max_length} characters',
        )
    mime_type = resolve_mime_type(
        mime_type or getattr(upload, 'content_type', None),
    )

    # Validate target folder before anything touches storage
    folder = resolve_folder(shop, folder_id)

    try:
        content = _read_payload(upload)
    except OSError as error:
        logger.exception('Failed to read upload: %s', original_name)
        raise BlobStorageError(f'Failed to read upload: {error}') from error

    # Step 1: Write blob first
    blobs.ensure_store_ready()
    try:
        path = blobs.write_blob(original_name, content)
    except BlobStorageError:
        logger.exception('Failed to write blob for upload: %s', original_name)
        raise

    # Step 2: Create metadata record
    try:
        return records.create_file(
            shop=shop,
            filename=blobs.blob_filename(path),
            original_name=original_name,
            mime_type=mime_type,
            size=len(content),
            path=path,
            folder=folder,
        )
    except FileManagerError:
        logger.exception(
            'Failed to create file record, blob orphaned: %s',
            path,
        )
        raise


def delete_file(shop: str, file_id: object) -> None:
    """Delete blob (best effort) and file record.

    Args:
        shop: Tenant identifier.
        file_id: ID of file to delete.

    Raises:
        NotFoundError: If the file is absent or owned by another shop.
        MetadataStoreError: If the record deletion fails.
    """
    file_instance = records.get_file(shop, file_id)
    logger.info(
        'Deleting file: ID=%s, path=%s',
        file_instance.id,
        file_instance.path,
    )

    delete_blob_quietly(file_instance.path)
    records.delete_file(shop, file_instance.id)


def move_file(shop: str, file_id: object, folder_id: object) -> File:
    """Move file into a folder, or to root when folder_id is empty.

    Only the folder reference changes; the blob stays where it is.

    Args:
        shop: Tenant identifier.
        file_id: ID of file to move.
        folder_id: Target folder of the same shop, or None for root.

    Returns:
        Updated File instance.

    Raises:
        NotFoundError: If file or target folder is absent or foreign.
    """
    file_instance = records.get_file(shop, file_id)
    folder = resolve_folder(shop, folder_id)
    logger.info(
        'Moving file %s to folder %s',
        file_instance.id,
        folder.id if folder else 'root',
    )
    return records.update_file_folder(shop, file_instance.id, folder)


def download_file(shop: str, file_id: object) -> Download:
    """Load file content for download.

    Args:
        shop: Tenant identifier.
        file_id: ID of file to download.

    Returns:
        Download with bytes, stored MIME type, original filename and size.

    Raises:
        NotFoundError: If the record is absent/foreign or the blob missing.
        BlobStorageError: If reading the blob fails.
    """
    file_instance = records.get_file(shop, file_id)
    if not blobs.blob_exists(file_instance.path):
        logger.warning(
            'File record without blob: ID=%s, path=%s',
            file_instance.id,
            file_instance.path,
        )
        raise NotFoundError('File', file_id)

    content = blobs.read_blob(file_instance.path)
    return Download(
        content=content,
        mime_type=file_instance.mime_type,
        filename=file_instance.original_name,
        size=file_instance.size,
    )


def delete_blob_quietly(path: str) -> bool:
    """Delete a blob, logging instead of raising on storage failure.

    Returns:
        False if the storage failed to delete the blob.
    """
    try:
        blobs.delete_blob(path)
    except BlobStorageError:
        # Record deletion proceeds, blob left for the cleanup command
        logger.exception('Failed to delete blob (orphaned): %s', path)
        return False
    return True


def resolve_folder(shop: str, folder_id: object) -> Folder | None:
    """Load the target folder of the shop, None for root.

    Raises:
        NotFoundError: If the folder is absent or owned by another shop.
    """
    if not folder_id:
        return None
    return records.get_folder(shop, folder_id)


def _read_payload(upload: BinaryIO | DjangoFile | bytes) -> bytes:
    if isinstance(upload, bytes):
        return upload
    if hasattr(upload, 'seek'):
        upload.seek(0)
    return upload.read()
