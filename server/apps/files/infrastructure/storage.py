"""Storage backends for shop file blobs."""

import logging
import os
from typing import Any, Final, final, override

from botocore.exceptions import ClientError
from django.core.files.storage import FileSystemStorage, Storage
from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)

_BUCKET_EXISTS_CODES: Final = frozenset((
    'BucketAlreadyOwnedByYou',
    'BucketAlreadyExists',
))


class BlobStorage(Storage):
    """Logging layer shared by the blob storage backends.

    Subclasses must implement `ensure_ready`.
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str | None,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Write a blob under its storage key, logging the outcome."""
        try:
            logger.info('Writing blob to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully wrote blob: %s', saved_name)
        except Exception:
            logger.exception('Failed to write blob to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Remove a blob by storage key, logging the outcome."""
        try:
            logger.info('Deleting blob from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted blob: %s', name)
        except Exception:
            logger.exception('Failed to delete blob from storage: %s', name)
            raise

    def ensure_ready(self) -> None:
        """Create the storage root if it does not exist yet."""
        raise NotImplementedError


@final
class LocalBlobStorage(BlobStorage, FileSystemStorage):
    """Blob storage on the local filesystem (default backend)."""

    @override
    def ensure_ready(self) -> None:
        """Create the storage directory.

        Safe to call repeatedly and from concurrent requests.
        """
        os.makedirs(self.location, exist_ok=True)


@final
class S3BlobStorage(BlobStorage, S3Storage):
    """Blob storage on an S3-compatible object store (MinIO, R2, AWS)."""

    @override
    def ensure_ready(self) -> None:
        """Create the bucket if it does not exist yet."""
        client = self.connection.meta.client
        try:
            client.head_bucket(Bucket=self.bucket_name)
        except ClientError:
            logger.info('Creating storage bucket: %s', self.bucket_name)
            try:
                client.create_bucket(Bucket=self.bucket_name)
            except ClientError as error:
                # Another request created it in the meantime
                code = error.response.get('Error', {}).get('Code')
                if code not in _BUCKET_EXISTS_CODES:
                    raise
