"""Business logic for folder operations."""

import logging

from server.apps.files.infrastructure import records
from server.apps.files.logic.file_operations import delete_blob_quietly
from server.apps.files.models import File, Folder

logger = logging.getLogger(__name__)


def create_folder(shop: str, name: str | None) -> Folder:
    """Create a folder for the shop.

    Raises:
        ValidationError: If the name is empty after trimming.
    """
    return records.create_folder(shop, name)


def list_folders(shop: str) -> list[Folder]:
    """Shop folders, newest first, annotated with `file_count`."""
    return records.list_folders(shop)


def list_folder_files(shop: str, folder_id: object) -> list[File]:
    """List files of one folder, newest first.

    Raises:
        NotFoundError: If the folder is absent or owned by another shop.
    """
    folder = records.get_folder(shop, folder_id)
    return records.list_files(shop, folder.id)


def delete_folder(shop: str, folder_id: object) -> None:
    """Delete folder, its file records and (best effort) their blobs.

    Every blob deletion is attempted on its own; failures are logged and
    never prevent the folder deletion. File records go away through the
    database cascade of the folder relation.

    Args:
        shop: Tenant identifier.
        folder_id: ID of folder to delete.

    Raises:
        NotFoundError: If the folder is absent or owned by another shop.
        MetadataStoreError: If the record deletion fails.
    """
    folder = records.get_folder(shop, folder_id)
    owned_files = records.list_files(shop, folder.id)

    logger.info(
        'Deleting folder: ID=%s, name=%s, files=%d',
        folder.id,
        folder.name,
        len(owned_files),
    )

    failed = [
        file_instance.path
        for file_instance in owned_files
        if not delete_blob_quietly(file_instance.path)
    ]
    if failed:
        logger.warning(
            'Folder %s: %d blobs could not be deleted (orphaned)',
            folder.id,
            len(failed),
        )

    records.delete_folder(shop, folder.id)
