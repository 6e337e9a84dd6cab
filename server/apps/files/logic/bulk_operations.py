"""Business logic for operations on several files and folders at once.

Items are processed one by one. A failing item is logged and recorded
in the result; it never stops the remaining items.
"""

import dataclasses
import logging
from collections.abc import Callable, Iterable
from typing import Final

from django.core.exceptions import ValidationError

from server.apps.files.exceptions import FileManagerError, NotFoundError
from server.apps.files.logic.file_operations import (
    delete_file,
    move_file,
    resolve_folder,
)
from server.apps.files.logic.folder_operations import delete_folder

FILE_ITEM_PREFIX: Final = 'file-'
FOLDER_ITEM_PREFIX: Final = 'folder-'

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class BulkResult:
    """Per-item outcome of a bulk operation."""

    succeeded: list[str] = dataclasses.field(default_factory=list)
    failed: list[str] = dataclasses.field(default_factory=list)

    def apply(
        self,
        item: str,
        operation: Callable[..., object],
        *args: object,
    ) -> None:
        """Run operation for one item and record the outcome."""
        try:
            operation(*args)
        except NotFoundError as error:
            logger.warning('Bulk item failed: %s (%s)', item, error)
            self.failed.append(item)
        except (FileManagerError, ValidationError):
            logger.exception('Bulk item failed: %s', item)
            self.failed.append(item)
        else:
            self.succeeded.append(item)


def bulk_delete(shop: str, item_ids: Iterable[str]) -> BulkResult:
    """Delete a mix of files ('file-<id>') and folders ('folder-<id>').

    Files are processed before folders. Ids without a known prefix are
    reported as failed.

    Args:
        shop: Tenant identifier.
        item_ids: Prefixed item identifiers.

    Returns:
        BulkResult with succeeded and failed item ids.

    Raises:
        ValidationError: If no items were provided.
    """
    item_ids = list(item_ids)
    if not item_ids:
        raise ValidationError('No items provided')

    file_items = [
        item for item in item_ids if item.startswith(FILE_ITEM_PREFIX)
    ]
    folder_items = [
        item for item in item_ids if item.startswith(FOLDER_ITEM_PREFIX)
    ]

    result = BulkResult()
    for unknown in item_ids:
        if unknown not in file_items and unknown not in folder_items:
            logger.warning('Unknown bulk item type: %s', unknown)
            result.failed.append(unknown)

    for file_item in file_items:
        result.apply(
            file_item,
            delete_file,
            shop,
            file_item.removeprefix(FILE_ITEM_PREFIX),
        )
    for folder_item in folder_items:
        result.apply(
            folder_item,
            delete_folder,
            shop,
            folder_item.removeprefix(FOLDER_ITEM_PREFIX),
        )

    logger.info(
        'Bulk delete for %s: %d deleted, %d failed',
        shop,
        len(result.succeeded),
        len(result.failed),
    )
    return result


def bulk_move(
    shop: str,
    file_ids: Iterable[str],
    folder_id: object,
) -> BulkResult:
    """Move several files into one folder (or root).

    Args:
        shop: Tenant identifier.
        file_ids: File ids, bare or with the 'file-' prefix.
        folder_id: Target folder of the same shop, empty for root.

    Returns:
        BulkResult with succeeded and failed item ids.

    Raises:
        ValidationError: If no files were provided.
        NotFoundError: If the target folder is absent or foreign.
    """
    file_ids = list(file_ids)
    if not file_ids:
        raise ValidationError('No files provided')

    # Checked once up front: a foreign target would fail every item
    resolve_folder(shop, folder_id)

    result = BulkResult()
    for file_item in file_ids:
        result.apply(
            file_item,
            move_file,
            shop,
            file_item.removeprefix(FILE_ITEM_PREFIX),
            folder_id,
        )

    logger.info(
        'Bulk move for %s: %d moved, %d failed',
        shop,
        len(result.succeeded),
        len(result.failed),
    )
    return result
