"""Business logic for browsing: search, type filter and sorting."""

import dataclasses
import logging
from typing import Final

from django.core.exceptions import ValidationError
from django.db.models.functions import Lower

from server.apps.files.infrastructure import records
from server.apps.files.infrastructure.metadata import (
    CATEGORY_ALL,
    FILE_CATEGORIES,
)
from server.apps.files.infrastructure.records import FolderFilter, FolderScope
from server.apps.files.models import File, Folder

SORT_ORDERS: Final = ('asc', 'desc')

# Sort key -> ordering expression, id as tie breaker for stable pages
_SORT_FIELDS: Final = {
    'name': Lower('original_name'),
    'date': 'created_at',
    'size': 'size',
    'type': 'mime_type',
}

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Listing:
    """One page of the file manager: all folders plus the browsed files."""

    folders: list[Folder]
    files: list[File]
    folder: FolderFilter


def browse_files(  # noqa: WPS211
    shop: str,
    folder: FolderFilter = FolderScope.ROOT,
    *,
    query: str = '',
    category: str = CATEGORY_ALL,
    sort_by: str = 'name',
    sort_order: str = 'asc',
) -> list[File]:
    """List files of a folder filtered by name and type, then sorted.

    Args:
        shop: Tenant identifier.
        folder: FolderScope.ROOT, FolderScope.ANY or a folder id.
        query: Case-insensitive substring of the original filename.
        category: 'all' or one of FILE_CATEGORIES.
        sort_by: One of 'name', 'date', 'size', 'type'.
        sort_order: 'asc' or 'desc'.

    Returns:
        Matching files in the requested order.

    Raises:
        ValidationError: If category, sort_by or sort_order is unknown.
    """
    if category != CATEGORY_ALL and category not in FILE_CATEGORIES:
        raise ValidationError(f'Unknown file type filter: {category}')
    if sort_by not in _SORT_FIELDS:
        raise ValidationError(f'Unknown sort field: {sort_by}')
    if sort_order not in SORT_ORDERS:
        raise ValidationError(f'Unknown sort order: {sort_order}')

    ordering = _SORT_FIELDS[sort_by]
    if sort_order == 'desc' and isinstance(ordering, Lower):
        ordering = ordering.desc()
    elif sort_order == 'desc':
        ordering = f'-{ordering}'

    files = records.list_files(shop, folder, order_by=(ordering, 'id'))

    query = query.strip().lower()
    if query:
        files = [
            file_instance for file_instance in files
            if query in file_instance.original_name.lower()
        ]

    # Category follows MIME matching rules that do not map onto SQL
    if category != CATEGORY_ALL:
        files = [
            file_instance for file_instance in files
            if file_instance.get_category() == category
        ]

    logger.debug(
        'Browsed %s in %s: %d files (query=%r, category=%s)',
        shop,
        folder,
        len(files),
        query,
        category,
    )
    return files


def browse_folders(
    shop: str,
    *,
    query: str = '',
    sort_order: str = 'asc',
) -> list[Folder]:
    """List folders filtered by name and sorted by name.

    Args:
        shop: Tenant identifier.
        query: Case-insensitive substring of the folder name.
        sort_order: 'asc' or 'desc'.

    Returns:
        Matching folders annotated with `file_count`.

    Raises:
        ValidationError: If sort_order is unknown.
    """
    if sort_order not in SORT_ORDERS:
        raise ValidationError(f'Unknown sort order: {sort_order}')

    ordering = Lower('name')
    if sort_order == 'desc':
        ordering = ordering.desc()
    folders = records.list_folders(shop, order_by=(ordering, 'id'))

    query = query.strip().lower()
    if query:
        folders = [folder for folder in folders if query in folder.name.lower()]
    return folders


def build_listing(  # noqa: WPS211
    shop: str,
    folder: FolderFilter = FolderScope.ROOT,
    *,
    query: str = '',
    category: str = CATEGORY_ALL,
    sort_by: str = 'name',
    sort_order: str = 'asc',
) -> Listing:
    """Browsed files of the current folder, plus folders at top level.

    Folders are only listed outside a concrete folder, since folders
    never contain other folders.
    """
    files = browse_files(
        shop,
        folder,
        query=query,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    folders = []
    if isinstance(folder, FolderScope):
        folders = browse_folders(shop, query=query, sort_order=sort_order)
    return Listing(folders=folders, files=files, folder=folder)
