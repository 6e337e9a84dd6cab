"""Metadata store: shop scoped CRUD over File and Folder records.

Every query filters by shop. A record owned by another shop behaves
exactly like a record that does not exist.
"""

import enum
import functools
import logging
import uuid
from collections.abc import Callable, Sequence
from typing import Final, ParamSpec, TypeVar

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.db.models import Count, Expression, QuerySet
from django.utils import timezone

from server.apps.files.exceptions import MetadataStoreError, NotFoundError
from server.apps.files.models import File, Folder

_DEFAULT_ORDERING: Final = ('-created_at',)

_Params = ParamSpec('_Params')
_Result = TypeVar('_Result')

logger = logging.getLogger(__name__)


class FolderScope(enum.Enum):
    """Folder filter for file listings that is not a concrete folder."""

    ANY = 'any'
    ROOT = 'root'


FolderFilter = FolderScope | uuid.UUID | str


def _store_errors(
    func: Callable[_Params, _Result],
) -> Callable[_Params, _Result]:
    """Wrap database failures into MetadataStoreError."""
    @functools.wraps(func)
    def wrapper(*args: _Params.args, **kwargs: _Params.kwargs) -> _Result:
        try:
            return func(*args, **kwargs)
        except DatabaseError as error:
            logger.exception('Metadata store failure in %s', func.__name__)
            raise MetadataStoreError(
                f'Metadata store unavailable: {error}',
            ) from error
    return wrapper


def parse_id(identifier: object) -> uuid.UUID | None:
    """Parse record identifier.

    Args:
        identifier: UUID or its string form.

    Returns:
        Parsed UUID, None if the identifier is malformed.
    """
    if isinstance(identifier, uuid.UUID):
        return identifier
    try:
        return uuid.UUID(str(identifier))
    except ValueError:
        return None


def _files_in_scope(shop: str, folder: FolderFilter) -> QuerySet[File]:
    files = File.objects.filter(shop=shop)
    if folder is FolderScope.ANY:
        return files
    if folder is FolderScope.ROOT:
        return files.filter(folder__isnull=True)
    folder_id = parse_id(folder)
    if folder_id is None:
        return files.none()
    return files.filter(folder_id=folder_id)


@_store_errors
def list_files(
    shop: str,
    folder: FolderFilter = FolderScope.ANY,
    order_by: Sequence[str | Expression] = _DEFAULT_ORDERING,
) -> list[File]:
    """List files of a shop.

    Args:
        shop: Tenant identifier.
        folder: FolderScope.ANY for every file, FolderScope.ROOT for files
            outside any folder, or a folder id for that folder only.
        order_by: ORM ordering expressions.

    Returns:
        Ordered list of File records.
    """
    return list(_files_in_scope(shop, folder).order_by(*order_by))


@_store_errors
def list_folders(
    shop: str,
    order_by: Sequence[str | Expression] = _DEFAULT_ORDERING,
) -> list[Folder]:
    """List folders of a shop, each annotated with `file_count`."""
    return list(
        Folder.objects.filter(shop=shop)
        .annotate(file_count=Count('files'))
        .order_by(*order_by),
    )


@_store_errors
def get_file(shop: str, file_id: object) -> File:
    """Get a shop's file.

    Raises:
        NotFoundError: If absent or owned by another shop.
    """
    parsed_id = parse_id(file_id)
    if parsed_id is None:
        raise NotFoundError('File', file_id)
    try:
        return File.objects.get(id=parsed_id, shop=shop)
    except File.DoesNotExist as error:
        raise NotFoundError('File', file_id) from error


@_store_errors
def get_folder(shop: str, folder_id: object) -> Folder:
    """Get a shop's folder.

    Raises:
        NotFoundError: If absent or owned by another shop.
    """
    parsed_id = parse_id(folder_id)
    if parsed_id is None:
        raise NotFoundError('Folder', folder_id)
    try:
        return Folder.objects.get(id=parsed_id, shop=shop)
    except Folder.DoesNotExist as error:
        raise NotFoundError('Folder', folder_id) from error


@_store_errors
def create_file(  # noqa: WPS211
    *,
    shop: str,
    filename: str,
    original_name: str,
    mime_type: str,
    size: int,
    path: str,
    folder: Folder | None = None,
) -> File:
    """Create file record with generated id and timestamps."""
    file_instance = File.objects.create(
        shop=shop,
        filename=filename,
        original_name=original_name,
        mime_type=mime_type,
        size=size,
        path=path,
        folder=folder,
    )
    logger.info(
        'File record created: %s (ID: %s, shop: %s)',
        path,
        file_instance.id,
        shop,
    )
    return file_instance


@_store_errors
def create_folder(shop: str, name: str | None) -> Folder:
    """Create folder record.

    Args:
        shop: Tenant identifier.
        name: Folder name, surrounding whitespace is removed.

    Returns:
        Created Folder.

    Raises:
        ValidationError: If the name is empty after trimming.
    """
    name = (name or '').strip()
    if not name:
        raise ValidationError('Folder name is required')

    folder = Folder.objects.create(shop=shop, name=name)
    logger.info('Folder created: %s (ID: %s, shop: %s)', name, folder.id, shop)
    return folder


@_store_errors
def update_file_folder(
    shop: str,
    file_id: object,
    folder: Folder | None,
) -> File:
    """Point a file at another folder (or root when folder is None).

    A single UPDATE statement, so it is atomic at row level. Setting the
    current folder again succeeds.

    Raises:
        NotFoundError: If the file is absent or owned by another shop.
    """
    parsed_id = parse_id(file_id)
    if parsed_id is None:
        raise NotFoundError('File', file_id)

    updated = File.objects.filter(id=parsed_id, shop=shop).update(
        folder=folder,
        updated_at=timezone.now(),
    )
    if updated == 0:
        raise NotFoundError('File', file_id)
    try:
        return File.objects.get(id=parsed_id, shop=shop)
    except File.DoesNotExist as error:
        # Deleted between the update and the read
        raise NotFoundError('File', file_id) from error


@_store_errors
def delete_file(shop: str, file_id: object) -> None:
    """Delete a shop's file record.

    Raises:
        NotFoundError: If nothing was deleted.
    """
    parsed_id = parse_id(file_id)
    if parsed_id is None:
        raise NotFoundError('File', file_id)

    deleted, _ = File.objects.filter(id=parsed_id, shop=shop).delete()
    if deleted == 0:
        raise NotFoundError('File', file_id)
    logger.info('File record deleted: ID=%s', parsed_id)


@_store_errors
def delete_folder(shop: str, folder_id: object) -> None:
    """Delete a shop's folder record and, by cascade, its file records.

    Raises:
        NotFoundError: If nothing was deleted.
    """
    parsed_id = parse_id(folder_id)
    if parsed_id is None:
        raise NotFoundError('Folder', folder_id)

    deleted, per_model = Folder.objects.filter(id=parsed_id, shop=shop).delete()
    if deleted == 0:
        raise NotFoundError('Folder', folder_id)
    logger.info(
        'Folder record deleted: ID=%s (%d file records)',
        parsed_id,
        per_model.get(File._meta.label, 0),  # noqa: WPS437
    )
