"""Dispatch of file manager form intents to business operations.

Every known failure is turned into an OperationResult with a message the
admin UI can show, so callers never see a raw exception.
"""

import dataclasses
import logging
from collections.abc import Callable, Mapping
from http import HTTPStatus
from typing import Any, Final

from django.core.exceptions import ValidationError
from rest_framework import serializers

from server.apps.files import serializers as payloads
from server.apps.files.exceptions import FileManagerError, NotFoundError
from server.apps.files.logic import bulk_operations, file_operations
from server.apps.files.logic import folder_operations

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class OperationResult:
    """Outcome of one intent."""

    success: bool
    error: str | None = None
    status: HTTPStatus = HTTPStatus.OK
    data: dict[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def ok(cls, **data: Any) -> 'OperationResult':
        """Successful result carrying optional payload."""
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, message: str, status: HTTPStatus) -> 'OperationResult':
        """Failed result with a human-readable message."""
        return cls(success=False, error=message, status=status)

    def as_dict(self) -> dict[str, Any]:
        """JSON body for the response."""
        if self.success:
            return {'success': True, **self.data}
        return {'success': False, 'error': self.error}


_Handler = Callable[
    [str, Mapping[str, Any], Mapping[str, Any]],
    OperationResult,
]



def handle_intent(
    shop: str,
    intent: str | None,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    """Run the operation named by intent.

    Args:
        shop: Tenant identifier resolved by the caller.
        intent: Intent name (e.g., 'upload', 'bulk-delete').
        data: Form fields.
        files: Uploaded files.

    Returns:
        OperationResult describing success or failure.
    """
    handler = _HANDLERS.get(intent or '')
    if handler is None:
        logger.warning('Invalid intent from %s: %r', shop, intent)
        return OperationResult.failure('Invalid intent', HTTPStatus.BAD_REQUEST)

    try:
        return handler(shop, data, files)
    except serializers.ValidationError as error:
        return OperationResult.failure(
            ' '.join(_error_messages(error.detail)),
            HTTPStatus.BAD_REQUEST,
        )
    except ValidationError as error:
        return OperationResult.failure(
            ' '.join(error.messages),
            HTTPStatus.BAD_REQUEST,
        )
    except NotFoundError as error:
        return OperationResult.failure(str(error), HTTPStatus.NOT_FOUND)
    except FileManagerError as error:
        logger.exception('Intent %s failed for %s', intent, shop)
        return OperationResult.failure(
            str(error),
            HTTPStatus.INTERNAL_SERVER_ERROR,
        )


def _create_folder(
    shop: str,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    payload = _validated(payloads.CreateFolderSerializer, data)
    folder = folder_operations.create_folder(shop, payload.get('name'))
    return OperationResult.ok(folder=payloads.FolderSerializer(folder).data)


def _delete_folder(
    shop: str,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    payload = _validated(payloads.DeleteFolderSerializer, data)
    folder_operations.delete_folder(shop, payload['folderId'])
    return OperationResult.ok()


def _upload(
    shop: str,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    payload = _validated(payloads.UploadSerializer, {
        'file': files.get('file'),
        'folderId': data.get('folderId'),
    })
    file_instance = file_operations.upload_file(
        shop,
        payload['file'],
        folder_id=payload.get('folderId') or None,
    )
    return OperationResult.ok(file=payloads.FileSerializer(file_instance).data)


def _delete(
    shop: str,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    payload = _validated(payloads.DeleteFileSerializer, data)
    file_operations.delete_file(shop, payload['fileId'])
    return OperationResult.ok()


def _bulk_delete(
    shop: str,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    payload = _validated(payloads.BulkDeleteSerializer, data)
    result = bulk_operations.bulk_delete(shop, payload['itemIds'])
    return OperationResult.ok(deleted=result.succeeded, failed=result.failed)


def _move_file(
    shop: str,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    payload = _validated(payloads.MoveFileSerializer, data)
    file_instance = file_operations.move_file(
        shop,
        payload['fileId'],
        payload.get('folderId') or None,
    )
    return OperationResult.ok(file=payloads.FileSerializer(file_instance).data)


def _bulk_move(
    shop: str,
    data: Mapping[str, Any],
    files: Mapping[str, Any],
) -> OperationResult:
    payload = _validated(payloads.BulkMoveSerializer, data)
    result = bulk_operations.bulk_move(
        shop,
        payload['fileIds'],
        payload.get('folderId') or None,
    )
    return OperationResult.ok(moved=result.succeeded, failed=result.failed)


def _validated(
    serializer_class: type[serializers.Serializer],
    data: Mapping[str, Any],
) -> dict[str, Any]:
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _error_messages(detail: Any) -> list[str]:
    """Flatten DRF error details into plain messages."""
    if isinstance(detail, Mapping):
        return [
            message
            for field_errors in detail.values()
            for message in _error_messages(field_errors)
        ]
    if isinstance(detail, list):
        return [
            message for item in detail for message in _error_messages(item)
        ]
    return [str(detail)]


_HANDLERS: Final[dict[str, _Handler]] = {
    'create-folder': _create_folder,
    'delete-folder': _delete_folder,
    'upload': _upload,
    'delete': _delete,
    'bulk-delete': _bulk_delete,
    'move-file': _move_file,
    'bulk-move': _bulk_move,
}
