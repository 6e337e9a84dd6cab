"""Serializers for file manager responses and intent payloads.

Output serializers expose records with camelCase field names. Input
serializers validate the form fields posted with each intent.
"""

from typing import Any

from rest_framework import serializers

from server.apps.files.models import File, Folder

_INVALID_ID_LIST = 'Invalid {field}: expected a JSON list'


class FileSerializer(serializers.ModelSerializer):
    """Public shape of a File record."""

    originalName = serializers.CharField(  # noqa: N815
        source='original_name',
        read_only=True,
    )
    mimeType = serializers.CharField(  # noqa: N815
        source='mime_type',
        read_only=True,
    )
    folderId = serializers.UUIDField(  # noqa: N815
        source='folder_id',
        read_only=True,
    )
    category = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(  # noqa: N815
        source='created_at',
        read_only=True,
    )
    updatedAt = serializers.DateTimeField(  # noqa: N815
        source='updated_at',
        read_only=True,
    )

    class Meta:
        model = File
        fields = [
            'id',
            'filename',
            'originalName',
            'mimeType',
            'size',
            'path',
            'shop',
            'folderId',
            'category',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields

    def get_category(self, obj: File) -> str:
        """Coarse type category (image, document...)."""
        return obj.get_category()


class FolderSerializer(serializers.ModelSerializer):
    """Public shape of a Folder record.

    `fileCount` is only present on folders loaded with the `file_count`
    annotation.
    """

    fileCount = serializers.IntegerField(  # noqa: N815
        source='file_count',
        read_only=True,
    )
    createdAt = serializers.DateTimeField(  # noqa: N815
        source='created_at',
        read_only=True,
    )
    updatedAt = serializers.DateTimeField(  # noqa: N815
        source='updated_at',
        read_only=True,
    )

    class Meta:
        model = Folder
        fields = ['id', 'name', 'shop', 'createdAt', 'updatedAt', 'fileCount']
        read_only_fields = fields


def _required_id(message: str) -> serializers.CharField:
    return serializers.CharField(
        error_messages={'required': message, 'blank': message, 'null': message},
    )


def _optional_id() -> serializers.CharField:
    return serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
    )


def _id_list(message: str, field: str) -> serializers.JSONField:
    # Lists arrive as one JSON encoded form field
    return serializers.JSONField(
        binary=True,
        error_messages={
            'required': message,
            'null': message,
            'invalid': _INVALID_ID_LIST.format(field=field),
        },
    )


def _validate_id_list(value: Any, field: str) -> list[str]:
    id_list = serializers.ListField(child=serializers.CharField())
    try:
        return id_list.run_validation(value)
    except serializers.ValidationError as error:
        raise serializers.ValidationError(
            _INVALID_ID_LIST.format(field=field),
        ) from error


class CreateFolderSerializer(serializers.Serializer):
    """Payload of the create-folder intent.

    The name is trimmed and checked by the metadata store.
    """

    name = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
    )


class DeleteFolderSerializer(serializers.Serializer):
    """Payload of the delete-folder intent."""

    folderId = _required_id('No folder ID provided')  # noqa: N815


class UploadSerializer(serializers.Serializer):
    """Payload of the upload intent."""

    file = serializers.FileField(
        allow_empty_file=True,
        error_messages={
            'required': 'No file provided',
            'null': 'No file provided',
            'no_name': 'File name is required',
        },
    )
    folderId = _optional_id()  # noqa: N815


class DeleteFileSerializer(serializers.Serializer):
    """Payload of the delete intent."""

    fileId = _required_id('No file ID provided')  # noqa: N815


class MoveFileSerializer(serializers.Serializer):
    """Payload of the move-file intent, empty folderId means root."""

    fileId = _required_id('No file ID provided')  # noqa: N815
    folderId = _optional_id()  # noqa: N815


class BulkDeleteSerializer(serializers.Serializer):
    """Payload of the bulk-delete intent."""

    itemIds = _id_list('No items provided', 'itemIds')  # noqa: N815

    def validate_itemIds(self, value: Any) -> list[str]:  # noqa: N802
        """Item ids must be a list of strings."""
        return _validate_id_list(value, 'itemIds')


class BulkMoveSerializer(serializers.Serializer):
    """Payload of the bulk-move intent."""

    fileIds = _id_list('No files provided', 'fileIds')  # noqa: N815
    folderId = _optional_id()  # noqa: N815

    def validate_fileIds(self, value: Any) -> list[str]:  # noqa: N802
        """File ids must be a list of strings."""
        return _validate_id_list(value, 'fileIds')
