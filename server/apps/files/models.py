"""Database models for files app."""

import uuid
from typing import Final, final, override

from django.core.exceptions import ValidationError
from django.db import models

from server.apps.files.infrastructure.metadata import (
    DEFAULT_MIME_TYPE,
    get_file_category,
    get_file_extension,
    get_file_type_name,
)

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_SHOP_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255
_PATH_MAX_LENGTH: Final = 1024


@final
class Folder(models.Model):
    """Named group of files owned by one shop.

    Folders are flat: a folder never has a parent folder. Deleting a
    folder deletes every File record referencing it.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    name = models.CharField(max_length=_NAME_MAX_LENGTH)

    # Tenant scope
    shop = models.CharField(
        max_length=_SHOP_MAX_LENGTH,
        db_index=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Folder'  # type: ignore[mutable-override]
        verbose_name_plural = 'Folders'  # type: ignore[mutable-override]
        ordering = ['-created_at']

        indexes = [
            models.Index(
                fields=['shop', '-created_at'],
                name='folders_shop_recent_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.shop}:{self.name}'


@final
class File(models.Model):
    """Metadata of an uploaded file whose bytes live in blob storage.

    `path` is the opaque storage key produced by the blob store; only
    the blob store knows how to build or interpret it.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    filename = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Server generated name of the stored blob',
    )

    original_name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Filename supplied by the client on upload',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        default=DEFAULT_MIME_TYPE,
    )

    size = models.BigIntegerField(
        help_text='File size in bytes',
    )

    path = models.CharField(
        max_length=_PATH_MAX_LENGTH,
        unique=True,
        help_text='Storage key of the blob',
    )

    # Tenant scope, never changes after creation
    shop = models.CharField(
        max_length=_SHOP_MAX_LENGTH,
        db_index=True,
    )

    folder = models.ForeignKey(
        Folder,
        on_delete=models.CASCADE,
        related_name='files',
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering = ['-created_at']

        indexes = [
            # Optimize folder listing queries
            models.Index(
                fields=['shop', 'folder'],
                name='files_shop_folder_idx',
            ),
            # Optimize recent files queries
            models.Index(
                fields=['shop', '-created_at'],
                name='files_shop_recent_idx',
            ),
        ]

        constraints = [
            models.CheckConstraint(
                condition=models.Q(size__gte=0),
                name='files_size_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.shop}:{self.original_name}'

    @override
    def clean(self) -> None:
        """Keep the file and its folder in the same shop.

        Raises:
            ValidationError: If the folder belongs to another shop.
        """
        super().clean()
        if self.folder is not None and self.folder.shop != self.shop:
            raise ValidationError(
                {'folder': 'Folder belongs to another shop'},
            )

    def get_extension(self) -> str:
        """Extract extension of the original filename.

        Example: 'Invoice.PDF' -> 'pdf'

        Returns:
            Extension without dot (lowercase).
        """
        return get_file_extension(self.original_name)

    def get_category(self) -> str:
        """Coarse type category used for filtering (image, document...)."""
        return get_file_category(self.mime_type)

    def get_type_name(self) -> str:
        """Short type label for display (PDF, DOC, ...)."""
        return get_file_type_name(self.mime_type)
