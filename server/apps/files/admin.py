"""Django admin configuration for files app."""

from typing import Any, override

from django.contrib import admin
from django.db.models import Count, QuerySet
from django.forms import ModelForm
from django.http import HttpRequest

from server.apps.files.infrastructure.metadata import format_file_size
from server.apps.files.models import File, Folder


@admin.register(File)
class FileAdmin(admin.ModelAdmin[File]):
    """Admin interface for File model."""

    list_display = [
        'original_name',
        'shop',
        'folder',
        'size_display',
        'category_display',
        'created_at',
    ]

    list_filter = [
        'mime_type',
        'created_at',
        'shop',
    ]

    search_fields = [
        'original_name',
        'filename',
        'shop',
    ]

    # Storage fields are owned by the blob store
    readonly_fields = [
        'filename',
        'path',
        'size',
        'mime_type',
        'shop',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('original_name', 'shop', 'folder'),
        }),
        ('Storage', {
            'fields': ('filename', 'path', 'size', 'mime_type'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string (e.g., '1.5 MB', '234 Bytes').
        """
        return format_file_size(obj.size)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def category_display(self, obj: File) -> str:
        """Display coarse type category."""
        return obj.get_category()
    category_display.short_description = 'Type'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('folder')

    @override
    def get_form(
        self,
        request: HttpRequest,
        obj: File | None = None,
        change: bool = False,
        **kwargs: Any,
    ) -> type[ModelForm]:
        """Offer only folders of the file's own shop.

        Args:
            request: HTTP request.
            obj: Edited file.
            change: Whether an existing file is edited.
            kwargs: Passed to ModelAdmin.get_form.

        Returns:
            Form class with a shop scoped folder choice.
        """
        form = super().get_form(request, obj, change=change, **kwargs)
        if obj is not None and 'folder' in form.base_fields:
            folder_field = form.base_fields['folder']
            folder_field.queryset = (  # type: ignore[attr-defined]
                Folder.objects.filter(shop=obj.shop)
            )
        return form

    @override
    def has_add_permission(self, request: HttpRequest) -> bool:
        """Files are created by uploads only, never in the admin."""
        return False


@admin.register(Folder)
class FolderAdmin(admin.ModelAdmin[Folder]):
    """Admin interface for Folder model."""

    list_display = [
        'name',
        'shop',
        'file_count',
        'created_at',
    ]

    list_filter = [
        'shop',
        'created_at',
    ]

    search_fields = [
        'name',
        'shop',
    ]

    readonly_fields = ['created_at', 'updated_at']

    @override
    def get_readonly_fields(
        self,
        request: HttpRequest,
        obj: Folder | None = None,
    ) -> list[str]:
        """Shop is fixed once the folder exists.

        Args:
            request: HTTP request.
            obj: Edited folder, None when adding.

        Returns:
            Read-only field names.
        """
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            readonly.append('shop')
        return readonly

    def file_count(self, obj: Folder) -> int:
        """Count of files in this folder.

        Args:
            obj: Folder instance.

        Returns:
            Number of files in the folder.
        """
        return obj.file_count  # type: ignore[attr-defined]
    file_count.short_description = 'Files'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Folder]:
        """Annotate file counts.

        Args:
            request: HTTP request.

        Returns:
            Annotated QuerySet.
        """
        return super().get_queryset(request).annotate(file_count=Count('files'))
