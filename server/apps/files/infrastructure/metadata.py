"""Metadata helpers for uploaded files."""

from pathlib import Path
from typing import Final

DEFAULT_MIME_TYPE: Final = 'application/octet-stream'

CATEGORY_ALL: Final = 'all'

# Order matters: first matching rule wins in get_file_category
FILE_CATEGORIES: Final = (
    'image',
    'video',
    'audio',
    'document',
    'spreadsheet',
    'archive',
    'other',
)

_KILOBYTE: Final = 1024
_SIZE_UNITS: Final = ('Bytes', 'KB', 'MB', 'GB')


def resolve_mime_type(mime_type: str | None) -> str:
    """Return the client supplied MIME type or the default.

    Args:
        mime_type: MIME type sent by the client, possibly empty.

    Returns:
        Normalized MIME type, 'application/octet-stream' when absent.
    """
    if mime_type is None:
        return DEFAULT_MIME_TYPE
    mime_type = mime_type.strip()
    return mime_type or DEFAULT_MIME_TYPE


def get_file_category(mime_type: str) -> str:  # noqa: WPS212
    """Classify MIME type into a coarse category.

    Args:
        mime_type: MIME type (e.g., 'application/pdf').

    Returns:
        One of FILE_CATEGORIES.
    """
    if mime_type.startswith('image/'):
        return 'image'
    if mime_type.startswith('video/'):
        return 'video'
    if mime_type.startswith('audio/'):
        return 'audio'
    if 'pdf' in mime_type:
        return 'document'
    if any(marker in mime_type for marker in ('word', 'document', 'text')):
        return 'document'
    if 'sheet' in mime_type or 'excel' in mime_type:
        return 'spreadsheet'
    if 'zip' in mime_type or 'archive' in mime_type:
        return 'archive'
    return 'other'


def get_file_type_name(mime_type: str) -> str:  # noqa: WPS212
    """Short label for a MIME type (e.g., 'PDF', 'Image')."""
    if mime_type.startswith('image/'):
        return 'Image'
    if mime_type.startswith('video/'):
        return 'Video'
    if 'pdf' in mime_type:
        return 'PDF'
    if 'zip' in mime_type:
        return 'ZIP'
    if 'word' in mime_type:
        return 'DOC'
    if 'sheet' in mime_type:
        return 'XLS'
    if 'html' in mime_type:
        return 'HTML'
    if 'text' in mime_type:
        return 'TXT'
    return 'FILE'


def format_file_size(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 Bytes').
    """
    if size_bytes <= 0:
        return '0 Bytes'

    size = float(size_bytes)
    unit_index = 0
    while size >= _KILOBYTE and unit_index < len(_SIZE_UNITS) - 1:
        size /= _KILOBYTE
        unit_index += 1

    return f'{round(size, 2):g} {_SIZE_UNITS[unit_index]}'


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = Path(filename).suffix
    return extension.lstrip('.').lower()
