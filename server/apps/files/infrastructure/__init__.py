"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Storage backends for blobs (local filesystem, S3-compatible)
- Blob store: generated storage keys, read/write/delete of bytes
- Metadata store: shop scoped queries over File and Folder records
- Metadata helpers (MIME type defaults, type categories)

Keep infrastructure concerns separate from business logic.
"""
