"""Business logic layer for files app.

This package contains all business logic for file operations:
- File upload, download, delete, move
- Folder creation, listing and cascading deletion
- Bulk delete and bulk move
- Browsing: search, type filter, sorting
- Intent dispatch for the admin UI

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
