"""Exceptions for files app.

Missing or empty input is reported with Django's ValidationError.
"""


class FileManagerError(Exception):
    """Base class for file manager failures reported to the caller."""


class NotFoundError(FileManagerError):
    """Raised when an entity is absent or owned by another shop.

    Both causes produce the same error, so other shops' identifiers
    are never revealed.
    """

    def __init__(self, entity: str, identifier: object) -> None:
        """Initialize NotFoundError.

        Args:
            entity: Entity name ('File', 'Folder').
            identifier: Identifier that was looked up.
        """
        self.entity = entity
        self.identifier = identifier
        super().__init__(f'{entity} not found')


class BlobStorageError(FileManagerError):
    """Raised when reading or writing blob content fails."""


class MetadataStoreError(FileManagerError):
    """Raised when the metadata database is unavailable or rejects a write."""
