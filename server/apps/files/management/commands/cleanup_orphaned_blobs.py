"""Management command to remove blobs that no file record references."""

import logging
from datetime import timedelta
from typing import Any, Final

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from server.apps.files.exceptions import BlobStorageError, NotFoundError
from server.apps.files.infrastructure import blobs
from server.apps.files.models import File

_DEFAULT_BATCH_SIZE: Final = 1000

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Delete blobs left behind by failed uploads or failed deletes."""

    help = 'Remove stored blobs without a file record'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=_DEFAULT_BATCH_SIZE,
            help=f'Max blobs to process (default: {_DEFAULT_BATCH_SIZE})',
        )
        parser.add_argument(
            '--grace-minutes',
            type=int,
            default=settings.FILES_ORPHAN_GRACE_MINUTES,
            help='Skip blobs younger than this (uploads still in flight)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']
        cutoff = timezone.now() - timedelta(minutes=options['grace_minutes'])

        self.stdout.write(f'Looking for orphaned blobs written before {cutoff}')

        referenced = set(File.objects.values_list('path', flat=True))
        try:
            stored = blobs.list_blobs()
        except BlobStorageError as exc:
            raise CommandError(str(exc)) from exc
        candidates = [
            path for path in sorted(stored)
            if path not in referenced
        ]

        count = 0
        failed = 0
        skipped = 0

        for path in candidates:
            if count + failed >= batch_size:
                break
            try:
                modified_at = blobs.blob_modified_at(path)
            except NotFoundError:
                # Removed since listing, e.g. by a concurrent delete
                skipped += 1
                continue
            except BlobStorageError as exc:
                self.stderr.write(f'Failed to inspect {path}: {exc}')
                logger.exception('Failed to inspect orphaned blob: %s', path)
                failed += 1
                continue
            if modified_at > cutoff:
                continue

            if dry_run:
                self.stdout.write(f'Would delete: {path}')
                count += 1
                continue

            try:
                blobs.delete_blob(path)
            except BlobStorageError as exc:
                self.stderr.write(f'Failed to delete {path}: {exc}')
                logger.exception('Failed to delete orphaned blob: %s', path)
                failed += 1
            else:
                logger.info('Deleted orphaned blob: %s', path)
                count += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would delete {count} orphaned blobs'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Deleted {count} orphaned blobs, {failed} failed, '
                    f'{skipped} skipped',
                ),
            )
