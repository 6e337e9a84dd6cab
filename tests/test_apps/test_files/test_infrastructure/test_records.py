"""Tests for the shop scoped metadata store."""

import datetime as dt
import uuid
from unittest import mock

import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.utils import timezone

from server.apps.files.exceptions import MetadataStoreError, NotFoundError
from server.apps.files.infrastructure import records
from server.apps.files.infrastructure.records import FolderScope
from server.apps.files.models import File, Folder


def test_parse_id():
    """Test UUIDs and their string forms parse, anything else is None."""
    identifier = uuid.uuid4()

    assert records.parse_id(identifier) == identifier
    assert records.parse_id(str(identifier)) == identifier
    assert records.parse_id('not-a-uuid') is None
    assert records.parse_id(None) is None


@pytest.mark.django_db
def test_list_files_scopes(shop, other_shop, folder, make_file):
    """Test ANY, ROOT and folder id filters."""
    root_file = make_file()
    folder_file = make_file(folder=folder)
    make_file(shop=other_shop)

    assert set(records.list_files(shop)) == {root_file, folder_file}
    assert records.list_files(shop, FolderScope.ROOT) == [root_file]
    assert records.list_files(shop, folder.id) == [folder_file]
    assert records.list_files(shop, str(folder.id)) == [folder_file]
    assert records.list_files(shop, 'not-a-uuid') == []


@pytest.mark.django_db
def test_list_files_newest_first(shop, make_file):
    """Test default order is newest first."""
    older = make_file()
    newer = make_file()
    File.objects.filter(id=older.id).update(
        created_at=timezone.now() - dt.timedelta(hours=1),
    )

    assert records.list_files(shop) == [newer, older]
    assert records.list_files(shop, order_by=('created_at',)) == [
        older,
        newer,
    ]


@pytest.mark.django_db
def test_list_files_foreign_folder(shop, other_shop, foreign_folder, make_file):
    """Test a shop never sees files of another shop's folder."""
    make_file(shop=other_shop, folder=foreign_folder)

    assert records.list_files(shop, foreign_folder.id) == []


@pytest.mark.django_db
def test_get_file(shop, other_shop, make_file):
    """Test lookup is scoped to the shop."""
    file_instance = make_file()

    assert records.get_file(shop, file_instance.id) == file_instance
    with pytest.raises(NotFoundError, match='File not found'):
        records.get_file(other_shop, file_instance.id)
    with pytest.raises(NotFoundError):
        records.get_file(shop, uuid.uuid4())
    with pytest.raises(NotFoundError):
        records.get_file(shop, 'not-a-uuid')


@pytest.mark.django_db
def test_get_folder(shop, folder, foreign_folder):
    """Test folder lookup is scoped to the shop."""
    assert records.get_folder(shop, str(folder.id)) == folder
    with pytest.raises(NotFoundError, match='Folder not found'):
        records.get_folder(shop, foreign_folder.id)


@pytest.mark.django_db
def test_create_file(shop, folder):
    """Test record is created with generated id and timestamps."""
    file_instance = records.create_file(
        shop=shop,
        filename='key.pdf',
        original_name='invoice.pdf',
        mime_type='application/pdf',
        size=10,
        path='key.pdf',
        folder=folder,
    )

    assert File.objects.get(id=file_instance.id).folder == folder
    assert file_instance.created_at is not None


@pytest.mark.django_db
def test_create_folder(shop):
    """Test folder names are trimmed and required."""
    assert records.create_folder(shop, '  Invoices ').name == 'Invoices'
    with pytest.raises(ValidationError):
        records.create_folder(shop, '   ')
    assert Folder.objects.count() == 1


@pytest.mark.django_db
def test_update_file_folder(shop, folder, make_file):
    """Test folder reference changes and updated_at advances."""
    file_instance = make_file()

    moved = records.update_file_folder(shop, file_instance.id, folder)
    assert moved.folder == folder
    assert moved.updated_at >= file_instance.updated_at

    back = records.update_file_folder(shop, file_instance.id, None)
    assert back.folder is None


@pytest.mark.django_db
def test_update_file_folder_other_shop(other_shop, make_file):
    """Test another shop cannot move the file."""
    file_instance = make_file()

    with pytest.raises(NotFoundError):
        records.update_file_folder(other_shop, file_instance.id, None)


@pytest.mark.django_db
def test_delete_file(shop, other_shop, make_file):
    """Test deletion is scoped and reports missing records."""
    file_instance = make_file()

    with pytest.raises(NotFoundError):
        records.delete_file(other_shop, file_instance.id)

    records.delete_file(shop, file_instance.id)

    with pytest.raises(NotFoundError):
        records.delete_file(shop, file_instance.id)


@pytest.mark.django_db
def test_delete_folder_cascades(shop, folder, make_file):
    """Test folder deletion removes its file records."""
    make_file(folder=folder)

    records.delete_folder(shop, folder.id)

    assert not File.objects.exists()
    with pytest.raises(NotFoundError):
        records.delete_folder(shop, folder.id)


@pytest.mark.django_db
def test_database_errors_are_wrapped(shop):
    """Test database failures surface as MetadataStoreError."""
    with mock.patch.object(
        Folder.objects,
        'create',
        side_effect=DatabaseError('database is locked'),
    ):
        with pytest.raises(MetadataStoreError, match='database is locked'):
            records.create_folder(shop, 'Invoices')
