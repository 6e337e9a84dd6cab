"""Shared fixtures for files app tests."""

import boto3
import pytest
from django.core.files.storage import storages
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.files.models import File, Folder

_LOCAL_BACKEND = 'server.apps.files.infrastructure.storage.LocalBlobStorage'
_S3_BACKEND = 'server.apps.files.infrastructure.storage.S3BlobStorage'


@pytest.fixture
def shop():
    """Tenant the tests act for."""
    return 'shop-1'


@pytest.fixture
def other_shop():
    """Second tenant for isolation tests."""
    return 'shop-2'


@pytest.fixture(autouse=True)
def blob_storage(settings, tmp_path):
    """Point the blob store at a temporary directory.

    Returns:
        LocalBlobStorage rooted in tmp_path/uploads (not created yet).
    """
    settings.STORAGES = {
        **settings.STORAGES,
        'files': {
            'BACKEND': _LOCAL_BACKEND,
            'OPTIONS': {'location': str(tmp_path / 'uploads')},
        },
    }
    return storages['files']


@pytest.fixture
def mock_s3():
    """Mock S3 service with shop-files bucket.

    Yields:
        boto3 S3 resource with shop-files bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket='shop-files')
        yield conn


@pytest.fixture
def s3_blob_storage(settings, mock_s3):
    """Use the S3 backend against the mocked bucket.

    Returns:
        S3BlobStorage instance.
    """
    settings.STORAGES = {
        **settings.STORAGES,
        'files': {
            'BACKEND': _S3_BACKEND,
            'OPTIONS': {
                'bucket_name': 'shop-files',
                'access_key': 'testing',
                'secret_key': 'testing',
                'region_name': 'us-east-1',
                'file_overwrite': False,
            },
        },
    }
    return storages['files']


@pytest.fixture
def invoice_upload():
    """Ten byte PDF upload as sent by the browser.

    Returns:
        SimpleUploadedFile named invoice.pdf.
    """
    return SimpleUploadedFile(
        'invoice.pdf',
        b'%PDF-1.4\n%',
        content_type='application/pdf',
    )


@pytest.fixture
def folder(db, shop):
    """Folder of the test shop."""
    return Folder.objects.create(shop=shop, name='Invoices')


@pytest.fixture
def foreign_folder(db, other_shop):
    """Folder owned by another shop."""
    return Folder.objects.create(shop=other_shop, name='Private')


@pytest.fixture
def make_file(db, shop):
    """Factory for File records without blobs.

    Returns:
        Callable creating File records; keyword arguments override fields.
    """
    counter = iter(range(1, 1000))

    def factory(**fields):
        number = next(counter)
        defaults = {
            'shop': shop,
            'filename': f'blob-{number}.txt',
            'original_name': f'file{number}.txt',
            'mime_type': 'text/plain',
            'size': 100,
            'path': f'blob-{number}.txt',
        }
        defaults.update(fields)
        return File.objects.create(**defaults)

    return factory
