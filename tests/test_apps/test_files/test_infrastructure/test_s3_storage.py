"""Tests for the blob store on the S3 backend (mocked with moto)."""

import pytest
from botocore.exceptions import ClientError

from server.apps.files.exceptions import NotFoundError
from server.apps.files.infrastructure import blobs
from server.apps.files.infrastructure.storage import S3BlobStorage
from server.apps.files.logic.file_operations import (
    delete_file,
    download_file,
    upload_file,
)


def _object_keys(mock_s3):
    return [item.key for item in mock_s3.Bucket('shop-files').objects.all()]


def test_write_and_read_blob(s3_blob_storage, mock_s3):
    """Test bytes land in the bucket under the returned key."""
    path = blobs.write_blob('report.pdf', b'binary\x00content')

    assert _object_keys(mock_s3) == [path]
    assert blobs.read_blob(path) == b'binary\x00content'


def test_read_missing_blob(s3_blob_storage):
    """Test missing objects raise NotFoundError."""
    with pytest.raises(NotFoundError):
        blobs.read_blob('never-written.txt')


def test_delete_blob(s3_blob_storage, mock_s3):
    """Test deleted objects are gone and a second delete is harmless."""
    path = blobs.write_blob('report.pdf', b'data')

    blobs.delete_blob(path)
    blobs.delete_blob(path)

    assert _object_keys(mock_s3) == []


def test_list_blobs(s3_blob_storage):
    """Test listing returns keys at the bucket root."""
    first = blobs.write_blob('a.txt', b'a')
    second = blobs.write_blob('b.txt', b'b')

    assert sorted(blobs.list_blobs()) == sorted([first, second])
    assert blobs.blob_modified_at(first).tzinfo is not None


def test_ensure_ready_existing_bucket(s3_blob_storage):
    """Test an existing bucket is left alone."""
    blobs.ensure_store_ready()

    assert blobs.list_blobs() == []


def test_ensure_ready_creates_bucket(mock_s3):
    """Test a missing bucket is created."""
    storage = S3BlobStorage(
        bucket_name='fresh-bucket',
        access_key='testing',
        secret_key='testing',
        region_name='us-east-1',
    )
    client = storage.connection.meta.client
    with pytest.raises(ClientError):
        client.head_bucket(Bucket='fresh-bucket')

    storage.ensure_ready()
    storage.ensure_ready()

    client.head_bucket(Bucket='fresh-bucket')


@pytest.mark.django_db
def test_file_lifecycle(s3_blob_storage, mock_s3, shop, invoice_upload):
    """Test upload, download and delete against the bucket."""
    file_instance = upload_file(shop, invoice_upload)
    assert _object_keys(mock_s3) == [file_instance.path]

    download = download_file(shop, file_instance.id)
    assert download.content == b'%PDF-1.4\n%'

    delete_file(shop, file_instance.id)
    assert _object_keys(mock_s3) == []
