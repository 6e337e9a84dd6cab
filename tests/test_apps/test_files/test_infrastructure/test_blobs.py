"""Tests for the blob store on the local filesystem backend."""

import logging
import os
from pathlib import Path
from unittest import mock

import pytest

from server.apps.files.exceptions import BlobStorageError, NotFoundError
from server.apps.files.infrastructure import blobs
from server.apps.files.infrastructure.storage import LocalBlobStorage


def test_ensure_store_ready_creates_root(blob_storage):
    """Test storage directory is created on demand."""
    assert not Path(blob_storage.location).exists()

    blobs.ensure_store_ready()

    assert Path(blob_storage.location).is_dir()


def test_ensure_store_ready_idempotent(blob_storage):
    """Test repeated calls are harmless."""
    blobs.ensure_store_ready()
    blobs.ensure_store_ready()

    assert Path(blob_storage.location).is_dir()


def test_ensure_store_ready_failure():
    """Test unusable storage root surfaces as BlobStorageError."""
    with mock.patch(
        'server.apps.files.infrastructure.storage.os.makedirs',
        side_effect=PermissionError('read-only filesystem'),
    ):
        with pytest.raises(BlobStorageError):
            blobs.ensure_store_ready()


def test_write_and_read_blob(blob_storage):
    """Test bytes written are read back unchanged."""
    path = blobs.write_blob('report.pdf', b'binary\x00content')

    assert blobs.read_blob(path) == b'binary\x00content'
    assert (Path(blob_storage.location) / path).read_bytes() == (
        b'binary\x00content'
    )


def test_write_blob_key_contains_original_name():
    """Test generated key keeps a sanitized client filename."""
    path = blobs.write_blob('my report.pdf', b'data')

    assert path.endswith('-my_report.pdf')
    assert blobs.blob_filename(path) == path


def test_write_blob_same_name_never_collides():
    """Test identical original names get distinct keys."""
    paths = {blobs.write_blob('invoice.pdf', b'data') for _ in range(20)}

    assert len(paths) == 20


def test_generate_storage_key_strips_directories():
    """Test client supplied directories never reach the key."""
    key = blobs.generate_storage_key('../../etc/passwd')

    assert '/' not in key
    assert key.endswith('-passwd')


@pytest.mark.parametrize('original_name', ['', '.', '..'])
def test_generate_storage_key_fallback_name(original_name):
    """Test unusable names fall back to a generic one."""
    key = blobs.generate_storage_key(original_name)

    assert key.endswith('-file')


def test_write_blob_failure():
    """Test write errors are reported as BlobStorageError."""
    with mock.patch.object(
        LocalBlobStorage,
        '_save',
        side_effect=OSError('No space left on device'),
    ):
        with pytest.raises(BlobStorageError, match='No space left'):
            blobs.write_blob('report.pdf', b'data')


def test_read_blob_missing():
    """Test reading a path that never existed raises NotFoundError."""
    blobs.ensure_store_ready()

    with pytest.raises(NotFoundError):
        blobs.read_blob('never-written.txt')


def test_read_blob_removed():
    """Test reading a removed blob raises NotFoundError."""
    path = blobs.write_blob('gone.txt', b'data')
    blobs.delete_blob(path)

    with pytest.raises(NotFoundError):
        blobs.read_blob(path)


def test_delete_blob_twice():
    """Test deleting the same path twice never raises."""
    path = blobs.write_blob('twice.txt', b'data')

    blobs.delete_blob(path)
    blobs.delete_blob(path)

    assert not blobs.blob_exists(path)


def test_delete_blob_failure():
    """Test storage errors on delete are reported as BlobStorageError."""
    path = blobs.write_blob('locked.txt', b'data')

    with mock.patch.object(
        os,
        'remove',
        side_effect=PermissionError('permission denied'),
    ):
        with pytest.raises(BlobStorageError):
            blobs.delete_blob(path)

    assert blobs.blob_exists(path)


def test_list_blobs():
    """Test listing returns every stored key."""
    assert blobs.list_blobs() == []

    first = blobs.write_blob('a.txt', b'a')
    second = blobs.write_blob('b.txt', b'b')

    assert sorted(blobs.list_blobs()) == sorted([first, second])


def test_blob_modified_at():
    """Test modification time is available for stored blobs."""
    path = blobs.write_blob('a.txt', b'a')

    assert blobs.blob_modified_at(path).tzinfo is not None


def test_list_blobs_failure():
    """Test listing errors are reported as BlobStorageError."""
    blobs.ensure_store_ready()

    with mock.patch.object(
        LocalBlobStorage,
        'listdir',
        side_effect=PermissionError('permission denied'),
    ):
        with pytest.raises(BlobStorageError, match='Failed to list files'):
            blobs.list_blobs()


def test_blob_modified_at_missing():
    """Test modification time of a removed blob raises NotFoundError."""
    path = blobs.write_blob('gone.txt', b'data')
    blobs.delete_blob(path)

    with pytest.raises(NotFoundError):
        blobs.blob_modified_at(path)


def test_blob_modified_at_failure():
    """Test storage errors on an existing blob become BlobStorageError."""
    path = blobs.write_blob('a.txt', b'a')

    with mock.patch.object(
        LocalBlobStorage,
        'get_modified_time',
        side_effect=PermissionError('permission denied'),
    ):
        with pytest.raises(BlobStorageError, match='Failed to read file time'):
            blobs.blob_modified_at(path)


def test_storage_logs_save_and_delete(caplog):
    """Test the storage backend logs writes and deletions by key."""
    with caplog.at_level(logging.INFO):
        path = blobs.write_blob('logged.txt', b'data')
        blobs.delete_blob(path)

    messages = [
        record.getMessage() for record in caplog.records
        if record.name == 'server.apps.files.infrastructure.storage'
    ]
    assert f'Successfully wrote blob: {path}' in messages
    assert f'Successfully deleted blob: {path}' in messages
