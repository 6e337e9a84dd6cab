"""Django storage configuration for uploaded shop files.

Blobs are kept on the local filesystem by default. Any S3-compatible
object store (MinIO, Cloudflare R2, AWS) can be used instead by setting
FILES_STORAGE_BACKEND=s3 and the AWS_* variables.
"""

from typing import Any, Final

from server.settings.components import BASE_DIR, config

FILES_STORAGE_BACKEND = config('FILES_STORAGE_BACKEND', default='filesystem')

FILES_STORAGE_ROOT = config(
    'FILES_STORAGE_ROOT',
    default=str(BASE_DIR.joinpath('uploads')),
)


def _files_storage() -> dict[str, Any]:
    if FILES_STORAGE_BACKEND == 's3':
        return {
            'BACKEND': 'server.apps.files.infrastructure.storage.S3BlobStorage',
            'OPTIONS': {
                'bucket_name': config('AWS_STORAGE_BUCKET_NAME'),
                'access_key': config('AWS_ACCESS_KEY_ID'),
                'secret_key': config('AWS_SECRET_ACCESS_KEY'),
                'endpoint_url': config(
                    'AWS_S3_ENDPOINT_URL',
                    default=None,
                ),
                'region_name': config(
                    'AWS_S3_REGION_NAME',
                    default='auto',
                ),
                'file_overwrite': False,  # Prevent accidental overwrites
                'default_acl': None,  # Inherit bucket ACL
            },
        }
    return {
        'BACKEND': 'server.apps.files.infrastructure.storage.LocalBlobStorage',
        'OPTIONS': {
            'location': FILES_STORAGE_ROOT,
        },
    }


STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'files': _files_storage(),
    'staticfiles': {
        # Keep static files separate from shop files
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
