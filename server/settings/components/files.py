"""File manager settings."""

from server.settings.components import config

# Alias in STORAGES holding uploaded blobs
FILES_STORAGE_ALIAS = 'files'

# WSGI environ key carrying the shop resolved by the embedding admin
FILES_SHOP_HEADER = config('FILES_SHOP_HEADER', default='HTTP_X_SHOP_DOMAIN')

# Blobs younger than this are never treated as orphans (uploads in flight)
FILES_ORPHAN_GRACE_MINUTES = config(
    'FILES_ORPHAN_GRACE_MINUTES',
    cast=int,
    default=60,
)
