"""
External media host.

Uploaded files are pushed to S3 (or the local filesystem in development);
entities store only {url, externalId} references.
"""

from .storage import (
    MediaStorage,
    MediaStorageError,
    MediaReference,
    LocalMediaStorage,
    S3MediaStorage,
    generate_external_id,
    get_media_storage,
    IMAGE_CONTENT_PREFIX,
    PDF_CONTENT_TYPE,
)

__all__ = [
    "MediaStorage",
    "MediaStorageError",
    "MediaReference",
    "LocalMediaStorage",
    "S3MediaStorage",
    "generate_external_id",
    "get_media_storage",
    "IMAGE_CONTENT_PREFIX",
    "PDF_CONTENT_TYPE",
]
