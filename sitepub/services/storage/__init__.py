"""
Storage accessor package.

- :mod:`base`          — accessor interface and the content-type layer
- :mod:`content_type`  — extension → media type fallback
- :mod:`s3_backend`    — S3 / S3-compatible (OSS) buckets via boto3
- :mod:`local_backend` — a local directory as the namespace
"""
from .base import ContentTypeLayer, ObjectMetadata, StorageAccessor
from .content_type import resolve_content_type
from .local_backend import LocalStorage
from .s3_backend import S3Storage

__all__ = [
    'StorageAccessor',
    'ObjectMetadata',
    'ContentTypeLayer',
    'LocalStorage',
    'S3Storage',
    'resolve_content_type',
]
