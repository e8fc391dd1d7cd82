"""Blob Storage Module.

Provides the key-object storage boundary for toggle configs:
- S3-compatible object storage (boto3)
- Local filesystem storage
- In-memory storage for tests
"""

from featuretoggle.core.storage.object_store import (
    BlobStore,
    InMemoryBlobStore,
    LocalFileBlobStore,
    S3BlobStore,
    create_blob_store,
)

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "LocalFileBlobStore",
    "S3BlobStore",
    "create_blob_store",
]
