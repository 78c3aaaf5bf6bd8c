"""Durable storage for cross-call archive state."""

from .blob_store import BlobStore, StoredBlob
from .sqlite import SQLiteDatabase

__all__ = ["BlobStore", "StoredBlob", "SQLiteDatabase"]
