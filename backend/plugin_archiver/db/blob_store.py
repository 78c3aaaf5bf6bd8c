"""Durable keyed blob store backed by SQLite."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import orjson

from plugin_archiver.core.errors import StoreError
from plugin_archiver.db.sqlite import SQLiteDatabase
from plugin_archiver.utils.time import now_ms


@dataclass(slots=True)
class StoredBlob:
    key: str
    value: bytes
    metadata: dict[str, Any] = field(default_factory=dict)
    updated_at: int = 0


class BlobStore:
    """put/get/delete by string key; each write is a single transaction."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self.db = database

    def put(self, key: str, value: bytes, metadata: Mapping[str, Any] | None = None) -> None:
        """Insert or fully replace the blob stored at ``key``."""
        meta_json = orjson.dumps(dict(metadata or {})).decode("utf-8")
        try:
            with self.db.transaction() as cursor:
                cursor.execute(
                    """
                    INSERT INTO blobs (key, value, metadata_json, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                      value = excluded.value,
                      metadata_json = excluded.metadata_json,
                      updated_at = excluded.updated_at
                    """,
                    [key, sqlite3.Binary(value), meta_json, now_ms()],
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to write {key}: {exc}") from exc

    def get(self, key: str) -> StoredBlob | None:
        try:
            row = self.db.query_one(
                "SELECT key, value, metadata_json, updated_at FROM blobs WHERE key = ?",
                [key],
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read {key}: {exc}") from exc
        if row is None:
            return None
        metadata = orjson.loads(row["metadata_json"]) if row["metadata_json"] else {}
        return StoredBlob(
            key=row["key"],
            value=bytes(row["value"]),
            metadata=metadata,
            updated_at=int(row["updated_at"]),
        )

    def exists(self, key: str) -> bool:
        try:
            row = self.db.query_one("SELECT 1 FROM blobs WHERE key = ?", [key])
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read {key}: {exc}") from exc
        return row is not None

    def delete(self, key: str) -> bool:
        return self.delete_many([key]) == 1

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete all ``keys`` in one transaction; return how many existed."""
        key_list = list(keys)
        if not key_list:
            return 0
        placeholders = ",".join("?" for _ in key_list)
        try:
            with self.db.transaction() as cursor:
                cursor.execute(f"DELETE FROM blobs WHERE key IN ({placeholders})", key_list)
                return cursor.rowcount
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to delete {len(key_list)} keys: {exc}") from exc

    def list_keys(self, prefix: str = "") -> list[str]:
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        try:
            rows = self.db.query(
                "SELECT key FROM blobs WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                [f"{escaped}%"],
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to list {prefix!r}: {exc}") from exc
        return [row["key"] for row in rows]


__all__ = ["BlobStore", "StoredBlob"]
