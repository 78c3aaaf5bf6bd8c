"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

import requests

from plugin_archiver.archive.service import ArchiveService
from plugin_archiver.core.config import Settings, get_settings
from plugin_archiver.db.blob_store import BlobStore
from plugin_archiver.db.sqlite import SQLiteDatabase

USER_AGENT = "plugin-archiver/0.1.0"

_DB: SQLiteDatabase | None = None
_SESSION: requests.Session | None = None
_ARCHIVE_SERVICE: ArchiveService | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> SQLiteDatabase:
    global _DB
    if _DB is None:
        db = SQLiteDatabase(get_app_settings().db_path)
        db.ensure_schema()
        _DB = db
    return _DB


def get_blob_store() -> BlobStore:
    return BlobStore(get_database())


def get_http_session() -> requests.Session:
    global _SESSION
    if _SESSION is None:
        session = requests.Session()
        session.headers["User-Agent"] = USER_AGENT
        _SESSION = session
    return _SESSION


def get_archive_service() -> ArchiveService:
    global _ARCHIVE_SERVICE
    if _ARCHIVE_SERVICE is None:
        _ARCHIVE_SERVICE = ArchiveService(
            settings=get_app_settings(),
            store=get_blob_store(),
            session=get_http_session(),
        )
    return _ARCHIVE_SERVICE


__all__ = [
    "get_app_settings",
    "get_database",
    "get_blob_store",
    "get_http_session",
    "get_archive_service",
]
