"""Fetch one chunk's files and persist them as a single chunk record."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import requests

from plugin_archiver.archive.records import RECORD_METADATA, chunk_key, encode_chunk_record
from plugin_archiver.archive.types import ChunkFetchSoftFailure, ChunkResult, FileEntry
from plugin_archiver.core.config import Settings
from plugin_archiver.core.errors import ChunkPersistError, StoreError
from plugin_archiver.core.logging import get_logger
from plugin_archiver.core.metrics import FILE_FETCH_FAILURES, FILES_PROCESSED
from plugin_archiver.db.blob_store import BlobStore

logger = get_logger(__name__)

_FetchOutcome = tuple[FileEntry, bytes | None, ChunkFetchSoftFailure | None]


class ChunkProcessor:
    """Soft-fails individual files; only the record write can fail the call."""

    def __init__(self, store: BlobStore, session: requests.Session, settings: Settings) -> None:
        self.store = store
        self.session = session
        self.settings = settings

    def process(self, slug: str, files: Sequence[FileEntry], chunk_index: int) -> ChunkResult:
        contents: dict[str, bytes] = {}
        failures: list[ChunkFetchSoftFailure] = []
        for entry, content, failure in self._fetch_all(slug, files):
            if failure is not None:
                failures.append(failure)
            else:
                contents[entry.path] = content or b""

        key = chunk_key(slug, chunk_index)
        try:
            self.store.put(key, encode_chunk_record(chunk_index, contents), RECORD_METADATA)
        except StoreError as exc:
            raise ChunkPersistError(f"Failed to persist chunk {chunk_index}: {exc.message}") from exc

        FILES_PROCESSED.inc(len(contents))
        logger.info(
            "Persisted chunk %s for %s",
            chunk_index,
            slug,
            extra={"ctx_slug": slug, "ctx_chunk": chunk_index, "ctx_files": len(contents), "ctx_failed": len(failures)},
        )
        return ChunkResult(chunk_index=chunk_index, files_processed=len(contents), failures=failures)

    def _fetch_all(self, slug: str, files: Sequence[FileEntry]) -> list[_FetchOutcome]:
        if not files:
            return []
        workers = min(self.settings.fetch_workers, len(files))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="parc-fetch") as executor:
            return list(executor.map(lambda entry: self._fetch_one(slug, entry), files))

    def _fetch_one(self, slug: str, entry: FileEntry) -> _FetchOutcome:
        url = self.settings.package_url(slug, entry.path)
        try:
            response = self.session.get(url, timeout=self.settings.request_timeout)
        except requests.RequestException as exc:
            return entry, None, self._soft_fail(entry, url, str(exc))
        if not response.ok:
            return entry, None, self._soft_fail(entry, url, f"HTTP {response.status_code}")
        return entry, response.content, None

    @staticmethod
    def _soft_fail(entry: FileEntry, url: str, reason: str) -> ChunkFetchSoftFailure:
        logger.warning("Failed to fetch file %s: %s", url, reason)
        FILE_FETCH_FAILURES.inc()
        return ChunkFetchSoftFailure(path=entry.path, url=url, reason=reason)


__all__ = ["ChunkProcessor"]
