"""Merge persisted chunk records into the final zip archive."""

from __future__ import annotations

import io
import zipfile

from plugin_archiver.archive.records import chunk_key, decode_chunk_record, files_key
from plugin_archiver.core.errors import MissingChunkError
from plugin_archiver.core.logging import get_logger
from plugin_archiver.core.metrics import ASSEMBLY_DURATION
from plugin_archiver.db.blob_store import BlobStore

logger = get_logger(__name__)


def archive_name(slug: str, path: str) -> str:
    """Entry name inside the archive: ``{slug}/`` plus the path without leading separators."""
    return f"{slug}/{path.lstrip('/')}"


class ArchiveAssembler:
    """Two-pass assembly: every record is read before any is deleted.

    A missing chunk aborts the call with all records left in place, so the
    caller can re-run that chunk and retry assembly.
    """

    def __init__(self, store: BlobStore, compresslevel: int = 9) -> None:
        self.store = store
        self.compresslevel = compresslevel

    def assemble(self, slug: str, total_chunks: int) -> bytes:
        with ASSEMBLY_DURATION.time():
            merged = self._read_chunks(slug, total_chunks)
            archive = self._build_archive(slug, merged)
            keys = [chunk_key(slug, index) for index in range(total_chunks)]
            removed = self.store.delete_many([*keys, files_key(slug)])
        logger.info(
            "Assembled %s from %s chunks",
            slug,
            total_chunks,
            extra={"ctx_slug": slug, "ctx_files": len(merged), "ctx_bytes": len(archive), "ctx_removed": removed},
        )
        return archive

    def _read_chunks(self, slug: str, total_chunks: int) -> dict[str, bytes]:
        merged: dict[str, bytes] = {}
        for index in range(total_chunks):
            blob = self.store.get(chunk_key(slug, index))
            if blob is None:
                raise MissingChunkError(index)
            merged.update(decode_chunk_record(index, blob.value))
        return merged

    def _build_archive(self, slug: str, files: dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(
            buffer,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=self.compresslevel,
        ) as zf:
            for path, content in files.items():
                zf.writestr(archive_name(slug, path), content)
        return buffer.getvalue()


__all__ = ["ArchiveAssembler", "archive_name"]
