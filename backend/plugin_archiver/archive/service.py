"""Phase coordination for chunked archive generation."""

from __future__ import annotations

import requests

from plugin_archiver.archive.assembler import ArchiveAssembler
from plugin_archiver.archive.planner import plan, slice_chunk
from plugin_archiver.archive.processor import ChunkProcessor
from plugin_archiver.archive.records import RECORD_METADATA, decode_file_list, encode_file_list, files_key
from plugin_archiver.archive.types import ChunkResult, DiscoveryResult, FileEntry
from plugin_archiver.core.config import Settings
from plugin_archiver.core.errors import DiscoveryError
from plugin_archiver.core.logging import get_logger
from plugin_archiver.db.blob_store import BlobStore
from plugin_archiver.listing.walker import DirectoryWalker

logger = get_logger(__name__)


class ArchiveService:
    """Stateless between calls; everything shared lives in the blob store."""

    def __init__(self, settings: Settings, store: BlobStore, session: requests.Session) -> None:
        self.settings = settings
        self.store = store
        self.walker = DirectoryWalker(session, settings)
        self.processor = ChunkProcessor(store, session, settings)
        self.assembler = ArchiveAssembler(store)

    def discover(self, slug: str) -> DiscoveryResult:
        files = self.walker.discover(slug)
        if not files:
            raise DiscoveryError("No files found for plugin")
        total_chunks = plan(files, self.settings.chunk_size)
        self.store.put(files_key(slug), encode_file_list(files), RECORD_METADATA)
        logger.info("Discovered %s files in %s chunks for %s", len(files), total_chunks, slug)
        return DiscoveryResult(total_files=len(files), total_chunks=total_chunks, files=files)

    def process_chunk(self, slug: str, chunk_index: int, total_chunks: int) -> ChunkResult:
        files = self._load_files(slug)
        return self.processor.process(slug, slice_chunk(files, chunk_index, total_chunks), chunk_index)

    def finalize(self, slug: str, total_chunks: int) -> bytes:
        return self.assembler.assemble(slug, total_chunks)

    def _load_files(self, slug: str) -> list[FileEntry]:
        """File list frozen at discovery, or a fresh walk when none was stored."""
        blob = self.store.get(files_key(slug))
        if blob is not None:
            return decode_file_list(blob.value)
        logger.warning("No stored file list for %s; walking the listing again", slug)
        return self.walker.discover(slug)


__all__ = ["ArchiveService"]
