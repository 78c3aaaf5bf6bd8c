"""Error types raised by the archive phases."""

from __future__ import annotations


class ArchiverError(Exception):
    """Base class for failures surfaced to callers as an error envelope."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DiscoveryError(ArchiverError):
    """The remote listing could not be walked or contained no files."""


class StoreError(ArchiverError):
    """The durable keyed store rejected an operation."""


class ChunkPersistError(ArchiverError):
    """Writing a chunk record to the durable store failed."""


class MissingChunkError(ArchiverError):
    """A chunk record expected by assembly is absent."""

    def __init__(self, chunk_index: int) -> None:
        super().__init__(f"Missing chunk {chunk_index}")
        self.chunk_index = chunk_index


class CorruptChunkError(ArchiverError):
    """A stored chunk record could not be decoded."""

    def __init__(self, chunk_index: int, detail: str) -> None:
        super().__init__(f"Corrupt chunk {chunk_index}: {detail}")
        self.chunk_index = chunk_index


class InvalidRequestError(ArchiverError):
    def __init__(self, message: str = "Invalid request parameters") -> None:
        super().__init__(message)


__all__ = [
    "ArchiverError",
    "DiscoveryError",
    "StoreError",
    "ChunkPersistError",
    "MissingChunkError",
    "CorruptChunkError",
    "InvalidRequestError",
]
