"""Data structures shared by the archive phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass(slots=True, frozen=True)
class FileEntry:
    """A file below the package root; ``path`` is ``/``-prefixed and unique."""

    name: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "path": self.path}


@dataclass(slots=True)
class DiscoveryResult:
    total_files: int
    total_chunks: int
    files: Sequence[FileEntry]


@dataclass(slots=True, frozen=True)
class ChunkFetchSoftFailure:
    """A file left out of its chunk because the source host did not return it."""

    path: str
    url: str
    reason: str


@dataclass(slots=True)
class ChunkResult:
    chunk_index: int
    files_processed: int
    failures: list[ChunkFetchSoftFailure] = field(default_factory=list)


__all__ = ["FileEntry", "DiscoveryResult", "ChunkFetchSoftFailure", "ChunkResult"]
