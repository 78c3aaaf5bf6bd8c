"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from plugin_archiver.archive.types import ChunkResult, DiscoveryResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FileEntryModel(_CamelModel):
    name: str
    path: str


class DiscoveryResponse(_CamelModel):
    status: Literal["success"] = "success"
    total_chunks: int = Field(alias="totalChunks")
    total_files: int = Field(alias="totalFiles")
    files: list[FileEntryModel]

    @classmethod
    def from_result(cls, result: DiscoveryResult) -> "DiscoveryResponse":
        return cls(
            total_chunks=result.total_chunks,
            total_files=result.total_files,
            files=[FileEntryModel(name=entry.name, path=entry.path) for entry in result.files],
        )


class ChunkResponse(_CamelModel):
    status: Literal["success"] = "success"
    chunk_index: int = Field(alias="chunkIndex")
    files_processed: int = Field(alias="filesProcessed")

    @classmethod
    def from_result(cls, result: ChunkResult) -> "ChunkResponse":
        return cls(chunk_index=result.chunk_index, files_processed=result.files_processed)


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str


__all__ = [
    "FileEntryModel",
    "DiscoveryResponse",
    "ChunkResponse",
    "ErrorResponse",
]
