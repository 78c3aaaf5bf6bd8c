"""Store keys and serialization for chunk records and frozen file lists."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping, Sequence

import orjson

from plugin_archiver.archive.types import FileEntry
from plugin_archiver.core.errors import CorruptChunkError

RECORD_METADATA: Mapping[str, Any] = {"content_type": "application/json"}


def chunk_key(slug: str, chunk_index: int) -> str:
    return f"temp/{slug}/chunk_{chunk_index}"


def files_key(slug: str) -> str:
    return f"temp/{slug}/files"


def encode_chunk_record(chunk_index: int, files: Mapping[str, bytes]) -> bytes:
    """Serialize a path to bytes mapping; content is base64 so the record stays JSON."""
    payload = {
        "chunkIndex": chunk_index,
        "files": {path: base64.b64encode(content).decode("ascii") for path, content in files.items()},
    }
    return orjson.dumps(payload)


def decode_chunk_record(chunk_index: int, raw: bytes) -> dict[str, bytes]:
    try:
        payload = orjson.loads(raw)
        stored_index = payload["chunkIndex"]
        encoded_files = payload["files"]
        files = {path: base64.b64decode(content, validate=True) for path, content in encoded_files.items()}
    except (orjson.JSONDecodeError, KeyError, TypeError, AttributeError, binascii.Error) as exc:
        raise CorruptChunkError(chunk_index, str(exc) or type(exc).__name__) from exc
    if stored_index != chunk_index:
        raise CorruptChunkError(chunk_index, f"record belongs to chunk {stored_index}")
    return files


def encode_file_list(files: Sequence[FileEntry]) -> bytes:
    return orjson.dumps([entry.to_dict() for entry in files])


def decode_file_list(raw: bytes) -> list[FileEntry]:
    return [FileEntry(name=item["name"], path=item["path"]) for item in orjson.loads(raw)]


__all__ = [
    "RECORD_METADATA",
    "chunk_key",
    "files_key",
    "encode_chunk_record",
    "decode_chunk_record",
    "encode_file_list",
    "decode_file_list",
]
