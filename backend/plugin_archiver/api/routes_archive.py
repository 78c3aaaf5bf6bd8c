"""Chunked zip generation routes."""

from __future__ import annotations

import re

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from plugin_archiver.api.dependencies import get_app_settings, get_archive_service
from plugin_archiver.archive.service import ArchiveService
from plugin_archiver.core.config import Settings
from plugin_archiver.core.errors import ArchiverError, InvalidRequestError
from plugin_archiver.core.logging import get_logger
from plugin_archiver.core.metrics import PHASE_REQUESTS
from plugin_archiver.models.dto import ChunkResponse, DiscoveryResponse, ErrorResponse

logger = get_logger(__name__)

router = APIRouter()

DISCOVER_CHUNK = -1
FINALIZE_CHUNK = -2

_SLUG_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")
_ERROR_RESPONSES = {500: {"model": ErrorResponse}}


@router.get("/generate-zip", include_in_schema=False)
@router.get("/generate-zip/", include_in_schema=False)
def missing_slug() -> PlainTextResponse:
    return PlainTextResponse("Plugin slug required", status_code=400)


@router.get(
    "/generate-zip/{slug}",
    summary="Discover, process one chunk, or assemble the archive",
    responses=_ERROR_RESPONSES,
)
def generate_zip(
    slug: str,
    chunk: str | None = None,
    total: str | None = None,
    service: ArchiveService = Depends(get_archive_service),
    settings: Settings = Depends(get_app_settings),
):
    phase = "invalid"
    try:
        if not _SLUG_RE.fullmatch(slug):
            raise InvalidRequestError("Invalid plugin slug")
        chunk_index = _parse_int(chunk)
        total_chunks = _parse_int(total)
        phase = _resolve_phase(chunk_index, total_chunks)

        if phase == "discover":
            body = DiscoveryResponse.from_result(service.discover(slug))
            response = JSONResponse(body.model_dump(by_alias=True))
        elif phase == "chunk":
            body = ChunkResponse.from_result(service.process_chunk(slug, chunk_index, total_chunks))
            response = JSONResponse(body.model_dump(by_alias=True))
        else:
            response = Response(
                content=service.finalize(slug, total_chunks),
                media_type="application/zip",
                headers={
                    "Content-Disposition": f'attachment; filename="{slug}.zip"',
                    "Cache-Control": f"public, max-age={settings.cache_max_age}",
                },
            )
    except ArchiverError as exc:
        PHASE_REQUESTS.labels(phase=phase, status="error").inc()
        logger.error("Phase %s failed for %s: %s", phase, slug, exc.message)
        raise
    except Exception as exc:
        PHASE_REQUESTS.labels(phase=phase, status="error").inc()
        logger.exception("Unexpected failure in phase %s for %s", phase, slug)
        raise ArchiverError(str(exc) or type(exc).__name__) from exc

    PHASE_REQUESTS.labels(phase=phase, status="success").inc()
    return response


def _parse_int(value: str | None) -> int:
    if value is None or value == "":
        return DISCOVER_CHUNK
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidRequestError() from exc


def _resolve_phase(chunk_index: int, total_chunks: int) -> str:
    if chunk_index == DISCOVER_CHUNK:
        return "discover"
    if chunk_index >= 0 and total_chunks > 0:
        return "chunk"
    if chunk_index == FINALIZE_CHUNK and total_chunks > 0:
        return "finalize"
    raise InvalidRequestError()


__all__ = ["router"]
