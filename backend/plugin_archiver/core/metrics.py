"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

PHASE_REQUESTS = Counter(
    "parc_phase_requests_total",
    "Archive phase calls by outcome",
    labelnames=("phase", "status"),
    registry=REGISTRY,
)

FILE_FETCH_FAILURES = Counter(
    "parc_file_fetch_failures_total",
    "Package files skipped because the source host did not return them",
    registry=REGISTRY,
)

FILES_PROCESSED = Counter(
    "parc_files_processed_total",
    "Package files fetched and persisted in chunk records",
    registry=REGISTRY,
)

ASSEMBLY_DURATION = Histogram(
    "parc_assembly_seconds",
    "Time spent assembling the final archive",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "PHASE_REQUESTS",
    "FILE_FETCH_FAILURES",
    "FILES_PROCESSED",
    "ASSEMBLY_DURATION",
    "metrics_response",
]
