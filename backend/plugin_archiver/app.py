"""FastAPI application setup for the plugin archive worker."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from plugin_archiver.api.dependencies import get_app_settings, get_archive_service, get_database
from plugin_archiver.api.routes_admin import router as admin_router
from plugin_archiver.api.routes_archive import router as archive_router
from plugin_archiver.core.errors import ArchiverError
from plugin_archiver.core.logging import configure_logging
from plugin_archiver.models.dto import ErrorResponse

configure_logging()

app = FastAPI(
    title="Plugin Archiver",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(archive_router, prefix="", tags=["archive"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.exception_handler(ArchiverError)
async def archiver_error_handler(request: Request, exc: ArchiverError) -> JSONResponse:
    body = ErrorResponse(error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.on_event("startup")
async def startup() -> None:
    """Warm up core singletons on startup."""
    get_app_settings()
    get_database()
    get_archive_service()


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
