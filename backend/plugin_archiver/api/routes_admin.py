"""Administrative routes for the archive worker."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from plugin_archiver.api.dependencies import get_blob_store
from plugin_archiver.core.metrics import metrics_response
from plugin_archiver.db.blob_store import BlobStore

router = APIRouter()


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


@router.get("/pending/{slug}", summary="List chunk records still stored for a package")
def list_pending(slug: str, store: BlobStore = Depends(get_blob_store)) -> dict[str, object]:
    keys = store.list_keys(f"temp/{slug}/")
    return {"slug": slug, "keys": keys}


__all__ = ["router"]
