import logging

from fastapi import APIRouter, Depends, HTTPException

from docsearch.core.db import STORE_ERRORS, DocumentStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/collections", tags=["collections"])


@router.get("")
async def list_collections(store: DocumentStore = Depends(get_store)):
    try:
        names = await store.list_collections()
    except STORE_ERRORS as e:
        logger.error("Collections lookup failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to retrieve collections: {e}")

    logger.info("Found %d collections", len(names))
    return {"collections": names, "count": len(names)}
