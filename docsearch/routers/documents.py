import logging

from fastapi import APIRouter, Depends, HTTPException

from docsearch.core.db import STORE_ERRORS, DocumentStore, get_store
from docsearch.models.requests import AddRequest, CountRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


def count_body(body: CountRequest) -> CountRequest:
    if not body.collection:
        raise HTTPException(status_code=400, detail="Collection name is required")
    return body


def add_body(body: AddRequest) -> AddRequest:
    if not body.collection or not body.data:
        raise HTTPException(status_code=400, detail="Collection name and data are required")
    return body


@router.post("/count")
async def count_documents(
    body: CountRequest = Depends(count_body),
    store: DocumentStore = Depends(get_store),
):
    try:
        count = await store.count_documents(body.collection, body.query)
    except STORE_ERRORS as e:
        logger.error("Count in %s failed: %s", body.collection, e)
        raise HTTPException(status_code=500, detail=f"Count failed: {e}")

    logger.info("Document count in %s: %d", body.collection, count)
    return {"count": count, "collection": body.collection, "query": body.query}


@router.post("/add")
async def add_documents(
    body: AddRequest = Depends(add_body),
    store: DocumentStore = Depends(get_store),
):
    try:
        if isinstance(body.data, list):
            inserted = await store.insert_many(body.collection, body.data)
            logger.info("Inserted %d documents into %s", len(inserted), body.collection)
            return {"success": True, "inserted": len(inserted), "data": inserted}

        doc = await store.insert_one(body.collection, body.data)
    except STORE_ERRORS as e:
        logger.error("Insert into %s failed: %s", body.collection, e)
        raise HTTPException(status_code=500, detail=f"Failed to add documents: {e}")

    logger.info("Inserted document %s into %s", doc.get("_id"), body.collection)
    return {"success": True, "inserted": 1, "data": doc}
