import logging

from fastapi import APIRouter, Depends, HTTPException

from docsearch.core.db import STORE_ERRORS, DocumentStore, get_store
from docsearch.models.filters import FilterExpression, Or, TextMatch
from docsearch.models.requests import AISearchRequest, SearchRequest
from docsearch.services.translator import TEXT_FIELDS, translate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/search", tags=["search"])
alias_router = APIRouter(prefix="/api/ai-search", tags=["search"])


def fallback_expression(raw_query: str) -> FilterExpression:
    """Plain title/description match on the untranslated query string."""
    return FilterExpression(
        node=Or(children=tuple(TextMatch(field=f, substring=raw_query) for f in TEXT_FIELDS))
    )


def search_body(body: SearchRequest) -> SearchRequest:
    if not body.collection:
        raise HTTPException(status_code=400, detail="Collection name is required")
    return body


def ai_search_body(body: AISearchRequest) -> AISearchRequest:
    if not body.collection or not body.query:
        raise HTTPException(status_code=400, detail="Collection name and query are required")
    return body


# body checks are declared ahead of get_store so a bad request gets its 400 even when Mongo is down
@router.post("")
async def search(
    body: SearchRequest = Depends(search_body),
    store: DocumentStore = Depends(get_store),
):
    query = body.query or {}
    logger.info("Searching %s with %s (limit %d)", body.collection, query, body.limit)
    try:
        results = await store.find(body.collection, query, body.limit)
    except STORE_ERRORS as e:
        logger.error("Search in %s failed: %s", body.collection, e)
        raise HTTPException(status_code=500, detail=f"Search failed: {e}")

    logger.info("Found %d documents", len(results))
    return {
        "results": results,
        "count": len(results),
        "collection": body.collection,
        "query": query,
    }


@router.post("/ai")
async def ai_search(
    body: AISearchRequest = Depends(ai_search_body),
    store: DocumentStore = Depends(get_store),
):
    logger.info("AI search in %s: %r (limit %d)", body.collection, body.query, body.limit)
    mongo_query = translate(body.query).to_mongo()
    logger.info("Converted to MongoDB query: %s", mongo_query)

    try:
        results = await store.find(body.collection, mongo_query, body.limit)
    except STORE_ERRORS as e:
        logger.warning("AI search failed (%s), attempting fallback keyword search", e)
        return await _fallback_search(store, body)

    logger.info("AI search found %d documents", len(results))
    return {
        "results": results,
        "count": len(results),
        "collection": body.collection,
        "originalQuery": body.query,
        "mongoQuery": mongo_query,
    }


alias_router.add_api_route("", ai_search, methods=["POST"])


async def _fallback_search(store: DocumentStore, body: AISearchRequest):
    fallback_query = fallback_expression(body.query).to_mongo()
    logger.info("Fallback query: %s", fallback_query)
    try:
        results = await store.find(body.collection, fallback_query, body.limit)
    except STORE_ERRORS as e:
        logger.error("Fallback search also failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Both AI and fallback search failed: {e}")

    logger.info("Fallback search found %d documents", len(results))
    return {
        "results": results,
        "count": len(results),
        "collection": body.collection,
        "fallback": True,
        "message": "AI search failed, using keyword search",
    }
