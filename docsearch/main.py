from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docsearch.core.config import settings
from docsearch.core.db import store
from docsearch.routers import collections, documents, health
from docsearch.routers import search as search_router

logger = logging.getLogger("docsearch")
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if await store.connect():
        logger.info("[startup] docsearch is up; MongoDB: %s/%s", store.uri, store.db_name)
    else:
        logger.warning("[startup] MongoDB unreachable at %s; will retry per request", store.uri)

    yield

    logger.info("[shutdown] closing database connections")
    await store.disconnect()

app = FastAPI(
    title="docsearch",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("Incoming request: %s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        logger.warning("404 - Endpoint not found: %s", request.url.path)
        return JSONResponse(
            status_code=404,
            content={"error": "Endpoint not found", "path": request.url.path},
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


app.include_router(health.router)
app.include_router(collections.router)
app.include_router(search_router.router)
app.include_router(search_router.alias_router)
app.include_router(documents.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("docsearch.main:app", host="127.0.0.1", port=settings.port, reload=True)
