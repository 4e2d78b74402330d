"""Pytest configuration: an in-memory stand-in for the Mongo document store."""

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from docsearch.core.db import get_store
from docsearch.main import app


class FakeStore:
    """Records every call and answers from canned documents."""

    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.collections: List[str] = []
        self.calls: List[tuple] = []
        # exceptions raised by successive find() calls, consumed in order
        self.find_errors: List[Optional[Exception]] = []
        self.error: Optional[Exception] = None

    def _maybe_raise(self) -> None:
        if self.error is not None:
            raise self.error

    async def find(self, collection, filter, limit):
        self.calls.append(("find", collection, filter, limit))
        if self.find_errors:
            err = self.find_errors.pop(0)
            if err is not None:
                raise err
        self._maybe_raise()
        return self.documents[:limit]

    async def insert_many(self, collection, docs):
        self.calls.append(("insert_many", collection, docs))
        self._maybe_raise()
        return [{"_id": str(i), **d} for i, d in enumerate(docs)]

    async def insert_one(self, collection, doc):
        self.calls.append(("insert_one", collection, doc))
        self._maybe_raise()
        return {"_id": "abc123", **doc}

    async def count_documents(self, collection, filter):
        self.calls.append(("count_documents", collection, filter))
        self._maybe_raise()
        return len(self.documents)

    async def list_collections(self):
        self.calls.append(("list_collections",))
        self._maybe_raise()
        return list(self.collections)


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def client(fake_store):
    app.dependency_overrides[get_store] = lambda: fake_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
