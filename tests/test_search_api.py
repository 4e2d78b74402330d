"""
Endpoint tests for /api/search and the natural-language search routes.
"""

from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from docsearch.services.translator import translate


class TestBasicSearch:

    def test_passes_query_and_limit(self, client, fake_store):
        fake_store.documents = [{"_id": "1", "title": "TV"}]
        resp = client.post(
            "/api/search",
            json={"collection": "products", "query": {"title": "TV"}, "limit": 5},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body == {
            "results": [{"_id": "1", "title": "TV"}],
            "count": 1,
            "collection": "products",
            "query": {"title": "TV"},
        }
        assert fake_store.calls == [("find", "products", {"title": "TV"}, 5)]

    def test_default_query_and_limit(self, client, fake_store):
        resp = client.post("/api/search", json={"collection": "products"})
        assert resp.status_code == 200
        assert fake_store.calls == [("find", "products", {}, 10)]

    def test_collection_required(self, client, fake_store):
        resp = client.post("/api/search", json={"query": {}})
        assert resp.status_code == 400
        assert fake_store.calls == []

    def test_invalid_limit(self, client):
        resp = client.post("/api/search", json={"collection": "products", "limit": 0})
        assert resp.status_code == 422

    def test_large_limit(self, client, fake_store):
        resp = client.post("/api/search", json={"collection": "products", "limit": 5000})
        assert resp.status_code == 200
        assert fake_store.calls == [("find", "products", {}, 5000)]

    def test_store_error(self, client, fake_store):
        fake_store.error = OperationFailure("boom")
        resp = client.post("/api/search", json={"collection": "products"})
        assert resp.status_code == 500
        assert "Search failed" in resp.json()["detail"]


class TestAISearch:

    def test_translates_and_searches(self, client, fake_store):
        fake_store.documents = [{"_id": "1", "title": "iPhone 12"}, {"_id": "2", "title": "iPhone SE"}]
        resp = client.post(
            "/api/search/ai",
            json={"collection": "products", "query": "iPhone under $500", "limit": 1},
        )
        assert resp.status_code == 200
        body = resp.json()
        expected = translate("iPhone under $500").to_mongo()
        assert body["mongoQuery"] == expected
        assert body["originalQuery"] == "iPhone under $500"
        assert body["count"] == 1
        assert body["collection"] == "products"
        assert fake_store.calls == [("find", "products", expected, 1)]

    def test_unmatched_query_searches_everything(self, client, fake_store):
        resp = client.post("/api/search/ai", json={"collection": "products", "query": "the a an is"})
        assert resp.status_code == 200
        assert resp.json()["mongoQuery"] == {}
        assert fake_store.calls == [("find", "products", {}, 10)]

    def test_alias_route(self, client, fake_store):
        resp = client.post("/api/ai-search", json={"collection": "products", "query": "gaming console"})
        assert resp.status_code == 200
        assert resp.json()["mongoQuery"] == translate("gaming console").to_mongo()

    def test_query_required(self, client, fake_store):
        resp = client.post("/api/search/ai", json={"collection": "products"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Collection name and query are required"
        assert fake_store.calls == []

    def test_fallback_on_store_failure(self, client, fake_store):
        fake_store.documents = [{"_id": "1", "title": "cheap tv"}]
        fake_store.find_errors = [OperationFailure("bad query")]
        resp = client.post("/api/search/ai", json={"collection": "products", "query": "cheap tv?"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["fallback"] is True
        assert body["count"] == 1
        assert "mongoQuery" not in body
        _, collection, fallback_query, limit = fake_store.calls[-1]
        assert collection == "products"
        assert limit == 10
        assert fallback_query == {
            "$or": [
                {"title": {"$regex": r"cheap\ tv\?", "$options": "i"}},
                {"description": {"$regex": r"cheap\ tv\?", "$options": "i"}},
            ]
        }

    def test_fallback_on_unencodable_filter(self, client, fake_store):
        fake_store.find_errors = [OverflowError("MongoDB can only handle up to 8-byte ints")]
        resp = client.post("/api/search/ai", json={"collection": "products", "query": "tv under 5"})
        assert resp.status_code == 200
        assert resp.json()["fallback"] is True
        assert len(fake_store.calls) == 2

    def test_oversized_price_is_searched_as_text(self, client, fake_store):
        resp = client.post(
            "/api/search/ai",
            json={"collection": "products", "query": "tv under 99999999999999999999"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert "fallback" not in body
        assert body["mongoQuery"] == {
            "$or": [
                {"title": {"$regex": "99999999999999999999", "$options": "i"}},
                {"description": {"$regex": "99999999999999999999", "$options": "i"}},
            ]
        }

    def test_fallback_failure(self, client, fake_store):
        fake_store.error = ServerSelectionTimeoutError("down")
        resp = client.post("/api/search/ai", json={"collection": "products", "query": "tv"})
        assert resp.status_code == 500
        assert resp.json()["detail"].startswith("Both AI and fallback search failed")
        assert len(fake_store.calls) == 2
