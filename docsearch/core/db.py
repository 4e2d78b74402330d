import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidDocument
from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from .config import settings

logger = logging.getLogger(__name__)

# raised by pymongo itself or while BSON-encoding a filter or document
STORE_ERRORS = (PyMongoError, InvalidDocument, OverflowError)


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Make a Mongo document JSON-safe (ObjectId -> str)."""
    return jsonable_encoder(doc, custom_encoder={ObjectId: str})


class DocumentStore:

    def __init__(self, uri: str, db_name: str, timeout_ms: int = 5000) -> None:
        self.uri = uri
        self.db_name = db_name
        self.timeout_ms = timeout_ms
        self._client: Optional[AsyncIOMotorClient] = None
        self._connected = False

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._client is None:
            raise RuntimeError("DocumentStore is not connected")
        return self._client[self.db_name]

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> bool:
        if self._connected:
            return True
        try:
            if self._client is None:
                self._client = AsyncIOMotorClient(self.uri, serverSelectionTimeoutMS=self.timeout_ms)
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.error("Failed to connect to MongoDB at %s: %s", self.uri, e)
            await self.disconnect()
            return False
        self._connected = True
        logger.info("Connected to MongoDB database %r", self.db_name)
        return True

    async def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("Database connection closed")
        self._client = None
        self._connected = False

    async def find(self, collection: str, filter: Dict[str, Any], limit: int) -> List[Dict[str, Any]]:
        cursor = self.db[collection].find(filter).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [serialize_document(d) for d in docs]

    async def insert_many(self, collection: str, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        docs = [dict(d) for d in docs]
        await self.db[collection].insert_many(docs)
        return [serialize_document(d) for d in docs]

    async def insert_one(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(doc)
        await self.db[collection].insert_one(doc)
        return serialize_document(doc)

    async def count_documents(self, collection: str, filter: Dict[str, Any]) -> int:
        return await self.db[collection].count_documents(filter)

    async def list_collections(self) -> List[str]:
        return sorted(await self.db.list_collection_names())


store = DocumentStore(settings.mongo_uri, settings.mongo_db, settings.mongo_timeout_ms)


async def get_store() -> DocumentStore:
    if not await store.connect():
        raise HTTPException(status_code=500, detail="Failed to connect to database")
    return store
