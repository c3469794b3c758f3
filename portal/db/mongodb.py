"""
MongoDB backend exposing the same collection/document/query/batch shape
as the in-memory store.

Documents are stored with _id equal to the portal id:
    {"_id": "course1", "id": "course1", "name": "...", "createdAt": ...}
_id never leaves this module; callers only see "id".

Query translation (same matches as the in-memory filters):
    "=="             -> {field: {"$eq": value, "$not": {"$type": "array"}}}
    "in"             -> {field: {"$in": value, "$not": {"$type": "array"}}}
    "array-contains" -> {field: {"$elemMatch": {"$eq": value}}}
    anything else    -> no filter

"==" None and "in" without candidates match nothing. pymongo is blocking, so
every call runs through asyncio.to_thread.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING as MONGO_ASCENDING, DESCENDING as MONGO_DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from portal.core.config import get_settings
from portal.db.documents import (
    DESCENDING,
    CollectionReference,
    DocumentReference,
    DocumentSnapshot,
    Query,
    QuerySnapshot,
    WriteBatch,
)
from portal.db.filters import ARRAY_CONTAINS, EQUAL, IN
from portal.db.sanitize import remove_undefined_values

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: Optional[MongoClient] = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        settings = get_settings()
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        )
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    return get_mongo_client()[get_settings().mongodb_db]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        get_mongo_client().admin.command("ping")
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def _strip_mongo_id(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc


# matches no document at all
_MATCH_NOTHING = {"_id": {"$in": []}}

# mongo compares scalars against array elements too; stored arrays only match whole
_NOT_ARRAY = {"$not": {"$type": "array"}}


def _equality_clause(field: str, value: Any) -> Dict[str, Any]:
    if value is None:
        # stored documents never hold None, and {field: None} would match missing fields
        return _MATCH_NOTHING
    if isinstance(value, list):
        return {field: {"$eq": value}}
    return {field: {"$eq": value, **_NOT_ARRAY}}


def _in_clause(field: str, value: Any) -> Dict[str, Any]:
    if not isinstance(value, (list, tuple, set)):
        # nothing can be "in" a non-list
        return _MATCH_NOTHING
    candidates = [item for item in value if item is not None]
    if not candidates:
        return _MATCH_NOTHING
    return {field: {"$in": candidates, **_NOT_ARRAY}}


def build_mongo_filter(query: Query) -> Dict[str, Any]:
    """Translate query filters into a MongoDB filter document (ANDed)."""
    clauses = []
    for cond in query.filters:
        if cond.op == EQUAL:
            clauses.append(_equality_clause(cond.field, cond.value))
        elif cond.op == IN:
            clauses.append(_in_clause(cond.field, cond.value))
        elif cond.op == ARRAY_CONTAINS:
            clauses.append({cond.field: {"$elemMatch": {"$eq": cond.value}}})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class MongoDocumentReference(DocumentReference):
    parent: "MongoCollectionReference"

    @property
    def _collection(self) -> Collection:
        return self.parent._collection

    async def get(self) -> DocumentSnapshot:
        doc = await asyncio.to_thread(self._collection.find_one, {"_id": self.id})
        return DocumentSnapshot(self, _strip_mongo_id(doc))

    async def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        clean = remove_undefined_values(data)
        clean.pop("_id", None)
        now = datetime.now(timezone.utc)

        if merge:
            result = await asyncio.to_thread(
                self._collection.update_one,
                {"_id": self.id},
                {"$set": {**clean, "id": self.id, "updatedAt": now}},
            )
            if result.matched_count > 0:
                return

        await asyncio.to_thread(
            self._collection.replace_one,
            {"_id": self.id},
            {**clean, "_id": self.id, "id": self.id, "createdAt": now},
            upsert=True,
        )

    async def update(self, data: Dict[str, Any]) -> None:
        """Merge fields into an existing document; no upsert."""
        clean = remove_undefined_values(data)
        clean.pop("_id", None)
        await asyncio.to_thread(
            self._collection.update_one,
            {"_id": self.id},
            {"$set": {**clean, "id": self.id, "updatedAt": datetime.now(timezone.utc)}},
            upsert=False,
        )

    async def delete(self) -> None:
        await asyncio.to_thread(self._collection.delete_one, {"_id": self.id})


class MongoCollectionReference(CollectionReference):
    def __init__(self, name: str, collection: Collection):
        super().__init__(name)
        self._collection = collection

    def _document(self, document_id: str) -> MongoDocumentReference:
        return MongoDocumentReference(self, document_id)

    def _find(self, query: Query) -> List[dict]:
        # blocking; runs in a worker thread
        if query.limit_count == 0:
            return []

        cursor = self._collection.find(build_mongo_filter(query))

        if query.ordering is not None:
            field, direction = query.ordering
            cursor = cursor.sort(field, MONGO_DESCENDING if direction == DESCENDING else MONGO_ASCENDING)

        if query.limit_count is not None:
            cursor = cursor.limit(query.limit_count)

        return list(cursor)

    async def _execute(self, query: Query) -> QuerySnapshot:
        raw_docs = await asyncio.to_thread(self._find, query)
        return QuerySnapshot([
            DocumentSnapshot(self._document(str(raw["_id"])), _strip_mongo_id(raw))
            for raw in raw_docs
        ])


class MongoFirestore:
    """Wraps a pymongo Database so route handlers see the usual store interface."""

    backend_name = "mongodb"

    def __init__(self, database: Database):
        self._db = database

    def collection(self, name: str) -> MongoCollectionReference:
        return MongoCollectionReference(name, self._db[name])

    def batch(self) -> WriteBatch:
        return WriteBatch()
