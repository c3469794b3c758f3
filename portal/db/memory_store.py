"""
In-memory document store with Firestore-style call shape.

Used when no MongoDB server is configured or reachable, and by the test
suite. State lives only for the lifetime of the MemoryFirestore instance:

    store = MemoryFirestore()
    ref = await store.collection("courses").add({"name": "CS101"})
    snap = await store.collection("courses").doc(ref.id).get()

Operations never raise: missing documents and collections give empty
results, and writes to missing documents are no-ops where noted.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from portal.db.documents import (
    CollectionReference,
    DocumentReference,
    DocumentSnapshot,
    Query,
    QuerySnapshot,
    WriteBatch,
)
from portal.db.filters import matches_all, sort_records
from portal.db.sanitize import remove_undefined_values

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryDocumentReference(DocumentReference):
    """Reads and writes one document inside a MemoryCollectionReference."""

    parent: "MemoryCollectionReference"

    def _index(self) -> int:
        for index, item in enumerate(self.parent._docs):
            if item.get("id") == self.id:
                return index
        return -1

    async def get(self) -> DocumentSnapshot:
        index = self._index()
        data = self.parent._docs[index] if index != -1 else None
        return DocumentSnapshot(self, data)

    async def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        """
        Create or overwrite the document.

        merge=True keeps existing fields not in data; merge=False replaces
        everything except the id.
        """
        docs = self.parent._docs
        clean = remove_undefined_values(data)
        index = self._index()

        if index != -1 and merge:
            docs[index] = {**docs[index], **clean, "id": self.id, "updatedAt": utc_now()}
            return

        new_item = {**clean, "id": self.id, "createdAt": utc_now()}
        if index != -1:
            docs[index] = new_item
        else:
            docs.append(new_item)

    async def update(self, data: Dict[str, Any]) -> None:
        """Merge fields into an existing document. A missing document is left alone."""
        index = self._index()
        if index == -1:
            logger.debug("update on missing document %s ignored", self.path)
            return
        docs = self.parent._docs
        clean = remove_undefined_values(data)
        docs[index] = {**docs[index], **clean, "id": self.id, "updatedAt": utc_now()}

    async def delete(self) -> None:
        index = self._index()
        if index != -1:
            del self.parent._docs[index]


class MemoryCollectionReference(CollectionReference):
    """Collection backed by an ordered list of dicts (insertion order)."""

    def __init__(self, name: str, docs: List[Dict[str, Any]]):
        super().__init__(name)
        self._docs = docs

    def _document(self, document_id: str) -> MemoryDocumentReference:
        return MemoryDocumentReference(self, document_id)

    async def _execute(self, query: Query) -> QuerySnapshot:
        records = [item for item in self._docs if matches_all(item, query.filters)]

        if query.ordering is not None:
            field, direction = query.ordering
            records = sort_records(records, field, direction)

        if query.limit_count is not None:
            records = records[:query.limit_count]

        return QuerySnapshot([
            DocumentSnapshot(self._document(item["id"]), item) for item in records
        ])


class MemoryFirestore:
    """
    The in-memory store itself: collection name -> list of documents.

    Collections are created on first reference and never evicted.
    """

    backend_name = "memory"

    def __init__(self):
        self._collections: Dict[str, List[Dict[str, Any]]] = {}

    def collection(self, name: str) -> MemoryCollectionReference:
        docs = self._collections.setdefault(name, [])
        return MemoryCollectionReference(name, docs)

    def batch(self) -> WriteBatch:
        return WriteBatch()

    def collection_names(self) -> List[str]:
        return list(self._collections)

    def seed(self, name: str, documents: Optional[Iterable[Dict[str, Any]]] = None) -> None:
        """
        Insert raw documents without stamping timestamps. Calling with no
        documents just creates the collection.

        Each document must carry its own "id"; documents without one are
        skipped and logged.
        """
        docs = self._collections.setdefault(name, [])
        for document in documents or []:
            if document.get("id") is None:
                logger.warning("Skipping seed document without an id in %s", name)
                continue
            docs.append(remove_undefined_values(dict(document)))
