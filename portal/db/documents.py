"""
Backend-independent document types.

Every backend (in-memory or MongoDB) hands out the same objects:

    store.collection("courses")            -> CollectionReference
        .where("status", "==", "active")   -> Query (new object per call)
        .order_by("createdAt", "desc")     -> Query
        .limit(10)                         -> Query
        .get()                             -> QuerySnapshot (async)
    store.collection("courses").doc(id)    -> DocumentReference
        .get()                             -> DocumentSnapshot (async)
    store.batch()                          -> WriteBatch

Route handlers only ever talk to these, so they never know which backend
is active.
"""

import binascii
import copy
import itertools
import os
import time
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple

ASCENDING = "asc"
DESCENDING = "desc"

_id_counter = itertools.count()


def generate_document_id() -> str:
    """
    Generate a document id: millisecond timestamp, process counter, random hex.

    The counter makes ids unique within the process without checking for
    collisions.
    """
    millis = int(time.time() * 1000)
    rand = binascii.b2a_hex(os.urandom(4)).decode("ascii")
    return f"mock_{millis}_{next(_id_counter):x}{rand}"


class BatchAlreadyCommittedError(Exception):
    """Raised when commit() is called twice on the same batch."""
    pass


# ============================================================
# SNAPSHOTS
# ============================================================

class DocumentSnapshot:
    """Point-in-time view of one document."""

    def __init__(self, reference: "DocumentReference", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self.exists = data is not None
        self._data = copy.deepcopy(data)

    def data(self) -> Optional[Dict[str, Any]]:
        if self._data is None:
            return None
        return copy.deepcopy(self._data)

    to_dict = data

    def get(self, field: str, default: Any = None) -> Any:
        if self._data is None:
            return default
        return copy.deepcopy(self._data.get(field, default))

    def __repr__(self) -> str:
        return f"DocumentSnapshot(id={self.id!r}, exists={self.exists})"


class QuerySnapshot:
    """Result of executing a query or reading a whole collection."""

    def __init__(self, docs: List[DocumentSnapshot]):
        self.docs = list(docs)

    @property
    def size(self) -> int:
        return len(self.docs)

    @property
    def empty(self) -> bool:
        return self.size == 0

    def for_each(self, callback: Callable[[DocumentSnapshot], Any]) -> None:
        for doc in self.docs:
            callback(doc)

    forEach = for_each

    def __iter__(self) -> Iterator[DocumentSnapshot]:
        return iter(self.docs)

    def __len__(self) -> int:
        return self.size


# ============================================================
# QUERY DESCRIPTOR
# ============================================================

class FieldFilter(NamedTuple):
    field: str
    op: str
    value: Any


class Query:
    """
    Immutable query description bound to one collection.

    Each chaining call returns a new Query; nothing touches stored data
    until get() runs, so filters see the state at execution time.
    Evaluation order is always filter, then sort, then limit.
    """

    def __init__(
        self,
        parent: "CollectionReference",
        filters: Tuple[FieldFilter, ...] = (),
        ordering: Optional[Tuple[str, str]] = None,
        limit_count: Optional[int] = None,
    ):
        self._parent = parent
        self.filters = filters
        self.ordering = ordering
        self.limit_count = limit_count

    def _copy(self, **changes) -> "Query":
        values = {
            "filters": self.filters,
            "ordering": self.ordering,
            "limit_count": self.limit_count,
        }
        values.update(changes)
        return Query(self._parent, **values)

    def where(self, field: str, op: str, value: Any) -> "Query":
        return self._copy(filters=self.filters + (FieldFilter(field, op, value),))

    def order_by(self, field: str, direction: str = ASCENDING) -> "Query":
        # only one ordering clause per chain; the latest call wins
        if direction != DESCENDING:
            direction = ASCENDING
        return self._copy(ordering=(field, direction))

    orderBy = order_by

    def limit(self, count: int) -> "Query":
        return self._copy(limit_count=max(int(count), 0))

    async def get(self) -> QuerySnapshot:
        return await self._parent._execute(self)

    def __repr__(self) -> str:
        return (
            f"Query(collection={self._parent.id!r}, filters={list(self.filters)!r}, "
            f"ordering={self.ordering!r}, limit={self.limit_count!r})"
        )


# ============================================================
# REFERENCES (backends subclass these)
# ============================================================

class DocumentReference:
    """Handle on one document id inside a collection; the document need not exist."""

    def __init__(self, parent: "CollectionReference", document_id: str):
        self.parent = parent
        self.id = document_id

    @property
    def path(self) -> str:
        return f"{self.parent.id}/{self.id}"

    async def get(self) -> DocumentSnapshot:
        raise NotImplementedError

    async def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        raise NotImplementedError

    async def update(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def delete(self) -> None:
        raise NotImplementedError

    def __eq__(self, other) -> bool:
        return isinstance(other, DocumentReference) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"


class CollectionReference:
    """Entry point bound to one named collection."""

    def __init__(self, name: str):
        self.id = name

    def _query(self) -> Query:
        return Query(self)

    def where(self, field: str, op: str, value: Any) -> Query:
        return self._query().where(field, op, value)

    def order_by(self, field: str, direction: str = ASCENDING) -> Query:
        return self._query().order_by(field, direction)

    orderBy = order_by

    def limit(self, count: int) -> Query:
        return self._query().limit(count)

    async def get(self) -> QuerySnapshot:
        return await self._query().get()

    def doc(self, document_id: Optional[str] = None) -> DocumentReference:
        """Reference a document by id; without an id a fresh one is generated."""
        if document_id is None:
            document_id = generate_document_id()
        return self._document(document_id)

    document = doc

    async def add(self, data: Dict[str, Any]) -> DocumentReference:
        """Create a document under a generated id and return its reference."""
        reference = self.doc()
        await reference.set(data)
        return reference

    def _document(self, document_id: str) -> DocumentReference:
        raise NotImplementedError

    async def _execute(self, query: Query) -> QuerySnapshot:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"


# ============================================================
# BATCHED WRITES
# ============================================================

class WriteBatch:
    """
    Staged writes applied together on commit().

    Writes run one after another in the order they were staged. There is no
    rollback: if a write fails, the earlier ones stay applied.
    """

    def __init__(self):
        self._writes: List[Dict[str, Any]] = []
        self._committed = False

    def set(self, reference: DocumentReference, data: Dict[str, Any], merge: bool = False) -> None:
        self._writes.append({"type": "set", "ref": reference, "data": data, "merge": merge})

    def update(self, reference: DocumentReference, data: Dict[str, Any]) -> None:
        self._writes.append({"type": "update", "ref": reference, "data": data})

    def delete(self, reference: DocumentReference) -> None:
        self._writes.append({"type": "delete", "ref": reference})

    @property
    def writes(self) -> List[Dict[str, Any]]:
        return list(self._writes)

    def __len__(self) -> int:
        return len(self._writes)

    async def commit(self) -> None:
        if self._committed:
            raise BatchAlreadyCommittedError("Batch has already been committed")
        self._committed = True

        for write in self._writes:
            ref = write["ref"]
            if write["type"] == "set":
                await ref.set(write["data"], merge=write["merge"])
            elif write["type"] == "update":
                await ref.update(write["data"])
            elif write["type"] == "delete":
                await ref.delete()
