"""
Query Service - filtered/ordered reads that survive missing indexes.

A real document database can reject a filtered + ordered query until a
composite index exists. safe_query() retries progressively simpler variants
so listing pages keep working:

1. all conditions + ordering + limit
2. all conditions + limit (ordering dropped)
3. first condition only, remaining conditions applied client-side
4. whole collection, all conditions applied client-side

Rungs 2-4 return unsorted results. The in-memory store never raises, so
against it only rung 1 ever runs.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from portal.db.documents import DESCENDING, DocumentSnapshot, QuerySnapshot
from portal.db.filters import evaluate_condition

logger = logging.getLogger(__name__)

INDEX_ERROR_MARKERS = ("index", "FAILED_PRECONDITION")


class QueryCondition(BaseModel):
    field: str
    operator: str = "=="
    value: Any = None


class OrderClause(BaseModel):
    field: str
    direction: str = DESCENDING


def is_index_error(error: Exception) -> bool:
    message = str(error)
    return any(marker in message for marker in INDEX_ERROR_MARKERS)


def filter_documents(docs: Iterable[DocumentSnapshot], conditions: Sequence[QueryCondition]) -> List[DocumentSnapshot]:
    """Client-side AND filter over already-fetched snapshots."""
    return [
        doc for doc in docs
        if all(
            evaluate_condition(doc.data() or {}, cond.field, cond.operator, cond.value)
            for cond in conditions
        )
    ]


def _build_query(collection_ref, conditions: Sequence[QueryCondition], order_by: Optional[OrderClause], limit: Optional[int]):
    query = collection_ref
    for cond in conditions:
        query = query.where(cond.field, cond.operator, cond.value)
    if order_by is not None:
        query = query.order_by(order_by.field, order_by.direction)
    if limit is not None:
        query = query.limit(limit)
    return query


async def safe_query(
    store,
    collection_name: str,
    conditions: Optional[Sequence[QueryCondition]] = None,
    order_by: Optional[OrderClause] = None,
    limit: Optional[int] = None,
) -> QuerySnapshot:
    """
    Run a query, falling back to simpler ones on index/precondition errors.

    Errors that are not about indexes propagate from the first attempt.
    """
    conditions = list(conditions or [])
    collection_ref = store.collection(collection_name)

    try:
        return await _build_query(collection_ref, conditions, order_by, limit).get()
    except Exception as error:
        if not is_index_error(error):
            raise
        logger.warning("Index error for %s, trying without orderBy: %s", collection_name, error)

    try:
        return await _build_query(collection_ref, conditions, None, limit).get()
    except Exception as error:
        logger.warning("Second attempt for %s failed, trying with single condition: %s", collection_name, error)

    try:
        snapshot = await _build_query(collection_ref, conditions[:1], None, None).get()
    except Exception as error:
        logger.warning("All query attempts for %s failed, fetching whole collection: %s", collection_name, error)
        snapshot = await collection_ref.get()

    docs = filter_documents(snapshot.docs, conditions)
    if limit is not None:
        docs = docs[:limit]
    return QuerySnapshot(docs)
