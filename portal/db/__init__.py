"""
Database module - document store backends (in-memory and MongoDB).
"""
from portal.db.documents import (
    ASCENDING,
    DESCENDING,
    DocumentSnapshot,
    QuerySnapshot,
    WriteBatch,
)
from portal.db.memory_store import MemoryFirestore
from portal.db.sanitize import remove_undefined_values
from portal.db.store import create_document_store, create_memory_store

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "DocumentSnapshot",
    "QuerySnapshot",
    "WriteBatch",
    "MemoryFirestore",
    "remove_undefined_values",
    "create_document_store",
    "create_memory_store",
]
