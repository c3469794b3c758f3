"""
Backend selection.

MongoDB is used when configured and reachable; otherwise the app runs on a
seeded in-memory store so it can start without any database.
"""

import logging
from typing import Optional, Union

from portal.core.config import Settings, get_settings
from portal.db.memory_store import MemoryFirestore
from portal.db.mongodb import MongoFirestore, get_mongo_db, test_mongo_connection
from portal.db.seed import seed_memory_store

logger = logging.getLogger(__name__)

DocumentStore = Union[MemoryFirestore, MongoFirestore]


def create_memory_store(seed: bool = True) -> MemoryFirestore:
    store = MemoryFirestore()
    if seed:
        seed_memory_store(store)
        logger.info("Mock database initialized with sample institutions and courses")
    return store


def create_document_store(settings: Optional[Settings] = None) -> DocumentStore:
    """Pick the backend for this process."""
    settings = settings or get_settings()

    if settings.use_mock_db:
        logger.warning("use_mock_db is set, using in-memory database")
        return create_memory_store(seed=settings.seed_sample_data)

    if not test_mongo_connection():
        logger.warning("MongoDB unreachable at %s, using in-memory database", settings.mongodb_uri)
        return create_memory_store(seed=settings.seed_sample_data)

    logger.info("Using MongoDB database %r", settings.mongodb_db)
    return MongoFirestore(get_mongo_db())
