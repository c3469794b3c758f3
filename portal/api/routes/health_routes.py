"""
Health Routes

GET /health  - Service status and active database backend
GET /test-db - Write, read and delete a probe document
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from portal.api.deps import get_store
from portal.db.store import DocumentStore

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(store: DocumentStore = Depends(get_store)):
    return {
        "success": True,
        "message": "Server is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": store.backend_name,
    }


@router.get("/test-db")
async def test_db(store: DocumentStore = Depends(get_store)):
    """Round-trip a throwaway document through the active backend."""
    probe_ref = store.collection("test_connections").doc()
    await probe_ref.set({
        "test": True,
        "message": "Database connection successful",
    })
    snapshot = await probe_ref.get()
    await probe_ref.delete()
    cleaned = not (await probe_ref.get()).exists

    return {
        "success": snapshot.exists and cleaned,
        "message": "Database is working!",
        "database": store.backend_name,
        "write": "successful",
        "read": "successful" if snapshot.exists else "failed",
        "cleanup": "successful" if cleaned else "failed",
    }
