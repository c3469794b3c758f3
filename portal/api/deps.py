"""
FastAPI dependencies.
"""

from fastapi import Request

from portal.db.store import DocumentStore


def get_store(request: Request) -> DocumentStore:
    """
    Dependency - the document store created at startup.

    Usage:
        @router.get("/things")
        async def route(store: DocumentStore = Depends(get_store)):
            ...
    """
    return request.app.state.store
