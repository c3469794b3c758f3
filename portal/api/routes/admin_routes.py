"""
Admin Routes

GET /admin/statistics        - Counts across collections
POST /admin/init-sample-data - Load sample institutions, courses, company and jobs
"""

from fastapi import APIRouter, Depends

from portal.api.deps import get_store
from portal.db.store import DocumentStore
from portal.schemas.schemas import MessageResponse, StatisticsResponse
from portal.services.portal_service import AdminService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/statistics")
async def get_statistics(store: DocumentStore = Depends(get_store)):
    statistics = await AdminService(store).statistics()
    return {"success": True, "statistics": StatisticsResponse(**statistics)}


@router.post("/init-sample-data", response_model=MessageResponse)
async def init_sample_data(store: DocumentStore = Depends(get_store)):
    created = await AdminService(store).init_sample_data()
    return MessageResponse(message="Sample data initialized successfully", data=created)
