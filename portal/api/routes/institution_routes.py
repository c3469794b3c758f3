"""
Institution Routes

GET /institutions                              - All institutions with active courses
GET /institutions/{id}/courses                 - Active courses of one institution
POST /institutions/{id}/courses                - Add a course
POST /institutions/{id}/publish-admissions     - Approve/reject applications in bulk
"""

from fastapi import APIRouter, Depends, HTTPException

from portal.api.deps import get_store
from portal.db.store import DocumentStore
from portal.schemas.schemas import CourseCreate, MessageResponse, PublishAdmissionsRequest
from portal.services.portal_service import InstitutionService

router = APIRouter(prefix="/institutions", tags=["Institutions"])


@router.get("")
async def list_institutions(store: DocumentStore = Depends(get_store)):
    """All institutions, each with its active courses embedded."""
    institutions = await InstitutionService(store).list_with_courses()
    return {"success": True, "institutions": institutions}


@router.get("/{institution_id}/courses")
async def list_courses(institution_id: str, store: DocumentStore = Depends(get_store)):
    courses = await InstitutionService(store).list_active_courses(institution_id)
    return {"success": True, "courses": courses}


@router.post("/{institution_id}/courses", status_code=201)
async def add_course(institution_id: str, course: CourseCreate, store: DocumentStore = Depends(get_store)):
    created = await InstitutionService(store).add_course(institution_id, course)
    if created is None:
        raise HTTPException(status_code=404, detail="Institution not found")
    return {
        "success": True,
        "message": "Course added successfully",
        "courseId": created["id"],
        "course": created,
    }


@router.post("/{institution_id}/publish-admissions", response_model=MessageResponse)
async def publish_admissions(
    institution_id: str,
    request: PublishAdmissionsRequest,
    store: DocumentStore = Depends(get_store),
):
    """Apply one decision to many applications and notify the students."""
    published = await InstitutionService(store).publish_admissions(
        institution_id, request.application_ids, request.status.value
    )
    return MessageResponse(
        message=f"Admissions published successfully for {published} applications",
        data={"published": published, "requested": len(request.application_ids)},
    )
