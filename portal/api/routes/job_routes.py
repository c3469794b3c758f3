"""
Job Routes

GET /jobs                  - List active job postings
POST /jobs/{job_id}/apply  - Apply to a job (student)
GET /companies/{id}/jobs   - Company's postings, newest first
POST /companies/{id}/jobs  - Create a job posting
"""

from fastapi import APIRouter, Depends, HTTPException

from portal.api.deps import get_store
from portal.db.store import DocumentStore
from portal.schemas.schemas import JobApplicationCreate, JobCreate
from portal.services.portal_service import JobAlreadyAppliedError, JobService

router = APIRouter(tags=["Jobs"])


@router.get("/jobs")
async def list_jobs(store: DocumentStore = Depends(get_store)):
    jobs = await JobService(store).list_active()
    return {"success": True, "jobPostings": jobs}


@router.post("/jobs/{job_id}/apply", status_code=201)
async def apply_to_job(job_id: str, application: JobApplicationCreate, store: DocumentStore = Depends(get_store)):
    """Apply to a job. Cannot apply twice to same job."""
    try:
        created = await JobService(store).apply(job_id, application)
    except JobAlreadyAppliedError:
        raise HTTPException(status_code=400, detail="You have already applied for this job")

    if created is None:
        raise HTTPException(status_code=404, detail="Job not found or inactive")

    return {
        "success": True,
        "message": "Job application submitted successfully",
        "applicationId": created["id"],
        "application": created,
    }


@router.get("/companies/{company_id}/jobs")
async def list_company_jobs(company_id: str, store: DocumentStore = Depends(get_store)):
    jobs = await JobService(store).list_for_company(company_id)
    return {"success": True, "jobs": jobs}


@router.post("/companies/{company_id}/jobs", status_code=201)
async def create_job(company_id: str, job: JobCreate, store: DocumentStore = Depends(get_store)):
    created = await JobService(store).create(company_id, job)
    return {
        "success": True,
        "message": "Job posting created successfully",
        "jobId": created["id"],
        "job": created,
    }
