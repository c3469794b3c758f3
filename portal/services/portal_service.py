"""
Portal Service - collection-level operations used by the API routes.

Collections touched here:
1. institution        - Institutions offering courses
2. courses            - Courses (institutionId, availableSeats, status)
3. job_postings       - Job postings (companyId, status)
4. applications       - Course and job applications (type = course | job)
5. notifications      - Per-user notifications
6. company_profile    - Company profiles
7. users              - Accounts (role, studentType)

Each service takes the document store in its constructor, so it works the
same against the in-memory store and MongoDB.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from portal.db.documents import DocumentSnapshot
from portal.db.sanitize import remove_undefined_values
from portal.db.seed import COLLECTIONS, sample_portal_data
from portal.schemas.schemas import (
    ApplicationStatus,
    ApplicationType,
    CourseCreate,
    JobApplicationCreate,
    JobCreate,
    RecordStatus,
    StudentType,
    UserRole,
)
from portal.services.query_service import OrderClause, QueryCondition, safe_query

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: snapshot -> plain dict for JSON responses
# ============================================================

def serialize_doc(doc: DocumentSnapshot) -> Optional[dict]:
    """Convert a document snapshot to a JSON-ready dict with its id."""
    if doc is None or not doc.exists:
        return None
    return {**doc.data(), "id": doc.id}


def serialize_docs(docs: List[DocumentSnapshot]) -> List[dict]:
    return [serialize_doc(doc) for doc in docs]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# INSTITUTIONS & COURSES
# ============================================================

class InstitutionService:
    """
    Institutions, their courses and admissions.
    """

    def __init__(self, store):
        self.store = store
        self.institutions = store.collection(COLLECTIONS["institutions"])
        self.courses = store.collection(COLLECTIONS["courses"])
        self.applications = store.collection(COLLECTIONS["applications"])
        self.notifications = store.collection(COLLECTIONS["notifications"])

    async def get(self, institution_id: str) -> Optional[dict]:
        return serialize_doc(await self.institutions.doc(institution_id).get())

    async def list_active_courses(self, institution_id: str) -> List[dict]:
        snapshot = await (
            self.courses
            .where("institutionId", "==", institution_id)
            .where("status", "==", RecordStatus.active.value)
            .get()
        )
        return serialize_docs(snapshot.docs)

    async def list_with_courses(self) -> List[dict]:
        """All institutions, each with an embedded list of its active courses."""
        snapshot = await self.institutions.get()
        if snapshot.empty:
            logger.info("No institutions found in database")
            return []

        institutions = []
        for doc in snapshot.docs:
            institution = serialize_doc(doc)
            institution["courses"] = await self.list_active_courses(doc.id)
            institutions.append(institution)
        return institutions

    async def add_course(self, institution_id: str, course: CourseCreate) -> Optional[dict]:
        """
        Create a course and link it to the institution.

        Returns None when the institution does not exist.
        """
        institution_ref = self.institutions.doc(institution_id)
        institution_doc = await institution_ref.get()
        if not institution_doc.exists:
            return None

        course_ref = self.courses.doc()
        course_data = remove_undefined_values({
            "id": course_ref.id,
            "name": course.name,
            "description": course.description,
            "facultyId": course.faculty_id,
            "institutionId": institution_id,
            "requirements": course.requirements,
            "duration": course.duration,
            "availableSeats": course.seats,
            "totalSeats": course.seats,
            "status": RecordStatus.active.value,
        })
        await course_ref.set(course_data)

        linked = institution_doc.get("courses") or []
        await institution_ref.update({"courses": linked + [course_ref.id]})

        logger.info("Course %s added for institution %s", course_ref.id, institution_id)
        return serialize_doc(await course_ref.get())

    async def publish_admissions(self, institution_id: str, application_ids: List[str], status: str) -> int:
        """
        Set the decision on the institution's applications and notify each
        student, all in one batch. Applications belonging to other
        institutions are skipped.

        Returns the number of applications updated.
        """
        batch = self.store.batch()
        timestamp = _now()
        published = 0

        for application_id in application_ids:
            application_ref = self.applications.doc(application_id)
            application_doc = await application_ref.get()
            if not application_doc.exists or application_doc.get("institutionId") != institution_id:
                continue

            update_data = {"status": status, "updatedAt": timestamp}
            if status == ApplicationStatus.approved.value:
                update_data["approvedAt"] = timestamp
            else:
                update_data["rejectedAt"] = timestamp
            batch.update(application_ref, update_data)

            application = application_doc.data()
            batch.set(self.notifications.doc(), {
                "userId": application.get("studentId"),
                "type": "application_update",
                "title": "Application Status Updated",
                "message": f"Your application for {application.get('courseName', 'the course')} has been {status}",
                "applicationId": application_id,
                "read": False,
            })
            published += 1

        await batch.commit()
        logger.info("Admissions published for %d of %d applications", published, len(application_ids))
        return published


# ============================================================
# JOBS & JOB APPLICATIONS
# ============================================================

class JobAlreadyAppliedError(Exception):
    """Raised when a student applies twice to the same job."""
    pass


class JobService:
    """
    Job postings and applications to them.
    """

    def __init__(self, store):
        self.store = store
        self.jobs = store.collection(COLLECTIONS["job_postings"])
        self.applications = store.collection(COLLECTIONS["applications"])
        self.notifications = store.collection(COLLECTIONS["notifications"])
        self.companies = store.collection(COLLECTIONS["company_profiles"])

    async def list_active(self) -> List[dict]:
        snapshot = await self.jobs.where("status", "==", RecordStatus.active.value).get()
        return serialize_docs(snapshot.docs)

    async def list_for_company(self, company_id: str) -> List[dict]:
        """Company's postings, newest first (unsorted if the index fallback kicks in)."""
        snapshot = await safe_query(
            self.store,
            COLLECTIONS["job_postings"],
            [QueryCondition(field="companyId", operator="==", value=company_id)],
            OrderClause(field="createdAt", direction="desc"),
        )
        return serialize_docs(snapshot.docs)

    async def create(self, company_id: str, job: JobCreate) -> dict:
        job_ref = self.jobs.doc()
        await job_ref.set({
            "id": job_ref.id,
            "companyId": company_id,
            "companyName": job.company_name,
            "title": job.title,
            "description": job.description,
            "requirements": job.requirements,
            "qualifications": job.qualifications,
            "skills": job.skills,
            "deadline": job.deadline,
            "location": job.location,
            "salary": job.salary,
            "jobType": job.job_type.value,
            "requiredEducation": job.required_education,
            "experienceLevel": job.experience_level.value,
            "status": RecordStatus.active.value,
            "applications": 0,
            "qualifiedApplications": 0,
        })

        # merge so a company without a profile document still gets one
        company_doc = await self.companies.doc(company_id).get()
        postings = company_doc.get("jobPostings") or []
        await self.companies.doc(company_id).set({"jobPostings": postings + [job_ref.id]}, merge=True)

        logger.info("Job posting %s created for company %s", job_ref.id, company_id)
        return serialize_doc(await job_ref.get())

    async def has_applied(self, student_id: str, job_id: str) -> bool:
        existing = await (
            self.applications
            .where("studentId", "==", student_id)
            .where("jobId", "==", job_id)
            .where("type", "==", ApplicationType.job.value)
            .get()
        )
        return not existing.empty

    async def apply(self, job_id: str, application: JobApplicationCreate) -> Optional[dict]:
        """
        Apply a student to an active job.

        Returns None when the job is missing or inactive; raises
        JobAlreadyAppliedError on a duplicate application.
        """
        job_ref = self.jobs.doc(job_id)
        job_doc = await job_ref.get()
        if not job_doc.exists or job_doc.get("status") != RecordStatus.active.value:
            return None

        if await self.has_applied(application.student_id, job_id):
            raise JobAlreadyAppliedError(f"Student {application.student_id} already applied to {job_id}")

        job = job_doc.data()
        application_ref = self.applications.doc()
        await application_ref.set({
            "id": application_ref.id,
            "studentId": application.student_id,
            "studentEmail": application.student_email,
            "coverLetter": application.cover_letter,
            "jobId": job_id,
            "type": ApplicationType.job.value,
            "status": ApplicationStatus.pending.value,
            "companyId": job.get("companyId"),
            "jobTitle": job.get("title"),
            "appliedAt": _now(),
        })
        await job_ref.update({"applications": job.get("applications", 0) + 1})

        # notification is best effort; the application itself already stands
        try:
            await self.notifications.doc().set({
                "userId": job.get("companyId"),
                "type": "new_job_application",
                "title": "New Job Application",
                "message": f"New application received for {job.get('title')}",
                "applicationId": application_ref.id,
                "read": False,
            })
        except Exception as e:
            logger.warning("Notification creation skipped: %s", e)

        return serialize_doc(await application_ref.get())


# ============================================================
# ADMIN
# ============================================================

class AdminService:
    """
    Cross-collection statistics and sample data loading.
    """

    def __init__(self, store):
        self.store = store

    async def statistics(self) -> Dict[str, int]:
        users = self.store.collection(COLLECTIONS["users"])
        students = await users.where("role", "==", UserRole.student.value).get()
        institutions = await users.where("role", "==", UserRole.institution.value).get()
        companies = await users.where("role", "==", UserRole.company.value).get()
        applications = await self.store.collection(COLLECTIONS["applications"]).get()
        job_postings = await self.store.collection(COLLECTIONS["job_postings"]).get()
        courses = await self.store.collection(COLLECTIONS["courses"]).get()

        def count(docs, field, value):
            return sum(1 for doc in docs if doc.get(field) == value)

        return {
            "totalStudents": students.size,
            "highSchoolStudents": count(students.docs, "studentType", StudentType.highschool.value),
            "collegeStudents": count(students.docs, "studentType", StudentType.college.value),
            "totalInstitutions": institutions.size,
            "totalCompanies": companies.size,
            "totalApplications": applications.size,
            "totalJobPostings": job_postings.size,
            "totalCourses": courses.size,
            "courseApplications": count(applications.docs, "type", ApplicationType.course.value),
            "jobApplications": count(applications.docs, "type", ApplicationType.job.value),
        }

    async def init_sample_data(self) -> Dict[str, Any]:
        """
        Write the sample institutions, courses, company and jobs in one batch.

        Returns the generated ids, e.g.
            {"institutions": [...], "courses": [...], "company": "...", "jobs": [...]}
        """
        sample = sample_portal_data()
        batch = self.store.batch()
        created = {"institutions": [], "courses": [], "company": None, "jobs": []}

        for institution in sample["institutions"]:
            inst_ref = self.store.collection(COLLECTIONS["institutions"]).doc()
            batch.set(inst_ref, {**institution["data"], "status": RecordStatus.active.value})
            created["institutions"].append(inst_ref.id)

            for course in institution["courses"]:
                course_ref = self.store.collection(COLLECTIONS["courses"]).doc()
                batch.set(course_ref, {**course, "institutionId": inst_ref.id})
                created["courses"].append(course_ref.id)

        company_ref = self.store.collection(COLLECTIONS["company_profiles"]).doc()
        batch.set(company_ref, sample["company"])
        created["company"] = company_ref.id

        for job in sample["jobs"]:
            job_ref = self.store.collection(COLLECTIONS["job_postings"]).doc()
            batch.set(job_ref, {**job, "companyId": company_ref.id})
            created["jobs"].append(job_ref.id)

        await batch.commit()
        logger.info("Sample data initialized: %d writes", len(batch))
        return created
