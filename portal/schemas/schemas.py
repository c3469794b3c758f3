"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Any, Dict
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    institution = "institution"
    company = "company"
    admin = "admin"


class StudentType(str, Enum):
    highschool = "highschool"
    college = "college"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    contract = "contract"


class ExperienceLevel(str, Enum):
    entry = "entry"
    mid = "mid"
    senior = "senior"


class RecordStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    closed = "closed"


class ApplicationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ApplicationType(str, Enum):
    course = "course"
    job = "job"


class AdmissionDecision(str, Enum):
    approved = "approved"
    rejected = "rejected"


# ============================================================
# COURSE SCHEMAS
# ============================================================

class CourseCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)
    seats: int = Field(..., ge=1)
    faculty_id: Optional[str] = None


class PublishAdmissionsRequest(BaseModel):
    application_ids: List[str] = Field(..., min_length=1)
    status: AdmissionDecision


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    salary: str = Field(..., min_length=1)
    deadline: str = Field(..., min_length=1)
    company_name: Optional[str] = None
    requirements: List[str] = []
    qualifications: List[str] = []
    skills: List[str] = []
    job_type: JobType = JobType.full_time
    required_education: str = ""
    experience_level: ExperienceLevel = ExperienceLevel.entry

    @field_validator("requirements", "qualifications", "skills")
    @classmethod
    def strip_blank_entries(cls, v: List[str]) -> List[str]:
        return [item.strip() for item in v if item and item.strip()]


class JobApplicationCreate(BaseModel):
    student_id: str = Field(..., min_length=1)
    student_email: Optional[EmailStr] = None
    cover_letter: Optional[str] = None


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class StatisticsResponse(BaseModel):
    totalStudents: int
    highSchoolStudents: int
    collegeStudents: int
    totalInstitutions: int
    totalCompanies: int
    totalApplications: int
    totalJobPostings: int
    totalCourses: int
    courseApplications: int
    jobApplications: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
    data: Optional[Dict[str, Any]] = None

class ErrorResponse(BaseModel):
    error: str
    success: bool = False
