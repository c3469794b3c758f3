"""
Sample data.

SEED_COLLECTIONS is loaded into every fresh in-memory store so the portal
has something to show without a database. sample_portal_data() is the
larger set written by POST /api/admin/init-sample-data.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from portal.db.memory_store import MemoryFirestore

# Collection name constants (avoid typos)
COLLECTIONS = {
    "institutions": "institution",
    "courses": "courses",
    "users": "users",
    "student_profiles": "student_profile",
    "applications": "applications",
    "comprehensive_applications": "comprehensive_applications",
    "job_postings": "job_postings",
    "notifications": "notifications",
    "transcripts": "transcripts",
    "certificates": "certificates",
    "faculties": "faculties",
    "company_profiles": "company_profile",
}


def _seed_institutions(now: datetime) -> List[Dict[str, Any]]:
    return [
        {
            "id": "inst1",
            "name": "National University of Lesotho",
            "email": "admissions@nul.ls",
            "phone": "+266 22340601",
            "address": "Roma, Maseru District, Lesotho",
            "location": "Roma, Lesotho",
            "description": "The premier institution of higher learning in Lesotho",
            "status": "active",
            "createdAt": now,
        },
        {
            "id": "inst2",
            "name": "Limkokwing University of Creative Technology",
            "email": "info@limkokwing.ls",
            "phone": "+266 22317242",
            "address": "Maseru, Lesotho",
            "location": "Maseru, Lesotho",
            "description": "Innovative university focusing on creative technology and design",
            "status": "active",
            "createdAt": now,
        },
    ]


def _seed_courses(now: datetime) -> List[Dict[str, Any]]:
    return [
        {
            "id": "course1",
            "institutionId": "inst1",
            "name": "Bachelor of Science in Computer Science",
            "description": "Comprehensive computer science degree program",
            "requirements": "LGCSE with credit in Mathematics and English",
            "duration": "4 years",
            "availableSeats": 50,
            "totalSeats": 50,
            "status": "active",
            "createdAt": now,
        },
        {
            "id": "course2",
            "institutionId": "inst1",
            "name": "Bachelor of Business Administration",
            "description": "Business management and administration degree",
            "requirements": "LGCSE with credit in Mathematics and English",
            "duration": "3 years",
            "availableSeats": 40,
            "totalSeats": 40,
            "status": "active",
            "createdAt": now,
        },
        {
            "id": "course3",
            "institutionId": "inst2",
            "name": "Bachelor of Arts in Digital Media",
            "description": "Creative digital media and design program",
            "requirements": "LGCSE with credit in English and Art",
            "duration": "3 years",
            "availableSeats": 30,
            "totalSeats": 30,
            "status": "active",
            "createdAt": now,
        },
    ]


def seed_memory_store(store: MemoryFirestore) -> MemoryFirestore:
    """Load sample institutions and courses; create the other collections empty."""
    now = datetime.now(timezone.utc)
    store.seed(COLLECTIONS["institutions"], _seed_institutions(now))
    store.seed(COLLECTIONS["courses"], _seed_courses(now))
    for name in COLLECTIONS.values():
        store.seed(name)
    return store


_SAMPLE_COURSES = [
    {
        "name": "Bachelor of Science in Computer Science",
        "description": "Comprehensive computer science degree program",
        "requirements": "LGCSE with credit in Mathematics and English",
        "duration": "4 years",
        "availableSeats": 50,
        "totalSeats": 50,
    },
    {
        "name": "Bachelor of Business Administration",
        "description": "Business management and administration degree",
        "requirements": "LGCSE with credit in Mathematics and English",
        "duration": "3 years",
        "availableSeats": 40,
        "totalSeats": 40,
    },
]


def sample_portal_data() -> Dict[str, Any]:
    """
    Build the sample set for the admin seeding endpoint.

    Returns:
        {
            "institutions": [{"data": {...}, "courses": [{...}, ...]}, ...],
            "company": {...},
            "jobs": [{...}, ...]
        }
    Ids are assigned by the caller when writing.
    """
    now = datetime.now(timezone.utc)
    institutions = []
    for inst in _seed_institutions(now):
        data = {k: v for k, v in inst.items() if k not in ("id", "location", "createdAt")}
        institutions.append({
            "data": data,
            "courses": [dict(course, status="active") for course in _SAMPLE_COURSES],
        })

    company = {
        "name": "Tech Solutions Lesotho",
        "email": "careers@techsolutions.ls",
        "phone": "+266 59548712",
        "industry": "Information Technology",
        "description": "Leading IT solutions provider in Lesotho",
        "status": "active",
    }

    jobs = [
        {
            "title": "Junior Software Developer",
            "description": "Looking for fresh graduates with programming skills",
            "requirements": ["Bachelor's in Computer Science", "Knowledge of JavaScript", "Problem-solving skills"],
            "qualifications": ["Python", "Java", "Web Development"],
            "location": "Maseru",
            "salary": "M8,000 - M12,000",
            "jobType": "full-time",
            "deadline": (now + timedelta(days=30)).isoformat(),
            "status": "active",
        },
        {
            "title": "IT Support Specialist",
            "description": "Provide technical support to clients and internal teams",
            "requirements": ["Diploma in IT", "Customer service skills", "Technical troubleshooting"],
            "qualifications": ["Network Administration", "Hardware Maintenance", "Communication Skills"],
            "location": "Maseru",
            "salary": "M6,000 - M9,000",
            "jobType": "full-time",
            "deadline": (now + timedelta(days=45)).isoformat(),
            "status": "active",
        },
    ]

    return {"institutions": institutions, "company": company, "jobs": jobs}
