"""
Education & Careers Portal
Course and job applications for students, institutions and companies.

Architecture:
- Document store: MongoDB, or an in-memory Firestore-style store as fallback
- FastAPI: thin routes over collection-level services
"""

__version__ = "1.0.0"
