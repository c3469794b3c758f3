"""
Education & Careers Portal - Main Application

FastAPI backend with:
- MongoDB for portal documents (institutions, courses, jobs, applications)
- In-memory document store fallback when MongoDB is not configured
- One store instance per app, injected into routes

Run: uvicorn portal.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api.routes import api_router
from portal.core.config import get_settings
from portal.core.logging import configure_logging
from portal.db.store import DocumentStore, create_document_store
from portal.schemas.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Build the application.

    Pass a store to skip backend selection (tests use a fresh MemoryFirestore).
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Education & Careers Portal",
        description="""
        Multi-role portal for course and job applications.

        ## Features
        - **Institutions**: Courses and admissions publishing
        - **Companies**: Job postings
        - **Students**: Job applications
        - **Admin**: Statistics and sample data

        ## Databases
        - MongoDB when reachable, otherwise an in-memory document store
        """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    if store is not None:
        app.state.store = store

    @app.on_event("startup")
    async def startup_event():
        """Pick the document store backend once per process."""
        if getattr(app.state, "store", None) is None:
            app.state.store = create_document_store(settings)
        logger.info("Database: %s", app.state.store.backend_name)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=str(exc.detail)).model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={**ErrorResponse(error="Invalid request").model_dump(), "details": jsonable_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(exc)).model_dump())

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "success": True,
            "app": "Education & Careers Portal",
            "database": app.state.store.backend_name if getattr(app.state, "store", None) else "not initialized",
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


app = create_app()
