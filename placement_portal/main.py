"""
Placement Portal - Main Application

FastAPI backend with:
- MongoDB for users, student profiles, jobs and applications
- JWT authentication with student / company / admin roles
- Application review pipeline with an audit trail

Run: uvicorn placement_portal.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from placement_portal import __version__
from placement_portal.api.routes import api_router
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import InternalError, PortalError
from placement_portal.core.logging import setup_logging
from placement_portal.db.mongodb import has_required_indexes, init_mongo_indexes, test_mongo_connection
from placement_portal.schemas.schemas import ErrorResponse

settings = get_settings()
setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Portal",
    description="""
    Placement / internship portal backend.

    ## Features
    - **Authentication**: JWT-based auth for students, companies and admins
    - **Profiles**: Student academic profile, skills and projects
    - **Jobs**: Post, search, close and delete job postings
    - **Applications**: Apply with eligibility checks, review pipeline with stage history
    - **Admin**: User management and placement analytics
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(
    api_router,
    prefix="/api",
    responses={code: {"model": ErrorResponse} for code in (403, 404, 409, 500)}
)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Domain errors carry their own status code and kind."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors()), "kind": "validation"}
    )


@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return await portal_error_handler(request, InternalError())


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        # /health reports "degraded" until the indexes exist
        logger.error("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Portal", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check. Degraded when the duplicate-application guard is missing."""
    connected = test_mongo_connection()
    indexes_ready = connected and has_required_indexes()
    return {
        "status": "healthy" if indexes_ready else "degraded",
        "mongodb": "connected" if connected else "disconnected",
        "indexes": "ready" if indexes_ready else "missing"
    }
