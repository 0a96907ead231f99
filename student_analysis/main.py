"""
Student Analysis Backend - Main Application

FastAPI backend with:
- MongoDB for student records and their AI analyses
- Document extraction microservice for resumes and marks cards
- Groq (OpenAI-compatible) for structuring and analysis
- Fallback ladder so AI failures degrade instead of erroring

Run: uvicorn student_analysis.main:app --reload
"""

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from student_analysis import __version__
from student_analysis.api.routes import api_router
from student_analysis.core.config import get_settings
from student_analysis.core.errors import PersistenceError, ValidationError
from student_analysis.db.mongodb import init_mongo_indexes, test_mongo_connection
from student_analysis.schemas.schemas import ErrorResponse
from student_analysis.services.extraction_client import ExtractionServiceClient, get_extraction_client

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Student Analysis Backend",
    description="""
    Aggregates a student's academic, coding-platform, resume and soft-skills data.

    ## Features
    - **Soft Skills**: Five-question assessment analyzed by AI
    - **Resume & Marks**: Document upload with AI extraction
    - **Profile Analysis**: Career guidance from the complete profile
    - **Integrations**: GitHub, LeetCode, photo upload

    AI-backed endpoints never fail because of the AI: every result carries a
    `source` field naming the fallback tier that produced it.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump(exclude_none=True))


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Database error on %s: %s", request.url.path, exc)
    body = ErrorResponse(error="Database error", details=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
        logger.info("✅ MongoDB indexes initialized")
    except PyMongoError as e:
        logger.warning("⚠️ MongoDB index initialization failed: %s", e)


@app.get("/api/health", tags=["Health"])
async def health_check(extraction: ExtractionServiceClient = Depends(get_extraction_client)):
    """Detailed health check."""
    return {
        "status": "online",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "apiVersion": __version__,
        "services": {
            "mongodb": "connected" if test_mongo_connection() else "disconnected",
            "extractionService": "connected" if await extraction.is_healthy() else "disconnected"
        }
    }
