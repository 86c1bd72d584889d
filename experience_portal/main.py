"""
Placement Experience Portal - Main Application

FastAPI backend with:
- PostgreSQL for users, comments, reports and announcements
- MongoDB for interview experiences and company standardizations
- JWT authentication with an admin moderation workflow

Run: uvicorn experience_portal.main:app --reload
"""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from experience_portal.api.routes import api_router
from experience_portal.core.config import get_settings
from experience_portal.core.logging import setup_logging, get_logger
from experience_portal.db.mongodb import init_mongo_indexes, test_mongo_connection
from experience_portal.db.postgres import init_sql_schema, test_postgres_connection
from experience_portal.schemas.schemas import HealthResponse

settings = get_settings()
setup_logging()
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Experience Portal",
    description="""
    Share and browse placement interview experiences.

    ## Features
    - **Authentication**: JWT auth for students and alumni (institutional emails only)
    - **Experiences**: Round-by-round interview reports, anonymous posting allowed
    - **Moderation**: Admins approve or reject submissions before they go public
    - **Insights**: Package statistics, frequent questions, question bank PDF export
    - **Community**: Comments, reports and announcements

    ## Databases
    - PostgreSQL: users, comments, reports, announcements
    - MongoDB: experiences, company standardizations
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


def _error_message(error: dict) -> str:
    message = error.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    field = error.get("loc", [])[-1] if error.get("loc") else None
    if field is not None and error.get("type") != "value_error":
        return f"{field}: {message}"
    return message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report body/query validation failures as 400 with the first message up front."""
    errors = [_error_message(e) for e in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"detail": errors[0] if errors else "Invalid request", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create SQL tables and MongoDB indexes on startup."""
    try:
        init_sql_schema()
    except Exception as e:
        logger.error(f"SQL schema initialization failed: {e}")
    try:
        init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except Exception as e:
        logger.error(f"MongoDB index initialization failed: {e}")


@app.get("/health", response_model=HealthResponse, tags=["Health"])
@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse()


@app.get("/health/db", tags=["Health"])
async def database_health_check():
    """Detailed health check."""
    postgres_ok = test_postgres_connection()
    mongo_ok = test_mongo_connection()
    return {
        "status": "ok" if postgres_ok and mongo_ok else "degraded",
        "postgres": "connected" if postgres_ok else "disconnected",
        "mongodb": "connected" if mongo_ok else "disconnected",
    }


if __name__ == "__main__":
    uvicorn.run("experience_portal.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
