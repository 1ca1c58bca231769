# Load environment variables FIRST, before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from core.config import settings
from core.database import engine, get_db
from routers import notes, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting application...")
    if not settings.ACCOUNTABLE_ENABLED:
        logger.warning("Actor stamping is disabled by configuration")

    yield

    logger.info("Shutting down application...")
    await engine.dispose()


openapi_tags = [
    {
        "name": "users",
        "description": "User registration and soft deletion.",
    },
    {
        "name": "notes",
        "description": "Notes stamped with the user who created, updated and deleted them.",
    },
    {
        "name": "health",
        "description": "Root and health check endpoints for verifying API availability.",
    },
]

app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Records who created, last updated and deleted each note. "
        f"Admins can attribute writes to another user with the {settings.ACT_AS_HEADER} header."
    ),
    version="1.0.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", settings.ACT_AS_HEADER],
)

app.include_router(users.router, prefix=f"{settings.API_V1_STR}/users", tags=["users"])
app.include_router(notes.router, prefix=f"{settings.API_V1_STR}/notes", tags=["notes"])


@app.get(
    "/health",
    summary="Health check",
    description="Validates database connectivity. Returns HTTP 200 when healthy, HTTP 503 when unhealthy.",
    operation_id="health_check",
    tags=["health"],
    responses={
        503: {"description": "Database connection failed"},
    },
)
async def health_check(db=Depends(get_db)):
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "disconnected"})
