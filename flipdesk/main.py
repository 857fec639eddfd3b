"""
Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from flipdesk.config import get_settings
from flipdesk.api import router as api_router
from flipdesk.db.database import init_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup."""
    init_db()
    logger.info(f"{settings.app_name} started ({settings.app_env})")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Fix-and-flip listings and deal analysis",
    version=VERSION,
    debug=settings.debug,
    lifespan=lifespan,
)

# Serve locally stored listing photos
if settings.storage_backend == "local":
    app.mount(
        settings.media_url,
        StaticFiles(directory=settings.media_root, check_dir=False),
        name="media",
    )

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": VERSION}
