"""
API routes for the listing and analysis service.
"""

from fastapi import APIRouter

from flipdesk.api import analyses, auth, calculations, images, properties

router = APIRouter()

# Include sub-routers
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(properties.router, prefix="/properties", tags=["properties"])
router.include_router(images.router, tags=["images"])
router.include_router(analyses.router, tags=["analyses"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
