"""
Listing photo API endpoints.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from flipdesk.api.properties import (
    PropertyImageResponse,
    get_owned_property,
    get_property_or_404,
    image_to_response,
)
from flipdesk.auth.dependencies import get_current_user
from flipdesk.config import get_settings
from flipdesk.db.database import get_db
from flipdesk.db.models import PropertyImage, User
from flipdesk.services.storage import (
    PhotoStorage,
    StorageError,
    build_photo_key,
    get_photo_storage,
    photo_extension,
)

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def remove_stored_photos(storage: PhotoStorage, keys: List[str]) -> None:
    """Best-effort removal of photos stored before a batch failed."""
    for key in keys:
        try:
            storage.delete(key)
        except StorageError as e:
            logger.warning(f"Could not remove orphaned photo {key}: {e}")


@router.get("/properties/{property_id}/images", response_model=List[PropertyImageResponse])
async def list_property_images(
    property_id: str,
    db: Session = Depends(get_db),
):
    """List a listing's photos in display order."""
    get_property_or_404(property_id, db)

    images = (
        db.query(PropertyImage)
        .filter(PropertyImage.property_id == property_id)
        .order_by(PropertyImage.image_order.asc())
        .all()
    )
    return [image_to_response(img) for img in images]


@router.post(
    "/properties/{property_id}/images",
    response_model=List[PropertyImageResponse],
    status_code=201,
)
async def upload_property_images(
    property_id: str,
    files: List[UploadFile] = File(...),
    current_user: User = Depends(get_current_user),
    storage: PhotoStorage = Depends(get_photo_storage),
    db: Session = Depends(get_db),
):
    """
    Upload photos for a listing (owner only).

    Photos are appended after any existing ones, in upload order. All files
    are validated before anything is stored.
    """
    get_owned_property(property_id, current_user, db)

    payloads = []
    for upload in files:
        extension = photo_extension(upload.filename)
        if extension not in settings.allowed_photo_extensions:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported file type: {upload.filename}",
            )
        data = await upload.read()
        if not data:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Empty file: {upload.filename}",
            )
        if len(data) > settings.max_photo_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large: {upload.filename}",
            )
        payloads.append((extension, data, upload.content_type))

    max_order = (
        db.query(func.max(PropertyImage.image_order))
        .filter(PropertyImage.property_id == property_id)
        .scalar()
    )
    next_order = 0 if max_order is None else max_order + 1

    created = []
    stored_keys = []
    for index, (extension, data, content_type) in enumerate(payloads):
        key = build_photo_key(property_id, index, extension)
        try:
            url = storage.upload(key, data, content_type)
        except StorageError as e:
            db.rollback()
            logger.error(f"Photo upload failed for property {property_id}: {e}")
            remove_stored_photos(storage, stored_keys)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Photo storage is unavailable",
            )

        image = PropertyImage(
            property_id=property_id,
            image_url=url,
            storage_key=key,
            image_order=next_order + index,
        )
        stored_keys.append(key)
        db.add(image)
        created.append(image)

    db.commit()
    for image in created:
        db.refresh(image)

    return [image_to_response(img) for img in created]


@router.get("/images/{image_id}", response_model=PropertyImageResponse)
async def get_property_image(
    image_id: str,
    db: Session = Depends(get_db),
):
    """Get a single listing photo by ID."""
    image = (
        db.query(PropertyImage)
        .filter(PropertyImage.id == image_id, PropertyImage.is_deleted == False)
        .first()
    )

    if not image:
        raise HTTPException(status_code=404, detail="Image not found")

    return image_to_response(image)


@router.delete("/images/{image_id}")
async def delete_property_image(
    image_id: str,
    current_user: User = Depends(get_current_user),
    storage: PhotoStorage = Depends(get_photo_storage),
    db: Session = Depends(get_db),
):
    """Remove a listing photo from storage and the listing (owner only)."""
    image = db.query(PropertyImage).filter(PropertyImage.id == image_id).first()
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")

    get_owned_property(image.property_id, current_user, db)

    try:
        storage.delete(image.storage_key)
    except StorageError as e:
        logger.warning(f"Could not remove stored photo {image.storage_key}: {e}")

    db.delete(image)
    db.commit()

    return {"deleted": True, "id": image_id}
