"""
Property listing API endpoints.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, status
from pydantic import BaseModel, Field
from typing import Optional, List
from sqlalchemy.orm import Session

from flipdesk.auth.dependencies import get_current_user
from flipdesk.db.database import get_db
from flipdesk.db.models import Property, PropertyStatus, User
from flipdesk.services.email import get_email_service

logger = logging.getLogger(__name__)
router = APIRouter()


class PropertyCreate(BaseModel):
    """Schema for creating a listing."""

    title: str = Field(min_length=1)
    description: Optional[str] = None
    address: str = Field(min_length=1)
    property_type: str = "single_family"
    asking_price: Optional[float] = None
    estimated_after_repair_value: Optional[float] = None
    estimated_closing_costs: Optional[float] = None
    estimated_as_is_value: Optional[float] = None
    rehab_cost: Optional[float] = None
    rehab_duration_months: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    interior_sqft: Optional[float] = None
    lot_sqft: Optional[float] = None
    seller_email: Optional[str] = None
    seller_phone: Optional[str] = None


class PropertyUpdate(BaseModel):
    """Schema for updating a listing."""

    title: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    property_type: Optional[str] = None
    asking_price: Optional[float] = None
    estimated_after_repair_value: Optional[float] = None
    estimated_closing_costs: Optional[float] = None
    estimated_as_is_value: Optional[float] = None
    rehab_cost: Optional[float] = None
    rehab_duration_months: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    interior_sqft: Optional[float] = None
    lot_sqft: Optional[float] = None
    seller_email: Optional[str] = None
    seller_phone: Optional[str] = None
    status: Optional[PropertyStatus] = None


class PropertyImageResponse(BaseModel):
    """Schema for a listing photo."""

    id: str
    property_id: str
    image_url: str
    image_order: int
    created_at: Optional[str] = None


class PropertyResponse(BaseModel):
    """Schema for property response."""

    id: str
    user_id: str
    title: str
    description: Optional[str]
    address: str
    property_type: Optional[str]
    asking_price: Optional[float]
    estimated_after_repair_value: Optional[float]
    estimated_closing_costs: Optional[float]
    estimated_as_is_value: Optional[float]
    rehab_cost: Optional[float]
    rehab_duration_months: Optional[float]
    bedrooms: Optional[int]
    bathrooms: Optional[float]
    interior_sqft: Optional[float]
    lot_sqft: Optional[float]
    seller_email: Optional[str]
    seller_phone: Optional[str]
    status: str
    images: List[PropertyImageResponse] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PropertyListResponse(BaseModel):
    """Response for listing properties."""

    properties: List[PropertyResponse]
    total: int


class ContactSellerRequest(BaseModel):
    """Buyer inquiry forwarded to the seller."""

    contact: str = Field(min_length=1)
    message: str = Field(min_length=1)


def image_to_response(image) -> PropertyImageResponse:
    return PropertyImageResponse(
        id=image.id,
        property_id=image.property_id,
        image_url=image.image_url,
        image_order=image.image_order,
        created_at=image.created_at.isoformat() if image.created_at else None,
    )


def property_to_response(prop: Property) -> PropertyResponse:
    """Convert Property model to response schema."""
    return PropertyResponse(
        id=prop.id,
        user_id=prop.user_id,
        title=prop.title,
        description=prop.description,
        address=prop.address,
        property_type=prop.property_type,
        asking_price=prop.asking_price,
        estimated_after_repair_value=prop.estimated_after_repair_value,
        estimated_closing_costs=prop.estimated_closing_costs,
        estimated_as_is_value=prop.estimated_as_is_value,
        rehab_cost=prop.rehab_cost,
        rehab_duration_months=prop.rehab_duration_months,
        bedrooms=prop.bedrooms,
        bathrooms=prop.bathrooms,
        interior_sqft=prop.interior_sqft,
        lot_sqft=prop.lot_sqft,
        seller_email=prop.seller_email,
        seller_phone=prop.seller_phone,
        status=prop.status.value if prop.status else PropertyStatus.active.value,
        images=[image_to_response(img) for img in prop.images],
        created_at=prop.created_at.isoformat() if prop.created_at else None,
        updated_at=prop.updated_at.isoformat() if prop.updated_at else None,
    )


def get_property_or_404(property_id: str, db: Session) -> Property:
    """Load a non-deleted property or raise 404."""
    db_property = (
        db.query(Property)
        .filter(Property.id == property_id, Property.is_deleted == False)
        .first()
    )

    if not db_property:
        raise HTTPException(status_code=404, detail="Property not found")

    return db_property


def get_owned_property(property_id: str, user: User, db: Session) -> Property:
    """Load a property the user owns; 404 if missing, 403 if not theirs."""
    db_property = get_property_or_404(property_id, db)

    if db_property.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not own this property",
        )

    return db_property


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    skip: int = 0,
    limit: int = 100,
    property_type: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List active listings, newest first."""
    query = db.query(Property).filter(
        Property.is_deleted == False,
        Property.status == PropertyStatus.active,
    )

    if property_type:
        query = query.filter(Property.property_type == property_type)

    total = query.count()
    properties = (
        query.order_by(Property.created_at.desc()).offset(skip).limit(limit).all()
    )

    return PropertyListResponse(
        properties=[property_to_response(p) for p in properties],
        total=total,
    )


@router.get("/mine", response_model=PropertyListResponse)
async def list_my_properties(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the current user's listings (any status), newest first."""
    properties = (
        db.query(Property)
        .filter(Property.user_id == current_user.id, Property.is_deleted == False)
        .order_by(Property.created_at.desc())
        .all()
    )

    return PropertyListResponse(
        properties=[property_to_response(p) for p in properties],
        total=len(properties),
    )


@router.post("", response_model=PropertyResponse, status_code=201)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a new listing owned by the current user."""
    db_property = Property(user_id=current_user.id, **property_data.model_dump())

    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    logger.info(f"User {current_user.id} created property {db_property.id}")

    return property_to_response(db_property)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Get a property by ID."""
    return property_to_response(get_property_or_404(property_id, db))


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: str,
    property_data: PropertyUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a listing (owner only)."""
    db_property = get_owned_property(property_id, current_user, db)

    # Update only provided fields
    update_data = property_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_property, field, value)

    db.commit()
    db.refresh(db_property)

    return property_to_response(db_property)


@router.delete("/{property_id}")
async def delete_property(
    property_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Soft delete a listing (owner only)."""
    db_property = get_owned_property(property_id, current_user, db)

    db_property.is_deleted = True
    db.commit()

    return {"deleted": True, "id": property_id}


@router.post("/{property_id}/contact")
async def contact_seller(
    property_id: str,
    request: ContactSellerRequest,
    db: Session = Depends(get_db),
):
    """Email a buyer's inquiry to the listing's seller."""
    db_property = get_property_or_404(property_id, db)

    if not db_property.seller_email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This listing has no seller email",
        )

    sent = get_email_service().send_seller_contact_email(
        to_email=db_property.seller_email,
        property_title=db_property.title,
        property_id=db_property.id,
        sender_contact=request.contact,
        message=request.message,
    )

    return {"sent": sent, "property_id": property_id}
