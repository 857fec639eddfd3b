"""
SQLAlchemy ORM models for listings, photos and saved analyses.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid
import enum


class PropertyStatus(str, enum.Enum):
    """Listing status enumeration."""
    active = "active"
    inactive = "inactive"
    sold = "sold"

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class User(AuditMixin, Base):
    """User model for authentication."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(200), nullable=True)
    phone_number = Column(String(50), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    # Relationships
    properties = relationship(
        "Property",
        back_populates="owner",
        lazy="dynamic",
    )
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )


class Property(AuditMixin, Base):
    """An off-market fix-and-flip listing."""

    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text)
    address = Column(String(255), nullable=False)
    property_type = Column(String(50), default="single_family")

    # Deal numbers supplied by the seller
    asking_price = Column(Float)
    estimated_after_repair_value = Column(Float)
    estimated_closing_costs = Column(Float)
    estimated_as_is_value = Column(Float)
    rehab_cost = Column(Float)
    rehab_duration_months = Column(Float)

    # Physical details
    bedrooms = Column(Integer)
    bathrooms = Column(Float)
    interior_sqft = Column(Float)
    lot_sqft = Column(Float)

    # Seller contact
    seller_email = Column(String(255))
    seller_phone = Column(String(50))

    status = Column(SQLEnum(PropertyStatus), default=PropertyStatus.active, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="properties")
    images = relationship(
        "PropertyImage",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyImage.image_order",
    )
    flip_analysis = relationship(
        "FlipAnalysis",
        back_populates="property",
        cascade="all, delete-orphan",
        uselist=False,
    )


class PropertyImage(AuditMixin, Base):
    """A listing photo stored in object storage."""

    __tablename__ = "property_images"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(String, ForeignKey("properties.id"), nullable=False, index=True)
    image_url = Column(String(1024), nullable=False)
    storage_key = Column(String(512), nullable=False)
    image_order = Column(Integer, default=0, nullable=False)

    property = relationship("Property", back_populates="images")


class FlipAnalysis(AuditMixin, Base):
    """
    Saved analysis inputs for a property (one row per property).

    Only the flattened acquisition subset is kept; the full result is
    recomputed on load. tax_rate is stored as a decimal (0.25 = 25%).
    """

    __tablename__ = "flip_analysis"

    id = Column(String, primary_key=True, default=generate_uuid)
    property_id = Column(
        String, ForeignKey("properties.id"), nullable=False, unique=True, index=True
    )
    purchase_price = Column(Float)
    estimated_purchase_costs = Column(Float)
    estimated_rehab_costs = Column(Float)
    after_repair_value = Column(Float)
    after_repair_sqft = Column(Float)
    tax_rate = Column(Float)

    property = relationship("Property", back_populates="flip_analysis")


class RefreshToken(AuditMixin, Base):
    """Refresh token for JWT authentication."""

    __tablename__ = "refresh_tokens"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    token_hash = Column(String(255), nullable=False, index=True)  # Store hash, not token
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="refresh_tokens")
