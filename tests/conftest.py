"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flipdesk.main import app
from flipdesk.db.database import create_db_engine, get_db, init_db
from flipdesk.db.models import Base, User, Property
from flipdesk.auth.password import hash_password
from flipdesk.services.storage import LocalPhotoStorage, get_photo_storage


# One in-memory database shared by every session in a test
test_engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    init_db(test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def photo_storage(tmp_path):
    """Store uploaded photos in a temporary directory."""
    storage = LocalPhotoStorage(str(tmp_path / "media"), "/media")
    app.dependency_overrides[get_photo_storage] = lambda: storage
    yield storage
    app.dependency_overrides.pop(get_photo_storage, None)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def test_user(db_session):
    """Create a test user."""
    user = User(
        email="test@example.com",
        hashed_password=hash_password("testpassword123"),
        full_name="Test User",
        phone_number="555-0100",
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    """Create a second user who owns nothing."""
    user = User(
        email="other@example.com",
        hashed_password=hash_password("otherpassword123"),
        full_name="Other User",
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def authenticated_client(client, test_user):
    """Create authenticated test client."""
    client.post(
        "/api/auth/login",
        json={"email": "test@example.com", "password": "testpassword123"},
    )
    return client


@pytest.fixture
def test_property(db_session, test_user):
    """Create a test listing owned by test_user."""
    prop = Property(
        user_id=test_user.id,
        title="Test Flip",
        description="Dated 3/2 ranch, needs kitchen and baths",
        address="123 Test St, Test City, FL 12345",
        property_type="single_family",
        asking_price=250000,
        estimated_after_repair_value=350000,
        estimated_closing_costs=10000,
        rehab_cost=50000,
        rehab_duration_months=4,
        bedrooms=3,
        bathrooms=2,
        interior_sqft=1500,
        seller_email="seller@example.com",
        seller_phone="555-0199",
    )
    db_session.add(prop)
    db_session.commit()
    db_session.refresh(prop)
    return prop
