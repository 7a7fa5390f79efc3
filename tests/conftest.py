"""
Test configuration and fixtures
"""
import os

# Keep the application engine off PostgreSQL; tests use their own engine below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.models.models import User
from app.services.business_store import BusinessStore


# Create an in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with overridden database dependency"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app=app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(db, email, role):
    user = User(email=email, name=email.split("@")[0].title(), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _headers(user):
    token = create_access_token(data={"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def normal_user(db):
    """Create a regular account"""
    return _create_user(db, "owner@test.com", "normal")


@pytest.fixture
def content_admin(db):
    """Create a content admin whose edits to published businesses need review"""
    return _create_user(db, "content@test.com", "content_admin")


@pytest.fixture
def main_admin(db):
    """Create a main admin"""
    return _create_user(db, "admin@test.com", "main_admin")


@pytest.fixture
def owner_headers(normal_user):
    return _headers(normal_user)


@pytest.fixture
def content_admin_headers(content_admin):
    return _headers(content_admin)


@pytest.fixture
def admin_headers(main_admin):
    return _headers(main_admin)


@pytest.fixture
def business_data():
    """Minimal valid registration payload"""
    return {
        "business_name": "A & B Shop",
        "category": "stores",
        "address": "12 Godowlia Road, Varanasi",
        "description": "Household goods and daily essentials.",
        "mobile": "9876543210",
        "email": "AB.Shop@Example.com",
    }


@pytest.fixture
def test_business(db, normal_user, business_data):
    """Create a pending business owned by the regular account"""
    return BusinessStore(db).create({**business_data, "user_id": normal_user.id})


@pytest.fixture
def approved_business(db, test_business):
    """Create an approved business"""
    return BusinessStore(db).update(test_business.id, lifecycle={"status": "approved"})


@pytest.fixture
def content_admin_business(db, content_admin):
    """Create an approved business owned by the content admin"""
    business = BusinessStore(db).create({
        "business_name": "Ganga View Cafe",
        "category": "cafe",
        "address": "Assi Ghat, Varanasi",
        "description": "Coffee with a river view.",
        "user_id": content_admin.id,
    })
    return BusinessStore(db).update(business.id, lifecycle={"status": "approved"})
