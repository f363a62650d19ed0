"""
Pytest configuration: in-memory MongoDB, mock payment processor and an
async HTTP client bound to the application.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from bistro.core.security import issue_token
from bistro.database import BistroDatabase, get_db
from bistro.main import app
from bistro.services.payment import MockPaymentService, get_payment_service

ADMIN_EMAIL = "admin@bistro.com"
GUEST_EMAIL = "guest@bistro.com"


def auth_headers(email: str) -> dict:
    """Authorization header carrying a fresh token for ``email``."""
    return {"Authorization": f"Bearer {issue_token({'email': email})}"}


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test, with the production indexes."""
    database = BistroDatabase(AsyncMongoMockClient()[f"bistroDB_test_{uuid.uuid4().hex}"])
    await database.ensure_indexes()
    return database


@pytest.fixture
def payment_service():
    return MockPaymentService()


@pytest_asyncio.fixture
async def client(db, payment_service):
    """Async client with the store and processor dependencies overridden."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_payment_service] = lambda: payment_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_user(db):
    await db.users.insert_one({"email": ADMIN_EMAIL, "name": "Boss", "role": "admin"})
    return ADMIN_EMAIL


@pytest_asyncio.fixture
async def guest_user(db):
    await db.users.insert_one({"email": GUEST_EMAIL, "name": "Guest"})
    return GUEST_EMAIL


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def guest_headers(guest_user):
    return auth_headers(guest_user)
