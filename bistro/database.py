"""
Database Connection Module
Handles the MongoDB connection using the Motor async driver.

A single client is created per process and shared by every request; the
driver pools connections internally.
"""

import logging
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from bistro.core.config import get_settings
from bistro.core.exceptions import InvalidIdentifier

logger = logging.getLogger(__name__)

USERS = "user"
MENUS = "menu"
REVIEWS = "reviews"
CARTS = "carts"
PAYMENTS = "payments"

settings = get_settings()

# Shared client; no connection is opened until the first operation
client = AsyncIOMotorClient(settings.mongodb_uri)


class BistroDatabase:
    """
    Gateway to the bistro collections.

    Wraps a Motor database handle and exposes the five collections by name.
    Tests build one around a mongomock-motor database.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database

    @property
    def users(self):
        return self.database[USERS]

    @property
    def menus(self):
        return self.database[MENUS]

    @property
    def reviews(self):
        return self.database[REVIEWS]

    @property
    def carts(self):
        return self.database[CARTS]

    @property
    def payments(self):
        return self.database[PAYMENTS]

    async def ensure_indexes(self) -> None:
        """Create the unique email index that backs idempotent sign-up."""
        await self.users.create_index([("email", ASCENDING)], unique=True)
        logger.info(f"Unique index on {USERS}.email ensured")

    async def ping(self) -> bool:
        await self.database.command("ping")
        return True


def get_database() -> BistroDatabase:
    return BistroDatabase(client[settings.mongodb_database])


async def get_db() -> BistroDatabase:
    """
    Dependency injection for FastAPI routes.
    Returns the gateway over the shared client.
    """
    return get_database()


async def init_db() -> None:
    """
    Prepare indexes.
    Called once at application startup.
    """
    await get_database().ensure_indexes()


def close_db() -> None:
    client.close()


# =============================================================================
# DOCUMENT HELPERS
# =============================================================================

def parse_object_id(value: str) -> ObjectId:
    """Convert a path identifier to an ObjectId or raise InvalidIdentifier."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifier(f"invalid id: {value}")


def serialize_document(value: Any) -> Any:
    """Render ObjectIds (at any depth) as strings so documents are JSON safe."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_document(item) for item in value]
    return value
