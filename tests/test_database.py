"""
Tests for the store handle and its indexes.
"""

import logging

import pytest
from pymongo.errors import DuplicateKeyError

from bistro.database import USERS


async def test_ensure_indexes_logs_collection_name(db, caplog):
    with caplog.at_level(logging.INFO, logger="bistro.database"):
        await db.ensure_indexes()

    assert f"Unique index on {USERS}.email ensured" in caplog.messages


async def test_email_index_is_unique(db, guest_user):
    with pytest.raises(DuplicateKeyError):
        await db.users.insert_one({"email": guest_user})
