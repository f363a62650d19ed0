"""
Database Bootstrap Script

Every admin route requires an existing admin, so the first one has to be
created out of band. This script does that and can also load menu items
and reviews from JSON files (each file holds a list of documents).

Run from project root:
    bistro-bootstrap --admin boss@bistro.com --menu data/menu.json --reviews data/reviews.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from bistro.core.config import setup_logging
from bistro.core.security import ADMIN_ROLE
from bistro.database import BistroDatabase, close_db, get_database

logger = logging.getLogger(__name__)


async def promote_admin(db: BistroDatabase, email: str) -> bool:
    """
    Create the user if needed and grant the admin role.

    Returns:
        bool: True if a new user record was created
    """
    result = await db.users.update_one(
        {"email": email},
        {"$set": {"role": ADMIN_ROLE}, "$setOnInsert": {"email": email}},
        upsert=True,
    )
    created = result.upserted_id is not None
    logger.info(f"Admin granted to {email} ({'new user' if created else 'existing user'})")
    return created


async def load_documents(collection, path: Path) -> int:
    """Insert every document of a JSON array file; returns the count."""
    documents = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(documents, list):
        raise ValueError(f"{path} must contain a JSON array")
    if not documents:
        return 0

    result = await collection.insert_many(documents)
    logger.info(f"Loaded {len(result.inserted_ids)} documents from {path}")
    return len(result.inserted_ids)


async def bootstrap(
    db: BistroDatabase,
    admin: Optional[str] = None,
    menu: Optional[Path] = None,
    reviews: Optional[Path] = None,
) -> None:
    await db.ensure_indexes()
    if admin:
        await promote_admin(db, admin)
    if menu:
        await load_documents(db.menus, menu)
    if reviews:
        await load_documents(db.reviews, reviews)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Bistro database bootstrap")
    parser.add_argument("--admin", metavar="EMAIL", help="Grant the admin role to this email")
    parser.add_argument("--menu", type=Path, help="JSON array of menu items to insert")
    parser.add_argument("--reviews", type=Path, help="JSON array of reviews to insert")
    args = parser.parse_args(argv)

    if not (args.admin or args.menu or args.reviews):
        parser.error("nothing to do: pass --admin, --menu or --reviews")

    setup_logging()
    try:
        asyncio.run(bootstrap(get_database(), args.admin, args.menu, args.reviews))
    finally:
        close_db()
    return 0


if __name__ == "__main__":
    sys.exit(main())
