"""
Admin dashboard statistics.
"""

import logging
from typing import Any

from bistro.database import BistroDatabase

logger = logging.getLogger(__name__)

REVENUE_PIPELINE = [
    {"$group": {"_id": None, "revenue": {"$sum": "$price"}}},
]


async def compute_stats(db: BistroDatabase) -> dict[str, Any]:
    """
    Collection counts plus total revenue.

    Counts come from collection metadata and may lag concurrent writes.
    Revenue is summed by the store, so payments are never loaded here.
    """
    users = await db.users.estimated_document_count()
    menu_items = await db.menus.estimated_document_count()
    orders = await db.payments.estimated_document_count()

    rows = await db.payments.aggregate(REVENUE_PIPELINE).to_list(length=None)
    revenue = rows[0]["revenue"] if rows else 0

    logger.debug(f"Stats: users={users} menu={menu_items} orders={orders} revenue={revenue}")

    return {
        "users": users,
        "menuItem": menu_items,
        "orders": orders,
        "revenue": revenue,
    }
