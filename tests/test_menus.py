"""
Tests for menu item endpoints.
"""

from bson import ObjectId

SALAD = {"name": "Caesar Salad", "price": 12.5, "category": "salad", "recipe": "Romaine, croutons"}


async def test_list_menu_is_public(client, db):
    await db.menus.insert_many([{"name": "Soup", "price": 6}, {"name": "Pizza", "price": 14}])

    response = await client.get("/menus")

    assert response.status_code == 200
    assert sorted(item["name"] for item in response.json()) == ["Pizza", "Soup"]


async def test_get_menu_item(client, db):
    result = await db.menus.insert_one(dict(SALAD))

    response = await client.get(f"/menus/{result.inserted_id}")

    assert response.status_code == 200
    assert response.json()["_id"] == str(result.inserted_id)
    assert response.json()["recipe"] == "Romaine, croutons"


async def test_get_missing_menu_item(client):
    response = await client.get(f"/menus/{ObjectId()}")

    assert response.status_code == 404
    assert response.json() == {"message": "Item not found"}


async def test_admin_creates_menu_item(client, db, admin_headers):
    response = await client.post("/menus", json=SALAD, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["acknowledged"] is True
    stored = await db.menus.find_one({"_id": ObjectId(body["insertedId"])})
    assert stored["category"] == "salad"


async def test_non_admin_cannot_create_menu_item(client, db, guest_headers):
    response = await client.post("/menus", json=SALAD, headers=guest_headers)

    assert response.status_code == 403
    assert await db.menus.count_documents({}) == 0


async def test_create_menu_item_requires_token(client, db):
    response = await client.post("/menus", json=SALAD)

    assert response.status_code == 401
    assert await db.menus.count_documents({}) == 0


async def test_delete_present_item_decrements_count(client, db, admin_headers):
    await db.menus.insert_one({"name": "Soup", "price": 6})
    result = await db.menus.insert_one(dict(SALAD))

    response = await client.delete(f"/menus/{result.inserted_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"deletedCount": 1}
    assert await db.menus.count_documents({}) == 1


async def test_delete_absent_item_is_not_found(client, db, admin_headers):
    await db.menus.insert_one(dict(SALAD))

    response = await client.delete(f"/menus/{ObjectId()}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"message": "Item not found"}
    assert await db.menus.count_documents({}) == 1


async def test_non_admin_cannot_delete_menu_item(client, db, guest_headers):
    result = await db.menus.insert_one(dict(SALAD))

    response = await client.delete(f"/menus/{result.inserted_id}", headers=guest_headers)

    assert response.status_code == 403
    assert await db.menus.count_documents({}) == 1
