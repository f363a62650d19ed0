"""
Tests for user account endpoints.
"""

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from bistro.database import USERS, BistroDatabase
from tests.conftest import ADMIN_EMAIL, GUEST_EMAIL, auth_headers


class TestCreateUser:

    async def test_first_sign_in_creates_user(self, client, db):
        response = await client.post("/users", json={"email": "new@bistro.com", "name": "New"})

        assert response.status_code == 200
        body = response.json()
        assert body["insertedId"]
        stored = await db.users.find_one({"_id": ObjectId(body["insertedId"])})
        assert stored["name"] == "New"

    async def test_existing_email_is_not_inserted_again(self, client, db, guest_user):
        before = await db.users.count_documents({})

        response = await client.post("/users", json={"email": GUEST_EMAIL, "name": "Other"})

        assert response.status_code == 200
        assert response.json() == {"message": "user already exists", "insertedId": None}
        assert await db.users.count_documents({}) == before
        stored = await db.users.find_one({"email": GUEST_EMAIL})
        assert stored["name"] == "Guest"

    async def test_concurrent_insert_race_reports_existing(self, client, db, guest_user, monkeypatch):
        # Another request inserted the same email between our match and our upsert
        class RacingUsers:
            def __init__(self, collection):
                self.collection = collection

            async def update_one(self, *args, **kwargs):
                raise DuplicateKeyError("E11000 duplicate key error collection: user index: email_1")

            def __getattr__(self, name):
                return getattr(self.collection, name)

        monkeypatch.setattr(
            BistroDatabase, "users", property(lambda self: RacingUsers(self.database[USERS]))
        )

        response = await client.post("/users", json={"email": GUEST_EMAIL, "name": "Other"})

        assert response.status_code == 200
        assert response.json() == {"message": "user already exists", "insertedId": None}
        assert await db.database[USERS].count_documents({}) == 1

    async def test_repeat_sign_in_is_idempotent(self, client, db):
        first = await client.post("/users", json={"email": "twice@bistro.com"})
        second = await client.post("/users", json={"email": "twice@bistro.com"})

        assert first.json()["insertedId"]
        assert second.json()["insertedId"] is None
        assert await db.users.count_documents({"email": "twice@bistro.com"}) == 1

    async def test_client_cannot_assign_role(self, client, db):
        await client.post("/users", json={"email": "sneaky@bistro.com", "role": "admin"})

        stored = await db.users.find_one({"email": "sneaky@bistro.com"})
        assert "role" not in stored

    async def test_email_is_required(self, client, db):
        response = await client.post("/users", json={"name": "No Email"})

        assert response.status_code == 400
        assert "email" in response.json()["message"]
        assert await db.users.count_documents({}) == 0


class TestListUsers:

    async def test_admin_lists_users(self, client, admin_headers, guest_user):
        response = await client.get("/users", headers=admin_headers)

        assert response.status_code == 200
        emails = {user["email"] for user in response.json()}
        assert emails == {ADMIN_EMAIL, GUEST_EMAIL}
        assert all(isinstance(user["_id"], str) for user in response.json())

    async def test_missing_token(self, client):
        response = await client.get("/users")

        assert response.status_code == 401
        assert response.json()["message"]

    async def test_invalid_token(self, client):
        response = await client.get("/users", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401

    async def test_non_admin_is_forbidden(self, client, guest_headers):
        response = await client.get("/users", headers=guest_headers)

        assert response.status_code == 403
        assert response.json() == {"message": "forbidden access"}


class TestDeleteUser:

    async def test_admin_deletes_user(self, client, db, admin_headers):
        result = await db.users.insert_one({"email": "gone@bistro.com"})

        response = await client.delete(f"/users/{result.inserted_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"acknowledged": True, "deletedCount": 1}
        assert await db.users.find_one({"email": "gone@bistro.com"}) is None

    async def test_unknown_id_returns_zero_count(self, client, admin_headers):
        response = await client.delete(f"/users/{ObjectId()}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["deletedCount"] == 0

    async def test_non_admin_cannot_delete(self, client, db, guest_headers):
        result = await db.users.insert_one({"email": "keep@bistro.com"})

        response = await client.delete(f"/users/{result.inserted_id}", headers=guest_headers)

        assert response.status_code == 403
        assert await db.users.find_one({"email": "keep@bistro.com"}) is not None

    async def test_malformed_id_is_client_error(self, client, admin_headers):
        response = await client.delete("/users/not-an-object-id", headers=admin_headers)

        assert response.status_code == 400


class TestMakeAdmin:

    async def test_admin_promotes_user(self, client, db, admin_headers, guest_user):
        guest = await db.users.find_one({"email": guest_user})

        response = await client.patch(f"/users/admin/{guest['_id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["modifiedCount"] == 1
        promoted = await db.users.find_one({"email": guest_user})
        assert promoted["role"] == "admin"

    async def test_unknown_user_is_not_found(self, client, admin_headers):
        response = await client.patch(f"/users/admin/{ObjectId()}", headers=admin_headers)

        assert response.status_code == 404

    async def test_non_admin_cannot_promote(self, client, db, guest_headers, guest_user):
        guest = await db.users.find_one({"email": guest_user})

        response = await client.patch(f"/users/admin/{guest['_id']}", headers=guest_headers)

        assert response.status_code == 403
        unchanged = await db.users.find_one({"email": guest_user})
        assert "role" not in unchanged


class TestAdminStatus:

    async def test_admin_sees_own_status(self, client, admin_headers):
        response = await client.get(f"/users/admin/{ADMIN_EMAIL}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"admin": True}

    async def test_guest_sees_own_status(self, client, guest_headers):
        response = await client.get(f"/users/admin/{GUEST_EMAIL}", headers=guest_headers)

        assert response.json() == {"admin": False}

    async def test_unknown_user_is_not_admin(self, client):
        headers = auth_headers("ghost@bistro.com")

        response = await client.get("/users/admin/ghost@bistro.com", headers=headers)

        assert response.json() == {"admin": False}

    async def test_other_identity_is_forbidden(self, client, guest_headers, admin_user):
        response = await client.get(f"/users/admin/{ADMIN_EMAIL}", headers=guest_headers)

        assert response.status_code == 403

    async def test_requires_token(self, client):
        response = await client.get(f"/users/admin/{GUEST_EMAIL}")

        assert response.status_code == 401
