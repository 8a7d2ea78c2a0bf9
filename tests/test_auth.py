from gamification.auth.auth_models import Role, SuperAdmin
from gamification.auth.auth_permissions import create_access_token, hash_password
from gamification.auth.auth_service import seed_super_admin
from gamification.core.config import Config

from conftest import auth_headers

REGISTRATION = {
    "email": "Ada@Example.com",
    "username": "ada",
    "password": "correct-horse",
    "firstName": "Ada",
}


async def test_register_returns_token_without_password(client, db):
    response = await client.post("/auth/register", json=REGISTRATION)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["email"] == "ada@example.com"
    assert user["firstName"] == "Ada"
    assert user["role"] == "user"
    assert "password" not in user

    stored = await db.users.find_one({"email": "ada@example.com"})
    assert stored["password"] != "correct-horse"


async def test_register_duplicate_email_conflicts(client):
    await client.post("/auth/register", json=REGISTRATION)
    response = await client.post("/auth/register", json={**REGISTRATION, "username": "ada2"})

    assert response.status_code == 409
    assert response.json()["error"]["type"] == "CONFLICT"


async def test_register_collects_field_errors(client):
    response = await client.post("/auth/register", json={"email": "not-an-email", "password": "short"})

    assert response.status_code == 422
    assert response.json() == {
        "success": False,
        "errors": [
            {"field": "email", "message": "Please provide a valid email address"},
            {"field": "username", "message": "Username is a required field"},
            {"field": "password", "message": "Password must be at least 8 characters"},
        ],
    }


async def test_login_and_profile(client):
    await client.post("/auth/register", json=REGISTRATION)

    response = await client.post("/auth/login", json={"email": "ada@example.com", "password": "correct-horse"})
    assert response.status_code == 200
    token = response.json()["data"]["token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "ada"


async def test_login_wrong_password(client):
    await client.post("/auth/register", json=REGISTRATION)

    response = await client.post("/auth/login", json={"email": "ada@example.com", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_missing_and_invalid_tokens(client):
    assert (await client.get("/auth/me")).status_code == 401

    response = await client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["error"]["type"] == "UNAUTHORIZED"


async def test_token_for_deleted_account_is_rejected(client, db, learner):
    await db.users.delete_one({"_id": learner["_id"]})

    response = await client.get("/auth/me", headers=auth_headers(learner))

    assert response.status_code == 401


async def test_learner_cannot_use_instructor_routes(client, learner):
    response = await client.post("/course/create", json={"title": "Nope"}, headers=auth_headers(learner))

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied"


async def test_super_admin_creates_admin(client, db):
    doc = SuperAdmin(email="root@example.com", password=hash_password("root-password")).to_document()
    doc["_id"] = (await db.super_admins.insert_one(doc)).inserted_id
    headers = {"Authorization": f"Bearer {create_access_token(doc)}"}

    response = await client.post(
        "/super-admin/admins",
        json={"email": "teach@example.com", "username": "teach", "password": "teach-password"},
        headers=headers,
    )

    assert response.status_code == 201
    assert response.json()["data"]["role"] == Role.ADMIN.value


async def test_super_admin_login(client, db):
    doc = SuperAdmin(email="root@example.com", password=hash_password("root-password")).to_document()
    await db.super_admins.insert_one(doc)

    response = await client.post("/super-admin/login", json={"email": "root@example.com", "password": "root-password"})

    assert response.status_code == 200
    assert response.json()["data"]["superAdmin"]["role"] == "superAdmin"


async def test_seed_super_admin_is_idempotent(db, monkeypatch):
    monkeypatch.setenv("SUPER_ADMIN_EMAIL", "Root@Example.com")
    monkeypatch.setenv("SUPER_ADMIN_PASSWORD", "root-password")
    settings = Config()

    first = await seed_super_admin(db, settings)
    second = await seed_super_admin(db, settings)

    assert first["_id"] == second["_id"]
    assert await db.super_admins.count_documents({}) == 1
