"""User Routes: end-to-end CRUD over HTTP against an in-memory SQLite store.

Tests cover:
    - POST creates (201) with id/createdAt/updatedAt; GET lists with count
    - Missing name/email, bad age, bad email -> 400 envelope
    - Duplicate email (case-insensitive) -> 400 "Email already exists"
    - PUT applies partial changes; unknown id -> 404; malformed id -> 400
    - DELETE returns prior state; unknown id -> 404; malformed id -> 400
    - Optional fields omitted from JSON when unset
"""

from uuid import uuid4

import pytest


# ─── POST /api/users ─────────────────────────────────────────────

async def test_create_returns_201_with_generated_fields(client):
    res = await client.post("/api/users", json={"name": "Al", "email": "a@b.co"})
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    record = body["data"]
    assert {"id", "createdAt", "updatedAt"} <= set(record)
    assert record["name"] == "Al"
    assert record["email"] == "a@b.co"

    listing = (await client.get("/api/users")).json()
    assert listing["count"] == 1


async def test_create_omits_unset_optional_fields(client):
    res = await client.post("/api/users", json={"name": "Al", "email": "a@b.co"})
    record = res.json()["data"]
    assert "age" not in record
    assert "phone" not in record
    assert "city" not in record


async def test_create_normalizes_fields(client):
    res = await client.post("/api/users", json={
        "name": "  Alice  ", "email": "Alice@Example.com",
        "age": "30", "phone": " 555 ", "city": " Lisbon ",
    })
    record = res.json()["data"]
    assert record["name"] == "Alice"
    assert record["email"] == "alice@example.com"
    assert record["age"] == 30
    assert record["phone"] == "555"
    assert record["city"] == "Lisbon"


@pytest.mark.parametrize("body", [
    {"email": "a@b.co"},
    {"name": "Alice"},
    {},
])
async def test_create_missing_required_returns_400(client, body):
    res = await client.post("/api/users", json=body)
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Name and email are required fields"


async def test_create_without_body_returns_400(client):
    res = await client.post("/api/users")
    assert res.status_code == 400
    assert res.json()["message"] == "Name and email are required fields"


@pytest.mark.parametrize("age", [0, 150])
async def test_create_age_boundaries_accepted(client, age):
    res = await client.post(
        "/api/users", json={"name": "Al", "email": f"a{age}@b.co", "age": age},
    )
    assert res.status_code == 201
    assert res.json()["data"]["age"] == age


@pytest.mark.parametrize("age,message", [
    (-1, "age: Age cannot be negative"),
    (151, "age: Age cannot exceed 150"),
])
async def test_create_age_out_of_range_returns_400(client, age, message):
    res = await client.post(
        "/api/users", json={"name": "Al", "email": "a@b.co", "age": age},
    )
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Error creating user"
    assert body["error"] == message


async def test_create_invalid_email_returns_400(client):
    res = await client.post("/api/users", json={"name": "Al", "email": "nope"})
    assert res.status_code == 400
    assert res.json()["error"] == "email: Please provide a valid email"


async def test_create_duplicate_email_returns_400_conflict(client, make_user):
    await make_user(email="dup@example.com")
    res = await client.post(
        "/api/users", json={"name": "Other", "email": "DUP@example.com"},
    )
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Email already exists"}


async def test_create_duplicate_with_trailing_newline_returns_400(client, make_user):
    await make_user(email="a@b.co")
    res = await client.post("/api/users", json={"name": "Other", "email": "A@B.CO\n"})
    assert res.status_code == 400
    assert res.json()["error"] == "email: Please provide a valid email"

    listed = (await client.get("/api/users")).json()
    assert listed["count"] == 1


async def test_create_ignores_unknown_and_system_fields(client):
    forced_id = str(uuid4())
    res = await client.post("/api/users", json={
        "name": "Al", "email": "a@b.co", "id": forced_id, "role": "admin",
    })
    record = res.json()["data"]
    assert record["id"] != forced_id
    assert "role" not in record


# ─── GET /api/users ──────────────────────────────────────────────

async def test_list_empty(client):
    res = await client.get("/api/users")
    assert res.status_code == 200
    assert res.json() == {"success": True, "count": 0, "data": []}


async def test_list_includes_created_record(client, make_user):
    created = await make_user(name="Alice", email="alice@example.com", city="Lisbon")
    res = await client.get("/api/users")
    body = res.json()
    assert body["count"] == 1
    listed = body["data"][0]
    assert listed["id"] == created["id"]
    assert listed["name"] == "Alice"
    assert listed["city"] == "Lisbon"


# ─── PUT /api/users/{id} ─────────────────────────────────────────

async def test_update_changes_only_supplied_fields(client, make_user):
    created = await make_user(name="Alice", email="alice@example.com", age=30, city="Lisbon")
    res = await client.put(f"/api/users/{created['id']}", json={"city": "Porto"})
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "User updated successfully"
    assert body["data"]["city"] == "Porto"

    listed = (await client.get("/api/users")).json()["data"][0]
    assert listed["city"] == "Porto"
    assert listed["name"] == "Alice"
    assert listed["age"] == 30
    assert listed["email"] == "alice@example.com"


async def test_update_unknown_id_returns_404(client):
    res = await client.put(f"/api/users/{uuid4()}", json={"city": "Porto"})
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "User not found"}


async def test_update_malformed_id_returns_400(client):
    res = await client.put("/api/users/not-an-id", json={"city": "Porto"})
    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Invalid user ID format"}


async def test_update_invalid_field_returns_400(client, make_user):
    created = await make_user()
    res = await client.put(f"/api/users/{created['id']}", json={"name": "A"})
    assert res.status_code == 400
    assert res.json()["message"] == "Error updating user"


async def test_update_to_existing_email_returns_400_conflict(client, make_user):
    await make_user(email="alice@example.com")
    bob = await make_user(name="Bob", email="bob@example.com")
    res = await client.put(
        f"/api/users/{bob['id']}", json={"email": "alice@example.com"},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Email already exists"


# ─── DELETE /api/users/{id} ──────────────────────────────────────

async def test_delete_returns_prior_state(client, make_user):
    created = await make_user(name="Alice", email="alice@example.com")
    res = await client.delete(f"/api/users/{created['id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "User deleted successfully"
    assert body["data"]["id"] == created["id"]
    assert body["data"]["email"] == "alice@example.com"

    listing = (await client.get("/api/users")).json()
    assert listing["count"] == 0


async def test_delete_unknown_id_returns_404(client):
    res = await client.delete(f"/api/users/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["message"] == "User not found"


async def test_delete_malformed_id_returns_400(client):
    res = await client.delete("/api/users/12345")
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid user ID format"
