"""Error Envelope: every failure path renders {success: False, message, error?}.

Tests cover:
    - Unmatched paths and unsupported methods -> 404 "Route not found"
    - Malformed JSON -> 400 "Invalid request body"
    - Non-object JSON body -> 400 validation envelope
    - Storage failures -> 500 with the operation's message
"""

from user_registry.core.errors import DatabaseError


class _BrokenRepository:
    """Repository whose every call fails at the storage layer."""

    async def _fail(self, *args, **kwargs):
        raise DatabaseError("Could not read users", "select")

    list_all = get = find_by_email = create = update = delete = _fail


async def test_unmatched_route_returns_404_envelope(client):
    res = await client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Route not found"}


async def test_unsupported_method_returns_404_envelope(client):
    res = await client.patch("/api/users", json={})
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Route not found"}


async def test_put_without_id_returns_404_envelope(client):
    res = await client.put("/api/users", json={"name": "Al"})
    assert res.status_code == 404
    assert res.json()["message"] == "Route not found"


async def test_malformed_json_returns_400(client):
    res = await client.post(
        "/api/users",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Invalid request body"


async def test_array_body_rejected(client):
    res = await client.post("/api/users", json=[{"name": "Al", "email": "a@b.co"}])
    assert res.status_code == 400
    assert res.json()["error"] == "body: Request body must be a JSON object"


async def test_list_storage_failure_returns_500(client, use_repository):
    use_repository(_BrokenRepository())
    res = await client.get("/api/users")
    assert res.status_code == 500
    assert res.json() == {
        "success": False,
        "message": "Error fetching users",
        "error": "Could not read users",
    }


async def test_delete_storage_failure_returns_500(client, use_repository):
    use_repository(_BrokenRepository())
    res = await client.delete("/api/users/00000000-0000-0000-0000-000000000001")
    assert res.status_code == 500
    assert res.json()["message"] == "Error deleting user"
