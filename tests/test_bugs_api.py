"""
Integration Tests — /api/v1/bugs
================================
Full HTTP round-trips through FastAPI's TestClient. The request-scoped
session is routed to a per-test in-memory database (see conftest.py).
"""
from datetime import datetime

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from bugtracker.api.bugs import get_store

BUGS = "/api/v1/bugs"


def _ts(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


INTEGRATION_BUG = {
    "title": "Integration Test Bug",
    "description": "This is from integration test",
    "priority": "medium",
}


def _create(client, **overrides):
    resp = client.post(BUGS, json={**INTEGRATION_BUG, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


# ===================================================================
# Create
# ===================================================================
def test_create_bug_returns_201_envelope(client):
    resp = client.post(BUGS, json=INTEGRATION_BUG)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert len(data["_id"]) == 32
    assert data["title"] == "Integration Test Bug"
    assert data["description"] == "This is from integration test"
    assert data["priority"] == "medium"
    assert data["status"] == "open"
    assert data["createdAt"] == data["updatedAt"]
    assert "count" not in body


def test_create_defaults_priority(client):
    resp = client.post(BUGS, json={"title": "t", "description": "d"})
    assert resp.status_code == 201
    assert resp.json()["data"]["priority"] == "medium"


def test_create_missing_fields_is_400_with_field_map(client):
    resp = client.post(BUGS, json={"title": "", "description": ""})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["fields"] == {
        "title": "Title is required",
        "description": "Description is required",
    }
    assert body["error"] == "Title is required, Description is required"


def test_create_invalid_priority_is_400(client):
    resp = client.post(BUGS, json={**INTEGRATION_BUG, "priority": "urgent"})
    assert resp.status_code == 400
    assert "priority" in resp.json()["fields"]


def test_create_non_object_body_is_400(client):
    resp = client.post(BUGS, json=["not", "an", "object"])
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "body" in body["fields"]


def test_create_malformed_json_is_400(client):
    resp = client.post(
        BUGS, content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


# ===================================================================
# List
# ===================================================================
def test_list_after_create(client):
    _create(client)
    resp = client.get(BUGS)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] >= 1
    assert isinstance(body["data"], list)
    assert body["count"] == len(body["data"])


def test_list_is_newest_first(client):
    first = _create(client, title="R1")
    second = _create(client, title="R2")
    ids = [bug["_id"] for bug in client.get(BUGS).json()["data"]]
    assert ids == [second["_id"], first["_id"]]


def test_list_empty(client):
    assert client.get(BUGS).json() == {"success": True, "data": [], "count": 0}


# ===================================================================
# Get / Update / Delete
# ===================================================================
def test_round_trip_by_id(client):
    created = _create(client, priority="high")
    resp = client.get(f"{BUGS}/{created['_id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": created}


def test_get_malformed_id_is_404(client):
    resp = client.get(f"{BUGS}/not-a-real-id")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": "Bug not found with id of not-a-real-id",
    }


def test_get_absent_id_is_404(client):
    resp = client.get(f"{BUGS}/{'0' * 32}")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_update_partial(client):
    created = _create(client)
    resp = client.put(f"{BUGS}/{created['_id']}", json={"status": "resolved"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "resolved"
    assert data["title"] == created["title"]
    assert data["createdAt"] == created["createdAt"]
    assert _ts(data["updatedAt"]) >= _ts(created["updatedAt"])


def test_update_invalid_status_is_400(client):
    created = _create(client)
    resp = client.put(f"{BUGS}/{created['_id']}", json={"status": "closed"})
    assert resp.status_code == 400
    assert "status" in resp.json()["fields"]


def test_update_missing_is_404(client):
    resp = client.put(f"{BUGS}/{'0' * 32}", json={"status": "resolved"})
    assert resp.status_code == 404


def test_delete_then_get(client):
    created = _create(client)
    resp = client.delete(f"{BUGS}/{created['_id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["_id"] == created["_id"]
    assert client.get(f"{BUGS}/{created['_id']}").status_code == 404
    assert client.get(BUGS).json()["count"] == 0


# ===================================================================
# Framework + unclassified failures
# ===================================================================
def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Not Found"}


def test_wrong_method_uses_envelope(client):
    resp = client.patch(BUGS)
    assert resp.status_code == 405
    assert resp.json()["success"] is False


def test_unexpected_error_is_generic_500(app):
    class ExplodingStore:
        def list(self):
            raise RuntimeError("database on fire")

    app.dependency_overrides[get_store] = lambda: ExplodingStore()
    # the route converts the failure itself; nothing reaches ServerErrorMiddleware
    client = TestClient(app)

    resp = client.get(BUGS)
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Server Error"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_driver_error_is_generic_500(app):
    class BrokenDriverStore:
        def get_by_id(self, bug_id):
            raise OperationalError("SELECT ...", {}, Exception("disk I/O error"))

    app.dependency_overrides[get_store] = lambda: BrokenDriverStore()
    resp = TestClient(app).get(f"{BUGS}/{'a' * 32}")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Server Error"}
