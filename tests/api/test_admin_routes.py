from unittest.mock import patch

import pytest
import redis
from fastapi.testclient import TestClient

from portal.api.auth import require_admin
from portal.api.deps import get_application_registry, get_user_registry
from portal.core.state_machine import ApplicationStatus, UserStatus
from portal.main import app
from portal.settings import settings

client = TestClient(app)


@pytest.fixture
def wired(applications, users):
    app.dependency_overrides[get_application_registry] = lambda: applications
    app.dependency_overrides[get_user_registry] = lambda: users
    yield
    app.dependency_overrides = {}


@pytest.fixture
def skip_auth(wired):
    app.dependency_overrides[require_admin] = lambda: None
    yield


@pytest.fixture
def seeded(users, applications, profile_factory, documents_factory):
    john = users.create("John", "Doe", "john.doe@example.com", "+267 71234567")
    alice = users.create("Alice", "Smith", "alice.smith@example.com", "+267 72345678")
    sarah = users.create("Sarah", "Williams", "sarah.williams@example.com", "+267 74567890")
    users.block(sarah.id, "Multiple invalid document submissions", 1)

    pending = applications.submit(john.id, profile_factory(), documents_factory())
    approved = applications.submit(alice.id, profile_factory(firstName="Alice"), documents_factory())
    applications.set_status(approved.id, ApplicationStatus.APPROVED, "All documents verified successfully.")
    return {"john": john, "alice": alice, "sarah": sarah, "pending": pending, "approved": approved}


@patch("portal.api.admin_routes.notify_decision", return_value="skipped")
def test_review_approve(mock_notify, skip_auth, seeded, applications):
    app_id = seeded["pending"].id
    resp = client.post(f"/admin/applications/{app_id}/review", json={"decision": "APPROVED"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["application"]["status"] == "APPROVED"
    assert data["notification"] == "skipped"
    assert applications.get_by_id(app_id).status == ApplicationStatus.APPROVED
    mock_notify.assert_called_once()


@patch("portal.api.admin_routes.notify_decision", return_value="queued")
def test_review_reject_requires_reason(mock_notify, skip_auth, seeded, applications):
    app_id = seeded["pending"].id

    missing = client.post(f"/admin/applications/{app_id}/review", json={"decision": "REJECTED", "feedback": "  "})
    assert missing.status_code == 422
    assert missing.json()["fields"] == {"feedback": "Rejection reason is required"}
    assert applications.get_by_id(app_id).status == ApplicationStatus.PENDING
    mock_notify.assert_not_called()

    resp = client.post(f"/admin/applications/{app_id}/review", json={"decision": "REJECTED", "feedback": "bad photo"})
    assert resp.status_code == 200
    assert resp.json()["application"]["feedback"] == "bad photo"
    assert resp.json()["notification"] == "queued"


def test_review_rejects_unknown_decision_and_id(skip_auth, seeded):
    app_id = seeded["pending"].id
    assert client.post(f"/admin/applications/{app_id}/review", json={"decision": "PENDING"}).status_code == 422
    assert client.post("/admin/applications/nope/review", json={"decision": "APPROVED"}).status_code == 404


def test_list_and_get_applications(skip_auth, seeded):
    rows = client.get("/admin/applications").json()
    assert [r["id"] for r in rows] == [seeded["pending"].id, seeded["approved"].id]
    assert "selfieImage" not in rows[0]

    approved = client.get("/admin/applications", params={"status": "approved"}).json()
    assert [r["id"] for r in approved] == [seeded["approved"].id]

    assert client.get("/admin/applications", params={"status": "bogus"}).status_code == 422

    detail = client.get(f"/admin/applications/{seeded['pending'].id}").json()
    assert detail["selfieImage"] == "data:image/jpeg;base64,selfie"


def test_user_search_and_filters(skip_auth, seeded):
    everyone = client.get("/admin/users").json()
    assert everyone["total"] == 3

    found = client.get("/admin/users", params={"q": "SMITH"}).json()
    assert [u["email"] for u in found["users"]] == ["alice.smith@example.com"]

    blocked = client.get("/admin/users", params={"status": "blocked"}).json()
    assert [u["id"] for u in blocked["users"]] == [seeded["sarah"].id]
    assert blocked["users"][0]["blockReason"] == "Multiple invalid document submissions"


def test_block_unblock_delete(skip_auth, seeded, users):
    john_id = seeded["john"].id

    bad = client.post(f"/admin/users/{john_id}/block", json={"reason": "spam", "durationDays": 4})
    assert bad.status_code == 422

    ok = client.post(f"/admin/users/{john_id}/block", json={"reason": "spam", "durationDays": 2})
    assert ok.status_code == 200
    assert ok.json()["status"] == "BLOCKED"
    assert ok.json()["blockedUntil"] is not None

    lifted = client.post(f"/admin/users/{john_id}/unblock")
    assert lifted.json()["status"] == "ACTIVE"
    assert lifted.json()["blockReason"] is None

    gone = client.delete(f"/admin/users/{john_id}")
    assert gone.json()["status"] == "DELETED"
    assert users.get_by_id(john_id).status == UserStatus.DELETED

    assert client.post(f"/admin/users/{john_id}/block", json={"reason": "spam", "durationDays": 1}).status_code == 409
    assert client.get("/admin/users/missing").status_code == 404


def test_stats(skip_auth, seeded):
    data = client.get("/admin/stats").json()
    assert data["applications"] == {"PENDING": 1, "APPROVED": 1, "REJECTED": 0}
    assert data["users"] == {"ACTIVE": 2, "BLOCKED": 1, "DELETED": 0}


def test_rbac_enforcement(wired, seeded):
    with patch.object(settings, "ADMIN_RBAC_ENABLED", True), \
         patch.object(settings, "ADMIN_API_KEY", "secret"):

        assert client.get("/admin/stats").status_code == 403
        assert client.get("/admin/stats", headers={"x-admin-key": "wrong"}).status_code == 403
        assert client.get("/admin/stats", headers={"x-admin-key": "secret"}).status_code == 200

    with patch.object(settings, "ADMIN_RBAC_ENABLED", True), \
         patch.object(settings, "ADMIN_API_KEY", ""):
        resp = client.get("/admin/stats", headers={"x-admin-key": ""})
        assert resp.status_code == 403
        assert "no key configured" in resp.json()["detail"]


@patch("portal.queue.rq_conn.get_queue", side_effect=redis.ConnectionError("Connection refused"))
def test_review_survives_unreachable_queue(mock_get_queue, skip_auth, seeded, applications):
    app_id = seeded["pending"].id
    with patch.object(settings, "DECISION_CALLBACK_MODE", "rq"), \
         patch.object(settings, "DECISION_CALLBACK_URL", "http://example.com/decisions"):
        resp = client.post(f"/admin/applications/{app_id}/review", json={"decision": "APPROVED"})

    assert resp.status_code == 200
    assert resp.json()["notification"] == "failed"
    assert applications.get_by_id(app_id).status == ApplicationStatus.APPROVED


@pytest.mark.parametrize("days", [True, "2", 2.0, 2.5])
def test_block_rejects_non_integer_durations(skip_auth, seeded, users, days):
    john_id = seeded["john"].id
    resp = client.post(f"/admin/users/{john_id}/block", json={"reason": "spam", "durationDays": days})

    assert resp.status_code == 422
    assert users.get_by_id(john_id).status == UserStatus.ACTIVE
