import re
from functools import partial

from portal.core import errors as portal_errors
from portal.models.notification_log import NotificationLog
from portal.models.submission import Submission
from portal.routers import submissions as submissions_router
from portal.services.admin_bootstrap import upsert_admin
from portal.services.submissions import create_submission
from tests.fixtures_data import ADMIN_ACCOUNT, TRACKING_CODE_REGEX, VALID_SUBMISSION_PAYLOAD


def _login(client, session_factory):
    db = session_factory()
    try:
        upsert_admin(db, **ADMIN_ACCOUNT)
    finally:
        db.close()
    response = client.post(
        "/api/admin/login",
        json={"username": ADMIN_ACCOUNT["username"], "password": ADMIN_ACCOUNT["password"]},
    )
    assert response.status_code == 200


def test_create_submission_returns_tracking_code_and_sends_initial_notification(client, channel, session_factory):
    response = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert re.match(TRACKING_CODE_REGEX, body["tracking_code"])
    assert body["submission"]["status"] == "PENGAJUAN_BARU"
    assert body["submission"]["no_wa"].startswith("62")

    assert channel.sent[0][0] == "6281234567890"
    db = session_factory()
    try:
        logs = db.query(NotificationLog).all()
        assert len(logs) == 1
        assert logs[0].send_status == "SUCCESS"
    finally:
        db.close()


def test_invalid_submission_returns_field_errors(client, session_factory):
    response = client.post(
        "/api/submissions",
        json={**VALID_SUBMISSION_PAYLOAD, "nik": "123", "consent": False},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"] == {
        "nik": "NIK harus 16 digit angka",
        "consent": "Anda harus menyetujui pemberian notifikasi",
    }
    db = session_factory()
    try:
        assert db.query(Submission).count() == 0
    finally:
        db.close()


def test_channel_failure_does_not_change_creation_response(client, channel, session_factory):
    channel.error = RuntimeError("graph api unreachable")

    response = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD)

    assert response.status_code == 201
    db = session_factory()
    try:
        assert db.query(Submission).count() == 1
        log = db.query(NotificationLog).one()
        assert log.send_status == "FAILED"
    finally:
        db.close()


def test_listing_endpoint_sets_cache_header(client):
    for name in ("Budi Santoso", "Siti Aminah"):
        client.post("/api/submissions", json={**VALID_SUBMISSION_PAYLOAD, "nama": name})

    response = client.get("/api/submissions", params={"q": "siti", "page": "abc", "sort": "nama"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "private, max-age=30, stale-while-revalidate=60"
    body = response.json()
    assert [row["nama"] for row in body["data"]] == ["Siti Aminah"]
    assert body["pagination"]["currentPage"] == 1
    assert body["filters"]["search"] == "siti"


def test_public_tracking_lookup(client):
    created = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD).json()

    response = client.get(f"/api/submissions/{created['tracking_code']}")
    missing = client.get("/api/submissions/WS-0-ZZZZZZ")

    assert response.status_code == 200
    assert response.json()["data"]["status_label"] == "Pengajuan Baru"
    assert "nik" not in response.json()["data"]
    assert missing.status_code == 404
    assert missing.json()["success"] is False


def test_admin_status_update_notifies_citizen(client, channel, session_factory):
    created = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD).json()
    submission_id = created["submission"]["id"]
    _login(client, session_factory)

    response = client.patch(f"/api/admin/submissions/{submission_id}/status", json={"status": "DIPROSES"})

    assert response.status_code == 200
    assert response.json()["previous_status"] == "PENGAJUAN_BARU"
    assert response.json()["data"]["status"] == "DIPROSES"
    assert len(channel.sent) == 2
    assert "sedang diproses" in channel.sent[1][1]

    detail = client.get(f"/api/admin/submissions/{submission_id}")
    assert detail.status_code == 200
    statuses = [entry["payload"]["status"] for entry in detail.json()["data"]["notification_logs"]]
    assert sorted(statuses) == ["DIPROSES", "PENGAJUAN_BARU"]


def test_admin_status_update_rejects_illegal_transition(client, channel, session_factory):
    created = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD).json()
    _login(client, session_factory)

    response = client.patch(
        f"/api/admin/submissions/{created['submission']['id']}/status",
        json={"status": "SELESAI"},
    )

    assert response.status_code == 400
    assert "status" in response.json()["errors"]
    assert len(channel.sent) == 1


def test_same_status_update_sends_nothing(client, channel, session_factory):
    created = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD).json()
    _login(client, session_factory)

    response = client.patch(
        f"/api/admin/submissions/{created['submission']['id']}/status",
        json={"status": "PENGAJUAN_BARU"},
    )

    assert response.status_code == 200
    assert len(channel.sent) == 1


def test_status_update_requires_admin_session(client):
    created = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD).json()

    response = client.patch(
        f"/api/admin/submissions/{created['submission']['id']}/status",
        json={"status": "DIPROSES"},
    )

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_status_update_requires_status_field(client, session_factory):
    created = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD).json()
    _login(client, session_factory)

    response = client.patch(f"/api/admin/submissions/{created['submission']['id']}/status", json={})

    assert response.status_code == 400
    assert "status" in response.json()["errors"]


def test_unexpected_creation_failure_returns_generic_500(client, channel, monkeypatch):
    def _broken(*_args, **_kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(submissions_router, "create_submission", _broken)

    response = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Terjadi kesalahan internal server"}
    assert channel.sent == []


def test_internal_error_detail_is_exposed_only_in_development(client, monkeypatch):
    def _broken(*_args, **_kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(submissions_router, "create_submission", _broken)
    monkeypatch.setattr(portal_errors, "IS_DEV", True)

    response = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD)

    assert response.status_code == 500
    assert response.json()["error"] == "connection reset by peer"


def test_listing_failure_returns_500_without_partial_page(client, monkeypatch):
    def _broken(*_args, **_kwargs):
        raise RuntimeError("statement timeout")

    monkeypatch.setattr(submissions_router, "list_submissions", _broken)

    response = client.get("/api/submissions")

    assert response.status_code == 500
    body = response.json()
    assert body == {"success": False, "message": "Terjadi kesalahan internal server"}
    assert "data" not in body
    assert "cache-control" not in response.headers


def test_exhausted_tracking_codes_return_409(client, channel, monkeypatch, session_factory):
    monkeypatch.setattr(
        submissions_router,
        "create_submission",
        partial(create_submission, code_generator=lambda: "WS-1-AAAAAA", max_attempts=2),
    )

    first = client.post("/api/submissions", json=VALID_SUBMISSION_PAYLOAD)
    second = client.post("/api/submissions", json={**VALID_SUBMISSION_PAYLOAD, "nama": "Siti Aminah"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["success"] is False
    assert len(channel.sent) == 1
    db = session_factory()
    try:
        assert db.query(Submission).count() == 1
    finally:
        db.close()
