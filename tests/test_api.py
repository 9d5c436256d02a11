from datetime import datetime, timedelta

from burnout.auth import create_access_token
from burnout.main import app, get_assessment_repo
from burnout.processor import INVALID_LENGTH_MESSAGE, INVALID_RANGE_MESSAGE


def _submit(client, headers, responses):
    return client.post("/api/bat/submit", json={"responses": responses}, headers=headers)


def test_requires_bearer_token(client):
    assert client.get("/api/bat/latest").status_code == 401
    assert _submit(client, {}, [3] * 33).status_code == 401


def test_rejects_invalid_or_expired_token(client):
    bad = {"Authorization": "Bearer not-a-jwt"}
    assert client.get("/api/bat/latest", headers=bad).status_code == 401

    expired = create_access_token({"sub": "alice"}, expires_delta=timedelta(minutes=-5))
    resp = client.get("/api/bat/latest", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401

    no_sub = create_access_token({"role": "user"})
    resp = client.get("/api/bat/latest", headers={"Authorization": f"Bearer {no_sub}"})
    assert resp.status_code == 401


def test_submit_scores_and_stores(client, repo, alice):
    resp = _submit(client, alice, [5] * 33)
    assert resp.status_code == 201

    body = resp.json()
    assert body["message"] == "Assessment submitted successfully"
    assessment = body["assessment"]
    assert assessment["user_id"] == "alice"
    assert assessment["responses"] == [5] * 33
    assert assessment["total_bat_score"] == 5.0
    assert assessment["risk_level"] == "red"
    assert assessment["secondary_risk"] == "red"
    assert "timestamp" in assessment
    assert "_id" not in assessment
    assert len(repo.docs) == 1


def test_submit_rejects_wrong_length(client, repo, alice):
    for responses in ([3] * 32, [3] * 34):
        resp = _submit(client, alice, responses)
        assert resp.status_code == 400
        assert resp.json()["detail"] == INVALID_LENGTH_MESSAGE
    assert repo.docs == []


def test_submit_rejects_missing_responses(client, repo, alice):
    resp = client.post("/api/bat/submit", json={}, headers=alice)
    assert resp.status_code == 400
    assert resp.json()["detail"] == INVALID_LENGTH_MESSAGE
    assert repo.docs == []


def test_submit_rejects_non_list_responses(client, repo, alice):
    for responses in ("3" * 33, {"0": 3}, 5):
        resp = _submit(client, alice, responses)
        assert resp.status_code == 400
        assert resp.json()["detail"] == INVALID_LENGTH_MESSAGE
    assert repo.docs == []


def test_submit_rejects_out_of_range_item(client, repo, alice):
    for bad in (0, 6):
        responses = [3] * 33
        responses[17] = bad
        resp = _submit(client, alice, responses)
        assert resp.status_code == 400
        assert resp.json()["detail"] == INVALID_RANGE_MESSAGE
    assert repo.docs == []


def test_latest_not_found_then_returns_submission(client, alice):
    resp = client.get("/api/bat/latest", headers=alice)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No assessment found"

    submitted = _submit(client, alice, [2] * 33).json()["assessment"]
    resp = client.get("/api/bat/latest", headers=alice)
    assert resp.status_code == 200
    assert resp.json() == submitted


def test_history_returns_newest_first_with_limit(client, alice):
    ids = [_submit(client, alice, [n] * 33).json()["assessment"]["id"] for n in (1, 2, 3, 4, 5)]

    resp = client.get("/api/bat/history", params={"limit": 2}, headers=alice)
    assert resp.status_code == 200
    assert [a["id"] for a in resp.json()] == [ids[4], ids[3]]

    resp = client.get("/api/bat/history", headers=alice)
    assert [a["id"] for a in resp.json()] == list(reversed(ids))


def test_history_rejects_non_positive_limit(client, alice):
    assert client.get("/api/bat/history", params={"limit": 0}, headers=alice).status_code == 422


def test_trend_is_oldest_first_and_projected(client, alice):
    for n in (1, 3, 5):
        _submit(client, alice, [n] * 33)

    resp = client.get("/api/bat/trend", headers=alice)
    assert resp.status_code == 200
    points = resp.json()
    assert [p["total_bat_score"] for p in points] == [1.0, 3.0, 5.0]
    assert [p["risk_level"] for p in points] == ["green", "orange", "red"]
    for point in points:
        assert set(point) == {"total_bat_score", "timestamp", "risk_level"}


def test_trend_summary(client, alice):
    for n in (4, 2):
        _submit(client, alice, [n] * 33)

    summary = client.get("/api/bat/trend/summary", headers=alice).json()
    assert summary["total_assessments"] == 2
    assert summary["latest_score"] == 2.0
    assert summary["latest_risk_level"] == "green"
    assert summary["change"] == -2.0
    assert summary["direction"] == "improving"
    assert summary["risk_distribution"] == {"green": 1, "orange": 0, "red": 1}


def test_users_only_see_their_own_records(client, alice, bob):
    mine = _submit(client, alice, [4] * 33).json()["assessment"]

    assert client.get("/api/bat/latest", headers=bob).status_code == 404
    assert client.get("/api/bat/history", headers=bob).json() == []
    assert client.get("/api/bat/trend", headers=bob).json() == []
    assert client.get(f"/api/bat/assessments/{mine['id']}", headers=bob).status_code == 404

    resp = client.get(f"/api/bat/assessments/{mine['id']}", headers=alice)
    assert resp.status_code == 200
    assert resp.json() == mine


def test_assessment_report_pdf(client, alice):
    assessment_id = _submit(client, alice, [3] * 33).json()["assessment"]["id"]

    resp = client.get(f"/api/bat/assessments/{assessment_id}/report.pdf", headers=alice)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")

    assert client.get("/api/bat/assessments/missing/report.pdf", headers=alice).status_code == 404


class _BrokenRepo:
    async def save(self, record):
        raise RuntimeError("connection refused")

    async def latest(self, user_id):
        raise RuntimeError("connection refused")

    async def history(self, user_id, limit=10):
        raise RuntimeError("connection refused")

    async def trend(self, user_id):
        raise RuntimeError("connection refused")


def test_storage_failures_surface_as_server_errors(client, alice):
    app.dependency_overrides[get_assessment_repo] = lambda: _BrokenRepo()

    resp = _submit(client, alice, [3] * 33)
    assert resp.status_code == 500
    assert resp.json()["detail"] == {"message": "Failed to submit assessment", "error": "connection refused"}

    expected = {
        "/api/bat/latest": "Failed to fetch assessment",
        "/api/bat/history": "Failed to fetch history",
        "/api/bat/trend": "Failed to fetch trend data",
    }
    for path, message in expected.items():
        resp = client.get(path, headers=alice)
        assert resp.status_code == 500
        assert resp.json()["detail"]["message"] == message


def test_invalid_submission_never_touches_storage(client, alice):
    app.dependency_overrides[get_assessment_repo] = lambda: _BrokenRepo()
    resp = _submit(client, alice, [9] * 33)
    assert resp.status_code == 400


def test_health_reports_database_status(client, monkeypatch):
    from burnout import db

    monkeypatch.setattr(db, "check_database_health", lambda: {
        "status": "healthy", "database": "burnout", "collections": {"bat_responses": 3},
    })
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["database"] == "burnout"
    assert body["collections"] == {"bat_responses": 3}
    assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00")).tzinfo is not None

    monkeypatch.setattr(db, "check_database_health", lambda: {"status": "unhealthy", "error": "timeout"})
    resp = client.get("/health")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Unhealthy: timeout"


def test_validation_runs_before_database_is_reached(client, alice, monkeypatch):
    from burnout import db

    app.dependency_overrides.pop(get_assessment_repo, None)
    monkeypatch.setattr(db, "MONGODB_URI", None)
    monkeypatch.setattr(db, "_async_client", None)

    resp = _submit(client, alice, [9] * 33)
    assert resp.status_code == 400
    assert resp.json()["detail"] == INVALID_RANGE_MESSAGE

    resp = _submit(client, alice, [3] * 33)
    assert resp.status_code == 500
    assert resp.json()["detail"] == {
        "message": "Failed to submit assessment",
        "error": "MONGODB_URI is missing in .env",
    }
