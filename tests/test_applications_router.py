from datetime import datetime, timezone

import careerai.routers.applications as apps_mod
from careerai.core.errors import ConfigError


class _Record:
    def __init__(self, user_id, job, cover_letter):
        self.id = "rec-1"
        self.user_id = user_id
        self.job = job
        self.cover_letter = cover_letter
        self.created_at = datetime(2025, 9, 16, tzinfo=timezone.utc)


def test_save_application_for_token_user(monkeypatch, client):
    monkeypatch.setattr(apps_mod, "create_application", lambda db, uid, job, letter: _Record(uid, job, letter))
    resp = client.post("/applications", json={"job": {"title": "Analyst"}, "cover_letter": "Dear team"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["user_id"] == "user-1"
    assert body["job"] == {"title": "Analyst"}
    assert body["created_at"].startswith("2025-09-16")


def test_save_application_returns_500_on_repo_failure(monkeypatch, client):
    monkeypatch.setattr(apps_mod, "create_application", lambda db, uid, job, letter: (_ for _ in ()).throw(RuntimeError("db")))
    resp = client.post("/applications", json={"job": {"title": "Analyst"}})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to save application"


def test_save_application_requires_auth(anon_client):
    resp = anon_client.post("/applications", json={"job": {"title": "Analyst"}})
    assert resp.status_code == 401


def test_bulk_apply_route_continues_past_save_failure(monkeypatch, client):
    saved = []

    class _Store:
        def __init__(self, db):
            pass

        def __call__(self, user_id, job, cover_letter):
            if job["title"] == "B":
                raise RuntimeError("write failed")
            saved.append((user_id, job["title"], cover_letter))

    monkeypatch.setattr(apps_mod, "DatabaseApplicationStore", _Store)
    monkeypatch.setattr(apps_mod, "dispatch", lambda action, payload: f"Letter {payload['job']['title']}")
    resp = client.post(
        "/applications/bulk-apply",
        json={"jobs": [{"title": "A"}, {"title": "B"}, {"title": "C"}], "resume_text": "resume"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["processed"] == 3
    assert body["saved"] == 2
    assert body["failures"] == [{"index": 1, "title": "B", "step": "save", "error": "write failed"}]
    assert saved == [("user-1", "A", "Letter A"), ("user-1", "C", "Letter C")]


def test_bulk_apply_route_missing_key_is_500(monkeypatch, client):
    monkeypatch.setattr(apps_mod, "DatabaseApplicationStore", lambda db: (lambda *a: None))

    def _no_key(action, payload):
        raise ConfigError()

    monkeypatch.setattr(apps_mod, "dispatch", _no_key)
    resp = client.post("/applications/bulk-apply", json={"jobs": [{"title": "A"}]})
    assert resp.status_code == 500
    assert "API key" in resp.json()["error"]
