import careerai.routers.ai as ai_mod
import careerai.services.dispatcher as dispatcher_mod
from careerai.core.errors import ProviderError


def test_ai_dispatch_success(client, provider):
    provider.reply_text('[{"title": "Junior Data Analyst"}]')
    resp = client.post("/ai", json={"action": "find_jobs", "payload": {"resume_text": "r", "query": "data"}})
    assert resp.status_code == 200
    assert resp.json() == {"result": '[{"title": "Junior Data Analyst"}]'}
    assert provider.calls == 1


def test_ai_unknown_action_is_400_regardless_of_payload(client, provider):
    for payload in ({}, {"resume_text": "x"}, {"anything": [1, 2, 3]}):
        resp = client.post("/ai", json={"action": "not_a_real_action", "payload": payload})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Unknown action"
        assert "not_a_real_action" in body["details"]
    assert provider.calls == 0


def test_ai_missing_action_is_unknown_action(client, provider):
    resp = client.post("/ai", json={"payload": {}})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Unknown action"


def test_ai_invalid_json_body_is_400(client, provider):
    resp = client.post("/ai", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid JSON request body"
    assert provider.calls == 0


def test_ai_non_object_body_is_400(client, provider):
    resp = client.post("/ai", json=["find_jobs"])
    assert resp.status_code == 400


def test_ai_missing_key_is_500_with_zero_provider_calls(monkeypatch, client, provider):
    monkeypatch.setattr(dispatcher_mod.settings, "ai_api_key", None)
    resp = client.post("/ai", json={"action": "generate_lesson", "payload": {"skill": "SQL"}})
    assert resp.status_code == 500
    assert "API key" in resp.json()["error"]
    assert provider.calls == 0


def test_ai_provider_failure_is_500_with_details(client, provider):
    provider.status_code = 502
    provider.envelope = {"message": "bad gateway"}
    resp = client.post("/ai", json={"action": "generate_lesson", "payload": {"skill": "SQL"}})
    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "AI request failed"
    assert body["details"].startswith("502")


def test_ai_dispatch_error_from_service_is_structured(monkeypatch, client):
    def _boom(action, payload):
        raise ProviderError(details="timeout")

    monkeypatch.setattr(ai_mod, "dispatch", _boom)
    resp = client.post("/ai", json={"action": "generate_lesson", "payload": {}})
    assert resp.status_code == 500
    assert resp.json() == {"error": "AI request failed", "details": "timeout"}


def test_ai_normalize_endpoint_jobs_fallback(client):
    resp = client.post("/ai/normalize", json={"action": "find_jobs", "text": "Role one\nRole two"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["shape"] == "lines"
    assert body["fallback"] == "line_split"
    assert [j["title"] for j in body["result"]] == ["Role one", "Role two"]
    assert all(70 <= j["ats"] < 95 for j in body["result"])


def test_ai_normalize_endpoint_object(client):
    resp = client.post("/ai/normalize", json={"action": "optimize_resume", "text": '{"optimized":"X","score":77}'})
    assert resp.json()["result"] == {"optimized": "X", "score": 77}
    assert resp.json()["fallback"] is None


def test_ai_normalize_unknown_action(client):
    resp = client.post("/ai/normalize", json={"action": "nope", "text": "x"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Unknown action"
