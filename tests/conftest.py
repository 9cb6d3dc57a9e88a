import json

import httpx
import pytest
from fastapi.testclient import TestClient

import careerai.services.llm_client as llm
from careerai.core.rate_limiter import rate_limiter
from careerai.database import get_db
from careerai.dependencies import get_current_user_id
from careerai.main import app


class StubProvider:
    """Records outbound provider requests and answers with a canned envelope."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.envelope: object = {"result": {"content": "ok"}}
        self.raw_body: bytes | None = None
        self.error: Exception | None = None

    def reply_text(self, text: str) -> None:
        self.envelope = {"result": {"content": text}}

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        return httpx.Response(self.status_code, json=self.envelope)


@pytest.fixture
def provider(monkeypatch) -> StubProvider:
    stub = StubProvider()
    monkeypatch.setattr(llm.settings, "ai_api_key", "test-key")
    monkeypatch.setattr(llm.settings, "ai_endpoint_url", "https://provider.test/generate")
    monkeypatch.setattr(llm, "_http_client", lambda: httpx.Client(transport=httpx.MockTransport(stub.handler)))
    return stub


@pytest.fixture
def client():
    def _db_override():
        yield object()

    rate_limiter.reset()
    app.dependency_overrides[get_db] = _db_override
    app.dependency_overrides[get_current_user_id] = lambda: "user-1"
    yield TestClient(app)
    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture
def anon_client():
    rate_limiter.reset()
    yield TestClient(app)
    rate_limiter.reset()
