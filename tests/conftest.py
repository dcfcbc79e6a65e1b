from __future__ import annotations

import json
import os
from typing import Any

import httpx
import pytest

from wi_mcp.client.credentials import CredentialHolder
from wi_mcp.client.graphql import WiClient
from wi_mcp.client.storage import SignedUrlUploader
from wi_mcp.core.config import get_settings, load_settings
from wi_mcp.tools import build_registry


ENDPOINT = "https://wi.test/graphql"
DEFAULT_TOKEN = "default-token-0001"


class FakeUpstream:
    """Answers GraphQL POSTs by operationName and storage PUTs by status.

    A queued answer may be a payload dict, an ``httpx.Response`` or an
    exception to raise. The last queued answer repeats.
    """

    def __init__(self) -> None:
        self.answers: dict[str | None, list[Any]] = {}
        self.requests: list[httpx.Request] = []
        self.put_status = 200

    def on(self, operation: str | None, *answers: Any) -> None:
        self.answers[operation] = list(answers)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "PUT":
            return httpx.Response(self.put_status, text="" if self.put_status < 400 else "denied")

        body = json.loads(request.content)
        queue = self.answers.get(body.get("operationName"))
        if not queue:
            return httpx.Response(200, json={"data": {}})
        answer = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    def graphql_bodies(self, operation: str | None = None) -> list[dict[str, Any]]:
        bodies = [json.loads(r.content) for r in self.requests if r.method == "POST"]
        if operation is None:
            return bodies
        return [b for b in bodies if b.get("operationName") == operation]

    def calls(self, operation: str) -> int:
        return len(self.graphql_bodies(operation))

    def puts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PUT"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("WI_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr("wi_mcp.client.retry.backoff_delay_ms", lambda attempt, base_delay_ms: 0)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client(upstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def settings():
    return load_settings(graphql_endpoint=ENDPOINT, bearer_token=DEFAULT_TOKEN, environment="test")


@pytest.fixture
def client(settings, http_client) -> WiClient:
    return WiClient(ENDPOINT, CredentialHolder(settings.bearer_token), http_client=http_client)


@pytest.fixture
def registry(client, settings, http_client):
    return build_registry(client, settings, SignedUrlUploader(http_client=http_client))
