"""Shared fixtures: a stubbed Graph API and clean settings per test."""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

import httpx
import pytest

from fbgraph import config as config_module
from fbgraph import transport
from fbgraph.authorizer import SimpleAuthorizer


class GraphStub:
    """Records requests and answers them from canned responses."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Tuple[int, bytes]]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        *,
        status_code: int = 200,
        content: Optional[bytes] = None,
    ) -> None:
        if content is None:
            content = json.dumps(json_body).encode()
        self.routes.setdefault((method, path), []).append((status_code, content))

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        responses = self.routes.get((request.method, request.url.path))
        if not responses:
            return httpx.Response(
                404,
                json={"error": {"message": "Unknown path", "type": "GraphMethodException", "code": 100}},
            )
        # The last canned response is sticky.
        status_code, content = responses.pop(0) if len(responses) > 1 else responses[0]
        return httpx.Response(status_code, content=content)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @staticmethod
    def form(request: httpx.Request) -> Dict[str, str]:
        return dict(parse_qsl(request.content.decode()))


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Ensure settings come from defaults, not the developer's environment."""
    for key in ("FBGRAPH_ACCESS_TOKEN", "FBGRAPH_ENDPOINT", "FBGRAPH_TIMEOUT", "FBGRAPH_USER_FIELDS"):
        monkeypatch.delenv(key, raising=False)
    config_module.reload_settings()
    yield
    config_module.get_settings.cache_clear()


@pytest.fixture
def graph_api(monkeypatch) -> GraphStub:
    """Route every Graph call through an in-memory stub."""
    stub = GraphStub()
    proxy = transport.RestProxy(transport=httpx.MockTransport(stub.handler))
    monkeypatch.setattr(transport, "get_proxy", lambda: proxy)
    return stub


@pytest.fixture
def authorizer() -> SimpleAuthorizer:
    return SimpleAuthorizer("T")
