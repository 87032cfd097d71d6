"""Shared fixtures: a controllable clock, a temp token file and a fake backend."""

import json
from typing import Callable, Dict, List, Tuple

import httpx
import pytest

from context import AppContext
from utils.storage import TokenStorage

NOW_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = NOW_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeBackend:
    """Records requests and answers them from a route table"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, method: str, path: str, response) -> None:
        if callable(response):
            self.routes[(method, path)] = response
        else:
            # Fresh copy per request so a route can be hit more than once
            self.routes[(method, path)] = lambda request: httpx.Response(
                response.status_code, headers=response.headers, content=response.content
            )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_file(tmp_path) -> str:
    return str(tmp_path / "tokens" / "tokens.json")


@pytest.fixture
def storage(token_file, clock) -> TokenStorage:
    return TokenStorage(token_file, clock=clock)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def context(token_file, clock, backend) -> AppContext:
    return AppContext(
        token_file=token_file,
        base_url="http://backend.test",
        clock=clock,
        transport=backend.transport,
    )


@pytest.fixture
def logged_in_storage(context):
    """Store a credential valid for another hour"""
    context.storage.save_tokens("access-1", "refresh-1", 3600)
    return context.storage
