"""Shared fixtures: credentials and a fake Content API behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from camayak_contentapi.client import ContentClient
from camayak_contentapi.config import Credentials

API_KEY = "test-api-key"
SHARED_SECRET = "test-shared-secret"


class FakeContentAPI:
    """Routes outbound requests by scheme://host/path and records them.

    Unregistered URLs answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, text="Not Found")
        return route(request)

    def add_json(self, url: str, body: Any, status: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status, text=json.dumps(body))

    def add_text(self, url: str, text: str, status: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status, text=text)

    def add_error(self, url: str, exc_type: type[httpx.HTTPError] = httpx.ConnectError) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type("connection refused", request=request)

        self.routes[url] = _raise

    @property
    def last_query(self) -> dict[str, str]:
        return dict(self.requests[-1].url.params)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key=API_KEY, shared_secret=SHARED_SECRET)


@pytest.fixture
def unsigned_credentials() -> Credentials:
    return Credentials(api_key=API_KEY)


@pytest.fixture
def content_api() -> FakeContentAPI:
    return FakeContentAPI()


@pytest.fixture
def content_client(credentials: Credentials, content_api: FakeContentAPI) -> ContentClient:
    return ContentClient(
        credentials, http_client=httpx.AsyncClient(transport=content_api.transport)
    )
