"""HTTP-level fixtures.

- ``make_app`` builds a CamayakContentAPI whose Content API traffic goes to
  the fake transport from tests/conftest.py
- ``client`` wraps the default app (no-op handlers) in a TestClient
"""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from camayak_contentapi.api import CamayakContentAPI


@pytest.fixture
def make_app(content_api):
    def _make(shared_secret: str | None = "test-shared-secret", **handlers) -> CamayakContentAPI:
        return CamayakContentAPI(
            api_key="test-api-key",
            shared_secret=shared_secret,
            http_client=httpx.AsyncClient(transport=content_api.transport),
            **handlers,
        )

    return _make


@pytest.fixture
def client(make_app):
    """TestClient around an app using the default handlers."""
    with TestClient(make_app().app, raise_server_exceptions=False) as c:
        yield c
