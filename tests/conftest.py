"""Shared pytest fixtures for Leonardo Relay tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from leonardo_relay.api.main import create_app
from leonardo_relay.core.client import LeonardoClient, build_http_client
from leonardo_relay.core.config import RelayConfig

VENDOR_BASE_URL = "https://vendor.test/api/rest/v1"
GENERATIONS_PATH = "/api/rest/v1/generations"


class FakeVendor:
    """Programmable stand-in for the vendor API, mounted via ``MockTransport``.

    Responses are queued per ``(method, path)``.  Each call consumes the head
    of the queue; the last response repeats.  Every request is recorded.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], list[Callable[[httpx.Request], httpx.Response]]] = {}

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
        text: str | None = None,
    ) -> None:
        """Queue a response for ``method path``."""

        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json)

        self.routes.setdefault((method, path), []).append(respond)

    def add_error(self, method: str, path: str, exc: Exception) -> None:
        """Queue a transport failure for ``method path``."""

        def respond(request: httpx.Request) -> httpx.Response:
            raise exc

        self.routes.setdefault((method, path), []).append(respond)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": "no stub", "path": request.url.path})
        respond = queue.pop(0) if len(queue) > 1 else queue[0]
        return respond(request)


@pytest.fixture
def test_config() -> RelayConfig:
    """Create a test configuration that ignores the real environment.

    Returns:
        RelayConfig pointed at the fake vendor
    """
    return RelayConfig(
        _env_file=None,
        api_key="test-key",
        base_url=VENDOR_BASE_URL,
    )


@pytest.fixture
def fake_vendor() -> FakeVendor:
    """Create an empty fake vendor.

    Returns:
        FakeVendor with no queued responses
    """
    return FakeVendor()


@pytest.fixture
def leonardo_client(test_config: RelayConfig, fake_vendor: FakeVendor) -> LeonardoClient:
    """Create a LeonardoClient wired to the fake vendor.

    Args:
        test_config: Test configuration from fixture
        fake_vendor: Fake vendor from fixture

    Returns:
        LeonardoClient instance for testing
    """
    http = build_http_client(test_config, transport=httpx.MockTransport(fake_vendor))
    return LeonardoClient(test_config, http)


@pytest.fixture
def test_client(
    test_config: RelayConfig, fake_vendor: FakeVendor
) -> Generator[TestClient, None, None]:
    """Create a FastAPI TestClient backed by the fake vendor.

    The client is used as a context manager so the lifespan handler opens
    and closes the vendor HTTP client.

    Yields:
        TestClient for the relay application
    """
    app = create_app(test_config, transport=httpx.MockTransport(fake_vendor))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def run() -> Callable[[Any], Any]:
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def complete_response() -> dict:
    """Vendor status body of a finished job with two images.

    Returns:
        Dictionary in the ``generations_by_pk`` layout
    """
    return {
        "generations_by_pk": {
            "id": "abc123",
            "status": "COMPLETE",
            "generated_images": [
                {"id": "img-1", "url": "https://cdn.leonardo.ai/img-1.png"},
                {"id": "img-2", "url": "https://cdn.leonardo.ai/img-2.png"},
            ],
        }
    }
