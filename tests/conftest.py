"""Shared test fixtures for live-auctioneer."""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

TEST_ENV = {
    "HOST": "127.0.0.1",
    "PORT": "8000",
    "DID_API_KEY": "test-key",
    "DID_API_URL": "https://vendor.test",
    "ENVIRONMENT": "development",
    "DEV_BASE_URL": "http://localhost:3000",
    "POLL_INTERVAL": "2.0",
}


class VendorStub:
    """Scripted D-ID stand-in; the last response queued for a route repeats."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: tuple[int, object]) -> "VendorStub":
        queue = self.routes.setdefault((method, path), [])
        for status, body in responses:
            if isinstance(body, (dict, list)):
                queue.append(httpx.Response(status, json=body))
            else:
                queue.append(httpx.Response(status, text=str(body)))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "Not found"})
        return queue.pop(0) if len(queue) > 1 else queue[0]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


class FakeClock:
    """Injected sleep: records delays and yields control without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def sleep(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


def _make_settings(tmp_path, env_overrides: dict[str, str] | None = None):
    env = dict(TEST_ENV, PUBLIC_DIR=str(tmp_path / "public"))
    if env_overrides:
        env.update(env_overrides)
    with patch.dict("os.environ", env):
        from src.live_auctioneer.config import Settings

        return Settings(_env_file=None)


@pytest.fixture
def mock_settings(tmp_path):
    """Settings with a fake vendor key and a temporary public directory."""
    return _make_settings(tmp_path)


@pytest.fixture
def unconfigured_settings(tmp_path):
    """Settings without a vendor key."""
    return _make_settings(tmp_path, {"DID_API_KEY": ""})


@pytest.fixture
def vendor():
    return VendorStub()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway(mock_settings, vendor):
    from src.live_auctioneer.services.gateway import DIDGateway

    return DIDGateway(mock_settings, transport=vendor.transport)


def _create_test_app(settings, vendor: VendorStub):
    from src.live_auctioneer.api.app import create_app
    from src.live_auctioneer.services.gateway import DIDGateway

    app = create_app(settings)
    app.state.gateway = DIDGateway(settings, transport=vendor.transport)
    return app


@pytest.fixture
def app(mock_settings, vendor):
    """FastAPI test app whose gateway talks to the vendor stub."""
    return _create_test_app(mock_settings, vendor)


@pytest.fixture
def app_unconfigured(unconfigured_settings, vendor):
    return _create_test_app(unconfigured_settings, vendor)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def client_unconfigured(app_unconfigured):
    from fastapi.testclient import TestClient

    return TestClient(app_unconfigured)


@pytest.fixture
def featured(mock_settings):
    from src.live_auctioneer.services.catalog import featured_avatar

    return featured_avatar(mock_settings)


@pytest.fixture
def sample_png_bytes():
    """PNG signature followed by filler; content is never inspected."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
