from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config, RelaySettings


class RecordingLogger:
    """In-memory RequestLogger used by the tests."""

    def __init__(self):
        self.relays: list[tuple[str, str, int]] = []
        self.errors: list[tuple[str, int | None, str, dict[str, str] | None]] = []

    def log_relay(self, method: str, target: str, status: int, elapsed_ms: float) -> None:
        assert elapsed_ms >= 0
        self.relays.append((method, target, status))

    def log_error(self, target, status, message, *, headers=None) -> None:
        self.errors.append((target, status, message, headers))


class TargetServer:
    """Fake target behind httpx.MockTransport that remembers what it received."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def make_client(logger):
    """Build a TestClient whose outbound calls hit the given handler."""
    clients = []

    def _make(handler, **settings) -> tuple[TestClient, TargetServer]:
        target = TargetServer(handler)
        config = Config(relay=RelaySettings(**settings))
        app = create_app(config, logger, transport=httpx.MockTransport(target))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client, target

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
