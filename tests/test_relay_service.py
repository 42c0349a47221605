import json

import httpx
import pytest

from core.config import Config, RelaySettings
from core.exceptions import InvalidSchemeError, MissingTargetError
from core.headers import HeaderBuilder
from core.request_types import ConstructionFailure, NetworkFailure, RelaySuccess
from core.target import TargetResolver
from services.relay_service import GATEWAY_TIMEOUT_MESSAGE, RelayService


def _service(logger, **settings) -> RelayService:
    config = Config(relay=RelaySettings(**settings))
    return RelayService(
        config=config,
        logger=logger,
        resolver=TargetResolver(config.relay.mount_prefix),
        header_builder=HeaderBuilder(config.relay.excluded_headers),
    )


@pytest.fixture
def service(logger):
    return _service(logger)


def test_prepare_builds_outbound_request(service):
    prepared = service.prepare(
        "post",
        "/request/https://target.example/hook",
        "a=1",
        [("Host", "relay.local"), ("Content-Length", "4"), ("X-Req", "1")],
        b"data",
    )

    assert prepared.method == "POST"
    assert prepared.url == "https://target.example/hook?a=1"
    assert prepared.headers.multi_items() == [("x-req", "1")]
    assert prepared.body == b"data"


def test_prepare_omits_empty_body(service):
    prepared = service.prepare("GET", "/request/http://target.example/", "", [], b"")
    assert prepared.body is None


def test_prepare_rejects_bad_targets(service):
    with pytest.raises(MissingTargetError):
        service.prepare("GET", "/request/", "", [], b"")
    with pytest.raises(InvalidSchemeError):
        service.prepare("GET", "/request/ws://target.example/", "", [], b"")


def test_render_success_relays_status_and_body(service, logger):
    prepared = service.prepare("GET", "/request/https://target.example/", "", [], b"")

    response = service.render(prepared, RelaySuccess(202, b"accepted"), 12.5)

    assert response.status_code == 202
    assert response.body == b"accepted"
    assert logger.relays == [("GET", "https://target.example/", 202)]
    assert logger.errors == []


def test_render_logs_target_errors(service, logger):
    prepared = service.prepare("GET", "/request/https://target.example/", "", [], b"")
    body = b"x" * 500

    response = service.render(
        prepared,
        RelaySuccess(503, body, httpx.Headers({"retry-after": "5"})),
        1.0,
    )

    assert response.status_code == 503
    assert response.body == body
    target, status, message, headers = logger.errors[0]
    assert status == 503
    assert len(message) == 200
    assert headers == {"retry-after": "5"}


def test_render_network_failure(service, logger):
    prepared = service.prepare("GET", "/request/https://target.example/", "", [], b"")

    response = service.render(prepared, NetworkFailure("read timed out"), 30000.0)

    assert response.status_code == 504
    assert json.loads(response.body) == {"error": GATEWAY_TIMEOUT_MESSAGE}
    assert logger.errors[0][:2] == ("https://target.example/", None)
    assert "read timed out" in logger.errors[0][2]
    assert logger.relays == [("GET", "https://target.example/", 504)]


def test_render_construction_failure(service, logger):
    prepared = service.prepare("GET", "/request/https://target.example/", "", [], b"")

    response = service.render(prepared, ConstructionFailure("bad host"), 0.1)

    assert response.status_code == 500
    assert json.loads(response.body) == {"error": "Server error: bad host"}
    assert "bad host" in logger.errors[0][2]


def test_render_forwards_filtered_headers_when_enabled(logger):
    service = _service(logger, forward_response_headers=True)
    prepared = service.prepare("GET", "/request/https://target.example/", "", [], b"")
    headers = httpx.Headers(
        [("content-type", "image/png"), ("transfer-encoding", "chunked"), ("x-a", "1")]
    )

    response = service.render(prepared, RelaySuccess(200, b"\x89PNG", headers), 1.0)

    assert response.headers["content-type"] == "image/png"
    assert response.headers["x-a"] == "1"
    assert "transfer-encoding" not in response.headers
    assert response.headers["content-length"] == "4"
