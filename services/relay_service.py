"""Relay orchestration: inbound request in, caller response out."""

from collections.abc import Iterable

from fastapi import Response
from fastapi.responses import JSONResponse

from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import (
    ConstructionFailure,
    NetworkFailure,
    PreparedRequest,
    RelayOutcome,
    RelaySuccess,
)
from core.target import TargetResolver

GATEWAY_TIMEOUT_MESSAGE = "Gateway timeout - no response from target server"
BODY_SNIPPET_SIZE = 200


class RelayService:
    """Prepare outbound requests and render their outcome for the caller."""

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        resolver: TargetResolver,
        header_builder: HeaderBuilder,
    ) -> None:
        self._settings = config.relay
        self._logger = logger
        self._resolver = resolver
        self._headers = header_builder

    def prepare(
        self,
        method: str,
        raw_path: str,
        query_string: str,
        headers: Iterable[tuple[str, str]],
        body: bytes,
    ) -> PreparedRequest:
        """Build the outbound request; raises TargetError for a bad target."""
        target = self._resolver.extract(raw_path, query_string)
        return PreparedRequest(
            method=method.upper(),
            url=target,
            headers=self._headers.build_relay_headers(headers),
            body=body if len(body) > 0 else None,
        )

    def render(
        self,
        prepared: PreparedRequest,
        outcome: RelayOutcome,
        elapsed_ms: float,
    ) -> Response:
        """Turn the outbound outcome into the response for the caller."""
        match outcome:
            case RelaySuccess():
                return self._render_success(prepared, outcome, elapsed_ms)
            case NetworkFailure(message=message):
                self._logger.log_error(prepared.url, None, f"No response received: {message}")
                self._logger.log_relay(prepared.method, prepared.url, 504, elapsed_ms)
                return JSONResponse({"error": GATEWAY_TIMEOUT_MESSAGE}, status_code=504)
            case ConstructionFailure(message=message):
                self._logger.log_error(prepared.url, None, f"Request failed: {message}")
                self._logger.log_relay(prepared.method, prepared.url, 500, elapsed_ms)
                return JSONResponse({"error": f"Server error: {message}"}, status_code=500)
        raise TypeError(f"Unknown relay outcome: {outcome!r}")

    def _render_success(
        self,
        prepared: PreparedRequest,
        outcome: RelaySuccess,
        elapsed_ms: float,
    ) -> Response:
        if outcome.status_code >= 400:
            snippet = outcome.body[:BODY_SNIPPET_SIZE].decode("utf-8", errors="replace")
            self._logger.log_error(
                prepared.url,
                outcome.status_code,
                snippet,
                headers=dict(outcome.headers.items()),
            )
        self._logger.log_relay(prepared.method, prepared.url, outcome.status_code, elapsed_ms)

        if not self._settings.forward_response_headers:
            return Response(
                content=outcome.body,
                status_code=outcome.status_code,
                media_type="text/html",
            )

        response = Response(content=outcome.body, status_code=outcome.status_code)
        for key, value in self._headers.build_response_headers(outcome.headers):
            response.headers.append(key, value)
        return response
