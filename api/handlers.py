"""FastAPI route handlers."""

import platform
import time

from fastapi import Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from core.config import Config
from core.exceptions import RequestTooLarge, TargetError
from core.protocols import RequestLogger

INTERNAL_ERROR_BODY = {"error": "Internal Server Error"}

INDEX_HTML = """
<h1>HTTP Request Relay</h1>
<p>Usage: <code>/request/{full-url}</code></p>
<p>Example: <code>/request/https://api.example.com/data</code></p>
<p>Powered by HTTPX</p>
"""


async def _read_body(request: Request, max_size: int) -> bytes:
    """Read the raw request body, enforcing the size limit."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_size:
        raise RequestTooLarge(f"Declared body of {declared} bytes exceeds {max_size}")

    # Chunked uploads carry no length, so count while reading
    raw_body = bytearray()
    async for chunk in request.stream():
        raw_body.extend(chunk)
        if len(raw_body) > max_size:
            raise RequestTooLarge(f"Body exceeds {max_size} bytes")
    return bytes(raw_body)


def _raw_path(request: Request) -> str:
    """Return the request path exactly as the client sent it."""
    raw = request.scope.get("raw_path")
    if raw:
        return raw.decode("latin-1")
    return request.url.path


async def handle_relay(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> Response:
    """Handle /request/{url}: relay to the embedded target."""
    try:
        return await _relay(request, config)
    except Exception as e:
        logger.log_error(request.url.path, 500, f"Unhandled error: {e}")
        return JSONResponse(INTERNAL_ERROR_BODY, status_code=500)


async def _relay(request: Request, config: Config) -> Response:
    relay_service = request.app.state.relay_service
    upstream = request.app.state.upstream_client

    try:
        body = await _read_body(request, config.relay.max_body_size)
    except RequestTooLarge:
        return JSONResponse({"error": "Request body too large"}, status_code=413)

    try:
        prepared = relay_service.prepare(
            request.method,
            _raw_path(request),
            request.scope.get("query_string", b"").decode("latin-1"),
            request.headers.items(),
            body,
        )
    except TargetError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)

    started = time.perf_counter()
    outcome = await upstream.send(prepared)
    elapsed_ms = (time.perf_counter() - started) * 1000
    return relay_service.render(prepared, outcome, elapsed_ms)


async def handle_health(request: Request) -> dict:
    """Report liveness and process uptime."""
    return {
        "status": "ok",
        "message": "HTTP Request Relay Server is running",
        "pythonVersion": platform.python_version(),
        "uptime": max(time.monotonic() - request.app.state.started_at, 0.0),
    }


async def handle_index() -> HTMLResponse:
    """Show a short usage page."""
    return HTMLResponse(INDEX_HTML)
