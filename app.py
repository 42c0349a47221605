"""FastAPI application factory."""

import time
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.handlers import INTERNAL_ERROR_BODY, handle_health, handle_index, handle_relay
from api.middleware import UnhandledErrorMiddleware
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.target import TargetResolver
from services.relay_service import RelayService
from services.upstream import UpstreamClient, build_http_client


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = config.relay

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        upstream_client = UpstreamClient(
            build_http_client(settings, transport),
            timeout=settings.timeout,
        )
        app.state.upstream_client = upstream_client
        app.state.relay_service = RelayService(
            config=config,
            logger=logger,
            resolver=TargetResolver(settings.mount_prefix),
            header_builder=HeaderBuilder(settings.excluded_headers),
        )
        try:
            yield
        finally:
            await upstream_client.aclose()

    app = FastAPI(title="HTTP Request Relay", version="0.1.0", lifespan=lifespan)
    app.state.started_at = time.monotonic()

    # Added first so it runs inside CORS and its 500s still carry CORS headers
    app.add_middleware(UnhandledErrorMiddleware, logger=logger)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.log_error(request.url.path, 500, f"Unhandled error: {exc}")
        return JSONResponse(INTERNAL_ERROR_BODY, status_code=500)

    mount = settings.mount_prefix.rstrip("/")

    async def relay(request: Request):
        return await handle_relay(request, config, logger)

    # No method list: every verb, standard or not, is relayed
    app.add_route(mount, relay, include_in_schema=False)
    app.add_route(mount + "/{target:path}", relay, include_in_schema=False)

    @app.get("/health")
    async def health(request: Request):
        return await handle_health(request)

    @app.get("/")
    async def index():
        return await handle_index()

    return app
