"""ASGI middleware for the relay application."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from api.handlers import INTERNAL_ERROR_BODY
from core.protocols import RequestLogger


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn any escaping exception into the generic 500, keeping detail in the log."""

    def __init__(self, app, logger: RequestLogger):
        super().__init__(app)
        self._logger = logger

    async def dispatch(self, request: Request, call_next):
        try:
            resp: Response = await call_next(request)
            return resp
        except Exception as e:
            self._logger.log_error(request.url.path, 500, f"Unhandled error: {e}")
            return JSONResponse(INTERNAL_ERROR_BODY, status_code=500)
