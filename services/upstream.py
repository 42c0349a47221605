"""HTTP relaying utilities for outbound requests."""

import asyncio
import socket
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx

from core.config import RelaySettings
from core.request_types import (
    ConstructionFailure,
    NetworkFailure,
    PreparedRequest,
    RelayOutcome,
    RelaySuccess,
)


def build_http_client(
    settings: RelaySettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared outbound client."""
    # An empty allow-list rejects every cookie, so nothing leaks between callers
    no_cookies = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
    return httpx.AsyncClient(
        timeout=settings.timeout,
        follow_redirects=True,
        max_redirects=settings.max_redirects,
        cookies=no_cookies,
        transport=transport,
    )


class UpstreamClient:
    """Send prepared requests to their target and classify the result."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = 30.0) -> None:
        self._client = client
        self._timeout = timeout

    async def send(self, prepared: PreparedRequest) -> RelayOutcome:
        """Execute the outbound request.

        Every HTTP status the target returns is a success. Failures come
        back as values: NetworkFailure when the request went out and nothing
        came back, ConstructionFailure when it could not be built or the
        target name did not resolve. The timeout bounds the whole exchange,
        redirects and body included.
        """
        try:
            request = self._client.build_request(
                prepared.method,
                prepared.url,
                headers=prepared.headers,
                content=prepared.body,
            )
            async with asyncio.timeout(self._timeout):
                response = await self._client.send(request)
        except (httpx.TimeoutException, TimeoutError) as e:
            return NetworkFailure(_describe(e, f"No response within {self._timeout}s"))
        except httpx.ConnectError as e:
            if _is_dns_failure(e):
                return ConstructionFailure(_describe(e))
            return NetworkFailure(_describe(e))
        except (httpx.NetworkError, httpx.RemoteProtocolError) as e:
            return NetworkFailure(_describe(e))
        except (httpx.InvalidURL, httpx.RequestError, ValueError, TypeError) as e:
            return ConstructionFailure(_describe(e))

        return RelaySuccess(
            status_code=response.status_code,
            body=response.content,
            headers=response.headers,
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def _describe(error: Exception, fallback: str | None = None) -> str:
    return str(error) or fallback or type(error).__name__


def _is_dns_failure(error: BaseException) -> bool:
    """Check whether a connect error was caused by name resolution."""
    seen = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False
