"""Header construction for relayed requests and responses."""

from collections.abc import Iterable, Mapping

import httpx

# Connection-specific headers never passed back to the caller
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)

# httpx decodes the body, so these no longer describe what we send
BODY_FRAMING_HEADERS = frozenset({"content-length", "content-encoding"})


class HeaderBuilder:
    """Build outbound headers for the target and response headers for the caller."""

    def __init__(self, excluded: Iterable[str] = ("host", "origin", "referer", "content-length")):
        self._excluded = frozenset(key.lower() for key in excluded)

    def build_relay_headers(
        self,
        headers: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> httpx.Headers:
        """Copy inbound headers, dropping the excluded ones."""
        items = headers.items() if isinstance(headers, Mapping) else headers
        return httpx.Headers(
            [(key, value) for key, value in items if key.lower() not in self._excluded]
        )

    def build_response_headers(self, headers: httpx.Headers) -> list[tuple[str, str]]:
        """Filter target response headers that are safe to hand back.

        Repeated headers such as set-cookie stay separate entries.
        """
        dropped = HOP_BY_HOP_HEADERS | BODY_FRAMING_HEADERS
        return [
            (key, value) for key, value in headers.multi_items() if key.lower() not in dropped
        ]
