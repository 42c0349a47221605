"""Shared request data types."""

from dataclasses import dataclass, field

import httpx


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an outbound relay request."""

    method: str
    url: str
    headers: httpx.Headers
    body: bytes | None = None


@dataclass(frozen=True)
class RelaySuccess:
    """The target answered; any status code counts."""

    status_code: int
    body: bytes
    headers: httpx.Headers = field(default_factory=httpx.Headers)


@dataclass(frozen=True)
class NetworkFailure:
    """The request went out but no response came back."""

    message: str


@dataclass(frozen=True)
class ConstructionFailure:
    """The request could not be built or sent."""

    message: str


RelayOutcome = RelaySuccess | NetworkFailure | ConstructionFailure
