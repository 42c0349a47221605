"""Configuration models and loading."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_PORT = 3000
MAX_BODY_SIZE = 10 * 1024 * 1024  # 10MB

TRUTHY = ("1", "true", "yes", "on")


class RelaySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    host: str = "0.0.0.0"
    mount_prefix: str = "/request/"
    timeout: float = 30.0
    max_redirects: int = 5
    max_body_size: int = MAX_BODY_SIZE
    excluded_headers: tuple[str, ...] = ("host", "origin", "referer", "content-length")
    forward_response_headers: bool = False


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    relay: RelaySettings = Field(default_factory=RelaySettings)


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Load configuration from the environment, falling back to defaults."""
    env = os.environ if environ is None else environ

    forward = env.get("RELAY_FORWARD_RESPONSE_HEADERS", "").strip().lower() in TRUTHY
    port = _parse_port(env.get("PORT"))
    return Config(relay=RelaySettings(port=port, forward_response_headers=forward))


def _parse_port(raw: str | None) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        return RelaySettings(port=raw.strip()).port
    except ValidationError:
        return DEFAULT_PORT
