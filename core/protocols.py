"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for relay logging (Dashboard, ConsoleLogger)."""

    def log_relay(self, method: str, target: str, status: int, elapsed_ms: float) -> None: ...
    def log_error(
        self,
        target: str,
        status: int | None,
        message: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> None: ...
