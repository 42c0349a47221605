"""Custom exception hierarchy for the request relay."""

MISSING_TARGET_MESSAGE = "Target URL is required. Usage: /request/{full-url-with-protocol}"
INVALID_SCHEME_MESSAGE = "Target URL must include http:// or https:// protocol"


class RelayError(Exception):
    """Base exception for all relay errors."""


class TargetError(RelayError):
    """Raised when the target URL embedded in the request path is unusable.

    Attributes:
        message: Error message returned to the caller
        status_code: HTTP status code returned to the caller
    """

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingTargetError(TargetError):
    """Raised when nothing follows the mount prefix."""

    def __init__(self, message: str = MISSING_TARGET_MESSAGE) -> None:
        super().__init__(message)


class InvalidSchemeError(TargetError):
    """Raised when the target does not start with http:// or https://."""

    def __init__(self, message: str = INVALID_SCHEME_MESSAGE) -> None:
        super().__init__(message)


class RequestTooLarge(RelayError):
    """Request body exceeds size limit."""
