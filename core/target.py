"""Target URL extraction - turns the inbound path into the relay target."""

from core.exceptions import InvalidSchemeError, MissingTargetError

ALLOWED_SCHEMES = ("http://", "https://")


class TargetResolver:
    """Extract the absolute target URL that follows the mount prefix."""

    def __init__(self, mount_prefix: str = "/request/"):
        self.mount_prefix = mount_prefix if mount_prefix.endswith("/") else mount_prefix + "/"

    def extract(self, raw_path: str, query_string: str = "") -> str:
        """Return the target URL exactly as it appears in the request.

        The path is expected undecoded: whatever follows the prefix is used
        verbatim, with the inbound query string re-attached to it.
        """
        suffix = self._suffix(raw_path)
        if not suffix:
            raise MissingTargetError()

        target = f"{suffix}?{query_string}" if query_string else suffix
        if not target.startswith(ALLOWED_SCHEMES):
            raise InvalidSchemeError()
        return target

    def _suffix(self, raw_path: str) -> str:
        """Return the part of the path after the mount prefix."""
        if raw_path.startswith(self.mount_prefix):
            return raw_path[len(self.mount_prefix):]
        return ""
