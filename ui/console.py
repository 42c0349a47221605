"""Line-oriented console logger for non-interactive terminals."""

from pathlib import Path
from threading import Lock

from rich.console import Console
from rich.markup import escape

from ui.dashboard import status_style
from ui.log_utils import CLI_LOG_FILE, redact_headers, truncate, write_cli_log


class ConsoleLogger:
    """Print one line per relay event instead of a live dashboard."""

    def __init__(self, console: Console | None = None, log_file: Path = CLI_LOG_FILE):
        self._console = console or Console()
        self._lock = Lock()
        self._log_file = log_file

    def log_relay(self, method: str, target: str, status: int, elapsed_ms: float) -> None:
        with self._lock:
            style = status_style(status)
            self._console.print(
                f"[{style}]{status}[/{style}] {method} {escape(truncate(target, 120))} "
                f"[dim]{elapsed_ms:.0f}ms[/dim]",
                highlight=False,
                markup=True,
            )
            write_cli_log(
                "RELAY",
                f"{method} {target}",
                log_file=self._log_file,
                status=status,
                ms=f"{elapsed_ms:.0f}",
            )

    def log_error(
        self,
        target: str,
        status: int | None,
        message: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        with self._lock:
            label = status if status is not None else "-"
            self._console.print(
                f"[red bold]![/red bold] [red]{label} {escape(truncate(target, 80))}: "
                f"{escape(truncate(message, 120))}[/red]",
                highlight=False,
                markup=True,
            )
            extra = {"target": target, "status": label}
            if headers:
                extra["headers"] = redact_headers(headers)
            write_cli_log("ERROR", message[:200], log_file=self._log_file, **extra)
