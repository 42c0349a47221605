"""Real-time CLI dashboard for relay monitoring."""

from datetime import datetime
from pathlib import Path
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import CLI_LOG_FILE, redact_headers, truncate, write_cli_log

console = Console()


class RelayInfo:
    """Info about a single relayed request."""

    def __init__(self, method: str, target: str, status: int, elapsed_ms: float, timestamp: datetime):
        self.method = method
        self.target = truncate(target, 80)
        self.status = status
        self.elapsed_ms = elapsed_ms
        self.timestamp = timestamp


def status_style(status: int) -> str:
    if status >= 500:
        return "red"
    if status >= 400:
        return "yellow"
    if status >= 300:
        return "cyan"
    return "green"


class Dashboard:
    """Real-time dashboard showing recent relays and errors."""

    def __init__(self, config: Config, log_file: Path = CLI_LOG_FILE):
        self.config = config
        self._lock = Lock()
        self._log_file = log_file
        self._recent: list[RelayInfo] = []
        self._max_recent = 10
        self._request_count = 0
        self._error_count = 0
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_relay(self, method: str, target: str, status: int, elapsed_ms: float) -> None:
        """Log a completed relay."""
        with self._lock:
            self._request_count += 1
            info = RelayInfo(method, target, status, elapsed_ms, datetime.now())
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]
            self._refresh()
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
        """Log an error."""
        with self._lock:
            self._error_count += 1
            label = status if status is not None else "-"
            self._errors.insert(0, f"{label} {truncate(target, 40)}: {truncate(message, 50)}")
            self._errors = self._errors[:3]
            self._refresh()
            extra = {"target": target, "status": label}
            if headers:
                extra["headers"] = redact_headers(headers)
            write_cli_log("ERROR", message[:200], log_file=self._log_file, **extra)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("HTTP Request Relay", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Relayed: {self._request_count}", style="green")
        stats.append("  |  ")
        stats.append(f"Errors: {self._error_count}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.relay.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build the recent relays table."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Status", width=6)
            table.add_column("ms", width=7, justify="right")
            table.add_column("Target", ratio=1)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    Text(str(info.status), style=status_style(info.status)),
                    f"{info.elapsed_ms:.0f}",
                    Text(info.target),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent relays[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Usage: http://localhost:{self.config.relay.port}"
                f"{self.config.relay.mount_prefix}https://example.com",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
