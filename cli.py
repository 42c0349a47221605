"""CLI entry point for http-request-relay."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import load_config
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    settings = config.relay
    plain = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Port:[/bold] {settings.port}")
            console.print(f"[bold]Mount:[/bold] {settings.mount_prefix}")
            console.print(f"[bold]Timeout:[/bold] {settings.timeout}s")
            console.print(f"[bold]Forward response headers:[/bold] {settings.forward_response_headers}")
            console.print(f"[bold]Log:[/bold] {CLI_LOG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        if arg == "--plain":
            plain = True

    clear_logs()
    dashboard = None
    if plain:
        logger = ConsoleLogger(console)
    else:
        dashboard = Dashboard(config)
        logger = dashboard

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    else:
        console.print(f"HTTP Request Relay Server running on port {settings.port}")
    start_time = datetime.now()
    write_cli_log("STARTUP", "Relay started", port=settings.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Relay stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]HTTP Request Relay[/bold cyan]

Relays /request/{full-url} to the embedded target and returns its status and body.

[bold]Usage:[/bold]
    http-request-relay             Start with live dashboard
    http-request-relay --plain     Start with line-by-line console logging
    http-request-relay --config    Show effective settings
    http-request-relay --help      Show this help

[bold]Environment:[/bold]
    PORT                             Listening port (default 3000)
    RELAY_FORWARD_RESPONSE_HEADERS   Also relay target response headers (default off)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
