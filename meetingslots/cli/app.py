"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.credential_store import FileCredentialStore
from ..adapters.google_authenticator import GoogleAuthenticator
from ..adapters.google_calendar_client import GoogleCalendarClient
from ..adapters.mock_calendar_client import MockCalendarClient
from ..config import AppConfig, load_config
from ..domain.clock import FixedClock
from ..domain.exceptions import ConfigurationError, SchedulingError
from ..domain.models import Availability
from ..services.booking_service import BookingService

app = typer.Typer(
    name="meetingslots",
    help="Offer open meeting slots from a Google Calendar and book them",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml, then the environment.")
]
MockOption = Annotated[
    bool,
    typer.Option("--mock", help="Use mock calendar data and skip authorization.")
]
MockDataOption = Annotated[
    Optional[Path],
    typer.Option("--mock-data", help="JSON file with busy intervals for --mock.")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    try:
        return load_config(config_file)
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)


def _build_authenticator(config: AppConfig) -> GoogleAuthenticator:
    return GoogleAuthenticator(
        client_id=config.google.client_id,
        client_secret=config.google.client_secret,
        redirect_uri=config.google.redirect_uri,
        store=FileCredentialStore(config.token_path),
    )


def _build_service(
    config: AppConfig,
    mock: bool,
    mock_data: Optional[Path],
    at: Optional[str] = None,
) -> BookingService:
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using test data[/yellow]\n")
        client = MockCalendarClient.from_json(mock_data) if mock_data else MockCalendarClient()
    else:
        client = GoogleCalendarClient(
            authenticator=_build_authenticator(config),
            calendar_id=config.calendar_id,
        )

    clock = None
    if at:
        try:
            clock = FixedClock(pendulum.parse(at, tz=config.timezone), timezone=config.timezone)
        except ValueError as e:
            console.print(f"[red]Could not parse --at: {e}[/red]")
            raise typer.Exit(1)

    return BookingService.from_config(config, calendar_client=client, clock=clock)


def _render_availability(availability: Availability) -> None:
    if not availability.days:
        console.print(
            "[yellow]⚠ No open slots found.[/yellow]\n"
            "Try a longer lookahead or check the busy calendar."
        )
        return

    table = Table(
        title=f"Open slots ({availability.time_zone}, {availability.duration_minutes} min)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Day")
    table.add_column("Time", style="bold")
    table.add_column("Display", style="dim")

    for day in availability.days:
        for index, slot in enumerate(day.slots):
            table.add_row(
                day.date.isoformat() if index == 0 else "",
                day.label if index == 0 else "",
                f"{slot.label} – {slot.end.format('HH:mm')}",
                slot.display,
            )

    console.print()
    console.print(table)
    console.print()


@app.command()
def availability(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    mock_data: MockDataOption = None,
    lookahead: Annotated[Optional[int], typer.Option("--lookahead", "-l", help="Business days to look ahead.")] = None,
    at: Annotated[Optional[str], typer.Option("--at", help="Compute as of this ISO timestamp instead of now.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the API response body instead of a table.")] = False,
):
    """
    List the open slots for the lookahead window.

    Examples:

        meetingslots availability

        meetingslots availability --lookahead 5 --json

        meetingslots availability --mock --at 2024-11-25T08:00
    """
    config = _load_config(config_file)

    if lookahead is not None and lookahead <= 0:
        console.print("[red]--lookahead must be greater than zero.[/red]")
        raise typer.Exit(1)

    service = _build_service(config, mock, mock_data, at)

    try:
        result = service.get_availability(lookahead_days=lookahead)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _render_availability(result)


@app.command()
def book(
    start: Annotated[str, typer.Option("--start", help="Slot start (ISO 8601).")],
    end: Annotated[str, typer.Option("--end", help="Slot end (ISO 8601).")],
    name: Annotated[str, typer.Option("--name", help="Attendee name.")],
    email: Annotated[str, typer.Option("--email", help="Attendee email.")],
    notes: Annotated[Optional[str], typer.Option("--notes", help="Optional notes for the event.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    mock_data: MockDataOption = None,
):
    """
    Book a slot and send the invitation.
    """
    config = _load_config(config_file)
    service = _build_service(config, mock, mock_data)

    payload = {"start": start, "end": end, "name": name, "email": email, "notes": notes}

    try:
        confirmation = service.book(payload)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ {confirmation.message}[/bold green]\n\n"
        f"[bold]Event:[/bold] {confirmation.external_reference}",
        title="✓ Booked"
    ))


@app.command()
def serve(
    config_file: ConfigOption = None,
    host: Annotated[str, typer.Option("--host", help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Port (defaults to the configured one).")] = None,
    mock: MockOption = False,
    mock_data: MockDataOption = None,
):
    """
    Run the HTTP API.
    """
    from ..api.app import create_app

    config = _load_config(config_file)
    service = _build_service(config, mock, mock_data) if mock else None
    flask_app = create_app(config, service=service)

    bind_port = port or config.port
    console.print(f"[bold cyan]Booking API listening on http://{host}:{bind_port}[/bold cyan]")
    console.print(f"OAuth redirect: {config.google.redirect_uri}")
    flask_app.run(host=host, port=bind_port)


@app.command("auth-url")
def auth_url(config_file: ConfigOption = None):
    """
    Print the URL where the calendar owner grants access.
    """
    config = _load_config(config_file)
    console.print(_build_authenticator(config).authorization_url())


@app.command()
def authorize(
    code: Annotated[str, typer.Argument(help="Authorization code from the OAuth redirect.")],
    config_file: ConfigOption = None,
):
    """
    Exchange an authorization code for tokens and store them.
    """
    config = _load_config(config_file)

    try:
        _build_authenticator(config).exchange_code(code)
    except SchedulingError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)

    console.print(f"\n[green]✓ Credentials stored in {config.token_path}[/green]\n")


@app.command()
def status(config_file: ConfigOption = None):
    """
    Show whether calendar credentials are stored.
    """
    config = _load_config(config_file)

    if _build_authenticator(config).is_authorized():
        console.print("[green]✓ Calendar connected.[/green]")
    else:
        console.print("[yellow]Calendar not connected. Run 'meetingslots auth-url'.[/yellow]")
        raise typer.Exit(1)


@app.command()
def logout(config_file: ConfigOption = None):
    """
    Remove the stored calendar credentials.
    """
    config = _load_config(config_file)
    _build_authenticator(config).clear()
    console.print("\n[green]✓ Credentials removed.[/green]")
    console.print("You will need to authorize the calendar again.\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]meetingslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
