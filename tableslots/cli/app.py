"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.mock_restaurant_client import MockRestaurantClient
from ..adapters.restaurant_api_client import RestaurantApiClient
from ..config import AppConfig, RestaurantConfig, get_default_config_path
from ..domain.availability_calculator import AvailabilityCalculator
from ..domain.exceptions import TableslotsError
from ..domain.models import DayAvailability, OccupancyLevel
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="tableslots",
    help="Show bookable reservation slots for a restaurant",
    add_completion=False
)

console = Console()

OCCUPANCY_STYLES = {
    OccupancyLevel.CLOSED: ("dim", "Closed"),
    OccupancyLevel.FULLY_BOOKED: ("red", "Fully booked"),
    OccupancyLevel.LIMITED: ("dark_orange", "Limited"),
    OccupancyLevel.MODERATE: ("yellow", "Moderate"),
    OccupancyLevel.AVAILABLE: ("green", "Available"),
}

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
GuestsOption = Annotated[Optional[int], typer.Option("--guests", "-g", help="Party size. Defaults to the configured guest_count")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled or configured mock data instead of the backend.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    """
    Load the configuration, falling back to the demo restaurant in mock mode.
    """
    config_path = config_file or get_default_config_path()
    if mock and config_file is None and not config_path.exists():
        return AppConfig(restaurant=RestaurantConfig(id=1, name="Demo restaurant"))
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig, mock: bool) -> AvailabilityService:
    if mock:
        data_source = MockRestaurantClient(data_file=config.data_file)
    else:
        data_source = RestaurantApiClient(
            base_url=config.api.base_url,
            access_token=config.api.access_token,
            timeout=config.api.timeout_seconds
        )

    calculator = AvailabilityCalculator(
        slot_interval_minutes=config.defaults.slot_interval_minutes,
        default_booking_minutes=config.defaults.default_booking_minutes,
        occupancy_mode=config.defaults.occupancy_mode
    )
    return AvailabilityService(data_source=data_source, calculator=calculator)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _render_day(availability: DayAvailability, guests: int) -> None:
    style, label = OCCUPANCY_STYLES[availability.occupancy]
    header = availability.date.strftime("%A, %d.%m.%Y")

    if not availability.is_open:
        reason = availability.closure_reason or "closed"
        console.print(Panel.fit(f"[{style}]Closed[/{style}] ({reason})", title=header))
        return

    table = Table(
        title=f"{header} | {availability.open_time} - {availability.close_time} | {guests} guest(s)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Booked guests", justify="right")
    table.add_column("Free seats", justify="right", style="dim")

    for slot in availability.time_slots:
        status = "[green]✓ bookable[/green]" if slot.available else "[red]✗ taken[/red]"
        table.add_row(slot.time, status, str(slot.booked_guests), str(slot.remaining_capacity))

    console.print()
    console.print(table)
    console.print(
        f"[{style}]{label}[/{style}]: {availability.available_slots} of "
        f"{availability.total_slots} slot(s) bookable\n"
    )


@app.command()
def day(
    date: Annotated[str, typer.Argument(help="Date to check (YYYY-MM-DD)")],
    guests: GuestsOption = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the calendar-availability JSON body.")] = False,
    include_past: Annotated[bool, typer.Option("--include-past", help="Do not hide slots that already started.")] = False,
    verbose: VerboseOption = False,
):
    """
    Show all slots for one date and which of them can be booked.

    Examples:

        tableslots day 2024-12-24 --guests 4
        tableslots day 2024-12-24 --mock --json
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file, mock)
        tz = config.restaurant.timezone
        guest_count = guests if guests is not None else config.defaults.guest_count
        now = None if include_past else pendulum.now(tz)

        service = _build_service(config, mock)
        availability = asyncio.run(
            service.get_day_availability(
                config.restaurant.id,
                date,
                guest_count,
                now=now,
                timezone=tz
            )
        )
    except (TableslotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        console.print_json(data=availability.to_api_dict())
        return

    _render_day(availability, guest_count)


@app.command()
def month(
    year_month: Annotated[str, typer.Argument(help="Month to check (YYYY-MM)")],
    guests: GuestsOption = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    include_past: Annotated[bool, typer.Option("--include-past", help="Do not hide slots that already started.")] = False,
    verbose: VerboseOption = False,
):
    """
    Show an occupancy overview for every day of a month.
    """
    _configure_logging(verbose)

    try:
        parsed = pendulum.from_format(year_month, "YYYY-MM")
    except ValueError:
        _fail(ValueError(f"Month must look like YYYY-MM, got '{year_month}'"))

    try:
        config = _load_config(config_file, mock)
        tz = config.restaurant.timezone
        guest_count = guests if guests is not None else config.defaults.guest_count
        now = None if include_past else pendulum.now(tz)

        service = _build_service(config, mock)
        days = asyncio.run(
            service.get_month_availability(
                config.restaurant.id,
                parsed.year,
                parsed.month,
                guest_count,
                now=now,
                timezone=tz
            )
        )
    except (TableslotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(
        title=f"{config.restaurant.display_name()} | {parsed.format('MMMM YYYY')} | {guest_count} guest(s)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold")
    table.add_column("Day")
    table.add_column("Status")
    table.add_column("Bookable", justify="right")

    for current, availability in days.items():
        style, label = OCCUPANCY_STYLES[availability.occupancy]
        if not availability.is_open and availability.closure_reason not in (None, "closed"):
            label = f"Closed ({availability.closure_reason})"
        table.add_row(
            current.strftime("%d.%m.%Y"),
            current.strftime("%a"),
            f"[{style}]{label}[/{style}]",
            f"{availability.available_slots}/{availability.total_slots}" if availability.is_open else "-"
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def check_api(
    config_file: ConfigOption = None,
):
    """
    Test the connection to the booking backend.
    """
    try:
        config = AppConfig.load_from_yaml(config_file or get_default_config_path())
        client = RestaurantApiClient(
            base_url=config.api.base_url,
            access_token=config.api.access_token,
            timeout=config.api.timeout_seconds
        )
        table_count = client.test_connection(config.restaurant.id)
    except (TableslotsError, FileNotFoundError, ValueError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ Backend reachable[/bold green]\n\n"
        f"[bold]URL:[/bold] {config.api.base_url}\n"
        f"[bold]Restaurant:[/bold] {config.restaurant.display_name()}\n"
        f"[bold]Tables:[/bold] {table_count}",
        title="✓ Connection test"
    ))


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]tableslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
