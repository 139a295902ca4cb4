"""
Main CLI application using Typer.
"""

import asyncio
from datetime import date
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.json_file_store import JsonFileStore
from ..config import AppConfig, configure_logging, load_config
from ..domain import catalog
from ..domain.exceptions import BookingValidationError, SmartWashError, StorageError
from ..domain.models import Booking, BookingStatus, Location, TimeSlot
from ..domain.pricing import service_price
from ..domain.slot_generator import SlotGenerator, group_slots_by_date
from ..services.booking_repository import BookingRepository
from ..services.booking_service import (
    BookingDraft,
    BookingService,
    can_transition,
    summarize_bookings,
)

app = typer.Typer(
    name="smartwash",
    help="Book a doorstep car wash anywhere in Sikkim",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
LocationOption = Annotated[
    Optional[str], typer.Option("--location", "-l", help="Location id (see 'locations')")
]
PincodeOption = Annotated[
    Optional[str], typer.Option("--pincode", "-p", help="Postal code of the wash location")
]

_STATUS_STYLES = {
    BookingStatus.PENDING: "yellow",
    BookingStatus.CONFIRMED: "cyan",
    BookingStatus.IN_PROGRESS: "blue",
    BookingStatus.COMPLETED: "green",
    BookingStatus.CANCELLED: "red",
}


def _load(config_file: Optional[Path]) -> AppConfig:
    """Load configuration and set up logging, exiting on bad config."""
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    configure_logging(config)
    return config


def _build_service(config: AppConfig) -> BookingService:
    """Wire the file store, repository and booking service together."""
    repository = BookingRepository(
        store=JsonFileStore(config.get_storage_dir()),
        slot_generator=SlotGenerator(config.get_service_hours()),
    )
    return BookingService(repository=repository, fuel_rate=config.fuel_rate)


def _resolve_location(location_id: Optional[str], pincode: Optional[str]) -> Optional[Location]:
    """
    Look up a location by id or pincode.

    Returns None when neither was given; exits when the lookup fails.
    """
    if location_id and pincode:
        console.print("[red]Error: use either --location or --pincode, not both.[/red]")
        raise typer.Exit(1)

    if pincode:
        location = catalog.get_location_by_pincode(pincode)
        if location is None:
            console.print(
                f"[red]Error: pincode {pincode} is outside our service area.[/red]"
            )
            raise typer.Exit(1)
        return location

    if location_id:
        location = catalog.get_location(location_id)
        if location is None:
            console.print(f"[red]Error: unknown location '{location_id}'.[/red]")
            raise typer.Exit(1)
        return location

    return None


def _slot_state(slot: TimeSlot) -> str:
    if slot.is_booked:
        return "[red]Booked[/red]"
    if not slot.is_available:
        return "[dim]Unavailable[/dim]"
    return "[green]Available[/green]"


def _money(amount: float) -> str:
    return f"₹{amount:,.0f}"


@app.command()
def locations():
    """
    List serviceable locations.
    """
    table = Table(title="Serviceable Locations", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Pincode")
    table.add_column("Distance", justify="right", style="dim")

    for location in catalog.SIKKIM_LOCATIONS:
        table.add_row(
            location.id,
            location.name,
            location.pincode,
            f"{location.distance_from_office:g} km",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def services(
    location_id: LocationOption = None,
    pincode: PincodeOption = None,
    config_file: ConfigOption = None,
):
    """
    List wash services. With a location, prices include the fuel charge.
    """
    config = _load(config_file)
    location = _resolve_location(location_id, pincode)

    title = f"Wash Services - {location.name}" if location else "Wash Services"
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Description", style="dim")
    table.add_column("Duration", justify="right")
    table.add_column("Price", justify="right", style="bold green")

    for service in catalog.WASH_SERVICES:
        table.add_row(
            service.id,
            service.name,
            service.description,
            f"{service.duration} min",
            _money(service_price(service, location, config.fuel_rate)),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    day: Annotated[Optional[str], typer.Option("--date", help="Only show this date (YYYY-MM-DD)")] = None,
    show_all: Annotated[bool, typer.Option("--all", help="Include booked and blocked slots.")] = False,
    config_file: ConfigOption = None,
):
    """
    Show bookable time slots for the coming week.
    """
    config = _load(config_file)
    service = _build_service(config)

    selected_date = None
    if day:
        try:
            selected_date = date.fromisoformat(day)
        except ValueError as e:
            console.print(f"[red]Error parsing date: {e}[/red]")
            raise typer.Exit(1)

    all_slots = asyncio.run(service.repository.list_time_slots())
    shown = [slot for slot in all_slots if show_all or slot.is_selectable]

    if selected_date:
        shown = [slot for slot in shown if slot.date == selected_date]

    if not shown:
        console.print("[yellow]⚠ No time slots available for the selected period.[/yellow]")
        return

    for slot_date, day_slots in group_slots_by_date(shown).items():
        table = Table(title=slot_date.strftime("%A, %d %B %Y"), header_style="bold cyan")
        table.add_column("Slot ID", style="bold yellow")
        table.add_column("Time")
        table.add_column("Status")

        for slot in day_slots:
            table.add_row(slot.id, slot.time, _slot_state(slot))

        console.print(table)


@app.command()
def quote(
    service_id: Annotated[str, typer.Argument(help="Wash service id, e.g. 'normal'")],
    location_id: LocationOption = None,
    pincode: PincodeOption = None,
    config_file: ConfigOption = None,
):
    """
    Show the price breakdown of a service at a location.
    """
    config = _load(config_file)
    location = _resolve_location(location_id, pincode)

    if location is None:
        console.print("[red]Error: a location (--location or --pincode) is required.[/red]")
        raise typer.Exit(1)

    price = _build_service(config).quote(location.id, service_id)
    if price is None:
        console.print(f"[red]Error: unknown wash service '{service_id}'.[/red]")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold]Base Price:[/bold] {_money(price.base_price)}\n"
        f"[bold]Fuel Charge ({location.distance_from_office:g} km x 2):[/bold] "
        f"{_money(price.fuel_charge)}\n"
        f"[bold green]Total:[/bold green] {_money(price.total_price)}",
        title=f"Quote - {location.name}",
    ))


@app.command()
def book(
    slot_id: Annotated[Optional[str], typer.Option("--slot", "-s", help="Time slot id (see 'slots')")] = None,
    service_id: Annotated[Optional[str], typer.Option("--service", help="Wash service id")] = None,
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="Customer name")] = None,
    phone: Annotated[Optional[str], typer.Option("--phone", help="Customer phone number")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Anything the crew should know")] = None,
    location_id: LocationOption = None,
    pincode: PincodeOption = None,
    config_file: ConfigOption = None,
):
    """
    Book a wash.

    Examples:

        smartwash book --pincode 737126 --slot 2025-01-06_9 --service normal --name Asha --phone 9800000000
    """
    config = _load(config_file)
    location = _resolve_location(location_id, pincode)

    draft = BookingDraft(
        location_id=location.id if location else None,
        slot_id=slot_id,
        service_id=service_id,
        customer_name=name,
        customer_phone=phone,
        notes=notes,
    )

    try:
        booking = asyncio.run(_build_service(config).submit(draft))
    except BookingValidationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    except StorageError as e:
        console.print(f"[bold red]Failed to save booking, please try again:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]✓ Booking confirmed![/bold green]\n\n"
        f"[bold]Booking ID:[/bold] {booking.id}\n"
        f"[bold]Service:[/bold] {booking.wash_service.name}\n"
        f"[bold]Location:[/bold] {booking.location.name} ({booking.location.pincode})\n"
        f"[bold]Time:[/bold] {booking.time_slot.format_display()}\n"
        f"[bold]Total:[/bold] {_money(booking.total_price)}",
        title="✓ Booking",
    ))


def _booking_row(booking: Booking) -> List[str]:
    style = _STATUS_STYLES[booking.status]
    return [
        booking.id[:8],
        f"[{style}]{booking.status.value}[/{style}]",
        booking.customer_name,
        booking.location.name,
        booking.time_slot.format_display(),
        booking.wash_service.name,
        _money(booking.fuel_charge),
        _money(booking.total_price),
    ]


@app.command()
def bookings(config_file: ConfigOption = None):
    """
    List all bookings, newest first.
    """
    config = _load(config_file)
    history = asyncio.run(_build_service(config).booking_history())

    if not history:
        console.print("[yellow]No bookings yet.[/yellow]")
        return

    summary = summarize_bookings(history)
    table = Table(title="My Bookings", show_header=True, header_style="bold cyan")
    for column in ("ID", "Status", "Customer", "Location", "Time", "Service", "Fuel", "Total"):
        table.add_column(column)

    for booking in history:
        table.add_row(*_booking_row(booking))

    console.print()
    console.print(table)
    console.print(
        f"Total: {summary.total}  Pending: {summary.pending}  "
        f"Confirmed: {summary.confirmed}  Completed: {summary.completed}"
    )
    console.print()


@app.command()
def set_status(
    booking_id: Annotated[str, typer.Argument(help="Booking id (a unique prefix is enough)")],
    status: Annotated[str, typer.Argument(help="pending, confirmed, in-progress, completed or cancelled")],
    force: Annotated[bool, typer.Option("--force", help="Allow any status change.")] = False,
    config_file: ConfigOption = None,
):
    """
    Change the status of a booking.
    """
    config = _load(config_file)

    try:
        new_status = BookingStatus(status.lower())
    except ValueError:
        console.print(f"[red]Error: unknown status '{status}'.[/red]")
        raise typer.Exit(1)

    service = _build_service(config)
    matches = [
        booking for booking in asyncio.run(service.repository.list_bookings())
        if booking.id.startswith(booking_id)
    ]

    if not matches:
        console.print(f"[yellow]⚠ Booking {booking_id} not found, nothing changed.[/yellow]")
        return
    if len(matches) > 1:
        console.print(f"[red]Error: '{booking_id}' matches {len(matches)} bookings.[/red]")
        raise typer.Exit(1)

    booking = matches[0]
    if not force and not can_transition(booking.status, new_status):
        console.print(
            f"[red]Error: cannot move a {booking.status.value} booking to "
            f"{new_status.value}. Use --force to override.[/red]"
        )
        raise typer.Exit(1)

    try:
        asyncio.run(service.repository.update_booking_status(booking.id, new_status))
    except SmartWashError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓ Booking {booking.id[:8]} is now {new_status.value}.[/green]")


@app.command()
def block_slot(
    slot_id: Annotated[str, typer.Argument(help="Time slot id, e.g. 2025-01-06_9")],
    unblock: Annotated[bool, typer.Option("--unblock", help="Make the slot available again.")] = False,
    config_file: ConfigOption = None,
):
    """
    Block (or unblock) a time slot without booking it.
    """
    config = _load(config_file)
    repository = _build_service(config).repository

    slot = next(
        (s for s in asyncio.run(repository.list_time_slots()) if s.id == slot_id),
        None,
    )
    if slot is None:
        console.print(f"[yellow]⚠ Time slot {slot_id} not found, nothing changed.[/yellow]")
        return

    try:
        asyncio.run(repository.set_slot_status(slot_id, is_available=unblock, is_booked=slot.is_booked))
    except SmartWashError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    action = "unblocked" if unblock else "blocked"
    console.print(f"[green]✓ Time slot {slot_id} {action}.[/green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]smartwash[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
