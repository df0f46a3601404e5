"""
Command-line entry point for the flight seeder.

    flightseed window --start 2025-09-01 --end 2025-10-31
    flightseed fixed --date 2024-12-25
    flightseed routes --start 2025-01-01 --end 2025-12-31
    flightseed regenerate-seats AZ101 --date 2024-12-25
    flightseed seed-references
    flightseed stats
"""

from datetime import date, datetime
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from tqdm import tqdm

from .exceptions import SeederError, BatchInsertError
from .models import StoreBackend
from .services.route_flights import FLIGHTS_PER_ROUTE
from .services.seed_runner import SeedReport, SeedRunner
from .store import create_store
from .utils.config import SeederConfig, configure_logging, load_config

app = typer.Typer(help="Seed the booking datastore with synthetic flights")
console = Console()

DEFAULT_WINDOW_START = "2025-09-01"
DEFAULT_WINDOW_END = "2025-10-31"
DEFAULT_ROUTES_START = "2025-01-01"
DEFAULT_ROUTES_END = "2025-12-31"


def parse_date(value: str, option: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        console.print(f"[red]Error: Invalid {option} '{value}'. Use YYYY-MM-DD[/red]")
        raise typer.Exit(1)


def build_config(env_file: Optional[str], store: Optional[StoreBackend], seed: Optional[int],
                 batch_size: Optional[int], verbose: bool) -> SeederConfig:
    """Load configuration and apply command-line overrides."""
    try:
        config = load_config(env_file)
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    overrides = {}
    if store is not None:
        overrides["store_backend"] = store
    if seed is not None:
        overrides["seed"] = seed
    if batch_size is not None:
        overrides["batch_size"] = batch_size
    if verbose:
        overrides["log_level"] = "DEBUG"
    config = config.model_copy(update=overrides)

    configure_logging(config.log_level)
    return config


class BatchProgress:
    """tqdm bar over insert batches, created when the first batch lands."""

    def __init__(self, enabled: bool):
        self.enabled = enabled
        self.bar: Optional[tqdm] = None

    def __call__(self, number: int, total: int, size: int) -> None:
        if not self.enabled:
            return
        if self.bar is None:
            self.bar = tqdm(total=total, desc="Inserting flights", unit="batch", colour="green")
        self.bar.update(1)

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()


def print_report(title: str, report: SeedReport) -> None:
    table = Table(title=title, box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan bold")
    table.add_column("Value", style="white", justify="right")
    table.add_row("Scope", str(report.scope))
    table.add_row("Flights generated", f"{report.generated:,}")
    table.add_row("Flights deleted", f"{report.deleted:,}")
    table.add_row("Flights inserted", f"{report.inserted:,}")
    table.add_row("Insert calls", f"{report.batches:,}")
    console.print()
    console.print(table)


def fail(error: SeederError) -> None:
    if isinstance(error, BatchInsertError):
        console.print(
            f"[red]❌ {error}[/red]\n"
            f"[yellow]{error.inserted:,} flights from earlier batches remain in the store[/yellow]"
        )
    else:
        console.print(f"[red]❌ {error}[/red]")
    raise typer.Exit(1)


EnvFileOption = typer.Option(None, "--env-file", help="Path to .env file (default: ./.env)")
StoreOption = typer.Option(None, "--store", help="Datastore backend (overrides SEEDER_STORE)")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Debug logging instead of a progress bar")


@app.command()
def window(
    start: str = typer.Option(DEFAULT_WINDOW_START, "--start", help="First day (YYYY-MM-DD)"),
    end: str = typer.Option(DEFAULT_WINDOW_END, "--end", help="Last day, inclusive (YYYY-MM-DD)"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for a reproducible run"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", min=1, help="Flights per insert call"),
    store: Optional[StoreBackend] = StoreOption,
    env_file: Optional[str] = EnvFileOption,
    verbose: bool = VerboseOption,
):
    """
    Replace all flights departing in a date window with a generated schedule.
    """
    start_date = parse_date(start, "--start")
    end_date = parse_date(end, "--end")
    if start_date > end_date:
        console.print(f"[red]Error: --start {start_date} is after --end {end_date}[/red]")
        raise typer.Exit(1)

    config = build_config(env_file, store, seed, batch_size, verbose)
    console.print(Panel.fit(
        f"[bold cyan]Flight seeding[/bold cyan]\n"
        f"{start_date.isoformat()} → {end_date.isoformat()} "
        f"({(end_date - start_date).days + 1} days, {config.store_backend.value} store)",
        border_style="cyan",
        box=box.DOUBLE,
    ))

    progress = BatchProgress(enabled=not verbose)
    runner = SeedRunner(create_store(config), config, on_batch=progress)
    try:
        report = runner.run_window(start_date, end_date)
    except SeederError as e:
        fail(e)
    finally:
        progress.close()

    print_report("Window seeding", report)
    console.print(f"[green]✅ Created {report.inserted:,} flights[/green]")


@app.command()
def fixed(
    on: str = typer.Option("2024-12-25", "--date", help="Day of the test flights (YYYY-MM-DD)"),
    store: Optional[StoreBackend] = StoreOption,
    env_file: Optional[str] = EnvFileOption,
    verbose: bool = VerboseOption,
):
    """
    Replace the AZ101/AZ102 Rome-Milan test flights.
    """
    flight_date = parse_date(on, "--date")
    config = build_config(env_file, store, None, None, verbose)

    runner = SeedRunner(create_store(config), config)
    try:
        report = runner.run_fixed(flight_date)
    except SeederError as e:
        fail(e)

    print_report("Fixed test flights", report)
    console.print("[green]✅ Test flights created successfully[/green]")


@app.command()
def routes(
    start: str = typer.Option(DEFAULT_ROUTES_START, "--start", help="First day (YYYY-MM-DD)"),
    end: str = typer.Option(DEFAULT_ROUTES_END, "--end", help="Last day, inclusive (YYYY-MM-DD)"),
    per_route: int = typer.Option(FLIGHTS_PER_ROUTE, "--per-route", min=1, help="Flights per route"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for a reproducible run"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", min=1, help="Flights per insert call"),
    store: Optional[StoreBackend] = StoreOption,
    env_file: Optional[str] = EnvFileOption,
    verbose: bool = VerboseOption,
):
    """
    Replace all flights in a date window with flights on popular European routes.
    """
    start_date = parse_date(start, "--start")
    end_date = parse_date(end, "--end")
    if start_date > end_date:
        console.print(f"[red]Error: --start {start_date} is after --end {end_date}[/red]")
        raise typer.Exit(1)

    config = build_config(env_file, store, seed, batch_size, verbose)
    console.print(Panel.fit(
        f"[bold cyan]Popular route seeding[/bold cyan]\n"
        f"{start_date.isoformat()} → {end_date.isoformat()} "
        f"({per_route} flights per route, {config.store_backend.value} store)",
        border_style="cyan",
        box=box.DOUBLE,
    ))

    progress = BatchProgress(enabled=not verbose)
    runner = SeedRunner(create_store(config), config, on_batch=progress)
    try:
        report = runner.run_routes(start_date, end_date, per_route)
    except SeederError as e:
        fail(e)
    finally:
        progress.close()

    print_report("Popular route seeding", report)
    console.print(f"[green]✅ Created {report.inserted:,} flights[/green]")


@app.command("regenerate-seats")
def regenerate_seats(
    flight_number: str = typer.Argument(..., help="Flight number, e.g. AZ101"),
    on: Optional[str] = typer.Option(None, "--date", help="Only the flight departing on this day (YYYY-MM-DD)"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for a reproducible run"),
    store: Optional[StoreBackend] = StoreOption,
    env_file: Optional[str] = EnvFileOption,
    verbose: bool = VerboseOption,
):
    """
    Rebuild the seat map of a stored flight with a first/business/economy cabin layout.
    """
    flight_date = parse_date(on, "--date") if on else None
    config = build_config(env_file, store, seed, None, verbose)

    runner = SeedRunner(create_store(config), config)
    try:
        report = runner.regenerate_seats(flight_number.strip().upper(), flight_date)
    except SeederError as e:
        fail(e)

    table = Table(title=f"Seats of {report.flight_number}", box=box.ROUNDED)
    table.add_column("Class", style="cyan bold")
    table.add_column("Seats", justify="right")
    for seat_class, count in report.seat_counts.items():
        table.add_row(seat_class.value.capitalize(), str(count))
    console.print(table)
    console.print(f"[green]✅ Updated {report.updated} flight(s)[/green]")


@app.command("seed-references")
def seed_references(
    store: Optional[StoreBackend] = StoreOption,
    env_file: Optional[str] = EnvFileOption,
    verbose: bool = VerboseOption,
):
    """
    Add the catalog airports and airlines that are missing from the store.
    """
    config = build_config(env_file, store, None, None, verbose)

    runner = SeedRunner(create_store(config), config)
    try:
        result = runner.seed_references()
    except SeederError as e:
        fail(e)

    table = Table(title="Reference data", box=box.ROUNDED)
    table.add_column("Entity", style="cyan bold")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Already present", justify="right", style="yellow")
    table.add_row("Airports", str(result.airports_created), str(result.airports_existing))
    table.add_row("Airlines", str(result.airlines_created), str(result.airlines_existing))
    console.print(table)


@app.command()
def stats(
    store: Optional[StoreBackend] = StoreOption,
    env_file: Optional[str] = EnvFileOption,
):
    """
    Show how many airports, airlines and flights the store holds.
    """
    config = build_config(env_file, store, None, None, False)

    runner = SeedRunner(create_store(config), config)
    try:
        counts = runner.stats()
    except SeederError as e:
        fail(e)

    table = Table(title="Database Statistics", box=box.ROUNDED, show_header=False)
    table.add_column("Entity", style="cyan bold")
    table.add_column("Count", justify="right")
    table.add_row("Airports", f"{counts.airports:,}")
    table.add_row("Airlines", f"{counts.airlines:,}")
    table.add_row("Flights", f"{counts.flights:,}")
    console.print(table)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
