"""
Command-line interface for E-FECOS using Typer.
"""

from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from efecos import __version__
from efecos.api import analyze as api_analyze
from efecos.analytics import build_analytics_overview, calculate_savings_metrics
from efecos.config import EXPORT_FORMATS, load_efecos_params
from efecos.core_types import ExportOptions
from efecos.metrics import get_route_optimization_suggestions
from efecos.reporting import save_analytics_report
from efecos.utils.data_processing import load_fleet_data
from efecos.utils.formatters import (
    format_currency,
    format_date,
    format_distance,
    format_fuel_consumption,
    format_number,
    format_percentage,
)
from efecos.utils.logging import (
    LogLevel,
    ProgressTracker,
    log_debug,
    log_detail,
    log_error,
    log_success,
    setup_logging,
)

app = typer.Typer(
    help="E-FECOS: fuel efficiency and cost analytics for vehicle fleets",
    add_completion=False,
)
console = Console()


def _parse_reference_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        log_error(f"Invalid --as-of timestamp: {value!r} (expected ISO 8601)")
        raise typer.Exit(1)


def _load_params(config: Path | None):
    if config and not config.exists():
        log_error(f"Config file not found: {config}")
        raise typer.Exit(1)
    try:
        return load_efecos_params(config)
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)


@app.command()
def analyze(
    data: Path = typer.Option(
        ..., "--data", "-d", help="Fleet data JSON file or CSV directory"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    time_range: str | None = typer.Option(
        None, "--time-range", "-t", help="Window length in days (7, 30, 90, 365)"
    ),
    view: str | None = typer.Option(
        None, "--view", help="Trend granularity: daily, weekly or monthly"
    ),
    format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help=f"Export format ({', '.join(EXPORT_FORMATS)})",
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the export to this directory"
    ),
    details: bool | None = typer.Option(
        None, "--details/--no-details", help="Include per-vehicle and per-driver tables"
    ),
    as_of: str | None = typer.Option(
        None, "--as-of", help="Reference time for the window (ISO 8601)"
    ),
    detect_anomalies: bool = typer.Option(
        False,
        "--detect-anomalies",
        help="Re-score fuel logs against vehicle baselines before aggregating",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Compute fuel analytics for a time window.

    Loads fleet records, filters them to the last TIME_RANGE days, and prints the
    headline figures, top performers and budget alerts.  With --output the
    analytics are also exported in the selected format.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    if not data.exists():
        log_error(f"Fleet data not found: {data}")
        raise typer.Exit(1)

    if format is not None and format not in EXPORT_FORMATS:
        log_error(f"Invalid format. Choose one of: {', '.join(EXPORT_FORMATS)}")
        raise typer.Exit(1)

    params = _load_params(config)
    reference_time = _parse_reference_time(as_of)

    try:
        if not quiet:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Computing analytics...", total=None)
                overview = api_analyze(
                    data=data,
                    config=params,
                    time_range=time_range,
                    view=view,
                    reference_time=reference_time,
                    output_dir=output,
                    format=format,
                    include_details=details,
                    detect_anomalies=detect_anomalies,
                )
                progress.update(task, completed=True)
        else:
            overview = api_analyze(
                data=data,
                config=params,
                time_range=time_range,
                view=view,
                reference_time=reference_time,
                output_dir=output,
                format=format,
                include_details=details,
                detect_anomalies=detect_anomalies,
            )
    except FileNotFoundError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)

    if quiet:
        return

    currency = params.analytics.currency
    analytics = overview.analytics

    window_end = reference_time or datetime.now()
    window = time_range or params.report.time_range
    table = Table(
        title="Fleet Analytics",
        caption=f"Last {window} days to {format_date(window_end)}",
        show_header=True,
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total Fuel Used", f"{format_number(analytics.total_fuel_used, 1)} L")
    table.add_row("Total Cost", format_currency(analytics.total_cost, currency))
    table.add_row("Average Efficiency", f"{analytics.average_efficiency:.2f} L/100km")
    table.add_row("Total Trips", str(analytics.total_trips))
    table.add_row("Anomalies Detected", str(analytics.anomalies_count))
    table.add_row(
        "Estimated Savings", format_currency(overview.savings.total_savings, currency)
    )
    console.print(table)

    if overview.top_vehicles:
        vehicles = Table(title="Top Vehicles", show_header=True)
        vehicles.add_column("Vehicle", style="cyan")
        vehicles.add_column("Fuel (L)", justify="right")
        vehicles.add_column("Cost", justify="right")
        vehicles.add_column("L/100km", justify="right")
        vehicles.add_column("Trips", justify="right")
        for v in overview.top_vehicles:
            vehicles.add_row(
                v.name,
                format_number(v.fuel_used, 1),
                format_currency(v.cost, currency),
                f"{v.efficiency:.1f}",
                str(v.trips),
            )
        console.print(vehicles)

    if overview.top_drivers:
        drivers = Table(title="Top Drivers", show_header=True)
        drivers.add_column("Driver", style="cyan")
        drivers.add_column("Fuel (L)", justify="right")
        drivers.add_column("L/100km", justify="right")
        drivers.add_column("Trips", justify="right")
        for d in overview.top_drivers:
            drivers.add_row(
                d.name,
                format_number(d.fuel_used, 1),
                f"{d.efficiency:.1f}",
                str(d.trips),
            )
        console.print(drivers)

    if overview.budget_alerts:
        alerts = Table(title="Budget Alerts", show_header=True)
        alerts.add_column("Budget", style="cyan")
        alerts.add_column("Spend", justify="right")
        alerts.add_column("Limit", justify="right")
        alerts.add_column("Used", justify="right")
        alerts.add_column("Status")
        for b in overview.budget_alerts:
            style = "red" if b.status.value == "critical" else "yellow"
            alerts.add_row(
                b.name,
                format_currency(b.current_spend, currency),
                format_currency(b.limit, currency),
                format_percentage(b.current_spend, b.limit),
                f"[{style}]{b.status.value}[/{style}]",
            )
        console.print(alerts)

    if output is not None:
        log_success(f"Analytics exported to {output}/")


@app.command()
def savings(
    data: Path = typer.Option(
        ..., "--data", "-d", help="Fleet data JSON file or CSV directory"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    fuel_price: float | None = typer.Option(
        None, "--fuel-price", help="Price per litre; overrides the config"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Estimate fuel and money saved against each vehicle's baseline consumption.
    """
    _setup_logging_from_flags(verbose, False, debug)
    params = _load_params(config)
    price = params.analytics.fuel_price if fuel_price is None else fuel_price

    try:
        fleet = load_fleet_data(data)
    except (FileNotFoundError, ValueError) as e:
        log_error(str(e))
        raise typer.Exit(1)

    metrics = calculate_savings_metrics(fleet.fuel_logs, fleet.vehicles, price)
    log_debug(f"Savings computed over {len(fleet.fuel_logs)} fuel logs at {price}/L")

    currency = params.analytics.currency
    table = Table(title="Fuel Savings", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    distance = sum(log.trip_distance for log in fleet.fuel_logs)
    liters = sum(log.liters for log in fleet.fuel_logs)
    table.add_row("Distance Logged", format_distance(distance))
    table.add_row("Fleet Consumption", format_fuel_consumption(liters, distance))
    table.add_row("Litres Saved", f"{format_number(metrics.total_liters_saved, 1)} L")
    table.add_row("Total Savings", format_currency(metrics.total_savings, currency))
    table.add_row(
        "Average per Trip",
        format_currency(metrics.average_savings_per_trip, currency),
    )
    console.print(table)


@app.command()
def routes(
    data: Path = typer.Option(
        ..., "--data", "-d", help="Fleet data JSON file or CSV directory"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    limit: int = typer.Option(10, "--limit", "-n", help="Number of routes to show"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Rank routes by the fuel money their trips saved against prediction.
    """
    _setup_logging_from_flags(verbose, False, debug)
    params = _load_params(config)

    try:
        fleet = load_fleet_data(data)
    except (FileNotFoundError, ValueError) as e:
        log_error(str(e))
        raise typer.Exit(1)

    suggestions = get_route_optimization_suggestions(
        fleet.trips, params.analytics.fuel_price
    )
    if not suggestions:
        console.print("[yellow]No trips found[/yellow]")
        return

    currency = params.analytics.currency
    table = Table(title="Route Suggestions", show_header=True)
    table.add_column("Route", style="cyan")
    table.add_column("Trips", justify="right")
    table.add_column("Avg L/100km", justify="right")
    table.add_column("Savings", justify="right", style="green")
    for s in suggestions[:limit]:
        table.add_row(
            s.route or "(unnamed)",
            str(s.trip_count),
            f"{s.average_efficiency:.1f}",
            format_currency(s.potential_savings, currency),
        )
    console.print(table)


@app.command()
def report(
    data: Path = typer.Option(
        ..., "--data", "-d", help="Fleet data JSON file or CSV directory"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output directory (defaults to results_dir)"
    ),
    formats: str = typer.Option(
        ",".join(EXPORT_FORMATS),
        "--formats",
        help="Comma-separated export formats to write",
    ),
    time_range: str | None = typer.Option(
        None, "--time-range", "-t", help="Window length in days"
    ),
    as_of: str | None = typer.Option(
        None, "--as-of", help="Reference time for the window (ISO 8601)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Write the analytics in several export formats in one pass.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    requested = [f.strip() for f in formats.split(",") if f.strip()]
    unknown = [f for f in requested if f not in EXPORT_FORMATS]
    if not requested or unknown:
        log_error(
            f"Invalid format(s): {', '.join(unknown) or formats!r}. "
            f"Choose from: {', '.join(EXPORT_FORMATS)}"
        )
        raise typer.Exit(1)

    params = _load_params(config)
    reference_time = _parse_reference_time(as_of)
    window = str(time_range) if time_range is not None else params.report.time_range
    results_dir = output if output is not None else params.report.results_dir

    progress = ProgressTracker(["Load Data", "Compute Analytics", *requested])
    try:
        fleet = load_fleet_data(data)
        progress.advance(
            f"Loaded {len(fleet.fuel_logs)} fuel logs for {len(fleet.vehicles)} vehicles"
        )

        overview = build_analytics_overview(
            fleet.fuel_logs,
            fleet.vehicles,
            fleet.drivers,
            fleet.trips,
            fleet.budgets,
            time_range=window,
            selected_view=params.report.view,
            reference_time=reference_time,
            params=params.analytics,
        )
        progress.advance(
            f"Computed analytics over {window} days "
            f"({overview.analytics.anomalies_count} anomalies)"
        )

        for fmt in requested:
            options = ExportOptions(
                format=fmt,
                time_range=window,
                include_details=params.report.include_details,
                currency=params.analytics.currency,
            )
            path = save_analytics_report(overview.analytics, options, results_dir)
            log_detail(f"{fmt}: {path}")
            progress.advance(f"Wrote {path.name}")
    except (FileNotFoundError, ValueError) as e:
        log_error(str(e))
        raise typer.Exit(1)
    finally:
        progress.close()

    log_success(f"Reports saved to {results_dir}/")


@app.command()
def version() -> None:
    """
    Show the E-FECOS version.
    """
    console.print(f"E-FECOS version {__version__}")


def _setup_logging_from_flags(
    verbose: bool = False, quiet: bool = False, debug: bool = False
):
    """Setup logging based on CLI flags or environment variable."""
    level_from_flags: LogLevel | None = None
    if debug:
        level_from_flags = LogLevel.DEBUG
    elif verbose:
        level_from_flags = LogLevel.VERBOSE
    elif quiet:
        level_from_flags = LogLevel.QUIET

    if level_from_flags is not None:
        setup_logging(level_from_flags)
    else:
        setup_logging()


if __name__ == "__main__":
    app()
