"""Command line interface for recording and listing readings.

Commands:
  authorize   - Request sharing permission from the health store
  add         - Save a reading, printing the shortcut dialog
  history     - Show blood pressure readings from the last days
  heart-rate  - Show raw heart rate samples from the last days
"""

import asyncio
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
import typer

from bloodpressure.api.shortcuts import AddReadingIntent
from bloodpressure.core.config import get_settings
from bloodpressure.core.container import ServiceContainer, create_container
from bloodpressure.core.exceptions import BloodPressureBaseError
from bloodpressure.core.logging_config import setup_logging
from bloodpressure.models.readings import DateWindow, HealthUnit
from bloodpressure.ports.health_store import HealthStoreError
from bloodpressure.storage.local_store import LocalHealthStore

app = typer.Typer(
    name="bloodpressure",
    help="Record blood pressure and heart rate in the health store.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()


def default_store_path() -> Path:
    """Store file used when LOCAL_STORE_PATH is not set."""
    return Path(typer.get_app_dir("bloodpressure")) / "health.json"


def _container() -> ServiceContainer:
    try:
        setup_logging()
        settings = get_settings()
        store = LocalHealthStore(settings.local_store_path or default_store_path())
        return create_container(settings, store)
    except (BloodPressureBaseError, HealthStoreError, ValidationError) as e:
        console.print(f"Could not open the health store: {e}", style="red")
        raise typer.Exit(code=1) from e


def _window(container: ServiceContainer, days: Optional[int]) -> DateWindow:
    return DateWindow.trailing(days or container.settings.query_window_days)


@app.command()
def authorize() -> None:
    """Request permission to share and read readings.

    Permissions are kept in the store file (LOCAL_STORE_PATH, or the
    application directory) so later commands see them.
    """
    container = _container()
    try:
        asyncio.run(container.gate.request_authorization())
    except BloodPressureBaseError as e:
        console.print(f"Authorization failed: {e}", style="red")
        raise typer.Exit(code=1) from e

    if container.gate.is_fully_authorized():
        console.print("Sharing authorized", style="green")
    else:
        console.print("Sharing is not authorized for every type", style="yellow")


@app.command()
def add(
    systolic: int = typer.Argument(..., help="Systolic value (mmHg)"),
    diastolic: int = typer.Argument(..., help="Diastolic value (mmHg)"),
    heart_rate: int = typer.Argument(..., help="Heart rate (BPM)"),
) -> None:
    """Save one reading to the health store."""
    container = _container()
    intent = AddReadingIntent(
        systolic=systolic, diastolic=diastolic, heart_rate=heart_rate
    )
    outcome = asyncio.run(
        intent.run(
            container.writer,
            timeout_seconds=container.settings.store_timeout_seconds,
        )
    )
    console.print(outcome.dialog, style="green" if outcome.success else "red")
    if not outcome.success:
        raise typer.Exit(code=1)


@app.command()
def history(
    days: Optional[int] = typer.Option(None, "--days", "-d", min=1, help="Days to look back"),
) -> None:
    """Show blood pressure readings, oldest first."""
    container = _container()
    try:
        readings = list(
            asyncio.run(
                container.reader.query(_window(container, days), sort_ascending=True)
            )
        )
    except BloodPressureBaseError as e:
        console.print(f"Query failed: {e}", style="red")
        raise typer.Exit(code=1) from e

    if not readings:
        console.print("No readings found", style="yellow")
        return

    table = Table(title="Blood Pressure")
    table.add_column("Time")
    table.add_column("Systolic (mmHg)", justify="right")
    table.add_column("Diastolic (mmHg)", justify="right")
    for reading in readings:
        table.add_row(
            reading.timestamp.strftime("%Y-%m-%d %H:%M"),
            f"{reading.systolic:.0f}",
            f"{reading.diastolic:.0f}",
        )
    console.print(table)


@app.command("heart-rate")
def heart_rate(
    days: Optional[int] = typer.Option(None, "--days", "-d", min=1, help="Days to look back"),
) -> None:
    """Show heart rate samples, oldest first."""
    container = _container()
    try:
        samples = asyncio.run(
            container.reader.fetch_heart_rate_samples(
                _window(container, days), sort_ascending=True
            )
        )
    except BloodPressureBaseError as e:
        console.print(f"Query failed: {e}", style="red")
        raise typer.Exit(code=1) from e

    if not samples:
        console.print("No heart rate samples found", style="yellow")
        return

    table = Table(title="Heart Rate")
    table.add_column("Time")
    table.add_column("BPM", justify="right")
    for sample in samples:
        table.add_row(
            sample.start.strftime("%Y-%m-%d %H:%M"),
            f"{sample.quantity.value_in(HealthUnit.COUNT_PER_MINUTE):.0f}",
        )
    console.print(table)


if __name__ == "__main__":
    app()
