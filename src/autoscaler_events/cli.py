# src/autoscaler_events/cli.py
"""autoscaler-events Command Line Interface.

Entry point for the autoscaler-events CLI tool.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from autoscaler_events import __version__
from autoscaler_events.core.config import MAX_TTL_SECONDS, AutoscalerEventsSettings, load_settings, load_settings_from_env
from autoscaler_events.core.logging import configure_logging

if TYPE_CHECKING:
    from autoscaler_events.core.store import AutoScalerEvent, EventDB

__all__ = ["app"]

app = typer.Typer(
    name="autoscaler-events",
    help="Storage and retention for autoscaler events.",
    no_args_is_help=True,
)

_DATABASE_OPTION = typer.Option(
    None,
    "--database",
    "-d",
    help="SQLAlchemy database URL (default: from settings file).",
)
_SETTINGS_OPTION = typer.Option(
    Path("settings.yaml"),
    "--settings",
    "-s",
    help="Path to settings YAML file.",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"autoscaler-events version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """autoscaler-events: persist, deduplicate and prune autoscaler events."""


def _load_config(settings_path: Path) -> AutoscalerEventsSettings:
    """Load settings if the file exists, otherwise from environment variables alone.

    Raises:
        typer.Exit: If the resulting settings are invalid.
    """
    has_file = settings_path.exists()
    source = str(settings_path) if has_file else "environment"
    try:
        return load_settings(settings_path) if has_file else load_settings_from_env()
    except ValidationError as e:
        typer.echo(f"Error: invalid settings in {source}:\n{e}", err=True)
        raise typer.Exit(1) from None


def _open_db(database: str | None, config: AutoscalerEventsSettings, *, create_tables: bool) -> EventDB:
    from autoscaler_events.core.store import EventDB

    url = database or config.database.url
    try:
        return EventDB.from_url(url, echo=config.database.echo, create_tables=create_tables)
    except Exception as e:
        typer.echo(f"Error connecting to database: {e}", err=True)
        raise typer.Exit(1) from None


def _format_event(event: AutoScalerEvent) -> str:
    return (
        f"[{event.id}] {event.create_time.isoformat()} -> {event.update_time.isoformat()} "
        f"{event.event_type} {event.reason} key={event.event_key} count={event.event_count}: {event.message}"
    )


@app.command()
def init(
    database: str | None = _DATABASE_OPTION,
    settings: Path = _SETTINGS_OPTION,
) -> None:
    """Create the event table if it does not exist."""
    config = _load_config(settings)
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)
    db = _open_db(database, config, create_tables=True)
    db.close()
    typer.echo("Event table ready.")


@app.command()
def events(
    job_key: str = typer.Argument(..., help="Job the events belong to."),
    reason: str = typer.Argument(..., help="Event reason."),
    event_key: str | None = typer.Option(
        None,
        "--event-key",
        "-k",
        help="Show only the latest event of this series.",
    ),
    database: str | None = _DATABASE_OPTION,
    settings: Path = _SETTINGS_OPTION,
) -> None:
    """List stored events for a job and reason.

    Examples:

        # Every event recorded for the reason
        autoscaler-events events my-job ScalingReport

        # Latest event of one series
        autoscaler-events events my-job ScalingReport --event-key 1f3a
    """
    from autoscaler_events.core.store import EventInteractor

    config = _load_config(settings)
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)
    db = _open_db(database, config, create_tables=False)
    try:
        interactor = EventInteractor(db)
        if event_key is not None:
            latest = interactor.query_latest_event(job_key, reason, event_key)
            if latest is None:
                typer.echo("No matching event.")
                raise typer.Exit(1)
            typer.echo(_format_event(latest))
            return

        found = interactor.query_events(job_key, reason)
        if not found:
            typer.echo("No matching events.")
            return
        for event in sorted(found, key=lambda e: e.id):
            typer.echo(_format_event(event))
    except SQLAlchemyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    finally:
        db.close()


@app.command()
def purge(
    ttl_seconds: int | None = typer.Option(
        None,
        "--ttl-seconds",
        "-t",
        min=1,
        max=MAX_TTL_SECONDS,
        help="Delete events created longer ago than this (default: from settings).",
    ),
    batch_size: int | None = typer.Option(
        None,
        "--batch-size",
        "-b",
        min=1,
        help="Maximum rows per delete statement (default: from settings).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be deleted without deleting.",
    ),
    database: str | None = _DATABASE_OPTION,
    settings: Path = _SETTINGS_OPTION,
) -> None:
    """Delete expired events in bounded batches.

    Examples:

        # See what would be deleted
        autoscaler-events purge --dry-run -d sqlite:///./events.db

        # Delete events older than 7 days, 500 rows per statement
        autoscaler-events purge --ttl-seconds 604800 --batch-size 500
    """
    from autoscaler_events.core.retention import EventCleaner
    from autoscaler_events.core.store import EventInteractor

    config = _load_config(settings)
    configure_logging(json_output=config.logging.json_output, level=config.logging.level)

    ttl = timedelta(seconds=ttl_seconds) if ttl_seconds is not None else config.retention.ttl
    effective_batch_size = batch_size if batch_size is not None else config.retention.batch_size

    db = _open_db(database, config, create_tables=False)
    try:
        interactor = EventInteractor(db)
        if dry_run:
            expired = interactor.query_expired_events_and_max_id(ttl)
            if expired is None or expired.expired_records == 0:
                typer.echo(f"No events older than {ttl} found.")
                return
            typer.echo(f"Would delete {expired.expired_records} event(s) with id <= {expired.max_id} older than {ttl}.")
            return

        result = EventCleaner(interactor, ttl, effective_batch_size).clean_expired_events()
        if result.expired_records == 0:
            typer.echo(f"No events older than {ttl} found.")
            return
        typer.echo(f"Purge completed in {result.duration_seconds:.2f}s:")
        typer.echo(f"  Expired: {result.expired_records}")
        typer.echo(f"  Deleted: {result.deleted_count}")
        typer.echo(f"  Batches: {result.batches}")
    except SQLAlchemyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    finally:
        db.close()


if __name__ == "__main__":
    app()
