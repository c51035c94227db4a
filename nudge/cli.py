"""Command line front end: every command opens the store, runs in one transaction, prints."""

import contextlib
from collections.abc import Callable, Iterator
from functools import wraps
from pathlib import Path
from typing import Annotated

import typer
from click.exceptions import Exit
from sqlalchemy.orm import Session

from nudge.core.clock import format_local
from nudge.core.errors import NudgeError
from nudge.core.settings import Settings, get_settings
from nudge.core.version import package_version, sqlite_version
from nudge.db.session import open_store
from nudge.observability.logging_config import configure_logging
from nudge.schemas.commands import ReminderInput, validate_input
from nudge.services.notification_service import GroupedNotification, NotificationService
from nudge.services.reminder_dispatcher import fire_due_reminders
from nudge.services.reminder_service import ReminderListItem, ReminderService

DEFAULT_COMMAND = "checkout"


def error_feedback(f):
    """Report domain errors as ``ERROR: ...`` on stderr and exit 1."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (SystemExit, Exit):
            raise
        except NudgeError as e:
            typer.echo(f"ERROR: {e}", err=True)
            raise typer.Exit(1) from e

    return wrapper


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


@contextlib.contextmanager
def _command_session(ctx: typer.Context) -> Iterator[Session]:
    store = open_store(_settings(ctx))
    try:
        with store.transaction() as session:
            yield session
    finally:
        store.close()


def _echo_groups(groups: list[GroupedNotification]) -> None:
    for index, group in enumerate(groups):
        stamp = format_local(group.created_at)
        if group.group_count == 1:
            typer.echo(f"{index}: {group.title} ({stamp})")
        else:
            typer.echo(f"{index}: [{group.group_count}] {group.title} ({stamp})")


def _echo_reminders(reminders: list[ReminderListItem]) -> None:
    for index, item in enumerate(reminders):
        if item.period:
            typer.echo(f"{index}: {item.title} (Scheduled at {item.scheduled_at} every {item.period})")
        else:
            typer.echo(f"{index}: {item.title} (Scheduled at {item.scheduled_at})")


@error_feedback
def checkout(ctx: typer.Context) -> None:
    """Fire off due reminders and show active notifications."""
    with _command_session(ctx) as session:
        fire_due_reminders(session)
        _echo_groups(NotificationService.for_session(session).list_active())


@error_feedback
def noti(ctx: typer.Context) -> None:
    """Show active notifications."""
    with _command_session(ctx) as session:
        _echo_groups(NotificationService.for_session(session).list_active())


@error_feedback
def noti_new(
    ctx: typer.Context,
    title: Annotated[list[str], typer.Argument(help="Notification title; words are joined with spaces.")],
) -> None:
    """Create a new notification."""
    with _command_session(ctx) as session:
        service = NotificationService.for_session(session)
        service.create_notification(" ".join(title))
        _echo_groups(service.list_active())


@error_feedback
def noti_dismiss(
    ctx: typer.Context,
    indices: Annotated[list[int], typer.Argument(help="Indices of active notifications.")],
) -> None:
    """Dismiss notifications by indices."""
    with _command_session(ctx) as session:
        service = NotificationService.for_session(session)
        result = service.dismiss_by_indices(indices)
        for index in result.invalid_indices:
            typer.echo(f"WARNING: {index} is not a valid index of an active notification", err=True)
        _echo_groups(service.list_active())
        typer.echo(f"Dismissed {result.dismissed_count} notifications")


@error_feedback
def noti_expand(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Index of an active notification group.")],
) -> None:
    """Show every notification of a collapsed group."""
    with _command_session(ctx) as session:
        for item in NotificationService.for_session(session).expand_by_index(index):
            typer.echo(f"{item.title} ({format_local(item.created_at)})")


@error_feedback
def remi(ctx: typer.Context) -> None:
    """Show active reminders."""
    with _command_session(ctx) as session:
        _echo_reminders(ReminderService.for_session(session).list_active())


@error_feedback
def remi_new(
    ctx: typer.Context,
    title: Annotated[str | None, typer.Argument(help="Reminder title.")] = None,
    scheduled_at: Annotated[str | None, typer.Argument(help="Date in YYYY-MM-DD.")] = None,
    period: Annotated[str | None, typer.Argument(help="Recurrence like 1d, 2w, 1m or 1y.")] = None,
) -> None:
    """Schedule a new reminder. Without arguments shows active reminders."""
    if title is not None:
        if scheduled_at is None:
            typer.echo("ERROR: expected scheduled_at", err=True)
            raise typer.Exit(1)
        validate_input(ReminderInput, title=title, scheduled_at=scheduled_at, period=period)

    with _command_session(ctx) as session:
        service = ReminderService.for_session(session)
        if title is not None:
            service.create_reminder(title, scheduled_at, period)
        _echo_reminders(service.list_active())


@error_feedback
def remi_dismiss(
    ctx: typer.Context,
    index: Annotated[int, typer.Argument(help="Index of an active reminder.")],
) -> None:
    """Remove a reminder by index."""
    with _command_session(ctx) as session:
        service = ReminderService.for_session(session)
        service.remove_by_index(index)
        _echo_reminders(service.list_active())


@error_feedback
def serve(
    ctx: typer.Context,
    port: Annotated[int | None, typer.Argument(help="Port to listen on.")] = None,
) -> None:
    """Start the local read-only viewer."""
    import uvicorn

    from nudge.main import create_app

    settings = _settings(ctx)
    port = port or settings.serve_port
    typer.echo(f"Listening to http://{settings.serve_host}:{port}/")
    uvicorn.run(create_app(settings), host=settings.serve_host, port=port, log_level=settings.log_level.lower())


def version(ctx: typer.Context) -> None:
    """Show current version."""
    typer.echo(f"{_settings(ctx).app_name} {package_version()}")
    typer.echo(f"SQLite {sqlite_version()}")


COMMANDS: tuple[tuple[str, Callable[..., None]], ...] = (
    ("checkout", checkout),
    ("noti", noti),
    ("noti:new", noti_new),
    ("noti:dismiss", noti_dismiss),
    ("noti:expand", noti_expand),
    ("remi", remi),
    ("remi:new", remi_new),
    ("remi:dismiss", remi_dismiss),
    ("serve", serve),
    ("version", version),
)


def build_cli(commands: tuple[tuple[str, Callable[..., None]], ...] = COMMANDS) -> typer.Typer:
    app = typer.Typer(
        invoke_without_command=True,
        add_completion=False,
        help=f"Personal reminders and notifications. The default command is `{DEFAULT_COMMAND}`.",
    )
    registry = dict(commands)

    @app.callback(context_settings={"help_option_names": ["-h", "--help"]})
    def main_callback(
        ctx: typer.Context,
        database: Annotated[Path | None, typer.Option("--database", help="Database file to use.")] = None,
    ) -> None:
        settings = get_settings()
        if database is not None:
            settings = settings.model_copy(update={"database_path": database})
        configure_logging(settings.log_level)
        ctx.obj = {"settings": settings}

        if ctx.resilient_parsing:
            return
        if ctx.invoked_subcommand is None:
            ctx.invoke(registry[DEFAULT_COMMAND], ctx)

    for name, handler in commands:
        app.command(name)(handler)
    return app


def main() -> None:
    build_cli()()
