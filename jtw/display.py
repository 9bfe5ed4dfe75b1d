"""Terminal rendering for previews, progress and errors."""
import logging
from datetime import datetime
from typing import Sequence

import typer

from .errors import (
    ConfigMissing,
    EmptyExtraction,
    HumanCancellation,
    JtwError,
    MalformedResponse,
    TaskNotFound,
    TransportFailure,
)
from .models import BatchResult, WorklogEntry

logger = logging.getLogger(__name__)

TROUBLESHOOTING = (
    "If the problem persists:\n"
    "  - check the VPN\n"
    "  - open Jira in a browser\n"
    "  - check the settings: jt setup"
)


def info(message: str) -> None:
    typer.echo(message)


def success(message: str) -> None:
    typer.secho(f"✓ {message}", fg=typer.colors.GREEN)


def warning(message: str) -> None:
    typer.secho(f"\n⚠️  {message}\n", fg=typer.colors.YELLOW)


def error(message: str) -> None:
    typer.secho(f"\n❌ {message}\n", fg=typer.colors.RED, err=True)


def hint(message: str) -> None:
    typer.echo(message, err=True)


def format_date(iso_date: str) -> str:
    try:
        parsed = datetime.strptime(iso_date, "%Y-%m-%d")
    except ValueError:
        return iso_date or "—"
    return f"{parsed.day} {parsed.strftime('%b')} {parsed.year}"


def format_hours(hours: float) -> str:
    return f"{hours:g}h"


def render_preview(entries: Sequence[WorklogEntry]) -> str:
    task_width = max(len(e.task or "???") for e in entries)
    activity_width = max([len(e.activity) for e in entries] + [20])
    date_width = max(len(format_date(e.date)) for e in entries)
    lines = []
    for e in entries:
        lines.append(
            f"  {format_date(e.date).ljust(date_width)}  {(e.task or '???').ljust(task_width)}"
            f"  {e.activity.ljust(activity_width)}  {format_hours(e.hours)}"
        )
    total = sum(e.hours for e in entries)
    lines.append("")
    lines.append(f"  Total: {format_hours(total)}")
    return "\n".join(lines)


def show_preview(entries: Sequence[WorklogEntry]) -> None:
    typer.echo("\nPreview:\n")
    typer.echo(render_preview(entries))
    typer.echo("")


def progress(current: int, total: int, item: str) -> None:
    typer.echo(f"  [{current}/{total}] {item}... ", nl=False)


def progress_result(ok: bool) -> None:
    typer.secho("✓" if ok else "✗", fg=typer.colors.GREEN if ok else typer.colors.RED)


def show_batch_result(result: BatchResult) -> None:
    if result.success:
        count = len(result.success)
        typer.echo("")
        success(f"Logged {count} {'entry' if count == 1 else 'entries'}")
    if result.failed:
        typer.secho(f"\n✗ Failed to log {len(result.failed)}:\n", fg=typer.colors.RED, err=True)
        for failed in result.failed:
            hint(f"  {failed.entry.task}: {failed.error}")
        hint("")


def handle_error(exc: BaseException) -> int:
    """Render an error at the command boundary and return the exit code."""
    if isinstance(exc, (KeyboardInterrupt, HumanCancellation)):
        typer.echo("\n\nCancelled\n")
        return 0
    if isinstance(exc, TransportFailure):
        error(str(exc))
        if exc.hint:
            hint(exc.hint + "\n")
        return 1
    if isinstance(exc, ConfigMissing):
        error(str(exc))
        hint("Run the setup: jt setup\n")
        return 1
    if isinstance(exc, TaskNotFound):
        error(str(exc))
        hint("Check the task keys and try again. Nothing was logged.\n")
        return 1
    if isinstance(exc, EmptyExtraction):
        error("Could not extract any entries from the input")
        hint("Make sure you mentioned:\n  - a task or alias\n  - the time (hours)\n"
             '  - the date (or "today", "yesterday")\n')
        return 1
    if isinstance(exc, MalformedResponse):
        error(f"Could not parse the input: {exc}")
        hint("Re-run with the whole text in quotes, for example:\n"
             '  jt q "yesterday PROJ-123 development 3 hours"\n')
        return 1
    if isinstance(exc, JtwError):
        error(f"Error: {exc}")
    else:
        logger.debug("Unexpected error", exc_info=exc)
        error(f"Error: {exc}" if str(exc) else "Unknown error")
    hint(TROUBLESHOOTING + "\n")
    return 1
