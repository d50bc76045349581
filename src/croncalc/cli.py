"""Command-line interface for croncalc."""

from __future__ import annotations

import functools
import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Callable, Iterable, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from croncalc.day_fields import DomConstraints, DowConstraints
from croncalc.errors import CronParseError
from croncalc.expression import CronExpression, validate_expression
from croncalc.infrastructure.config import ConfigError, Settings, load_settings
from croncalc.infrastructure.logging import configure_logging
from croncalc.presets import PRESETS

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

app = typer.Typer(
    name="croncalc",
    help="Parse cron expressions and compute their next occurrences",
    add_completion=False,
)


# =============================================================================
# Error Handling
# =============================================================================


class ErrorCode(Enum):
    """Standard CLI exit codes."""

    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    CONFIG_INVALID = 31
    PARSE_ERROR = 60


class OutputFormat(str, Enum):
    """Output formats for occurrence listings."""

    PLAIN = "plain"
    TABLE = "table"
    JSON = "json"


def error_boundary(func: F) -> F:
    """Convert library errors into a red message and an exit code."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except CronParseError as e:
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(ErrorCode.PARSE_ERROR.value)
        except ConfigError as e:
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(ErrorCode.CONFIG_INVALID.value)
        except Exception as e:
            logger.exception("Unexpected error")
            typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
            raise typer.Exit(ErrorCode.GENERAL_ERROR.value)

    return wrapper  # type: ignore


# =============================================================================
# Helpers
# =============================================================================


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def _reference_instant(start: str | None, settings: Settings) -> datetime:
    zone = settings.zone()
    if start is None:
        return datetime.now(zone)
    try:
        instant = datetime.fromisoformat(start)
    except ValueError:
        typer.echo(f"Error: --from is not an ISO-8601 datetime: {start}", err=True)
        raise typer.Exit(ErrorCode.USAGE_ERROR.value)
    if zone is not None and instant.tzinfo is None:
        instant = instant.replace(tzinfo=zone)
    return instant


def compress_values(values: Iterable[int]) -> str:
    """Render sorted integers compactly, e.g. ``0-4,22,23``."""
    nums = sorted(set(values))
    if not nums:
        return "-"

    ranges: list[str] = []
    start = prev = nums[0]
    for n in nums[1:] + [None]:
        if n is not None and n == prev + 1:
            prev = n
            continue
        ranges.append(str(start) if start == prev else f"{start}-{prev}")
        if n is not None:
            start = prev = n
    return ",".join(ranges)


# =============================================================================
# Commands
# =============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file (YAML, JSON or TOML)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Parse cron expressions and compute their next occurrences."""
    try:
        settings = load_settings(config)
    except ConfigError as e:
        typer.echo(typer.style(f"Error: {e}", fg="red"), err=True)
        raise typer.Exit(ErrorCode.CONFIG_INVALID.value)

    configure_logging(
        level="debug" if verbose else settings.log_level,
        format=settings.log_format,
    )
    ctx.obj = settings


@app.command(name="next")
@error_boundary
def next_cmd(
    ctx: typer.Context,
    expression: Annotated[str, typer.Argument(help="Cron expression (quote it)")],
    count: Annotated[
        Optional[int],
        typer.Option("--count", "-n", min=1, help="Number of occurrences"),
    ] = None,
    start: Annotated[
        Optional[str],
        typer.Option("--from", help="Reference instant, ISO-8601 (default: now)"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.PLAIN,
) -> None:
    """Print the next occurrences of an expression.

    Examples:
        croncalc next "*/15 9-17 * * MON-FRI"
        croncalc next "0 0 L * *" --from 2016-02-15 -n 3
        croncalc next @weekly --format json
    """
    settings = _settings(ctx)
    expr = CronExpression.parse(expression)
    after = _reference_instant(start, settings)
    occurrences = expr.next_n(count or settings.default_count, after)

    if format is OutputFormat.JSON:
        typer.echo(json.dumps({
            "expression": expr.expression,
            "from": after.isoformat(),
            "occurrences": [o.isoformat() for o in occurrences],
        }))
        return

    if not occurrences:
        typer.echo("No upcoming occurrence")
        return

    if format is OutputFormat.TABLE:
        table = Table(title=expr.expression)
        table.add_column("#", justify="right")
        table.add_column("Occurrence")
        table.add_column("Weekday")
        for index, occurrence in enumerate(occurrences, 1):
            table.add_row(
                str(index),
                occurrence.strftime(settings.output_format),
                occurrence.strftime("%A"),
            )
        Console().print(table)
        return

    for occurrence in occurrences:
        typer.echo(occurrence.strftime(settings.output_format))


@app.command(name="validate")
def validate_cmd(
    expressions: Annotated[list[str], typer.Argument(help="Cron expressions to check")],
) -> None:
    """Check expressions; exit non-zero if any is invalid.

    Every bad field of an expression is reported on its own line.
    """
    failed = 0
    for text in expressions:
        problems = validate_expression(text)
        if not problems:
            typer.echo(typer.style(f"OK       {text}", fg="green"))
            continue
        failed += 1
        for problem in problems:
            typer.echo(typer.style(f"INVALID  {text}: {problem['message']}", fg="red"))

    if failed:
        raise typer.Exit(ErrorCode.PARSE_ERROR.value)


def _day_of_month_summary(dom: DomConstraints) -> str:
    if not dom.restricted:
        return "*"
    parts = [compress_values(dom.days)] if dom.days else []
    if dom.has_special:
        if dom.last_day:
            parts.append("last day")
        if dom.last_workday:
            parts.append("last weekday")
        parts.extend(f"weekday nearest {day}" for day in sorted(dom.workdays))
    return "; ".join(parts)


def _day_of_week_summary(dow: DowConstraints) -> str:
    if not dow.restricted:
        return "*"
    parts = [compress_values(dow.days)] if dow.days else []
    if dow.has_special:
        parts.extend(f"last {weekday}" for weekday in sorted(dow.last_weekdays))
        parts.extend(f"{weekday}#{nth}" for weekday, nth in dow.nth_pairs())
    return "; ".join(parts)


@app.command(name="inspect")
@error_boundary
def inspect_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression (quote it)")],
) -> None:
    """Show the value sets an expression expands to."""
    expr = CronExpression.parse(expression)

    table = Table(title=expr.normalized)
    table.add_column("Field")
    table.add_column("Values")
    table.add_row("second", compress_values(expr.seconds))
    table.add_row("minute", compress_values(expr.minutes))
    table.add_row("hour", compress_values(expr.hours))
    table.add_row("day-of-month", _day_of_month_summary(expr.day_of_month))
    table.add_row("month", compress_values(expr.months))
    table.add_row("day-of-week", _day_of_week_summary(expr.day_of_week))
    table.add_row("year", compress_values(expr.years))
    Console().print(table)


@app.command(name="presets")
def presets_cmd() -> None:
    """List the named preset schedules."""
    table = Table(title="Presets")
    table.add_column("Name")
    table.add_column("Expression")
    for name, expr in PRESETS.items():
        table.add_row(name, expr.expression)
    Console().print(table)


if __name__ == "__main__":
    app()
