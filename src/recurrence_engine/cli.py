"""
Command-line interface for the recurrence engine.
"""

import logging
from configparser import ConfigParser
from dataclasses import dataclass
from dataclasses import field
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from recurrence_engine.codec import format_pattern
from recurrence_engine.codec import parse
from recurrence_engine.codec import parse_strict
from recurrence_engine.enumerator import OccurrenceQuery
from recurrence_engine.enumerator import iter_occurrences
from recurrence_engine.models import DEFAULT_CONFIG
from recurrence_engine.models import AfterCount
from recurrence_engine.models import EngineConfig
from recurrence_engine.models import InvalidRuleError
from recurrence_engine.models import LeapDayPolicy
from recurrence_engine.models import Never
from recurrence_engine.models import OnDate
from recurrence_engine.models import RecurrenceError
from recurrence_engine.models import RecurrenceRule
from recurrence_engine.summary import describe
from recurrence_engine.summary import describe_end
from recurrence_engine.summary import format_occurrence

logger = logging.getLogger(__name__)

CONFIG_SECTION = "recurrence"

# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Parse, describe and expand recurrence patterns (DAILY, WEEKLY:1:1,3,5, ...).",
)

console = Console()


# ---------------------------------------------------------------------------
# Global state shared across subcommands
# ---------------------------------------------------------------------------


@dataclass
class _State:
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG)


state = _State()


@app.callback()
def _global(
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help=f"Config file path (default: {DEFAULT_CONFIG})"),
    ] = DEFAULT_CONFIG,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose debug output"),
    ] = False,
) -> None:
    state.config_path = config
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False, console=console)],
    )


def _load_config_file(config_path: Path) -> dict[str, str]:
    if not config_path.exists():
        return {}
    parser = ConfigParser()
    parser.read(config_path)
    if CONFIG_SECTION not in parser:
        return {}
    return dict(parser[CONFIG_SECTION])


def load_engine_config(config_path: Path) -> EngineConfig:
    """Build an EngineConfig from the ``[recurrence]`` section of an INI file.

    Missing file, section or keys fall back to the defaults.
    """
    values = _load_config_file(config_path)
    kwargs = {}
    try:
        if "search_horizon_days" in values:
            kwargs["search_horizon_days"] = int(values["search_horizon_days"])
        if "preview_count" in values:
            kwargs["preview_count"] = int(values["preview_count"])
        if "interval_aware_weekly" in values:
            flag = values["interval_aware_weekly"].strip().lower()
            kwargs["interval_aware_weekly"] = ConfigParser.BOOLEAN_STATES[flag]
        if "leap_day_policy" in values:
            kwargs["leap_day_policy"] = LeapDayPolicy(values["leap_day_policy"].strip().lower())
    except (KeyError, ValueError) as e:
        raise InvalidRuleError(f"Invalid value in {config_path}: {e}") from e
    logger.debug("Config overrides from %s: %s", config_path, kwargs)
    return EngineConfig(**kwargs)


def _engine_config() -> EngineConfig:
    try:
        return load_engine_config(state.config_path)
    except RecurrenceError as e:
        console.print(f"[bold red]Config error:[/] {e}")
        raise typer.Exit(1) from None


def _read_pattern(pattern: str, strict: bool) -> RecurrenceRule:
    if not strict:
        return parse(pattern)
    try:
        return parse_strict(pattern)
    except RecurrenceError as e:
        console.print(f"[bold red]Invalid pattern:[/] {e}")
        raise typer.Exit(1) from None


def _parse_date_option(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[bold red]Error:[/] Invalid date for {option}: {value!r}")
        raise typer.Exit(1) from None


def _no_occurrences_reason(query: OccurrenceQuery) -> str:
    end = query.end
    if isinstance(end, AfterCount) and query.occurrences_before >= end.count:
        return f"No occurrences left: all {end.count} have already been produced."
    if isinstance(end, OnDate) and end.date <= query.anchor:
        return f"No occurrences: end date {end.date.isoformat()} is not after the start date."
    return f"No occurrences within {query.search_horizon_days} days."


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

_PATTERN_ARG = Annotated[str, typer.Argument(help="Pattern string, e.g. WEEKLY:1:1,3,5")]
_STRICT = Annotated[
    bool,
    typer.Option("--strict", help="Reject malformed patterns instead of using defaults"),
]


@app.command(name="describe")
def describe_cmd(pattern: _PATTERN_ARG, strict: _STRICT = False) -> None:
    """Show the canonical form and the English summary of a pattern."""
    rule = _read_pattern(pattern, strict)

    info = Text()
    info.append("  Canonical: ", style="bold")
    info.append(f"{format_pattern(rule)}\n", style="cyan")
    info.append("  Summary:   ", style="bold")
    info.append(describe(rule))
    console.print(Panel(info, title="[bold]Recurrence[/bold]", expand=False))


@app.command()
def normalize(pattern: _PATTERN_ARG, strict: _STRICT = False) -> None:
    """Print the canonical form of a pattern (what callers should persist)."""
    console.print(format_pattern(_read_pattern(pattern, strict)), highlight=False)


@app.command(name="next")
def next_cmd(
    pattern: _PATTERN_ARG,
    from_date: Annotated[
        str | None,
        typer.Option("--from", help="Anchor date YYYY-MM-DD, exclusive (default: today)"),
    ] = None,
    count: Annotated[
        int | None,
        typer.Option("--count", "-n", help="Maximum dates to list (default: preview_count)"),
    ] = None,
    after: Annotated[
        int | None,
        typer.Option("--after", help="End condition: stop after N occurrences in total"),
    ] = None,
    until: Annotated[
        str | None,
        typer.Option("--until", help="End condition: stop after this date YYYY-MM-DD"),
    ] = None,
    done: Annotated[
        int,
        typer.Option("--done", help="Occurrences already produced (counts toward --after)"),
    ] = 0,
    horizon: Annotated[
        int | None,
        typer.Option("--horizon", help="Days to scan forward (default: search_horizon_days)"),
    ] = None,
    interval_aware_weekly: Annotated[
        bool,
        typer.Option("--interval-aware-weekly", help="Skip weeks according to WEEKLY interval"),
    ] = False,
    strict: _STRICT = False,
) -> None:
    """List the upcoming dates on which a pattern fires."""
    if after is not None and until is not None:
        raise typer.BadParameter("--after and --until are mutually exclusive")

    cfg = _engine_config()
    rule = _read_pattern(pattern, strict)
    anchor = _parse_date_option(from_date, "--from") if from_date else date.today()
    until_date = _parse_date_option(until, "--until") if until is not None else None

    try:
        if after is not None:
            end = AfterCount(after)
        elif until_date is not None:
            end = OnDate(until_date)
        else:
            end = Never()
        query = OccurrenceQuery(
            rule=rule,
            anchor=anchor,
            end=end,
            max_results=count if count is not None else cfg.preview_count,
            search_horizon_days=horizon if horizon is not None else cfg.search_horizon_days,
            occurrences_before=done,
            interval_aware_weekly=interval_aware_weekly or cfg.interval_aware_weekly,
            leap_day_policy=cfg.leap_day_policy,
        )
        dates = list(iter_occurrences(query))
    except RecurrenceError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1) from None

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold", justify="right", width=3)
    table.add_column("Date")
    table.add_column("Day", style="dim")
    for i, d in enumerate(dates, 1):
        table.add_row(str(i), d.isoformat(), format_occurrence(d))

    console.print(f"[bold]{describe(rule)}[/bold] [dim]({format_pattern(rule)})[/dim]")
    console.print(f"[dim]{describe_end(end)} · after {anchor.isoformat()}[/dim]")
    if dates:
        console.print(table)
    else:
        console.print(f"[yellow]{_no_occurrences_reason(query)}[/]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    app()
