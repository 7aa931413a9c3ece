"""CLI entry point for the manga catalog browser.

Provides commands:
  - tui: Launch the interactive two-tab browser
  - top: Print top-ranked manga
  - browse: Search and filter the catalog
  - logs: Show JSON-lines logs written by the TUI
  - config show: Print the effective configuration
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import BaseModel, ConfigDict, ValidationError
from rich.console import Console
from rich.table import Table

from mangabrowse.config import BrowserConfig, load_browser_config
from mangabrowse.constants import BROWSE_DEFAULT_ORDER_BY, NO_TRACE, TOP_DEFAULT_SORT
from mangabrowse.query import BROWSE_FEED, TOP_FEED, FeedSpec, parse_year_filter

if TYPE_CHECKING:
    from mangabrowse.console import ConsoleSink
    from mangabrowse.feed import FeedController

app = typer.Typer(
    help="MangaBrowse - browse and search the Jikan manga catalog",
    rich_markup_mode="rich",
)
console = Console()

config_app = typer.Typer(help="Inspect configuration")
app.add_typer(config_app, name="config")

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to browser_config.json"),
]
PagesOption = Annotated[
    int,
    typer.Option("--pages", "-p", min=1, help="Number of pages to fetch"),
]


def _load_config(config_path: Path | None) -> BrowserConfig:
    try:
        return load_browser_config(config_path)
    except (ValueError, TypeError) as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1)


async def _fetch_pages(
    feed: FeedSpec,
    config: BrowserConfig,
    pages: int,
    changes: dict[str, str],
) -> tuple[FeedController, ConsoleSink]:
    """Drive a FeedController against a ConsoleSink for *pages* pages."""
    from mangabrowse.client import CatalogClient
    from mangabrowse.console import ConsoleSink
    from mangabrowse.feed import FeedController

    sink = ConsoleSink(console)
    async with CatalogClient(config) as client:
        controller = FeedController(feed, client, sink, config=config)
        controller.filters = controller.filters.with_changes(**changes)
        await controller.load_initial()
        while (
            controller.last_error is None
            and controller.has_next_page
            and controller.page < pages
        ):
            await controller.load_more()
    return controller, sink


def _run_feed(
    feed: FeedSpec,
    config: BrowserConfig,
    pages: int,
    changes: dict[str, str],
) -> None:
    controller, sink = asyncio.run(_fetch_pages(feed, config, pages, changes))
    if controller.last_error is not None:
        raise typer.Exit(code=1)
    console.print(f"[dim]{sink.summary()}[/dim]")


@app.command()
def tui(
    search: Annotated[
        str | None,
        typer.Option("--search", "-s", help="Run this browse search on startup"),
    ] = None,
    config_path: ConfigOption = None,
    log_dir: Annotated[
        str,
        typer.Option("--log-dir", help="Directory for JSON-lines TUI logs"),
    ] = "logs",
    no_log: Annotated[
        bool,
        typer.Option("--no-log", help="Disable TUI file logging"),
    ] = False,
) -> None:
    """Launch the interactive TUI."""
    from mangabrowse.tui import run_tui

    config = _load_config(config_path)
    run_tui(
        config=config,
        initial_search=search.strip() if search else None,
        log_dir=None if no_log else log_dir,
    )


@app.command()
def top(
    sort: Annotated[
        str,
        typer.Option(
            "--sort",
            help="'bypopularity' for popularity order; anything else uses score order",
        ),
    ] = TOP_DEFAULT_SORT,
    pages: PagesOption = 1,
    config_path: ConfigOption = None,
) -> None:
    """Print the top-ranked manga."""
    config = _load_config(config_path)
    _run_feed(TOP_FEED, config, pages, {"order_by": sort})


@app.command()
def browse(
    query: Annotated[str, typer.Argument(help="Free-text title search")] = "",
    genre: Annotated[
        str, typer.Option("--genre", "-g", help="Jikan genre id (e.g. 1 = Action)")
    ] = "",
    year: Annotated[
        str, typer.Option("--year", "-y", help="Year (2004) or range (2000_2009)")
    ] = "",
    season: Annotated[str, typer.Option("--season", help="winter/spring/summer/fall")] = "",
    fmt: Annotated[
        str, typer.Option("--format", "-f", help="manga, novel, lightnovel, oneshot, ...")
    ] = "",
    status: Annotated[
        str, typer.Option("--status", help="publishing, complete, hiatus, ...")
    ] = "",
    order_by: Annotated[
        str, typer.Option("--order-by", "-o", help="Sort key (score, popularity, title, ...)")
    ] = BROWSE_DEFAULT_ORDER_BY,
    ascending: Annotated[
        bool, typer.Option("--asc", help="Sort ascending instead of descending")
    ] = False,
    pages: PagesOption = 1,
    config_path: ConfigOption = None,
) -> None:
    """Search and filter the catalog."""
    try:
        parse_year_filter(year)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    config = _load_config(config_path)
    changes = {
        "q": query.strip(),
        "genres": genre,
        "year": year,
        "season": season,
        "type": fmt,
        "status": status,
        "order_by": order_by,
        "sort": "asc" if ascending else "desc",
    }
    _run_feed(BROWSE_FEED, config, pages, changes)


@config_app.command("show")
def config_show(config_path: ConfigOption = None) -> None:
    """Print the effective configuration."""
    config = _load_config(config_path)
    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in asdict(config).items():
        table.add_row(key, "unlimited" if value is None else str(value))
    console.print(table)


class LogLine(BaseModel):
    """One record of a ``mangabrowse-*.log`` file."""

    model_config = ConfigDict(extra="ignore")

    ts: str = ""
    level: str = "INFO"
    feed: str = ""
    trace: str = NO_TRACE
    msg: str = ""

    @property
    def severity(self) -> int:
        value = logging.getLevelName(self.level)
        return value if isinstance(value, int) else logging.INFO

    @property
    def cycle(self) -> str:
        """Short trace id, or a dash for records logged outside a fetch cycle."""
        return "-" if self.trace == NO_TRACE else self.trace[:8]


_LEVEL_STYLES = {
    "DEBUG": "dim",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold red",
    "CRITICAL": "bold red",
}


def _read_log_lines(log_files: list[Path]) -> tuple[list[LogLine], int]:
    """Parse every line of *log_files*; returns the records and a count of bad lines."""
    lines: list[LogLine] = []
    bad = 0
    for log_file in log_files:
        for raw in log_file.read_text(encoding="utf-8").splitlines():
            if not raw.strip():
                continue
            try:
                lines.append(LogLine.model_validate_json(raw))
            except ValidationError:
                bad += 1
    return lines, bad


@app.command(name="logs")
def logs_cmd(
    log_dir: Annotated[
        Path,
        typer.Option("--log-dir", help="Directory holding mangabrowse-*.log files"),
    ] = Path("logs"),
    feed: Annotated[
        str | None,
        typer.Option("--feed", help="Only records from this feed (top or browse)"),
    ] = None,
    trace: Annotated[
        str | None,
        typer.Option("--trace", "-t", help="Only records from one fetch cycle (trace id prefix)"),
    ] = None,
    level: Annotated[
        str | None,
        typer.Option("--level", "-l", help="Minimum level: DEBUG, INFO, WARNING, ERROR"),
    ] = None,
    tail: Annotated[
        int,
        typer.Option("--tail", "-n", min=0, help="Show only the last N records (0 = all)"),
    ] = 0,
) -> None:
    """Show the JSON-lines log written by ``mangabrowse tui``.

    Each fetch cycle has its own trace id, so ``--trace`` isolates one
    cycle's request, rate-limit retries, and stale discards.

    \\b
      mangabrowse logs --feed browse --level INFO
      mangabrowse logs --trace 4bf92f35
    """
    min_severity = logging.DEBUG
    if level:
        min_severity = logging.getLevelName(level.upper())
        if not isinstance(min_severity, int):
            console.print(f"[red]Unknown level {level!r}. Use DEBUG, INFO, WARNING or ERROR.[/red]")
            raise typer.Exit(code=1)

    log_files = sorted(log_dir.glob("mangabrowse-*.log")) if log_dir.is_dir() else []
    if not log_files:
        console.print(f"[dim]No log files found in {log_dir}/[/dim]")
        return

    lines, bad = _read_log_lines(log_files)
    shown = [
        line
        for line in lines
        if line.severity >= min_severity
        and (feed is None or line.feed == feed)
        and (trace is None or line.trace.startswith(trace))
    ]
    if tail:
        shown = shown[-tail:]
    if not shown:
        console.print("[dim]No log records matched.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Level", no_wrap=True)
    table.add_column("Feed", no_wrap=True)
    table.add_column("Cycle", style="dim", no_wrap=True)
    table.add_column("Message", overflow="fold")
    for line in shown:
        style = _LEVEL_STYLES.get(line.level, "default")
        table.add_row(
            line.ts,
            f"[{style}]{line.level}[/{style}]",
            line.feed or "-",
            line.cycle,
            line.msg,
        )
    console.print(table)

    footer = f"{len(shown)} of {len(lines)} records from {len(log_files)} file(s)"
    if bad:
        footer += f", {bad} unreadable line(s) skipped"
    console.print(f"[dim]{footer}[/dim]")
