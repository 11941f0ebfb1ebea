"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import functools
import json
import locale
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .appctx import build_source, build_view_model
from .application.services.paginated_loader import PaginationStatus
from .domain.models.query import SortDirection
from .errors import SettingsError, SourceUnavailableError, TableEditorError, UnknownFieldError
from .errors.handler import ErrorHandler
from .events.bus import EventBus
from .events.table_events import PageLoadedEvent
from .gui.ui.models.columns import COLUMNS
from .gui.viewmodels.table_editor_viewmodel import TableEditorViewModel
from .settings.manager import SettingsManager
from .utils.logging import setup_logging

app = typer.Typer(help="Incremental table viewer with local, non-persisted edits")
console = Console()
LOGGER = logging.getLogger(__name__)


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (SettingsError, SourceUnavailableError, UnknownFieldError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except TableEditorError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _use_system_collation() -> None:
    """Sort with the user's LC_COLLATE instead of the C locale."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        LOGGER.warning("Falling back to C collation: %s", exc)


def _load_settings(settings_path: Optional[Path]) -> SettingsManager:
    manager = SettingsManager(settings_path)
    manager.load()
    return manager


async def _load_pages(vm: TableEditorViewModel, pages: int) -> None:
    await vm.start()
    for _ in range(pages - 1):
        if not vm.can_fetch:
            break
        await vm.scroll_trigger.notify(True)


def _render(vm: TableEditorViewModel, limit: Optional[int]) -> Table:
    table = Table(show_lines=False)
    for field_name, title in COLUMNS:
        table.add_column(title, overflow="ellipsis", max_width=40 if field_name == "address" else None)
    rows = vm.view_rows()
    for row in rows[:limit] if limit else rows:
        style = "blue" if row.is_new else ("yellow" if row.is_edited else None)
        table.add_row(*(row.text(field_name) for field_name, _ in COLUMNS), style=style)
    return table


@app.command()
@_handle_errors
def preview(
    source: Optional[str] = typer.Argument(None, help="JSON file or URL; defaults to source.url"),
    pages: int = typer.Option(1, "--pages", "-p", min=1, help="Pages to load"),
    filter_text: str = typer.Option("", "--filter", "-f", help="Case-insensitive search text"),
    sort: Optional[str] = typer.Option(None, "--sort", "-s", help="Field to sort by"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for language/state fallbacks"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Rows to print"),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Load pages from SOURCE and print the filtered, sorted view."""

    settings = _load_settings(settings_path)
    level = logging.DEBUG if verbose else getattr(logging, settings.get("logging.level", "INFO"))
    setup_logging(level)
    _use_system_collation()

    bus = EventBus()
    errors = ErrorHandler(logging.getLogger("tableeditor.errors"), bus)
    errors.register_ui_callback(lambda message, _severity: typer.echo(f"Error: {message}", err=True))

    page_source = build_source(settings, source, page_size=page_size, seed=seed)
    vm = build_view_model(settings, page_source, page_size=page_size, event_bus=bus, error_handler=errors)
    loaded: list[PageLoadedEvent] = []
    vm.subscribe_event(bus, PageLoadedEvent, loaded.append)
    try:
        vm.set_filter_text(filter_text)
        if sort:
            vm.set_sort(sort, SortDirection.DESC if desc else SortDirection.ASC)

        asyncio.run(_load_pages(vm, pages))

        if vm.pagination_status() is PaginationStatus.ERRORED:
            raise typer.Exit(2)

        console.print(_render(vm, limit))
        status = vm.pagination_status().value
        console.print(
            f"{vm.summary()} [dim]({len(loaded)} pages, {len(vm.stored_rows())} loaded, "
            f"status {status})[/dim]"
        )
    finally:
        vm.dispose()


@app.command("settings")
@_handle_errors
def show_settings(
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings JSON file"),
) -> None:
    """Print the effective settings as JSON."""

    settings = _load_settings(settings_path)
    typer.echo(json.dumps(settings.as_dict(), indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
