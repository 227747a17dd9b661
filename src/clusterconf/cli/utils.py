from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clusterconf.core.errors import ClusterConfError
from clusterconf.core.settings import get_settings
from clusterconf.core.storage import Storage

console = Console()
err_console = Console(stderr=True)

# Shared options
DriverOption = typer.Option(None, "--driver", help="SQL driver (sqlite3, postgres). Defaults to settings.")
DatabaseOption = typer.Option(None, "--database", "-d", help="Data source (SQLite path, PostgreSQL URL/DSN).")
JsonOption = typer.Option(False, "--json", help="JSON output")


# ── Storage helper ───────────────────────────────────────────────────────


@contextmanager
def open_storage(driver: str | None = None, database: str | None = None) -> Iterator[Storage]:
    """Open a :class:`Storage` for one command.

    Options override ``CLUSTERCONF_*`` settings.  Any clusterconf error
    raised inside the block is printed with its category and turned into
    exit code 1.
    """
    settings = get_settings()
    try:
        storage = Storage(
            driver or settings.db_driver,
            database or settings.storage_specification,
            echo=settings.echo_sql,
            busy_timeout=settings.sqlite_busy_timeout,
        )
    except ClusterConfError as exc:
        fail(exc)
    try:
        yield storage
    except ClusterConfError as exc:
        fail(exc)
    finally:
        storage.close()


def fail(exc: ClusterConfError) -> NoReturn:
    err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {escape(exc.message)}")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert entity / dict to plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def output_result(
    data: Any,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an entity, a list of entities or a dict to the terminal."""
    if as_json:
        payload = [_to_dict(d) for d in data] if isinstance(data, list | tuple) else _to_dict(data)
        console.print_json(json.dumps(payload, default=str))
        return

    if isinstance(data, list | tuple):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        _print_table(list(data), title=title)
    else:
        _print_dict(_to_dict(data), title=title)


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list, *, title: str = "") -> None:
    """Render a list of entities/dicts as a Rich table."""
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        d = _to_dict(item)
        table.add_row(*(escape(str(v)) for v in d.values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {escape(str(v))}", highlight=False)
