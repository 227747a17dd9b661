"""
CLI: ``clusterconf db`` -- schema and connectivity.
"""

from __future__ import annotations

import typer

from clusterconf.cli.utils import (
    DatabaseOption,
    DriverOption,
    JsonOption,
    open_storage,
    output_result,
)

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Create the schema (idempotent)."""
    with open_storage(driver, database) as storage:
        tables = storage.init_schema()
        output_result(
            {"backend": storage.info.backend, "tables": tables},
            as_json=json_out,
            title="Database Init",
        )


@app.command()
def ping(
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Check database connectivity."""
    with open_storage(driver, database) as storage:
        storage.ping()
        output_result(
            {"backend": storage.info.backend, "url": storage.info.url, "ok": True},
            as_json=json_out,
            title="Database Ping",
        )
