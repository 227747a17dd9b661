"""
CLI: ``clusterconf profiles`` -- configuration profiles.
"""

from __future__ import annotations

from pathlib import Path

import typer

from clusterconf.cli.utils import (
    DatabaseOption,
    DriverOption,
    JsonOption,
    err_console,
    open_storage,
    output_result,
)

app = typer.Typer(no_args_is_help=True)


def read_configuration(configuration: str | None, file: Path | None) -> str:
    """Configuration text from ``--configuration`` or ``--file`` (verbatim)."""
    if (configuration is None) == (file is None):
        err_console.print("[bold red]Give exactly one of --configuration / --file[/bold red]")
        raise typer.Exit(code=2)
    if file is not None:
        return file.read_text(encoding="utf-8")
    return configuration


@app.command("list")
def list_profiles(
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """List configuration profiles."""
    with open_storage(driver, database) as storage:
        output_result(storage.profiles.list(), as_json=json_out, title="Configuration Profiles")


@app.command("create")
def create_profile(
    user: str = typer.Option(..., "--user", "-u", help="Recorded as changed_by"),
    description: str = typer.Option("", "--description"),
    configuration: str | None = typer.Option(None, "--configuration", "-c", help="Configuration text"),
    file: Path | None = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Read configuration from file"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Store a new configuration profile."""
    text = read_configuration(configuration, file)
    with open_storage(driver, database) as storage:
        output_result(
            storage.profiles.create(user, description, text),
            as_json=json_out,
            title="Configuration Profiles",
        )


@app.command("delete")
def delete_profile(
    profile_id: str = typer.Argument(..., help="Profile id"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Delete a configuration profile and its cluster assignments."""
    with open_storage(driver, database) as storage:
        output_result(
            storage.profiles.delete(profile_id),
            as_json=json_out,
            title="Configuration Profiles",
        )
