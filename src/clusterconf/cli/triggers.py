"""
CLI: ``clusterconf triggers`` -- trigger types and triggers.
"""

from __future__ import annotations

import typer

from clusterconf.cli.utils import (
    DatabaseOption,
    DriverOption,
    JsonOption,
    console,
    open_storage,
    output_result,
)

app = typer.Typer(no_args_is_help=True)


@app.command("types")
def list_types(
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """List registered trigger types."""
    with open_storage(driver, database) as storage:
        output_result(storage.trigger_types.list(), as_json=json_out, title="Trigger Types")


@app.command("register-type")
def register_type(
    trigger_type: str = typer.Argument(..., help="Trigger type, e.g. must-gather"),
    description: str = typer.Option("", "--description"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Register a trigger type."""
    with open_storage(driver, database) as storage:
        output_result(
            storage.trigger_types.create(trigger_type, description),
            as_json=json_out,
            title="Registered Trigger Type",
        )


@app.command("list")
def list_triggers(
    cluster: str | None = typer.Option(None, "--cluster"),
    active: bool = typer.Option(False, "--active", help="Only active triggers (needs --cluster)"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """List triggers."""
    if active and cluster is None:
        raise typer.BadParameter("--active needs --cluster")
    with open_storage(driver, database) as storage:
        repo = storage.triggers
        if cluster is None:
            rows = repo.list()
        elif active:
            rows = repo.list_active_for_cluster(cluster)
        else:
            rows = repo.list_for_cluster(cluster)
        output_result(rows, as_json=json_out, title="Triggers")


@app.command("create")
def create_trigger(
    cluster: str = typer.Argument(..., help="Cluster name"),
    trigger_type: str = typer.Argument(..., help="Registered trigger type"),
    user: str = typer.Option(..., "--user", "-u"),
    reason: str = typer.Option("", "--reason", "-r"),
    link: str = typer.Option("", "--link"),
    parameters: str = typer.Option("", "--parameters", "-p"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Raise a trigger against a cluster."""
    with open_storage(driver, database) as storage:
        trigger = storage.triggers.create(cluster, trigger_type, user, reason, link, parameters)
        output_result(trigger, as_json=json_out, title="Trigger")


@app.command("ack")
def ack_trigger(
    cluster: str = typer.Argument(..., help="Cluster name"),
    trigger_id: str = typer.Argument(..., help="Trigger id"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Acknowledge a trigger."""
    with open_storage(driver, database) as storage:
        storage.triggers.ack(cluster, trigger_id)
        trigger = storage.triggers.get_by_id(trigger_id)
        if json_out:
            output_result(trigger, as_json=True)
        else:
            console.print(f"[green]Acknowledged trigger {trigger.id}[/green]")
