"""
CLI: ``clusterconf configs`` -- cluster configuration assignments.
"""

from __future__ import annotations

from pathlib import Path

import typer

from clusterconf.cli.profiles import read_configuration
from clusterconf.cli.utils import (
    DatabaseOption,
    DriverOption,
    JsonOption,
    console,
    open_storage,
    output_result,
)

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_configurations(
    cluster: str | None = typer.Option(None, "--cluster", help="Only this cluster's assignments"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """List configuration assignments."""
    with open_storage(driver, database) as storage:
        repo = storage.cluster_configurations
        rows = repo.list() if cluster is None else repo.list_for_cluster(cluster)
        output_result(rows, as_json=json_out, title="Cluster Configurations")


@app.command("create")
def create_configuration(
    cluster: str = typer.Argument(..., help="Cluster name"),
    user: str = typer.Option(..., "--user", "-u"),
    reason: str = typer.Option(..., "--reason", "-r"),
    description: str = typer.Option("", "--description"),
    configuration: str | None = typer.Option(None, "--configuration", "-c"),
    file: Path | None = typer.Option(None, "--file", "-f", exists=True, dir_okay=False),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Store a configuration and make it the cluster's active one."""
    text = read_configuration(configuration, file)
    with open_storage(driver, database) as storage:
        rows = storage.cluster_configurations.create(cluster, user, reason, description, text)
        output_result(rows, as_json=json_out, title=f"Configurations of {cluster}")


@app.command("enable")
def enable_configuration(
    cluster: str = typer.Argument(..., help="Cluster name"),
    user: str = typer.Option(..., "--user", "-u"),
    reason: str = typer.Option(..., "--reason", "-r"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Activate the cluster's most recent configuration."""
    with open_storage(driver, database) as storage:
        rows = storage.cluster_configurations.enable(cluster, user, reason)
        output_result(rows, as_json=json_out, title=f"Configurations of {cluster}")


@app.command("disable")
def disable_configuration(
    cluster: str = typer.Argument(..., help="Cluster name"),
    user: str = typer.Option(..., "--user", "-u"),
    reason: str = typer.Option(..., "--reason", "-r"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Deactivate the cluster's active configuration."""
    with open_storage(driver, database) as storage:
        rows = storage.cluster_configurations.disable(cluster, user, reason)
        output_result(rows, as_json=json_out, title=f"Configurations of {cluster}")


@app.command("active")
def active_configuration(
    cluster: str = typer.Argument(..., help="Cluster name"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Print the configuration text the cluster should apply."""
    with open_storage(driver, database) as storage:
        text = storage.cluster_configurations.get_active_configuration(cluster)
        if json_out:
            output_result({"cluster": cluster, "configuration": text}, as_json=True)
        else:
            console.out(text)
