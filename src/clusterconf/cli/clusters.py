"""
CLI: ``clusterconf clusters`` -- cluster registry.
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
from clusterconf.core.query import UNSET, Pagination
from clusterconf.core.repositories import SearchClusterRequest

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_clusters(
    name: str | None = typer.Option(None, "--name", help="Only the cluster with this name"),
    limit: int = typer.Option(0, "--limit", "-n", help="0 = no limit"),
    offset: int = typer.Option(0, "--offset"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """List clusters ordered by id."""
    request = SearchClusterRequest(
        name=UNSET if name is None else name,
        pagination=Pagination(limit=limit, offset=offset),
    )
    with open_storage(driver, database) as storage:
        output_result(storage.cluster_query.search(request), as_json=json_out, title="Clusters")


@app.command("register")
def register_cluster(
    name: str = typer.Argument(..., help="Cluster name (usually a UUID)"),
    cluster_id: int | None = typer.Option(None, "--id", help="Explicit id instead of an assigned one"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Register a new cluster."""
    with open_storage(driver, database) as storage:
        if cluster_id is None:
            cluster = storage.clusters.register(name)
        else:
            cluster = storage.clusters.create(cluster_id, name)
        output_result(cluster, as_json=json_out, title="Registered Cluster")


@app.command("delete")
def delete_cluster(
    cluster_id: str = typer.Argument(..., help="Cluster id"),
    driver: str | None = DriverOption,
    database: str | None = DatabaseOption,
    json_out: bool = JsonOption,
) -> None:
    """Delete a cluster with its configurations and triggers."""
    with open_storage(driver, database) as storage:
        storage.clusters.delete(cluster_id)
        if json_out:
            output_result({"deleted": cluster_id}, as_json=True)
        else:
            console.print(f"[green]Deleted cluster {cluster_id}[/green]")
