"""
clusterconf command-line entry point.

    clusterconf db init
    clusterconf clusters register 00000000-0000-0000-0000-000000000001
    clusterconf configs create <cluster> -u admin -r "initial" -c '{"no_op":"X"}'
    clusterconf configs active <cluster>
"""

from __future__ import annotations

import typer
from typer import Typer

from clusterconf.core.logging import configure_logging
from clusterconf.core.settings import get_settings

app = Typer(
    name="clusterconf",
    help="clusterconf: cluster configuration storage and activation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from clusterconf import __version__

        typer.echo(f"clusterconf {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override CLUSTERCONF_LOG_LEVEL."),
) -> None:
    """clusterconf CLI: manage clusters, configuration profiles and triggers."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.log_json,
    )


# ── Sub-command registration ─────────────────────────────────────────────

from clusterconf.cli.clusters import app as clusters_app  # noqa: E402
from clusterconf.cli.configs import app as configs_app  # noqa: E402
from clusterconf.cli.db import app as db_app  # noqa: E402
from clusterconf.cli.profiles import app as profiles_app  # noqa: E402
from clusterconf.cli.triggers import app as triggers_app  # noqa: E402

app.add_typer(db_app, name="db", help="Schema and connectivity.")
app.add_typer(clusters_app, name="clusters", help="Cluster registry.")
app.add_typer(profiles_app, name="profiles", help="Configuration profiles.")
app.add_typer(configs_app, name="configs", help="Cluster configuration assignments.")
app.add_typer(triggers_app, name="triggers", help="Trigger types and triggers.")
