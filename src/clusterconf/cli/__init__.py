"""
CLI layer for clusterconf.

Provides a Typer application whose sub-commands delegate to
:class:`clusterconf.core.storage.Storage`.  This package handles only
terminal transport: argument parsing, coloured output, and table
formatting.

Entry point::

    clusterconf --help
"""

from clusterconf.cli.app import app

__all__ = ["app"]
