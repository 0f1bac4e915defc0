# src/kubesight/cli/main.py
"""
This module is the main entry point for the KubeSight CLI.

It aggregates all commands from the submodules (capacity, pressure, resources, nodes, config).
"""

import logging

import typer

from ..core.config import config
from . import capacity, config_cmd, nodes, pressure, resources

# --- Setup Logger ---
logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="kubesight",
    help="Inventory, pressure and usage analysis for Kubernetes resource requests and limits.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of KubeSight.
    """
    if value:
        from .. import __version__

        typer.echo(f"KubeSight version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of KubeSight.
    """
    from .. import __version__

    typer.echo(f"KubeSight version: {__version__}")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    KubeSight CLI main entry point.
    """
    pass


# Register command sub-apps
app.add_typer(capacity.app, name="capacity")
app.add_typer(pressure.app, name="pressure")
app.add_typer(resources.app, name="resources")
app.add_typer(nodes.app, name="nodes")
app.add_typer(config_cmd.app, name="config")


if __name__ == "__main__":
    app()
