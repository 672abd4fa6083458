"""jailcmd CLI - run programs under firejail.

Commands:
    status  - launcher availability, version and configured presets
    show    - print the firejail command line for a program
    run     - run a program under firejail and exit with its status
"""
from __future__ import annotations

import click

from jailcmd import __version__

from .run_cmd import run_command, show_command
from .status_cmd import status_command


@click.group()
@click.version_option(version=__version__, prog_name="jailcmd")
def cli() -> None:
    """Build and run firejail command lines."""


cli.add_command(status_command)
cli.add_command(show_command)
cli.add_command(run_command)


def main() -> None:
    """Entry point for the jailcmd console script."""
    cli()


__all__ = ["cli", "main"]
