"""jailcmd status - report whether the launcher is usable."""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from jailcmd.config import load_config
from jailcmd.detect import get_launcher_info


@click.command("status")
@click.option("-w", "--workspace", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory whose .jailcmd/config.json is used (default: cwd)")
@click.option("--launcher", default=None, help="Check this launcher instead of the configured one")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def status_command(workspace: Path | None, launcher: str | None, json_output: bool) -> None:
    """Check launcher availability and version."""
    config = load_config(workspace=workspace)
    info = get_launcher_info(launcher or config["launcher"])
    info["presets"] = sorted(config.get("presets") or {})

    if json_output:
        click.echo(json.dumps(info, indent=2))
    else:
        console = Console()
        table = Table(
            title="jailcmd status",
            box=ROUNDED,
            border_style="cyan",
            show_header=False,
        )
        table.add_column("Key", style="bold")
        table.add_column("Value")
        table.add_row("System", info["system"])
        table.add_row("Launcher", info["launcher"])
        table.add_row("Path", info["path"] or "[red]not found[/red]")
        table.add_row(
            "Available",
            "[green]yes[/green]" if info["available"] else "[red]no[/red]",
        )
        table.add_row("Version", info["version"])
        table.add_row("Presets", ", ".join(info["presets"]) or "[dim]none[/dim]")
        console.print(table)

        if not info["available"] and info["system"] == "Linux":
            console.print()
            console.print("To install firejail:")
            console.print("  sudo apt install firejail     # Debian/Ubuntu")
            console.print("  sudo dnf install firejail     # Fedora")
            console.print("  sudo pacman -S firejail       # Arch")

    if not info["available"]:
        sys.exit(1)


__all__ = ["status_command"]
