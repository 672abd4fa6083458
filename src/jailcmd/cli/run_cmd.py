"""jailcmd run / jailcmd show - build a firejail command from CLI flags.

Options are applied in layers, later layers winning for scalars and modes
and appending for lists:
    1. --preset NAME         (presets from the jailcmd config)
    2. --options-file PATH   (a JSON options mapping)
    3. individual flags      (--caps, --net, --bind, ...)
"""
from __future__ import annotations

import shlex
import sys
from pathlib import Path
from typing import Any, Callable

import click

from jailcmd.command import FirejailCommand
from jailcmd.config import get_preset, load_config, read_options_file
from jailcmd.errors import ConfigError, SpawnError, UnknownOptionError
from jailcmd.options import apply_options
from jailcmd.settings import CapsDrop, Net, Private, Seccomp, X11

from .redact import redact_argv, redact_env_dict

# Shell-style exit codes for launcher spawn failures
_SPAWN_EXIT_CODES = {
    "launcher_not_found": 127,
    "permission_denied": 126,
}

_CONTEXT_SETTINGS = {"allow_interspersed_args": False}


def _key_value(_ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]) -> list[tuple[str, str]]:
    pairs = []
    for value in values:
        if "=" not in value:
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}")
        key, val = value.split("=", 1)
        pairs.append((key, val))
    return pairs


def _bind_pair(_ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]) -> list[tuple[str, str]]:
    pairs = []
    for value in values:
        if "," not in value:
            raise click.BadParameter(f"expected SRC,DST, got {value!r}")
        source, target = value.split(",", 1)
        pairs.append((source, target))
    return pairs


def command_options(func: Callable) -> Callable:
    """Options shared by `run` and `show`."""
    options = [
        click.option("-w", "--workspace", type=click.Path(file_okay=False, path_type=Path), default=None,
                     help="Directory whose .jailcmd/config.json is used (default: cwd)"),
        click.option("--launcher", default=None, help="Launcher binary (default: from config, then firejail)"),
        click.option("--preset", default=None, help="Apply a named preset from the config"),
        click.option("--options-file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     default=None, help="Apply a JSON options mapping"),
        click.option("--verbose", is_flag=True, help="Do not pass --quiet to firejail"),
        click.option("--caps", is_flag=True, help="Enable the default capability filter"),
        click.option("--caps-keep", multiple=True, help="Capability to keep (repeatable)"),
        click.option("--caps-drop", multiple=True, help="Capability to drop, or 'all' (repeatable)"),
        click.option("--apparmor", is_flag=True, help="Enable AppArmor confinement"),
        click.option("--private", "private_home", is_flag=True, help="Use a temporary home directory"),
        click.option("--private-dir", type=click.Path(path_type=Path), default=None,
                     help="Use DIR as the home directory"),
        click.option("--net", default=None, help="'none' or a network interface"),
        click.option("--dns", multiple=True, help="DNS server (repeatable)"),
        click.option("--bind", "binds", multiple=True, callback=_bind_pair, help="SRC,DST bind mount (repeatable)"),
        click.option("--blacklist", multiple=True, help="Path to blacklist (repeatable)"),
        click.option("--whitelist", multiple=True, help="Path to whitelist (repeatable)"),
        click.option("--seccomp", is_flag=True, help="Enable the default seccomp filter"),
        click.option("--x11", type=click.Choice([m.name.lower() for m in X11 if m is not X11.NOT_SPECIFIED]),
                     default=None, help="X11 isolation server"),
        click.option("--timeout", default=None, help="Kill the sandbox after hh:mm:ss (or seconds)"),
        click.option("--env", "env_pairs", multiple=True, callback=_key_value,
                     help="KEY=VALUE for the launcher's environment (repeatable)"),
        click.option("--cwd", type=click.Path(file_okay=False, path_type=Path), default=None,
                     help="Working directory for the launcher"),
        click.argument("program"),
        click.argument("args", nargs=-1, type=click.UNPROCESSED),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_command(params: dict[str, Any]) -> FirejailCommand:
    """Turn parsed CLI parameters into a FirejailCommand."""
    config = load_config(workspace=params.get("workspace"))
    command = FirejailCommand.from_config(params["program"], config)
    if params.get("launcher"):
        command.launcher = params["launcher"]

    if params.get("preset"):
        apply_options(command, get_preset(config, params["preset"]))
    if params.get("options_file"):
        apply_options(command, read_options_file(params["options_file"]))

    if params.get("verbose"):
        command.verbose()
    if params.get("caps"):
        command.caps()
    if params.get("apparmor"):
        command.apparmor()

    caps_drop = list(params.get("caps_drop") or ())
    caps_keep = list(params.get("caps_keep") or ())
    if caps_drop == ["all"] and not caps_keep:
        command.caps_drop(CapsDrop.drop_all())
    elif caps_drop or caps_keep:
        command.caps_drop(CapsDrop.builder().keeps(caps_keep).drops(caps_drop).build())

    if params.get("private_dir") is not None:
        command.private(Private.directory(params["private_dir"]))
    elif params.get("private_home"):
        command.private()

    net = params.get("net")
    if net:
        command.net(Net.none() if net == "none" else Net.interface(net))
    if params.get("seccomp"):
        command.seccomp(Seccomp.default())
    if params.get("x11"):
        command.x11(X11[params["x11"].upper()])

    timeout = params.get("timeout")
    if timeout:
        command.timeout(int(timeout) if timeout.isdigit() else timeout)

    command.dns_servers(params.get("dns") or ())
    command.binds(params.get("binds") or ())
    command.blacklists(params.get("blacklist") or ())
    command.whitelists(params.get("whitelist") or ())

    command.envs(params.get("env_pairs") or ())
    if params.get("cwd") is not None:
        command.current_dir(params["cwd"])

    command.args(params.get("args") or ())
    return command


def _build_or_exit(params: dict[str, Any]) -> FirejailCommand:
    try:
        return build_command(params)
    except (ConfigError, UnknownOptionError) as e:
        raise click.ClickException(str(e)) from e


@click.command("show", context_settings=_CONTEXT_SETTINGS)
@command_options
def show_command(**params: Any) -> None:
    """Print the firejail command line without running it.

    \b
    Examples:
        jailcmd show --caps --apparmor env
        jailcmd show --preset offline -- python3 -c 'print(1)'
    """
    command = _build_or_exit(params)
    click.echo(shlex.join(redact_argv(command.argv())))

    env_pairs = dict(params.get("env_pairs") or ())
    if env_pairs:
        for key, value in redact_env_dict(env_pairs).items():
            click.echo(f"env: {key}={value}", err=True)
    if command.get_current_dir() is not None:
        click.echo(f"cwd: {command.get_current_dir()}", err=True)


@click.command("run", context_settings=_CONTEXT_SETTINGS)
@command_options
def run_command(**params: Any) -> None:
    """Run PROGRAM inside firejail and exit with its status.

    \b
    Examples:
        jailcmd run --net none --private -- curl https://example.com
        jailcmd run --caps --caps-drop all --seccomp bash
    """
    command = _build_or_exit(params)
    try:
        child = command.spawn()
    except SpawnError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(_SPAWN_EXIT_CODES.get(e.reason, 1))

    try:
        returncode = child.wait()
    except KeyboardInterrupt:
        # firejail gets the same SIGINT from the terminal; wait for it to exit
        returncode = child.wait()
    sys.exit(returncode if returncode >= 0 else 128 - returncode)


__all__ = ["run_command", "show_command", "build_command", "command_options"]
