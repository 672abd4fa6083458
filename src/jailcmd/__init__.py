"""jailcmd - build and spawn firejail command lines from Python.

Public API:
    from jailcmd import FirejailCommand, CapsDrop, Net, Seccomp, Stdio

    child = (
        FirejailCommand("env")
        .caps()
        .apparmor()
        .net(Net.none())
        .stdout(Stdio.PIPED)
        .spawn()
    )

Submodules:
    settings  - mode settings (CapsDrop, Net, IpConfig, Seccomp, X11, ...)
    profile   - the Profile record behind a command
    emit      - Profile -> launcher argv
    command   - FirejailCommand builder and spawner
    options   - apply JSON option mappings (presets) to a command
    config    - layered config (launcher path, presets)
    detect    - locate the firejail binary
"""
from __future__ import annotations

__version__ = "0.1.0"

from jailcmd.command import FirejailCommand, Stdio
from jailcmd.emit import build_argv, emit_flags
from jailcmd.errors import (
    CommandConsumedError,
    ConfigError,
    JailcmdError,
    SpawnError,
    UnknownOptionError,
)
from jailcmd.options import apply_options
from jailcmd.profile import Profile
from jailcmd.settings import (
    CapsDrop,
    CapsDropBuilder,
    IpConfig,
    Join,
    Net,
    NetFilter,
    Overlay,
    Private,
    PrivateList,
    Seccomp,
    Shell,
    X11,
)

__all__ = [
    "FirejailCommand",
    "Stdio",
    "Profile",
    "build_argv",
    "emit_flags",
    "apply_options",
    # Settings
    "CapsDrop",
    "CapsDropBuilder",
    "IpConfig",
    "Join",
    "Net",
    "NetFilter",
    "Overlay",
    "Private",
    "PrivateList",
    "Seccomp",
    "Shell",
    "X11",
    # Errors
    "JailcmdError",
    "SpawnError",
    "CommandConsumedError",
    "UnknownOptionError",
    "ConfigError",
    "__version__",
]
