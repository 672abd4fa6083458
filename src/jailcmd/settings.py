"""Mode settings - closed sets of mutually exclusive firejail options.

Every family has a "not specified" default that emits nothing, and one
variant per firejail spelling of the option. Variants are frozen
dataclasses, so a value assigned into a Profile cannot change afterwards.

Each family base is abstract over ``flags()``: a variant that forgets to
say how it is emitted cannot be instantiated.

Usage:
    from jailcmd.settings import CapsDrop, Net, Seccomp, X11

    CapsDrop.builder().keep("fowner").drop("chown").build()
    Net.interface("eth0")
    Seccomp.drop(["mount", "umount2"])
    X11.XVFB
"""
from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


def as_text(value: Any) -> str:
    """Render an option value exactly as it is handed to the launcher."""
    if isinstance(value, (bytes, os.PathLike)):
        return os.fsdecode(value)
    return str(value)


def _joined(items: Iterable[Any]) -> str:
    return ",".join(as_text(item) for item in items)


class Setting(ABC):
    """A mode value that knows which launcher flags it stands for."""

    @abstractmethod
    def flags(self) -> list[str]:
        """Return the flags for this variant (empty for the default)."""


# ── Capabilities ────────────────────────────────────────────────────────


class CapsDrop(Setting):
    """Capability-drop mode; only emitted when the caps switch is on."""

    @staticmethod
    def not_specified() -> "CapsDrop":
        return CapsDropNotSpecified()

    @staticmethod
    def drop_all() -> "CapsDrop":
        return CapsDropAll()

    @staticmethod
    def builder() -> "CapsDropBuilder":
        return CapsDropBuilder()


@dataclass(frozen=True)
class CapsDropNotSpecified(CapsDrop):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class CapsDropAll(CapsDrop):
    def flags(self) -> list[str]:
        return ["--caps.drop=all"]


@dataclass(frozen=True)
class CapsDropSettings(CapsDrop):
    """Explicit keep / drop lists. An empty side emits nothing."""

    keep: tuple[str, ...] = ()
    drop: tuple[str, ...] = ()

    def flags(self) -> list[str]:
        out = []
        if self.keep:
            out.append(f"--caps.keep={_joined(self.keep)}")
        if self.drop:
            out.append(f"--caps.drop={_joined(self.drop)}")
        return out


class CapsDropBuilder:
    """Accumulates keep / drop capability names until build() snapshots them.

    The builder owns its lists; values already built are unaffected by
    later calls.
    """

    def __init__(self) -> None:
        self._keep: list[str] = []
        self._drop: list[str] = []

    def keep(self, capability: str) -> "CapsDropBuilder":
        self._keep.append(capability)
        return self

    def keeps(self, capabilities: Iterable[str]) -> "CapsDropBuilder":
        self._keep.extend(capabilities)
        return self

    def drop(self, capability: str) -> "CapsDropBuilder":
        self._drop.append(capability)
        return self

    def drops(self, capabilities: Iterable[str]) -> "CapsDropBuilder":
        self._drop.extend(capabilities)
        return self

    def build(self) -> CapsDropSettings:
        return CapsDropSettings(keep=tuple(self._keep), drop=tuple(self._drop))


# ── Network ─────────────────────────────────────────────────────────────


class Net(Setting):
    """Network namespace mode."""

    @staticmethod
    def not_specified() -> "Net":
        return NetNotSpecified()

    @staticmethod
    def none() -> "Net":
        return NetNone()

    @staticmethod
    def interface(name: str) -> "Net":
        return NetInterface(name)

    @staticmethod
    def namespace(name: str) -> "Net":
        return NetNamespace(name)


@dataclass(frozen=True)
class NetNotSpecified(Net):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class NetNone(Net):
    def flags(self) -> list[str]:
        return ["--net=none"]


@dataclass(frozen=True)
class NetInterface(Net):
    name: str

    def flags(self) -> list[str]:
        return [f"--net={as_text(self.name)}"]


@dataclass(frozen=True)
class NetNamespace(Net):
    name: str

    def flags(self) -> list[str]:
        return [f"--netns={as_text(self.name)}"]


class IpConfig(Setting):
    """IPv4 configuration of the sandbox's network interface."""

    @staticmethod
    def not_specified() -> "IpConfig":
        return IpNotSpecified()

    @staticmethod
    def none() -> "IpConfig":
        return IpNone()

    @staticmethod
    def dhcp() -> "IpConfig":
        return IpDhcp()

    @staticmethod
    def address(address: str) -> "IpConfig":
        return IpAddress(address)

    @staticmethod
    def range(start: str, end: str) -> "IpConfig":
        return IpRange(start, end)


@dataclass(frozen=True)
class IpNotSpecified(IpConfig):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class IpNone(IpConfig):
    def flags(self) -> list[str]:
        return ["--ip=none"]


@dataclass(frozen=True)
class IpDhcp(IpConfig):
    def flags(self) -> list[str]:
        return ["--ip=dhcp"]


@dataclass(frozen=True)
class IpAddress(IpConfig):
    addr: str

    def flags(self) -> list[str]:
        return [f"--ip={as_text(self.addr)}"]


@dataclass(frozen=True)
class IpRange(IpConfig):
    start: str
    end: str

    def flags(self) -> list[str]:
        return [f"--iprange={as_text(self.start)},{as_text(self.end)}"]


class NetFilter(Setting):
    """Netfilter firewall for a new network namespace."""

    @staticmethod
    def not_specified() -> "NetFilter":
        return NetFilterNotSpecified()

    @staticmethod
    def default() -> "NetFilter":
        return NetFilterDefault()

    @staticmethod
    def file(path: Any, args: Iterable[str] = ()) -> "NetFilter":
        return NetFilterFile(path, tuple(args))


@dataclass(frozen=True)
class NetFilterNotSpecified(NetFilter):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class NetFilterDefault(NetFilter):
    def flags(self) -> list[str]:
        return ["--netfilter"]


@dataclass(frozen=True)
class NetFilterFile(NetFilter):
    """A filter file, optionally followed by template arguments."""

    path: Any
    args: tuple[str, ...] = ()

    def flags(self) -> list[str]:
        return [f"--netfilter={_joined((self.path, *self.args))}"]


# ── Joining an existing sandbox ─────────────────────────────────────────


class Join(Setting):
    """Join an existing sandbox, identified by name or PID."""

    @staticmethod
    def not_specified() -> "Join":
        return JoinNotSpecified()

    @staticmethod
    def sandbox(target: Any) -> "Join":
        return JoinSandbox(target)

    @staticmethod
    def filesystem(target: Any) -> "Join":
        return JoinFilesystem(target)

    @staticmethod
    def network(target: Any) -> "Join":
        return JoinNetwork(target)

    @staticmethod
    def or_start(target: Any) -> "Join":
        return JoinOrStart(target)


@dataclass(frozen=True)
class JoinNotSpecified(Join):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class JoinSandbox(Join):
    target: Any

    def flags(self) -> list[str]:
        return [f"--join={as_text(self.target)}"]


@dataclass(frozen=True)
class JoinFilesystem(Join):
    target: Any

    def flags(self) -> list[str]:
        return [f"--join-filesystem={as_text(self.target)}"]


@dataclass(frozen=True)
class JoinNetwork(Join):
    target: Any

    def flags(self) -> list[str]:
        return [f"--join-network={as_text(self.target)}"]


@dataclass(frozen=True)
class JoinOrStart(Join):
    target: Any

    def flags(self) -> list[str]:
        return [f"--join-or-start={as_text(self.target)}"]


# ── Filesystem ──────────────────────────────────────────────────────────


class Overlay(Setting):
    """Overlay filesystem on top of the host filesystem."""

    @staticmethod
    def not_specified() -> "Overlay":
        return OverlayNotSpecified()

    @staticmethod
    def overlay() -> "Overlay":
        return OverlayDefault()

    @staticmethod
    def named(name: str) -> "Overlay":
        return OverlayNamed(name)

    @staticmethod
    def tmpfs() -> "Overlay":
        return OverlayTmpfs()


@dataclass(frozen=True)
class OverlayNotSpecified(Overlay):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class OverlayDefault(Overlay):
    def flags(self) -> list[str]:
        return ["--overlay"]


@dataclass(frozen=True)
class OverlayNamed(Overlay):
    name: str

    def flags(self) -> list[str]:
        return [f"--overlay-named={as_text(self.name)}"]


@dataclass(frozen=True)
class OverlayTmpfs(Overlay):
    def flags(self) -> list[str]:
        return ["--overlay-tmpfs"]


class Private(Setting):
    """Private home directory: a fresh tmpfs, or a host directory."""

    @staticmethod
    def not_specified() -> "Private":
        return PrivateNotSpecified()

    @staticmethod
    def enabled() -> "Private":
        return PrivateEnabled()

    @staticmethod
    def directory(path: Any) -> "Private":
        return PrivateDirectory(path)


@dataclass(frozen=True)
class PrivateNotSpecified(Private):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class PrivateEnabled(Private):
    def flags(self) -> list[str]:
        return ["--private"]


@dataclass(frozen=True)
class PrivateDirectory(Private):
    path: Any

    def flags(self) -> list[str]:
        return [f"--private={as_text(self.path)}"]


class PrivateList(ABC):
    """Private copy of a system directory (bin, etc, home, lib, opt, srv).

    The same values serve every directory kind; the kind is supplied at
    emission time, e.g. ``--private-etc=hosts,passwd``.
    """

    @abstractmethod
    def flags(self, kind: str) -> list[str]:
        """Return the flags for this variant applied to ``kind``."""

    @staticmethod
    def not_specified() -> "PrivateList":
        return PrivateListNotSpecified()

    @staticmethod
    def default() -> "PrivateList":
        return PrivateListDefault()

    @staticmethod
    def files(names: Iterable[Any]) -> "PrivateList":
        return PrivateListFiles(tuple(names))


@dataclass(frozen=True)
class PrivateListNotSpecified(PrivateList):
    def flags(self, kind: str) -> list[str]:
        return []


@dataclass(frozen=True)
class PrivateListDefault(PrivateList):
    def flags(self, kind: str) -> list[str]:
        return [f"--private-{kind}"]


@dataclass(frozen=True)
class PrivateListFiles(PrivateList):
    names: tuple[Any, ...] = ()

    def flags(self, kind: str) -> list[str]:
        return [f"--private-{kind}={_joined(self.names)}"]


# ── Seccomp ─────────────────────────────────────────────────────────────


class Seccomp(Setting):
    """Seccomp syscall filter."""

    @staticmethod
    def not_specified() -> "Seccomp":
        return SeccompNotSpecified()

    @staticmethod
    def default() -> "Seccomp":
        return SeccompDefault()

    @staticmethod
    def extend(syscalls: Iterable[str]) -> "Seccomp":
        return SeccompExtend(tuple(syscalls))

    @staticmethod
    def drop(syscalls: Iterable[str]) -> "Seccomp":
        return SeccompDrop(tuple(syscalls))

    @staticmethod
    def keep(syscalls: Iterable[str]) -> "Seccomp":
        return SeccompKeep(tuple(syscalls))


@dataclass(frozen=True)
class SeccompNotSpecified(Seccomp):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class SeccompDefault(Seccomp):
    def flags(self) -> list[str]:
        return ["--seccomp"]


@dataclass(frozen=True)
class SeccompExtend(Seccomp):
    """Default blacklist plus the given syscalls."""

    syscalls: tuple[str, ...] = ()

    def flags(self) -> list[str]:
        return [f"--seccomp={_joined(self.syscalls)}"]


@dataclass(frozen=True)
class SeccompDrop(Seccomp):
    syscalls: tuple[str, ...] = ()

    def flags(self) -> list[str]:
        return [f"--seccomp.drop={_joined(self.syscalls)}"]


@dataclass(frozen=True)
class SeccompKeep(Seccomp):
    syscalls: tuple[str, ...] = ()

    def flags(self) -> list[str]:
        return [f"--seccomp.keep={_joined(self.syscalls)}"]


# ── Shell / X11 ─────────────────────────────────────────────────────────


class Shell(Setting):
    """Login shell override inside the sandbox."""

    @staticmethod
    def not_specified() -> "Shell":
        return ShellNotSpecified()

    @staticmethod
    def none() -> "Shell":
        return ShellNone()

    @staticmethod
    def program(path: Any) -> "Shell":
        return ShellProgram(path)


@dataclass(frozen=True)
class ShellNotSpecified(Shell):
    def flags(self) -> list[str]:
        return []


@dataclass(frozen=True)
class ShellNone(Shell):
    def flags(self) -> list[str]:
        return ["--shell=none"]


@dataclass(frozen=True)
class ShellProgram(Shell):
    path: Any

    def flags(self) -> list[str]:
        return [f"--shell={as_text(self.path)}"]


class X11(Enum):
    """X11 isolation server."""
    NOT_SPECIFIED = None
    AUTO = "--x11"
    NONE = "--x11=none"
    XEPHYR = "--x11=xephyr"
    XORG = "--x11=xorg"
    XPRA = "--x11=xpra"
    XVFB = "--x11=xvfb"

    def flags(self) -> list[str]:
        return [] if self.value is None else [self.value]


__all__ = [
    "as_text",
    "Setting",
    "CapsDrop",
    "CapsDropNotSpecified",
    "CapsDropAll",
    "CapsDropSettings",
    "CapsDropBuilder",
    "Net",
    "NetNotSpecified",
    "NetNone",
    "NetInterface",
    "NetNamespace",
    "IpConfig",
    "IpNotSpecified",
    "IpNone",
    "IpDhcp",
    "IpAddress",
    "IpRange",
    "NetFilter",
    "NetFilterNotSpecified",
    "NetFilterDefault",
    "NetFilterFile",
    "Join",
    "JoinNotSpecified",
    "JoinSandbox",
    "JoinFilesystem",
    "JoinNetwork",
    "JoinOrStart",
    "Overlay",
    "OverlayNotSpecified",
    "OverlayDefault",
    "OverlayNamed",
    "OverlayTmpfs",
    "Private",
    "PrivateNotSpecified",
    "PrivateEnabled",
    "PrivateDirectory",
    "PrivateList",
    "PrivateListNotSpecified",
    "PrivateListDefault",
    "PrivateListFiles",
    "Seccomp",
    "SeccompNotSpecified",
    "SeccompDefault",
    "SeccompExtend",
    "SeccompDrop",
    "SeccompKeep",
    "Shell",
    "ShellNotSpecified",
    "ShellNone",
    "ShellProgram",
    "X11",
]
