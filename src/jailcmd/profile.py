"""Profile - every option of one firejail invocation, fully defaulted.

A fresh Profile requests nothing: every switch is off, every scalar is
None, every list is empty and every mode is its "not specified" variant.
It is only ever mutated through FirejailCommand and read once, by the
emitter, when the command is spawned.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Union

from .settings import (
    CapsDrop,
    CapsDropNotSpecified,
    IpConfig,
    IpNotSpecified,
    Join,
    JoinNotSpecified,
    Net,
    NetFilter,
    NetFilterNotSpecified,
    NetNotSpecified,
    Overlay,
    OverlayNotSpecified,
    Private,
    PrivateList,
    PrivateListNotSpecified,
    PrivateNotSpecified,
    Seccomp,
    SeccompNotSpecified,
    Shell,
    ShellNotSpecified,
    X11,
)

Timeout = Union[int, timedelta, str]


@dataclass
class Profile:
    """Configuration record for one launcher invocation."""

    # Switches
    verbose: bool = False
    caps: bool = False
    allow_debuggers: bool = False
    allusers: bool = False
    apparmor: bool = False
    appimage: bool = False
    deterministic_exit_code: bool = False
    disable_mnt: bool = False
    ipc_namespace: bool = False
    keep_dev_shm: bool = False
    keep_var_tmp: bool = False
    machine_id: bool = False
    memory_deny_write_execute: bool = False
    no3d: bool = False
    noautopulse: bool = False
    nodvd: bool = False
    nogroups: bool = False
    noinput: bool = False
    nonewprivs: bool = False
    noprofile: bool = False
    noroot: bool = False
    nosound: bool = False
    notv: bool = False
    nou2f: bool = False
    novideo: bool = False
    private_cache: bool = False
    private_dev: bool = False
    private_tmp: bool = False
    seccomp_block_secondary: bool = False
    writable_etc: bool = False
    writable_run_user: bool = False
    writable_var: bool = False
    writable_var_log: bool = False

    # Modes
    caps_drop: CapsDrop = field(default_factory=CapsDropNotSpecified)
    net: Net = field(default_factory=NetNotSpecified)
    ip: IpConfig = field(default_factory=IpNotSpecified)
    netfilter: NetFilter = field(default_factory=NetFilterNotSpecified)
    join: Join = field(default_factory=JoinNotSpecified)
    overlay: Overlay = field(default_factory=OverlayNotSpecified)
    private: Private = field(default_factory=PrivateNotSpecified)
    private_bin: PrivateList = field(default_factory=PrivateListNotSpecified)
    private_etc: PrivateList = field(default_factory=PrivateListNotSpecified)
    private_home: PrivateList = field(default_factory=PrivateListNotSpecified)
    private_lib: PrivateList = field(default_factory=PrivateListNotSpecified)
    private_opt: PrivateList = field(default_factory=PrivateListNotSpecified)
    private_srv: PrivateList = field(default_factory=PrivateListNotSpecified)
    seccomp: Seccomp = field(default_factory=SeccompNotSpecified)
    shell: Shell = field(default_factory=ShellNotSpecified)
    x11: X11 = X11.NOT_SPECIFIED

    # Scalars (last write wins)
    cgroup: Any = None
    hostname: str | None = None
    hosts_file: Any = None
    name: str | None = None
    profile_file: Any = None
    chroot: Any = None
    nice: int | None = None
    timeout: Timeout | None = None
    rlimit_as: int | str | None = None
    rlimit_cpu: int | None = None
    rlimit_fsize: int | str | None = None
    rlimit_nofile: int | None = None
    rlimit_nproc: int | None = None
    rlimit_sigpending: int | None = None
    ip6: str | None = None
    mac: str | None = None
    mtu: int | None = None
    defaultgw: str | None = None
    netmask: str | None = None
    veth_name: str | None = None
    seccomp_error_action: str | None = None

    # Lists (append only, emitted in append order)
    cpu: list[int] = field(default_factory=list)
    protocol: list[str] = field(default_factory=list)
    bind: list[tuple[Any, Any]] = field(default_factory=list)
    dns: list[str] = field(default_factory=list)
    blacklist: list[Any] = field(default_factory=list)
    ignore: list[str] = field(default_factory=list)
    whitelist: list[Any] = field(default_factory=list)
    noblacklist: list[Any] = field(default_factory=list)
    nowhitelist: list[Any] = field(default_factory=list)
    read_only: list[Any] = field(default_factory=list)
    read_write: list[Any] = field(default_factory=list)
    tmpfs: list[Any] = field(default_factory=list)
    mkdir: list[Any] = field(default_factory=list)
    mkfile: list[Any] = field(default_factory=list)
    sandbox_env: list[tuple[str, str]] = field(default_factory=list)
    rmenv: list[str] = field(default_factory=list)


__all__ = ["Profile", "Timeout"]
