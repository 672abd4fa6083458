"""FirejailCommand - fluent builder and spawner for firejail invocations.

Every option method mutates one field of the command's Profile and returns
the command, so calls chain. Nothing is validated and nothing touches the
system until spawn().

Example:
    from jailcmd import CapsDrop, FirejailCommand, Stdio

    child = (
        FirejailCommand("env")
        .caps()
        .caps_drop(CapsDrop.builder().keep("fowner").drop("chown").build())
        .apparmor()
        .bind("/srv/data", "/data")
        .stderr(Stdio.PIPED)
        .env("E", "2")
        .spawn()
    )
    print(child.stderr.read())
"""
from __future__ import annotations

import os
import subprocess
from enum import Enum
from typing import IO, Any, Iterable, Mapping, Union

from .emit import build_argv
from .errors import CommandConsumedError, SpawnError
from .profile import Profile, Timeout
from .settings import (
    CapsDrop,
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
    as_text,
)


class Stdio(Enum):
    """Standard stream configuration for the spawned launcher."""
    INHERIT = "inherit"  # parent's stream
    PIPED = "piped"      # new pipe, readable/writable via the Popen handle
    NULL = "null"        # /dev/null


StreamConfig = Union[Stdio, int, IO[Any], None]


def _popen_stream(cfg: StreamConfig) -> Any:
    if cfg is None or cfg is Stdio.INHERIT:
        return None
    if cfg is Stdio.PIPED:
        return subprocess.PIPE
    if cfg is Stdio.NULL:
        return subprocess.DEVNULL
    # file object or descriptor, handed to Popen as-is
    return cfg


class FirejailCommand:
    """Builder for one sandboxed program invocation.

    A command spawns at most once; build a new one for each child.
    """

    def __init__(self, program: Any, launcher: str = "firejail"):
        self.program = program
        self.launcher = launcher
        self.profile = Profile()
        self._args: list[Any] = []
        self._cwd: Any = None
        self._env_ops: list[tuple] = []
        self._stdin: StreamConfig = Stdio.INHERIT
        self._stdout: StreamConfig = Stdio.INHERIT
        self._stderr: StreamConfig = Stdio.INHERIT
        self._spawned = False

    @classmethod
    def from_config(cls, program: Any, config: Mapping[str, Any] | None = None) -> "FirejailCommand":
        """Create a command whose launcher comes from the jailcmd config."""
        if config is None:
            from .config import load_config
            config = load_config()
        return cls(program, launcher=config.get("launcher") or "firejail")

    # ── Switches ────────────────────────────────────────────────────────

    def _switch(self, field_name: str, enabled: bool) -> "FirejailCommand":
        setattr(self.profile, field_name, bool(enabled))
        return self

    def verbose(self, enabled: bool = True) -> "FirejailCommand":
        """Let firejail print its own messages (suppresses --quiet)."""
        return self._switch("verbose", enabled)

    def caps(self, enabled: bool = True) -> "FirejailCommand":
        """Enable the default capability filter; required for caps_drop()."""
        return self._switch("caps", enabled)

    def allow_debuggers(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("allow_debuggers", enabled)

    def allusers(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("allusers", enabled)

    def apparmor(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("apparmor", enabled)

    def appimage(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("appimage", enabled)

    def deterministic_exit_code(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("deterministic_exit_code", enabled)

    def disable_mnt(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("disable_mnt", enabled)

    def ipc_namespace(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("ipc_namespace", enabled)

    def keep_dev_shm(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("keep_dev_shm", enabled)

    def keep_var_tmp(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("keep_var_tmp", enabled)

    def machine_id(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("machine_id", enabled)

    def memory_deny_write_execute(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("memory_deny_write_execute", enabled)

    def no3d(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("no3d", enabled)

    def noautopulse(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("noautopulse", enabled)

    def nodvd(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("nodvd", enabled)

    def nogroups(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("nogroups", enabled)

    def noinput(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("noinput", enabled)

    def nonewprivs(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("nonewprivs", enabled)

    def noprofile(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("noprofile", enabled)

    def noroot(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("noroot", enabled)

    def nosound(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("nosound", enabled)

    def notv(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("notv", enabled)

    def nou2f(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("nou2f", enabled)

    def novideo(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("novideo", enabled)

    def private_cache(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("private_cache", enabled)

    def private_dev(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("private_dev", enabled)

    def private_tmp(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("private_tmp", enabled)

    def seccomp_block_secondary(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("seccomp_block_secondary", enabled)

    def writable_etc(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("writable_etc", enabled)

    def writable_run_user(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("writable_run_user", enabled)

    def writable_var(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("writable_var", enabled)

    def writable_var_log(self, enabled: bool = True) -> "FirejailCommand":
        return self._switch("writable_var_log", enabled)

    # ── Modes ───────────────────────────────────────────────────────────

    def caps_drop(self, setting: CapsDrop) -> "FirejailCommand":
        """Capability drop settings. Ignored unless caps() is enabled."""
        self.profile.caps_drop = setting
        return self

    def net(self, setting: Net) -> "FirejailCommand":
        self.profile.net = setting
        return self

    def ip(self, setting: IpConfig) -> "FirejailCommand":
        self.profile.ip = setting
        return self

    def netfilter(self, setting: NetFilter) -> "FirejailCommand":
        self.profile.netfilter = setting
        return self

    def join(self, setting: Join) -> "FirejailCommand":
        self.profile.join = setting
        return self

    def overlay(self, setting: Overlay) -> "FirejailCommand":
        self.profile.overlay = setting
        return self

    def private(self, setting: Private | Any = None) -> "FirejailCommand":
        """Private home: no argument for a tmpfs home, a path to use a host
        directory, or any Private value."""
        if setting is None:
            setting = Private.enabled()
        elif not isinstance(setting, Private):
            setting = Private.directory(setting)
        self.profile.private = setting
        return self

    def private_bin(self, setting: PrivateList) -> "FirejailCommand":
        self.profile.private_bin = setting
        return self

    def private_etc(self, setting: PrivateList) -> "FirejailCommand":
        self.profile.private_etc = setting
        return self

    def private_home(self, setting: PrivateList) -> "FirejailCommand":
        self.profile.private_home = setting
        return self

    def private_lib(self, setting: PrivateList) -> "FirejailCommand":
        self.profile.private_lib = setting
        return self

    def private_opt(self, setting: PrivateList) -> "FirejailCommand":
        self.profile.private_opt = setting
        return self

    def private_srv(self, setting: PrivateList) -> "FirejailCommand":
        self.profile.private_srv = setting
        return self

    def seccomp(self, setting: Seccomp) -> "FirejailCommand":
        self.profile.seccomp = setting
        return self

    def shell(self, setting: Shell) -> "FirejailCommand":
        self.profile.shell = setting
        return self

    def x11(self, setting: X11) -> "FirejailCommand":
        self.profile.x11 = setting
        return self

    # ── Scalars (last write wins) ───────────────────────────────────────

    def cgroup(self, path: Any) -> "FirejailCommand":
        self.profile.cgroup = path
        return self

    def hostname(self, hostname: str) -> "FirejailCommand":
        self.profile.hostname = hostname
        return self

    def hosts_file(self, path: Any) -> "FirejailCommand":
        self.profile.hosts_file = path
        return self

    def name(self, name: str) -> "FirejailCommand":
        """Sandbox name, usable later with Join.sandbox(name)."""
        self.profile.name = name
        return self

    def profile_file(self, path: Any) -> "FirejailCommand":
        """Firejail security profile (name or path)."""
        self.profile.profile_file = path
        return self

    def chroot(self, path: Any) -> "FirejailCommand":
        self.profile.chroot = path
        return self

    def nice(self, value: int) -> "FirejailCommand":
        self.profile.nice = value
        return self

    def timeout(self, value: Timeout) -> "FirejailCommand":
        """Kill the sandbox after this long (enforced by firejail, not here).

        Seconds, a timedelta, or an "hh:mm:ss" string.
        """
        self.profile.timeout = value
        return self

    def rlimit_as(self, value: int | str) -> "FirejailCommand":
        self.profile.rlimit_as = value
        return self

    def rlimit_cpu(self, value: int) -> "FirejailCommand":
        self.profile.rlimit_cpu = value
        return self

    def rlimit_fsize(self, value: int | str) -> "FirejailCommand":
        self.profile.rlimit_fsize = value
        return self

    def rlimit_nofile(self, value: int) -> "FirejailCommand":
        self.profile.rlimit_nofile = value
        return self

    def rlimit_nproc(self, value: int) -> "FirejailCommand":
        self.profile.rlimit_nproc = value
        return self

    def rlimit_sigpending(self, value: int) -> "FirejailCommand":
        self.profile.rlimit_sigpending = value
        return self

    def ip6(self, address: str) -> "FirejailCommand":
        self.profile.ip6 = address
        return self

    def mac(self, address: str) -> "FirejailCommand":
        self.profile.mac = address
        return self

    def mtu(self, value: int) -> "FirejailCommand":
        self.profile.mtu = value
        return self

    def defaultgw(self, address: str) -> "FirejailCommand":
        self.profile.defaultgw = address
        return self

    def netmask(self, mask: str) -> "FirejailCommand":
        self.profile.netmask = mask
        return self

    def veth_name(self, name: str) -> "FirejailCommand":
        self.profile.veth_name = name
        return self

    def seccomp_error_action(self, action: str) -> "FirejailCommand":
        self.profile.seccomp_error_action = action
        return self

    # ── Lists (append only) ─────────────────────────────────────────────

    def cpu(self, index: int) -> "FirejailCommand":
        self.profile.cpu.append(index)
        return self

    def cpus(self, indices: Iterable[int]) -> "FirejailCommand":
        self.profile.cpu.extend(indices)
        return self

    def protocol(self, name: str) -> "FirejailCommand":
        self.profile.protocol.append(name)
        return self

    def protocols(self, names: Iterable[str]) -> "FirejailCommand":
        self.profile.protocol.extend(names)
        return self

    def bind(self, source: Any, target: Any) -> "FirejailCommand":
        """Bind-mount source over target (emitted as --bind=source,target)."""
        self.profile.bind.append((source, target))
        return self

    def binds(self, pairs: Iterable[tuple[Any, Any]]) -> "FirejailCommand":
        self.profile.bind.extend((source, target) for source, target in pairs)
        return self

    def dns(self, address: str) -> "FirejailCommand":
        self.profile.dns.append(address)
        return self

    def dns_servers(self, addresses: Iterable[str]) -> "FirejailCommand":
        self.profile.dns.extend(addresses)
        return self

    def blacklist(self, path: Any) -> "FirejailCommand":
        self.profile.blacklist.append(path)
        return self

    def blacklists(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.blacklist.extend(paths)
        return self

    def ignore(self, command: str) -> "FirejailCommand":
        """Ignore a command in the security profile."""
        self.profile.ignore.append(command)
        return self

    def ignores(self, commands: Iterable[str]) -> "FirejailCommand":
        self.profile.ignore.extend(commands)
        return self

    def whitelist(self, path: Any) -> "FirejailCommand":
        self.profile.whitelist.append(path)
        return self

    def whitelists(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.whitelist.extend(paths)
        return self

    def noblacklist(self, path: Any) -> "FirejailCommand":
        self.profile.noblacklist.append(path)
        return self

    def noblacklists(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.noblacklist.extend(paths)
        return self

    def nowhitelist(self, path: Any) -> "FirejailCommand":
        self.profile.nowhitelist.append(path)
        return self

    def nowhitelists(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.nowhitelist.extend(paths)
        return self

    def read_only(self, path: Any) -> "FirejailCommand":
        self.profile.read_only.append(path)
        return self

    def read_only_paths(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.read_only.extend(paths)
        return self

    def read_write(self, path: Any) -> "FirejailCommand":
        self.profile.read_write.append(path)
        return self

    def read_write_paths(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.read_write.extend(paths)
        return self

    def tmpfs(self, path: Any) -> "FirejailCommand":
        self.profile.tmpfs.append(path)
        return self

    def tmpfs_paths(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.tmpfs.extend(paths)
        return self

    def mkdir(self, path: Any) -> "FirejailCommand":
        self.profile.mkdir.append(path)
        return self

    def mkdirs(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.mkdir.extend(paths)
        return self

    def mkfile(self, path: Any) -> "FirejailCommand":
        self.profile.mkfile.append(path)
        return self

    def mkfiles(self, paths: Iterable[Any]) -> "FirejailCommand":
        self.profile.mkfile.extend(paths)
        return self

    def sandbox_env(self, key: str, value: Any) -> "FirejailCommand":
        """Set a variable inside the sandbox via --env=key=value.

        Unlike env(), this is applied by firejail rather than by the
        spawning process.
        """
        self.profile.sandbox_env.append((key, value))
        return self

    def sandbox_envs(self, pairs: Iterable[tuple[str, Any]] | Mapping[str, Any]) -> "FirejailCommand":
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        self.profile.sandbox_env.extend((key, value) for key, value in items)
        return self

    def rmenv(self, key: str) -> "FirejailCommand":
        self.profile.rmenv.append(key)
        return self

    def rmenvs(self, keys: Iterable[str]) -> "FirejailCommand":
        self.profile.rmenv.extend(keys)
        return self

    # ── Target program ──────────────────────────────────────────────────

    def arg(self, arg: Any) -> "FirejailCommand":
        self._args.append(arg)
        return self

    def args(self, args: Iterable[Any]) -> "FirejailCommand":
        self._args.extend(args)
        return self

    # ── Process boundary ────────────────────────────────────────────────

    def current_dir(self, path: Any) -> "FirejailCommand":
        self._cwd = path
        return self

    def env_clear(self) -> "FirejailCommand":
        """Start the child from an empty environment."""
        self._env_ops.append(("clear",))
        return self

    def env_remove(self, key: str) -> "FirejailCommand":
        self._env_ops.append(("remove", key))
        return self

    def env(self, key: str, value: Any) -> "FirejailCommand":
        self._env_ops.append(("set", key, value))
        return self

    def envs(self, pairs: Iterable[tuple[str, Any]] | Mapping[str, Any]) -> "FirejailCommand":
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        for key, value in items:
            self._env_ops.append(("set", key, value))
        return self

    def stdin(self, cfg: StreamConfig) -> "FirejailCommand":
        self._stdin = cfg
        return self

    def stdout(self, cfg: StreamConfig) -> "FirejailCommand":
        self._stdout = cfg
        return self

    def stderr(self, cfg: StreamConfig) -> "FirejailCommand":
        self._stderr = cfg
        return self

    # ── Output ──────────────────────────────────────────────────────────

    def get_args(self) -> list[Any]:
        """Arguments for the target program, in the order supplied."""
        return list(self._args)

    def get_current_dir(self) -> Any:
        return self._cwd

    def child_env(self) -> dict[str, str] | None:
        """Resolve the environment edits into the child's environment.

        Returns None when no edits were made, meaning the child inherits the
        parent's environment unchanged.
        """
        if not self._env_ops:
            return None
        env = dict(os.environ)
        for op in self._env_ops:
            if op[0] == "clear":
                env.clear()
            elif op[0] == "remove":
                env.pop(as_text(op[1]), None)
            else:
                env[as_text(op[1])] = as_text(op[2])
        return env

    def argv(self) -> list[str]:
        """The full launcher argv, without spawning anything."""
        return build_argv(self.profile, self.program, self._args, launcher=self.launcher)

    def spawn(self) -> subprocess.Popen:
        """Start the launcher and return the running child.

        Does not wait for the child. Raises SpawnError if the process cannot
        be created; nothing is retried.
        """
        if self._spawned:
            raise CommandConsumedError("this command has already been spawned; build a new one")

        argv = self.argv()
        cwd = os.fspath(self._cwd) if self._cwd is not None else None
        try:
            child = subprocess.Popen(
                argv,
                cwd=cwd,
                env=self.child_env(),
                stdin=_popen_stream(self._stdin),
                stdout=_popen_stream(self._stdout),
                stderr=_popen_stream(self._stderr),
                shell=False,
            )
        except OSError as exc:
            raise SpawnError.from_os_error(argv, exc, cwd=cwd) from exc

        self._spawned = True
        return child


__all__ = ["FirejailCommand", "Stdio", "StreamConfig"]
