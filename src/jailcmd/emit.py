"""Flag emitter - turns a Profile into the launcher's argument vector.

The emitter is pure: the same Profile always yields the same flags, in an
order fixed by the tables below and never by the order in which options
were configured.

Emission order:
    1. --quiet, unless verbose
    2. the private home setting (--private, --private=DIR)
    3. switches, in SWITCH_FLAGS order
    4. capability drop settings, only when caps is on
    5. mode settings, in MODE_FIELDS order
    6. scalars, in SCALAR_FLAGS order
    7. comma-joined lists (cpu, protocol)
    8. --bind pairs
    9. --dns, --blacklist, --ignore, then the remaining repeated lists
    10. the "--" separator, the program and its arguments (build_argv only)

Values are interpolated verbatim. Each flag is one argv entry, so spaces
or commas inside a value reach the launcher unchanged.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Any, Iterable

from .profile import Profile
from .settings import PrivateList, as_text

QUIET_FLAG = "--quiet"
SEPARATOR = "--"

# Adding a switch: add the Profile field, a builder method and one row here.
SWITCH_FLAGS: tuple[tuple[str, str], ...] = (
    ("caps", "--caps"),
    ("allow_debuggers", "--allow-debuggers"),
    ("allusers", "--allusers"),
    ("apparmor", "--apparmor"),
    ("appimage", "--appimage"),
    ("deterministic_exit_code", "--deterministic-exit-code"),
    ("disable_mnt", "--disable-mnt"),
    ("ipc_namespace", "--ipc-namespace"),
    ("keep_dev_shm", "--keep-dev-shm"),
    ("keep_var_tmp", "--keep-var-tmp"),
    ("machine_id", "--machine-id"),
    ("memory_deny_write_execute", "--memory-deny-write-execute"),
    ("no3d", "--no3d"),
    ("noautopulse", "--noautopulse"),
    ("nodvd", "--nodvd"),
    ("nogroups", "--nogroups"),
    ("noinput", "--noinput"),
    ("nonewprivs", "--nonewprivs"),
    ("noprofile", "--noprofile"),
    ("noroot", "--noroot"),
    ("nosound", "--nosound"),
    ("notv", "--notv"),
    ("nou2f", "--nou2f"),
    ("novideo", "--novideo"),
    ("private_cache", "--private-cache"),
    ("private_dev", "--private-dev"),
    ("private_tmp", "--private-tmp"),
    ("seccomp_block_secondary", "--seccomp.block-secondary"),
    ("writable_etc", "--writable-etc"),
    ("writable_run_user", "--writable-run-user"),
    ("writable_var", "--writable-var"),
    ("writable_var_log", "--writable-var-log"),
)

# private is emitted ahead of the switches, see emit_flags.
# Private directory lists carry their kind ("bin", "etc", ...) as the value.
MODE_FIELDS: tuple[tuple[str, str | None], ...] = (
    ("net", None),
    ("ip", None),
    ("netfilter", None),
    ("join", None),
    ("overlay", None),
    ("private_bin", "bin"),
    ("private_etc", "etc"),
    ("private_home", "home"),
    ("private_lib", "lib"),
    ("private_opt", "opt"),
    ("private_srv", "srv"),
    ("seccomp", None),
    ("shell", None),
    ("x11", None),
)

SCALAR_FLAGS: tuple[tuple[str, str], ...] = (
    ("cgroup", "--cgroup"),
    ("hostname", "--hostname"),
    ("hosts_file", "--hosts-file"),
    ("name", "--name"),
    ("profile_file", "--profile"),
    ("chroot", "--chroot"),
    ("nice", "--nice"),
    ("timeout", "--timeout"),
    ("rlimit_as", "--rlimit-as"),
    ("rlimit_cpu", "--rlimit-cpu"),
    ("rlimit_fsize", "--rlimit-fsize"),
    ("rlimit_nofile", "--rlimit-nofile"),
    ("rlimit_nproc", "--rlimit-nproc"),
    ("rlimit_sigpending", "--rlimit-sigpending"),
    ("ip6", "--ip6"),
    ("mac", "--mac"),
    ("mtu", "--mtu"),
    ("defaultgw", "--defaultgw"),
    ("netmask", "--netmask"),
    ("veth_name", "--veth-name"),
    ("seccomp_error_action", "--seccomp-error-action"),
)

# One flag for the whole list, entries joined with commas.
JOINED_LIST_FLAGS: tuple[tuple[str, str], ...] = (
    ("cpu", "--cpu"),
    ("protocol", "--protocol"),
)

# One flag per entry; bind and sandbox_env entries are pairs.
REPEATED_LIST_FLAGS: tuple[tuple[str, str], ...] = (
    ("bind", "--bind"),
    ("dns", "--dns"),
    ("blacklist", "--blacklist"),
    ("ignore", "--ignore"),
    ("whitelist", "--whitelist"),
    ("noblacklist", "--noblacklist"),
    ("nowhitelist", "--nowhitelist"),
    ("read_only", "--read-only"),
    ("read_write", "--read-write"),
    ("tmpfs", "--tmpfs"),
    ("mkdir", "--mkdir"),
    ("mkfile", "--mkfile"),
    ("sandbox_env", "--env"),
    ("rmenv", "--rmenv"),
)


def format_timeout(value: Any) -> str:
    """Render a timeout as firejail's hh:mm:ss.

    Integers are seconds, timedeltas are rounded down to whole seconds and
    strings are assumed to be formatted already.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds())
    else:
        seconds = int(value)
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _entry(field_name: str, item: Any) -> str:
    if field_name == "bind":
        source, target = item
        return f"{as_text(source)},{as_text(target)}"
    if field_name == "sandbox_env":
        key, value = item
        return f"{as_text(key)}={as_text(value)}"
    return as_text(item)


def emit_flags(profile: Profile) -> list[str]:
    """Return the launcher flags for ``profile``, without the separator."""
    args: list[str] = []

    if not profile.verbose:
        args.append(QUIET_FLAG)

    args.extend(profile.private.flags())

    for field_name, flag in SWITCH_FLAGS:
        if getattr(profile, field_name):
            args.append(flag)

    # caps_drop is left out entirely while the caps switch is off
    if profile.caps:
        args.extend(profile.caps_drop.flags())

    for field_name, kind in MODE_FIELDS:
        setting = getattr(profile, field_name)
        if isinstance(setting, PrivateList):
            args.extend(setting.flags(kind))
        else:
            args.extend(setting.flags())

    for field_name, flag in SCALAR_FLAGS:
        value = getattr(profile, field_name)
        if value is None:
            continue
        text = format_timeout(value) if field_name == "timeout" else as_text(value)
        args.append(f"{flag}={text}")

    for field_name, flag in JOINED_LIST_FLAGS:
        items = getattr(profile, field_name)
        if items:
            args.append(f"{flag}={','.join(as_text(item) for item in items)}")

    for field_name, flag in REPEATED_LIST_FLAGS:
        for item in getattr(profile, field_name):
            args.append(f"{flag}={_entry(field_name, item)}")

    return args


def build_argv(
    profile: Profile,
    program: str,
    args: Iterable[Any] = (),
    launcher: str = "firejail",
) -> list[str]:
    """Return the full argv: launcher, flags, separator, program, arguments."""
    return [
        launcher,
        *emit_flags(profile),
        SEPARATOR,
        as_text(program),
        *(as_text(arg) for arg in args),
    ]


__all__ = [
    "QUIET_FLAG",
    "SEPARATOR",
    "SWITCH_FLAGS",
    "MODE_FIELDS",
    "SCALAR_FLAGS",
    "JOINED_LIST_FLAGS",
    "REPEATED_LIST_FLAGS",
    "format_timeout",
    "emit_flags",
    "build_argv",
]
