"""Options mappings - apply JSON-shaped option dicts onto a FirejailCommand.

Presets in the config file and ``--options-file`` on the CLI use this
format. Keys are option names; values depend on the option's shape:

    switch   true / false                    {"apparmor": true}
    scalar   the value                       {"hostname": "box", "timeout": 30}
    list     a list (or a single item)       {"dns": ["1.1.1.1", "9.9.9.9"]}
             bind entries: "src,dst" or [src, dst]
             sandbox_env entries: "KEY=VALUE", [key, value], or a dict
    mode     false / null for "not specified", otherwise see _MODE_PARSERS
             {"net": "none"}, {"caps_drop": {"keep": ["fowner"]}},
             {"seccomp": {"drop": ["mount"]}}, {"x11": "xvfb"}

Keys are applied in mapping order. Unknown keys raise UnknownOptionError,
values of the wrong shape raise ConfigError.
"""
from __future__ import annotations

from typing import Any, Callable, Mapping

from .command import FirejailCommand
from .emit import SCALAR_FLAGS, SWITCH_FLAGS
from .errors import ConfigError, UnknownOptionError
from .settings import (
    CapsDrop,
    CapsDropSettings,
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

SWITCH_KEYS = ("verbose",) + tuple(name for name, _ in SWITCH_FLAGS)
SCALAR_KEYS = tuple(name for name, _ in SCALAR_FLAGS)

# list field -> plural builder method
LIST_METHODS: dict[str, str] = {
    "cpu": "cpus",
    "protocol": "protocols",
    "bind": "binds",
    "dns": "dns_servers",
    "blacklist": "blacklists",
    "ignore": "ignores",
    "whitelist": "whitelists",
    "noblacklist": "noblacklists",
    "nowhitelist": "nowhitelists",
    "read_only": "read_only_paths",
    "read_write": "read_write_paths",
    "tmpfs": "tmpfs_paths",
    "mkdir": "mkdirs",
    "mkfile": "mkfiles",
    "sandbox_env": "sandbox_envs",
    "rmenv": "rmenvs",
}


def _single_key(key: str, value: dict, allowed: tuple[str, ...]) -> tuple[str, Any]:
    if len(value) != 1 or next(iter(value)) not in allowed:
        raise ConfigError(f"{key}: expected one of {', '.join(allowed)}, got {sorted(value)}")
    return next(iter(value.items()))


def _as_list(key: str, value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [value]
    raise ConfigError(f"{key}: expected a list, got {type(value).__name__}")


def _parse_caps_drop(key: str, value: Any) -> CapsDrop:
    if value == "all":
        return CapsDrop.drop_all()
    if isinstance(value, dict):
        unknown = set(value) - {"keep", "drop"}
        if unknown:
            raise ConfigError(f"{key}: unknown fields {sorted(unknown)}")
        return CapsDropSettings(
            keep=tuple(_as_list(key, value.get("keep", []))),
            drop=tuple(_as_list(key, value.get("drop", []))),
        )
    raise ConfigError(f"{key}: expected \"all\" or {{\"keep\": [...], \"drop\": [...]}}")


def _parse_net(key: str, value: Any) -> Net:
    if value == "none":
        return Net.none()
    if isinstance(value, str):
        return Net.interface(value)
    if isinstance(value, dict):
        kind, arg = _single_key(key, value, ("interface", "namespace"))
        return Net.interface(arg) if kind == "interface" else Net.namespace(arg)
    raise ConfigError(f"{key}: expected \"none\", an interface name, or {{\"namespace\": name}}")


def _parse_ip(key: str, value: Any) -> IpConfig:
    if value == "none":
        return IpConfig.none()
    if value == "dhcp":
        return IpConfig.dhcp()
    if isinstance(value, str):
        return IpConfig.address(value)
    if isinstance(value, dict):
        _, arg = _single_key(key, value, ("range",))
        if not isinstance(arg, (list, tuple)) or len(arg) != 2:
            raise ConfigError(f"{key}: range must be [start, end]")
        return IpConfig.range(arg[0], arg[1])
    raise ConfigError(f"{key}: expected \"none\", \"dhcp\", an address or {{\"range\": [start, end]}}")


def _parse_netfilter(key: str, value: Any) -> NetFilter:
    if value is True or value == "default":
        return NetFilter.default()
    if isinstance(value, str):
        return NetFilter.file(value)
    if isinstance(value, dict):
        if "file" not in value:
            raise ConfigError(f"{key}: expected {{\"file\": path, \"args\": [...]}}")
        return NetFilter.file(value["file"], _as_list(key, value.get("args", [])))
    raise ConfigError(f"{key}: expected true, a filter file or {{\"file\": path}}")


def _parse_join(key: str, value: Any) -> Join:
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return Join.sandbox(value)
    if isinstance(value, dict):
        kind, arg = _single_key(key, value, ("sandbox", "filesystem", "network", "or_start"))
        return getattr(Join, kind)(arg)
    raise ConfigError(f"{key}: expected a sandbox name/PID or {{\"network\": name}}")


def _parse_overlay(key: str, value: Any) -> Overlay:
    if value is True or value == "overlay":
        return Overlay.overlay()
    if value == "tmpfs":
        return Overlay.tmpfs()
    if isinstance(value, dict):
        _, arg = _single_key(key, value, ("named",))
        return Overlay.named(arg)
    raise ConfigError(f"{key}: expected true, \"tmpfs\" or {{\"named\": name}}")


def _parse_private(key: str, value: Any) -> Private:
    if value is True:
        return Private.enabled()
    if isinstance(value, str):
        return Private.directory(value)
    raise ConfigError(f"{key}: expected true or a directory")


def _parse_private_list(key: str, value: Any) -> PrivateList:
    if value is True or value == "default":
        return PrivateList.default()
    if isinstance(value, (list, tuple, str)):
        return PrivateList.files(_as_list(key, value))
    raise ConfigError(f"{key}: expected true or a list of names")


def _parse_seccomp(key: str, value: Any) -> Seccomp:
    if value is True or value == "default":
        return Seccomp.default()
    if isinstance(value, (list, tuple)):
        return Seccomp.extend(value)
    if isinstance(value, dict):
        kind, arg = _single_key(key, value, ("extend", "drop", "keep"))
        return getattr(Seccomp, kind)(_as_list(key, arg))
    raise ConfigError(f"{key}: expected true, a syscall list or {{\"drop\": [...]}}")


def _parse_shell(key: str, value: Any) -> Shell:
    if value == "none":
        return Shell.none()
    if isinstance(value, str):
        return Shell.program(value)
    raise ConfigError(f"{key}: expected \"none\" or a shell path")


def _parse_x11(key: str, value: Any) -> X11:
    if value is True:
        return X11.AUTO
    if isinstance(value, str):
        try:
            return X11[value.upper()]
        except KeyError:
            pass
    choices = ", ".join(m.name.lower() for m in X11 if m is not X11.NOT_SPECIFIED)
    raise ConfigError(f"{key}: expected true or one of {choices}")


_MODE_PARSERS: dict[str, tuple[Callable[[str, Any], Any], Callable[[], Any]]] = {
    "caps_drop": (_parse_caps_drop, CapsDrop.not_specified),
    "net": (_parse_net, Net.not_specified),
    "ip": (_parse_ip, IpConfig.not_specified),
    "netfilter": (_parse_netfilter, NetFilter.not_specified),
    "join": (_parse_join, Join.not_specified),
    "overlay": (_parse_overlay, Overlay.not_specified),
    "private": (_parse_private, Private.not_specified),
    "private_bin": (_parse_private_list, PrivateList.not_specified),
    "private_etc": (_parse_private_list, PrivateList.not_specified),
    "private_home": (_parse_private_list, PrivateList.not_specified),
    "private_lib": (_parse_private_list, PrivateList.not_specified),
    "private_opt": (_parse_private_list, PrivateList.not_specified),
    "private_srv": (_parse_private_list, PrivateList.not_specified),
    "seccomp": (_parse_seccomp, Seccomp.not_specified),
    "shell": (_parse_shell, Shell.not_specified),
    "x11": (_parse_x11, lambda: X11.NOT_SPECIFIED),
}


def _bind_entry(key: str, entry: Any) -> tuple[Any, Any]:
    if isinstance(entry, str) and "," in entry:
        source, target = entry.split(",", 1)
        return source, target
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return entry[0], entry[1]
    raise ConfigError(f"{key}: bind entries are \"src,dst\" or [src, dst], got {entry!r}")


def _env_entries(key: str, value: Any) -> list[tuple[str, Any]]:
    if isinstance(value, dict):
        return list(value.items())
    pairs = []
    for entry in _as_list(key, value):
        if isinstance(entry, str) and "=" in entry:
            name, val = entry.split("=", 1)
            pairs.append((name, val))
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            pairs.append((entry[0], entry[1]))
        else:
            raise ConfigError(f"{key}: env entries are \"KEY=VALUE\" or [key, value], got {entry!r}")
    return pairs


def apply_option(command: FirejailCommand, key: str, value: Any) -> FirejailCommand:
    """Apply a single option to ``command``."""
    if key in SWITCH_KEYS:
        if not isinstance(value, bool):
            raise ConfigError(f"{key}: expected true or false, got {value!r}")
        return getattr(command, key)(value)

    if key in SCALAR_KEYS:
        return getattr(command, key)(value)

    if key in _MODE_PARSERS:
        parse, not_specified = _MODE_PARSERS[key]
        setting = not_specified() if value is None or value is False else parse(key, value)
        return getattr(command, key)(setting)

    if key in LIST_METHODS:
        method = getattr(command, LIST_METHODS[key])
        if key == "bind":
            return method([_bind_entry(key, entry) for entry in _as_list(key, value)])
        if key == "sandbox_env":
            return method(_env_entries(key, value))
        return method([value] if isinstance(value, int) else _as_list(key, value))

    raise UnknownOptionError(key)


def apply_options(command: FirejailCommand, options: Mapping[str, Any]) -> FirejailCommand:
    """Apply every entry of ``options`` to ``command``, in mapping order."""
    for key, value in options.items():
        apply_option(command, key, value)
    return command


def known_options() -> list[str]:
    """All option keys accepted by apply_options."""
    return sorted(set(SWITCH_KEYS) | set(SCALAR_KEYS) | set(_MODE_PARSERS) | set(LIST_METHODS))


__all__ = ["apply_option", "apply_options", "known_options", "LIST_METHODS"]
