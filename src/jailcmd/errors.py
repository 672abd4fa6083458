"""Exception taxonomy for jailcmd.

Building a command never fails; errors only surface when a command is
spawned, or when an options mapping / config file cannot be understood.
"""
from __future__ import annotations

import errno as _errno


class JailcmdError(Exception):
    """Base class for all jailcmd errors."""


class SpawnError(JailcmdError):
    """The launcher process could not be created.

    The underlying OSError is chained as ``__cause__``; ``reason`` classifies
    it the same way a shell would report exit codes 127 / 126.
    """

    def __init__(self, reason: str, argv: list[str], os_error: OSError):
        detail = os_error.strerror or str(os_error)
        super().__init__(f"{reason}: {detail}: {argv[0] if argv else '<empty argv>'}")
        self.reason = reason
        self.argv = list(argv)
        self.errno = os_error.errno
        self.os_error = os_error

    @classmethod
    def from_os_error(cls, argv: list[str], exc: OSError, cwd: str | None = None) -> "SpawnError":
        if cwd is not None and exc.filename == cwd:
            reason = "cwd_not_found"
        elif isinstance(exc, FileNotFoundError) or exc.errno == _errno.ENOENT:
            reason = "launcher_not_found"
        elif isinstance(exc, PermissionError) or exc.errno == _errno.EACCES:
            reason = "permission_denied"
        else:
            reason = "os_error"
        return cls(reason, argv, exc)


class CommandConsumedError(JailcmdError):
    """spawn() was called twice on the same command."""


class UnknownOptionError(JailcmdError, KeyError):
    """An options mapping used a key that is not a known option."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"unknown option: {self.key!r}"


class ConfigError(JailcmdError):
    """A config file, preset or option value could not be interpreted."""


__all__ = [
    "JailcmdError",
    "SpawnError",
    "CommandConsumedError",
    "UnknownOptionError",
    "ConfigError",
]
