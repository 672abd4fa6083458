"""Detect the firejail launcher on this system."""
from __future__ import annotations

import platform
import shutil
import subprocess

DEFAULT_LAUNCHER = "firejail"


def find_launcher(name: str = DEFAULT_LAUNCHER) -> str | None:
    """Return the resolved path of the launcher, or None if it is not on PATH."""
    return shutil.which(name)


def is_launcher_available(name: str = DEFAULT_LAUNCHER) -> bool:
    """Check if the launcher exists and answers --version."""
    path = find_launcher(name)
    if path is None:
        return False
    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, OSError):
        return False


def launcher_version(name: str = DEFAULT_LAUNCHER) -> str:
    """First line of ``<launcher> --version``, or "unknown"."""
    path = find_launcher(name)
    if path is None:
        return "unknown"
    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, OSError):
        return "unknown"
    lines = result.stdout.strip().splitlines()
    return lines[0].strip() if lines else "unknown"


def get_launcher_info(name: str = DEFAULT_LAUNCHER) -> dict:
    """Get information about the configured launcher."""
    path = find_launcher(name)
    available = is_launcher_available(name)
    return {
        "system": platform.system(),
        "launcher": name,
        "path": path,
        "available": available,
        "version": launcher_version(name) if available else "unknown",
    }


__all__ = [
    "DEFAULT_LAUNCHER",
    "find_launcher",
    "is_launcher_available",
    "launcher_version",
    "get_launcher_info",
]
