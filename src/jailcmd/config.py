"""
jailcmd configuration

Loads config from:
  1. Defaults
  2. Global config (explicit path, or $JAILCMD_HOME/config.json, or
     ~/.jailcmd/config.json)
  3. Workspace override (<workspace>/.jailcmd/config.json; the current
     directory when no workspace is given)
  4. Environment variables (JAILCMD_LAUNCHER)

Config keys:
  launcher  - launcher binary name or path (default "firejail")
  presets   - named option mappings, see jailcmd.options

Example config.json:
  {
    "launcher": "/usr/local/bin/firejail",
    "presets": {
      "offline": {"net": "none", "private": true, "caps_drop": "all", "caps": true}
    }
  }
"""
from __future__ import annotations

import copy
import json
import os
import warnings
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError

CONFIG_DIRNAME = ".jailcmd"
CONFIG_FILENAME = "config.json"

DEFAULT_CONFIG: dict[str, Any] = {
    "launcher": "firejail",
    "presets": {},
}


def load_config(config_path: Optional[Path] = None, workspace: Optional[Path] = None) -> dict:
    """Load the layered jailcmd config.

    `config_path` replaces the global user layer. Under pytest the implicit
    global layer is skipped so tests never depend on the user's home.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    is_pytest = bool(os.environ.get("PYTEST_CURRENT_TEST"))
    jailcmd_home = Path(os.environ["JAILCMD_HOME"]) if os.environ.get("JAILCMD_HOME") else None
    default_global_path = (jailcmd_home or (Path.home() / CONFIG_DIRNAME)) / CONFIG_FILENAME

    global_path = Path(config_path) if config_path else default_global_path
    if is_pytest and config_path is None and jailcmd_home is None:
        global_path = None
    if global_path is not None and global_path.exists():
        config = _merge(config, _read_json(global_path))

    ws_root = Path(workspace) if workspace else Path.cwd()
    ws_config_path = ws_root / CONFIG_DIRNAME / CONFIG_FILENAME
    if ws_config_path.exists() and ws_config_path != global_path:
        config = _merge(config, _read_json(ws_config_path))

    _apply_env_overrides(config)
    return config


def get_preset(config: dict, name: str) -> dict:
    """Return the options mapping stored under presets.<name>."""
    presets = config.get("presets") or {}
    if name not in presets:
        available = ", ".join(sorted(presets)) or "none"
        raise ConfigError(f"unknown preset {name!r} (available: {available})")
    preset = presets[name]
    if not isinstance(preset, dict):
        raise ConfigError(f"preset {name!r} must be a JSON object")
    return preset


def read_options_file(path: Path) -> dict:
    """Read a standalone JSON options mapping."""
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"could not read options file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"options file {path} must contain a JSON object")
    return data


def _read_json(path: Path) -> dict:
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        warnings.warn(f"jailcmd: could not read config {path}: {e}", RuntimeWarning)
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"jailcmd: ignoring config {path}: not a JSON object", RuntimeWarning)
        return {}
    return data


def _merge(base: dict, override: dict) -> dict:
    """Deep merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict) -> None:
    launcher = os.environ.get("JAILCMD_LAUNCHER")
    if launcher:
        config["launcher"] = launcher


__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
    "get_preset",
    "read_options_file",
]
