"""Tests for layered config loading and presets."""
from __future__ import annotations

import json

import pytest

from jailcmd.config import DEFAULT_CONFIG, get_preset, load_config, read_options_file
from jailcmd.errors import ConfigError


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data))


class TestLoadConfig:

    def test_defaults(self, isolated_config):
        config = load_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_global_layer(self, isolated_config):
        _write(isolated_config["home"] / "config.json", {"launcher": "/opt/fj"})
        assert load_config()["launcher"] == "/opt/fj"

    def test_workspace_overrides_global(self, isolated_config):
        _write(isolated_config["home"] / "config.json", {
            "launcher": "/opt/fj",
            "presets": {"a": {"caps": True}},
        })
        _write(isolated_config["workspace"] / ".jailcmd" / "config.json", {
            "presets": {"b": {"apparmor": True}},
        })
        config = load_config()
        assert config["launcher"] == "/opt/fj"
        assert set(config["presets"]) == {"a", "b"}

    def test_explicit_workspace(self, isolated_config, tmp_path):
        other = tmp_path / "other"
        _write(other / ".jailcmd" / "config.json", {"launcher": "ws-firejail"})
        assert load_config(workspace=other)["launcher"] == "ws-firejail"
        assert load_config()["launcher"] == "firejail"

    def test_explicit_config_path(self, isolated_config, tmp_path):
        path = tmp_path / "custom.json"
        _write(path, {"launcher": "custom"})
        assert load_config(config_path=path)["launcher"] == "custom"

    def test_env_override_wins(self, isolated_config, monkeypatch):
        _write(isolated_config["workspace"] / ".jailcmd" / "config.json", {"launcher": "ws"})
        monkeypatch.setenv("JAILCMD_LAUNCHER", "env-firejail")
        assert load_config()["launcher"] == "env-firejail"

    def test_bad_json_warns_and_is_skipped(self, isolated_config):
        _write(isolated_config["home"] / "config.json", "{not json")
        with pytest.warns(RuntimeWarning, match="could not read config"):
            config = load_config()
        assert config["launcher"] == "firejail"

    def test_non_object_warns(self, isolated_config):
        _write(isolated_config["home"] / "config.json", "[1, 2]")
        with pytest.warns(RuntimeWarning, match="not a JSON object"):
            load_config()

    def test_global_layer_skipped_under_pytest_without_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("JAILCMD_HOME", raising=False)
        monkeypatch.delenv("JAILCMD_LAUNCHER", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        _write(tmp_path / ".jailcmd" / "config.json", {"launcher": "from-home"})
        monkeypatch.chdir(tmp_path / ".jailcmd")
        assert load_config()["launcher"] == "firejail"


class TestPresets:

    def test_get_preset(self):
        config = {"presets": {"offline": {"net": "none"}}}
        assert get_preset(config, "offline") == {"net": "none"}

    def test_unknown_preset_lists_available(self):
        config = {"presets": {"offline": {}, "gui": {}}}
        with pytest.raises(ConfigError, match="available: gui, offline"):
            get_preset(config, "nope")

    def test_non_object_preset(self):
        with pytest.raises(ConfigError, match="must be a JSON object"):
            get_preset({"presets": {"bad": ["caps"]}}, "bad")


class TestOptionsFile:

    def test_read(self, tmp_path):
        path = tmp_path / "opts.json"
        _write(path, {"caps": True})
        assert read_options_file(path) == {"caps": True}

    def test_bad_json(self, tmp_path):
        path = tmp_path / "opts.json"
        _write(path, "{")
        with pytest.raises(ConfigError, match="could not read options file"):
            read_options_file(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "opts.json"
        _write(path, '"caps"')
        with pytest.raises(ConfigError, match="must contain a JSON object"):
            read_options_file(path)
