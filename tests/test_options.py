"""Tests for applying JSON option mappings to a command."""
from __future__ import annotations

import pytest

from jailcmd import FirejailCommand
from jailcmd.errors import ConfigError, UnknownOptionError
from jailcmd.options import apply_option, apply_options, known_options


def _flags(options: dict) -> list[str]:
    argv = apply_options(FirejailCommand("env"), options).argv()
    return argv[1:argv.index("--")]


class TestSwitchesAndScalars:

    def test_switches(self):
        assert _flags({"caps": True, "apparmor": True}) == ["--quiet", "--caps", "--apparmor"]

    def test_switch_false_turns_off(self):
        assert _flags({"apparmor": True, "verbose": True}) == ["--apparmor"]
        command = apply_options(FirejailCommand("env"), {"apparmor": True})
        apply_option(command, "apparmor", False)
        assert "--apparmor" not in command.argv()

    def test_switch_requires_bool(self):
        with pytest.raises(ConfigError, match="apparmor"):
            apply_option(FirejailCommand("env"), "apparmor", "yes")

    def test_scalars(self):
        assert _flags({"hostname": "box", "timeout": 30, "profile_file": "firefox"}) == [
            "--quiet", "--hostname=box", "--profile=firefox", "--timeout=00:00:30",
        ]


class TestModes:

    @pytest.mark.parametrize("key,value,expected", [
        ("caps_drop", "all", ["--caps", "--caps.drop=all"]),
        ("caps_drop", {"keep": ["fowner"], "drop": "chown"},
         ["--caps", "--caps.keep=fowner", "--caps.drop=chown"]),
        ("net", "none", ["--net=none"]),
        ("net", "eth0", ["--net=eth0"]),
        ("net", {"namespace": "ns1"}, ["--netns=ns1"]),
        ("ip", "dhcp", ["--ip=dhcp"]),
        ("ip", "10.0.0.5", ["--ip=10.0.0.5"]),
        ("ip", {"range": ["10.0.0.10", "10.0.0.20"]}, ["--iprange=10.0.0.10,10.0.0.20"]),
        ("netfilter", True, ["--netfilter"]),
        ("netfilter", {"file": "/etc/f.net", "args": ["80"]}, ["--netfilter=/etc/f.net,80"]),
        ("join", 3272, ["--join=3272"]),
        ("join", {"network": "browser"}, ["--join-network=browser"]),
        ("overlay", "tmpfs", ["--overlay-tmpfs"]),
        ("overlay", {"named": "work"}, ["--overlay-named=work"]),
        ("private", True, ["--private"]),
        ("private", "/home/u/box", ["--private=/home/u/box"]),
        ("private_etc", ["hosts", "passwd"], ["--private-etc=hosts,passwd"]),
        ("private_bin", True, ["--private-bin"]),
        ("seccomp", True, ["--seccomp"]),
        ("seccomp", ["mount"], ["--seccomp=mount"]),
        ("seccomp", {"drop": ["mount", "umount2"]}, ["--seccomp.drop=mount,umount2"]),
        ("shell", "none", ["--shell=none"]),
        ("x11", True, ["--x11"]),
        ("x11", "xvfb", ["--x11=xvfb"]),
    ])
    def test_mode_values(self, key, value, expected):
        options = {"verbose": True, key: value}
        if key == "caps_drop":
            options["caps"] = True
        assert _flags(options) == expected

    @pytest.mark.parametrize("value", [None, False])
    def test_null_resets_mode(self, value):
        command = apply_options(FirejailCommand("env"), {"seccomp": True})
        apply_option(command, "seccomp", value)
        assert "--seccomp" not in command.argv()

    @pytest.mark.parametrize("key,value", [
        ("caps_drop", {"keep": ["a"], "bogus": 1}),
        ("net", {"interface": "a", "namespace": "b"}),
        ("ip", {"range": ["only-one"]}),
        ("x11", "wayland"),
        ("private", 3),
        ("shell", 1),
    ])
    def test_bad_mode_values(self, key, value):
        with pytest.raises(ConfigError):
            apply_option(FirejailCommand("env"), key, value)


class TestLists:

    def test_list_values_append(self):
        command = FirejailCommand("env").dns("1.1.1.1")
        apply_options(command, {"dns": ["9.9.9.9", "1.1.1.1"]})
        assert command.argv()[2:5] == ["--dns=1.1.1.1", "--dns=9.9.9.9", "--dns=1.1.1.1"]

    def test_single_items(self):
        assert _flags({"blacklist": "/boot", "cpu": 1}) == [
            "--quiet", "--cpu=1", "--blacklist=/boot",
        ]

    def test_bind_entries(self):
        assert _flags({"bind": ["/a,/b", ["/c", "/d"]]}) == [
            "--quiet", "--bind=/a,/b", "--bind=/c,/d",
        ]

    def test_bad_bind_entry(self):
        with pytest.raises(ConfigError, match="bind"):
            apply_option(FirejailCommand("env"), "bind", ["/only-one"])

    @pytest.mark.parametrize("value", [
        {"LANG": "C", "TZ": "UTC"},
        ["LANG=C", "TZ=UTC"],
        [["LANG", "C"], ["TZ", "UTC"]],
    ])
    def test_sandbox_env_shapes(self, value):
        assert _flags({"sandbox_env": value}) == ["--quiet", "--env=LANG=C", "--env=TZ=UTC"]

    def test_list_rejects_mapping(self):
        with pytest.raises(ConfigError):
            apply_option(FirejailCommand("env"), "dns", {"a": 1})


class TestUnknown:

    def test_unknown_key(self):
        with pytest.raises(UnknownOptionError) as excinfo:
            apply_options(FirejailCommand("env"), {"caps": True, "capz": True})
        assert excinfo.value.key == "capz"
        assert str(excinfo.value) == "unknown option: 'capz'"

    def test_unknown_option_is_a_key_error(self):
        with pytest.raises(KeyError):
            apply_option(FirejailCommand("env"), "nope", True)

    def test_known_options_cover_every_family(self):
        names = known_options()
        for name in ("verbose", "caps", "hostname", "timeout", "net", "x11",
                     "private_etc", "bind", "sandbox_env", "rmenv"):
            assert name in names
        assert names == sorted(names)
