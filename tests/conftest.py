"""Pytest configuration and fixtures for jailcmd tests."""
from __future__ import annotations

import os
import shutil
import stat
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with an empty JAILCMD_HOME and cwd so no real config is read."""
    home = tmp_path / "jailcmd_home"
    home.mkdir()
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    monkeypatch.setenv("JAILCMD_HOME", str(home))
    monkeypatch.delenv("JAILCMD_LAUNCHER", raising=False)
    monkeypatch.chdir(workspace)
    return {"home": home, "workspace": workspace}


@pytest.fixture
def echo_launcher(tmp_path):
    """A stand-in launcher that prints each argument on its own line."""
    if os.name != "posix" or shutil.which("sh") is None:
        pytest.skip("needs a POSIX shell")
    script = tmp_path / "fake-firejail"
    script.write_text('#!/bin/sh\nprintf \'%s\\n\' "$@"\n')
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


@pytest.fixture
def env_launcher(tmp_path):
    """A stand-in launcher that prints its own environment and working dir."""
    if os.name != "posix" or shutil.which("sh") is None:
        pytest.skip("needs a POSIX shell")
    script = tmp_path / "env-firejail"
    script.write_text('#!/bin/sh\necho "cwd=$(pwd)"\nenv\n')
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


class FakePopen:
    """Records the arguments subprocess.Popen was called with."""

    calls: list[dict] = []

    def __init__(self, argv, **kwargs):
        self.argv = argv
        self.kwargs = kwargs
        self.returncode = 0
        self.stdout = None
        self.stderr = None
        FakePopen.calls.append({"argv": argv, **kwargs})

    def wait(self, timeout=None):
        return self.returncode


@pytest.fixture
def fake_popen(monkeypatch):
    """Replace subprocess.Popen with a recorder."""
    FakePopen.calls = []
    monkeypatch.setattr("jailcmd.command.subprocess.Popen", FakePopen)
    return FakePopen
