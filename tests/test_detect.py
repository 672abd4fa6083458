"""Tests for launcher detection."""
from __future__ import annotations

import os
import stat

import pytest

from jailcmd.detect import (
    find_launcher,
    get_launcher_info,
    is_launcher_available,
    launcher_version,
)


@pytest.fixture
def versioned_launcher(tmp_path):
    if os.name != "posix":
        pytest.skip("needs a POSIX shell")
    script = tmp_path / "firejail"
    script.write_text('#!/bin/sh\necho "firejail version 0.9.72"\necho\necho "Compile time support:"\n')
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return str(script)


@pytest.fixture
def broken_launcher(tmp_path):
    if os.name != "posix":
        pytest.skip("needs a POSIX shell")
    script = tmp_path / "broken-firejail"
    script.write_text("#!/bin/sh\nexit 3\n")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return str(script)


class TestDetect:

    def test_missing_launcher(self, tmp_path):
        name = str(tmp_path / "nope")
        assert find_launcher(name) is None
        assert is_launcher_available(name) is False
        assert launcher_version(name) == "unknown"

    def test_available_launcher(self, versioned_launcher):
        assert find_launcher(versioned_launcher) == versioned_launcher
        assert is_launcher_available(versioned_launcher) is True
        assert launcher_version(versioned_launcher) == "firejail version 0.9.72"

    def test_failing_version_is_unavailable(self, broken_launcher):
        assert find_launcher(broken_launcher) == broken_launcher
        assert is_launcher_available(broken_launcher) is False

    def test_launcher_info(self, versioned_launcher):
        info = get_launcher_info(versioned_launcher)
        assert info["launcher"] == versioned_launcher
        assert info["path"] == versioned_launcher
        assert info["available"] is True
        assert info["version"] == "firejail version 0.9.72"
        assert info["system"]

    def test_launcher_info_missing(self, tmp_path):
        info = get_launcher_info(str(tmp_path / "nope"))
        assert info["path"] is None
        assert info["available"] is False
        assert info["version"] == "unknown"
