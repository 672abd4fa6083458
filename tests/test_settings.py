"""Tests for mode settings and their flag spellings."""
from __future__ import annotations

from pathlib import Path

import pytest

from jailcmd.settings import (
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
    as_text,
)


class TestCapsDrop:
    """Tests for CapsDrop variants and the CapsDropBuilder."""

    def test_not_specified_emits_nothing(self):
        assert CapsDrop.not_specified().flags() == []

    def test_drop_all(self):
        assert CapsDrop.drop_all().flags() == ["--caps.drop=all"]

    def test_keep_then_drop_order(self):
        """Keep flag comes before drop flag regardless of call order."""
        setting = CapsDrop.builder().drop("chown").keep("fowner").build()
        assert setting.flags() == ["--caps.keep=fowner", "--caps.drop=chown"]

    def test_lists_are_comma_joined_in_order(self):
        setting = (
            CapsDrop.builder()
            .keeps(["net_bind_service", "fowner"])
            .drop("chown")
            .drops(["sys_admin", "chown"])
            .build()
        )
        assert setting.flags() == [
            "--caps.keep=net_bind_service,fowner",
            "--caps.drop=chown,sys_admin,chown",
        ]

    def test_empty_keep_list_emits_only_drop(self):
        setting = CapsDrop.builder().drop("chown").build()
        assert setting.flags() == ["--caps.drop=chown"]

    def test_empty_builder_emits_nothing(self):
        assert CapsDrop.builder().build().flags() == []

    def test_build_snapshots_lists(self):
        """Later builder calls do not change an already built value."""
        builder = CapsDrop.builder().keep("fowner")
        first = builder.build()
        builder.keep("chown").drop("sys_admin")
        second = builder.build()

        assert first == CapsDropSettings(keep=("fowner",), drop=())
        assert second == CapsDropSettings(keep=("fowner", "chown"), drop=("sys_admin",))

    def test_settings_are_frozen(self):
        setting = CapsDrop.builder().keep("fowner").build()
        with pytest.raises(AttributeError):
            setting.keep = ("chown",)


class TestNetworkSettings:

    def test_net_variants(self):
        assert Net.not_specified().flags() == []
        assert Net.none().flags() == ["--net=none"]
        assert Net.interface("eth0").flags() == ["--net=eth0"]
        assert Net.namespace("ns1").flags() == ["--netns=ns1"]

    def test_ip_variants(self):
        assert IpConfig.not_specified().flags() == []
        assert IpConfig.none().flags() == ["--ip=none"]
        assert IpConfig.dhcp().flags() == ["--ip=dhcp"]
        assert IpConfig.address("10.10.20.56").flags() == ["--ip=10.10.20.56"]
        assert IpConfig.range("10.10.20.100", "10.10.20.150").flags() == [
            "--iprange=10.10.20.100,10.10.20.150"
        ]

    def test_netfilter_variants(self):
        assert NetFilter.not_specified().flags() == []
        assert NetFilter.default().flags() == ["--netfilter"]
        assert NetFilter.file("/etc/firejail/nolocal.net").flags() == [
            "--netfilter=/etc/firejail/nolocal.net"
        ]
        assert NetFilter.file(Path("/etc/firejail/tcpserver.net"), ["80"]).flags() == [
            "--netfilter=/etc/firejail/tcpserver.net,80"
        ]


class TestSandboxSettings:

    def test_join_variants(self):
        assert Join.not_specified().flags() == []
        assert Join.sandbox("browser").flags() == ["--join=browser"]
        assert Join.sandbox(3272).flags() == ["--join=3272"]
        assert Join.filesystem("browser").flags() == ["--join-filesystem=browser"]
        assert Join.network("browser").flags() == ["--join-network=browser"]
        assert Join.or_start("browser").flags() == ["--join-or-start=browser"]

    def test_overlay_variants(self):
        assert Overlay.not_specified().flags() == []
        assert Overlay.overlay().flags() == ["--overlay"]
        assert Overlay.named("work").flags() == ["--overlay-named=work"]
        assert Overlay.tmpfs().flags() == ["--overlay-tmpfs"]

    def test_private_variants(self):
        assert Private.not_specified().flags() == []
        assert Private.enabled().flags() == ["--private"]
        assert Private.directory(Path("/home/u/sandbox")).flags() == ["--private=/home/u/sandbox"]

    def test_private_list_uses_kind(self):
        assert PrivateList.not_specified().flags("etc") == []
        assert PrivateList.default().flags("etc") == ["--private-etc"]
        assert PrivateList.files(["bash", "ls"]).flags("bin") == ["--private-bin=bash,ls"]

    def test_seccomp_variants(self):
        assert Seccomp.not_specified().flags() == []
        assert Seccomp.default().flags() == ["--seccomp"]
        assert Seccomp.extend(["mount", "umount2"]).flags() == ["--seccomp=mount,umount2"]
        assert Seccomp.drop(["mount"]).flags() == ["--seccomp.drop=mount"]
        assert Seccomp.keep(["read", "write"]).flags() == ["--seccomp.keep=read,write"]

    def test_shell_variants(self):
        assert Shell.not_specified().flags() == []
        assert Shell.none().flags() == ["--shell=none"]
        assert Shell.program("/bin/dash").flags() == ["--shell=/bin/dash"]

    def test_x11_variants(self):
        assert X11.NOT_SPECIFIED.flags() == []
        assert X11.AUTO.flags() == ["--x11"]
        assert X11.NONE.flags() == ["--x11=none"]
        assert X11.XEPHYR.flags() == ["--x11=xephyr"]
        assert X11.XORG.flags() == ["--x11=xorg"]
        assert X11.XPRA.flags() == ["--x11=xpra"]
        assert X11.XVFB.flags() == ["--x11=xvfb"]


class TestSettingBase:

    @pytest.mark.parametrize("family", [CapsDrop, Net, IpConfig, NetFilter, Join, Overlay,
                                        Private, PrivateList, Seccomp, Shell])
    def test_family_base_is_abstract(self, family):
        """Only concrete variants can be instantiated."""
        with pytest.raises(TypeError):
            family()

    def test_equal_variants_compare_equal(self):
        assert Net.none() == Net.none()
        assert Net.interface("eth0") == Net.interface("eth0")
        assert Net.interface("eth0") != Net.interface("eth1")
        assert Net.none() != IpConfig.none()

    def test_as_text_keeps_values_literal(self):
        assert as_text(Path("/tmp/a b")) == "/tmp/a b"
        assert as_text(42) == "42"
        assert as_text("x,y;z") == "x,y;z"
        assert as_text(b"/tmp/x") == "/tmp/x"
        assert Private.directory(b"/home/u/box").flags() == ["--private=/home/u/box"]
