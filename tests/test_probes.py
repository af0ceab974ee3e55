"""Tests for the fact probes, driven through canned command output."""

from types import SimpleNamespace

import pytest

from sysbanner.errors import PrepareError
from sysbanner.probes import display, hardware, packages, system
from sysbanner.probes.base import Absent
from sysbanner.probes.display import (
    De, Resolution, Wm, desktop_from_env, parse_system_profiler, parse_xprop_name,
    parse_xprop_window, parse_xrandr, windows_theme,
)
from sysbanner.probes.hardware import Cpu, Gpu, clean_cpu_name, cpuinfo_model, parse_lspci, short_vendor
from sysbanner.probes.packages import PackageManagers, available_managers
from sysbanner.probes.system import Distro, Kernel, Uptime, format_uptime, parse_version

LINUX = SimpleNamespace(system="Linux", release="6.9.1", machine="x86_64")
DARWIN = SimpleNamespace(system="Darwin", release="23.4.0", machine="arm64")
HAIKU = SimpleNamespace(system="Haiku", release="r1beta4", machine="x86_64")

XRANDR = """\
Screen 0: minimum 320 x 200, current 4480 x 1440, maximum 16384 x 16384
eDP-1 connected primary 1920x1080+0+0 (normal left inverted right x axis y axis) 344mm x 194mm
   1920x1080     60.01*+  59.97    59.96
   1680x1050     59.95
HDMI-1 connected 2560x1440+1920+0 (normal left inverted right x axis y axis) 597mm x 336mm
   2560x1440     59.95 +  143.91*
   1920x1080     60.00
"""

LSPCI = """\
00:00.0 "Host bridge" "Intel Corporation" "11th Gen Core Processor Host Bridge" -r01 "Lenovo" "Device 22e2"
00:02.0 "VGA compatible controller" "Intel Corporation" "TigerLake-LP GT2 [Iris Xe Graphics]" -r01 "Lenovo" "Device 22e2"
01:00.0 "3D controller" "NVIDIA Corporation" "GA107M [GeForce RTX 3050 Mobile]" -ra1 "Lenovo" "Device 22e2"
"""


class TestSystemProbes:
    """Test suite for kernel, distro, uptime and shell helpers."""

    def test_kernel_publish(self, ctx, monkeypatch):
        monkeypatch.setattr(system.platform, "uname", lambda: SimpleNamespace(
            system="Linux", release="6.9.1", machine="x86_64"))
        Kernel().publish(ctx)
        assert ctx.template_vars["kernel"] == "Linux 6.9.1"
        assert ctx.env["kernel_architecture"] == "x86_64"

    def test_distro_on_unknown_kernel(self, ctx):
        d = Distro(HAIKU)
        d.publish(ctx)
        assert d.id == "haiku"
        assert ctx.template_vars["distro"] == "Haiku r1beta4"
        assert ctx.template_vars["distro.codename"] == ""

    def test_distro_on_linux_uses_distro_library(self, monkeypatch):
        monkeypatch.setattr(system.distro, "id", lambda: "arch")
        monkeypatch.setattr(system.distro, "name", lambda pretty=False: "Arch Linux")
        monkeypatch.setattr(system.distro, "version", lambda: "")
        monkeypatch.setattr(system.distro, "codename", lambda: "")
        d = Distro(LINUX)
        assert (d.id, d.pretty) == ("arch", "Arch Linux")

    @pytest.mark.parametrize(
        "out,expected",
        [
            ("GNU bash, version 5.2.15(1)-release (x86_64-pc-linux-gnu)\nCopyright", "5.2.15"),
            ("zsh 5.9 (x86_64-pc-linux-gnu)", "5.9"),
            ("fish, version 3.7.1", "3.7.1"),
            ("", ""),
        ],
    )
    def test_parse_version(self, out, expected):
        assert parse_version(out) == expected

    def test_uptime_prepare_splits_seconds(self, ctx):
        u = Uptime(HAIKU)
        u.now, u.boot_time = 1_000_000.0, 1_000_000.0 - (2 * 86400 + 3 * 3600 + 4 * 60 + 5)
        u.prepare()
        u.publish(ctx)
        assert u.parts == (2, 3, 4, 5)
        assert ctx.template_vars["uptime"] == "2 days, 3 hours, 4 mins"
        assert ctx.script.get("uptimeSeconds") == 5

    def test_uptime_in_the_future_fails(self):
        u = Uptime(HAIKU)
        u.boot_time = u.now + 60
        with pytest.raises(PrepareError):
            u.prepare()

    def test_format_uptime(self):
        assert format_uptime(1, 1, 1) == "1 day, 1 hour, 1 min"
        assert format_uptime(0, 0, 0) == "0 mins"

    def test_shell_version(self, ctx, monkeypatch):
        monkeypatch.setenv("SHELL", "/usr/bin/zsh")
        monkeypatch.setattr(system, "run_cmd", lambda cmd, timeout=5: "zsh 5.9 (x86_64)")
        s = system.Shell(LINUX)
        s.publish(ctx)
        assert ctx.template_vars["shell"] == "zsh 5.9"
        assert ctx.template_vars["shell.path"] == "/usr/bin/zsh"


class TestPackageManagers:
    """Test suite for package counting."""

    @pytest.fixture
    def installed(self, monkeypatch):
        present = {"pacman", "flatpak", "snap", "port"}
        monkeypatch.setattr(packages.shutil, "which", lambda b: f"/usr/bin/{b}" if b in present else None)
        outputs = {
            "pacman": "a\nb\nc\n",
            "flatpak": "",
            "snap": "Name  Version\ncore  16\nlxd  5.0\n",
        }
        monkeypatch.setattr(packages, "run_cmd", lambda cmd, timeout=5: outputs[
            next(pm for pm, c in packages.LIST_CMDS.items() if c == cmd)])

    def test_available_filters_by_kernel_and_install(self, installed):
        assert available_managers(["snap", "pacman", "bogus"], "Linux") == ["snap", "pacman", "flatpak"]

    def test_counts_skip_headers_and_empty_managers(self, ctx, installed):
        pms = PackageManagers(LINUX, ["pacman", "snap", "flatpak"])
        pms.publish(ctx)
        assert pms.counts == [("pacman", 3), ("snap", 2)]
        assert ctx.template_vars["packages"] == "3 (pacman), 2 (snap)"
        assert ctx.template_vars["packages.total"] == 5
        assert ctx.script.get("packageManagers") == ["pacman", "snap"]
        assert ctx.env["packages_pacman"] == "3"


class TestDisplayProbes:
    """Test suite for resolution, window manager and desktop probes."""

    def test_parse_xrandr(self):
        assert parse_xrandr(XRANDR) == [(1920, 1080, 60.01), (2560, 1440, 143.91)]

    def test_parse_system_profiler(self):
        out = "Displays:\n  Color LCD:\n    Resolution: 2560 x 1600 Retina\n"
        assert parse_system_profiler(out) == [(2560, 1600, None)]

    def test_resolution_publish(self, ctx):
        Resolution([(1920, 1080, 60.01), (1280, 1024, None)]).publish(ctx)
        assert ctx.template_vars["resolution"] == "1920x1080 @ 60.01Hz, 1280x1024"
        assert ctx.template_vars["resolution.width"] == 1920
        assert ctx.template_vars["resolution.refresh"] == 60.01

    def test_resolution_headless_is_absent(self, monkeypatch):
        monkeypatch.setattr(display.sys, "platform", "linux")
        monkeypatch.delenv("DISPLAY", raising=False)
        assert isinstance(Resolution.detect(), Absent)

    def test_xprop_parsing(self):
        assert parse_xprop_window("_NET_SUPPORTING_WM_CHECK: window id # 0x1a00003") == "0x1a00003"
        assert parse_xprop_name('_NET_WM_NAME = "i3"') == "i3"
        assert parse_xprop_window("") == ""

    def test_wm_on_macos(self, ctx):
        Wm.detect(DARWIN).publish(ctx)
        assert ctx.template_vars["wm"] == "Quartz Compositor"

    def test_wm_without_session_is_absent(self, monkeypatch):
        monkeypatch.delenv("DISPLAY", raising=False)
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        assert isinstance(Wm.detect(LINUX), Absent)

    def test_wm_under_x11(self, monkeypatch):
        monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
        monkeypatch.setenv("DISPLAY", ":0")
        replies = iter(["_NET_SUPPORTING_WM_CHECK: window id # 0x600002\n", '_NET_WM_NAME = "Openbox"\n'])
        monkeypatch.setattr(display, "run_cmd", lambda cmd, timeout=5: next(replies))
        assert Wm.detect(LINUX).wm_name == "Openbox"

    @pytest.mark.parametrize(
        "raw,distro_id,expected",
        [("ubuntu:GNOME", "ubuntu", "GNOME"), ("KDE", "arch", "Plasma"),
         ("X-Cinnamon", "linuxmint", "Cinnamon"), ("Hyperdesk", "arch", "Hyperdesk"), ("", "arch", "")],
    )
    def test_desktop_from_env(self, raw, distro_id, expected):
        assert desktop_from_env(raw, distro_id) == expected

    def test_de_detect_with_version(self, ctx, monkeypatch):
        monkeypatch.setenv("XDG_CURRENT_DESKTOP", "ubuntu:GNOME")
        monkeypatch.setattr(display, "run_cmd", lambda cmd, timeout=5: "GNOME Shell 46.0\n")
        De.detect(LINUX, SimpleNamespace(id="ubuntu", version="24.04")).publish(ctx)
        assert ctx.template_vars["de"] == "GNOME 46.0"
        assert ctx.script.get("deName") == "GNOME"

    def test_de_missing_is_absent(self, monkeypatch):
        monkeypatch.delenv("XDG_CURRENT_DESKTOP", raising=False)
        monkeypatch.delenv("DESKTOP_SESSION", raising=False)
        assert isinstance(De.detect(LINUX, SimpleNamespace(id="arch", version="")), Absent)

    def test_windows_theme(self):
        assert windows_theme("11") == "Fluent"
        assert windows_theme("10") == "Metro"
        assert windows_theme("XP") == ""


class TestHardwareProbes:
    """Test suite for CPU and GPU probes."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Intel(R) Core(TM) i7-8550U CPU @ 1.80GHz", "Intel Core i7-8550U"),
            ("AMD Ryzen 7 5800X 8-Core Processor", "AMD Ryzen 7 5800X"),
            ("Apple M2", "Apple M2"),
        ],
    )
    def test_clean_cpu_name(self, raw, expected):
        assert clean_cpu_name(raw) == expected

    def test_cpuinfo_model(self):
        text = "processor\t: 0\nvendor_id\t: GenuineIntel\nmodel name\t: Intel(R) Xeon(R)\n"
        assert cpuinfo_model(text) == "Intel(R) Xeon(R)"
        assert cpuinfo_model("") == ""

    def test_cpu_prepare_and_publish(self, ctx):
        cpu = Cpu("AMD Ryzen 7 5800X 8-Core Processor", 8, 16, 4850.0)
        cpu.prepare()
        cpu.publish(ctx)
        assert ctx.template_vars["cpu"] == "AMD Ryzen 7 5800X (16) @ 4.85GHz"
        assert ctx.template_vars["cpu.freq"] == 4.85
        assert ctx.script.get("cpuThreads") == 16

    def test_cpu_without_frequency(self, ctx):
        cpu = Cpu("Apple M2", 8, 8, None)
        cpu.prepare()
        cpu.publish(ctx)
        assert ctx.template_vars["cpu"] == "Apple M2 (8)"
        assert "cpu.freq" not in ctx

    def test_cpu_unknown_is_absent(self, monkeypatch):
        monkeypatch.setattr(hardware.platform, "processor", lambda: "")
        assert isinstance(Cpu.detect(HAIKU), Absent)

    def test_parse_lspci(self):
        assert parse_lspci(LSPCI) == [
            "Intel TigerLake-LP GT2 [Iris Xe Graphics]",
            "NVIDIA GA107M [GeForce RTX 3050 Mobile]",
        ]

    def test_short_vendor(self):
        assert short_vendor("Advanced Micro Devices, Inc. [AMD/ATI]") == "AMD"
        assert short_vendor("NVIDIA Corporation") == "NVIDIA"

    def test_gpu_detect_and_publish(self, ctx, monkeypatch):
        monkeypatch.setattr(hardware, "run_cmd", lambda cmd, timeout=5: LSPCI)
        Gpu.detect(LINUX).publish(ctx)
        assert ctx.template_vars["gpu.count"] == 2
        assert ctx.template_vars["gpu"].startswith("Intel")
        assert ctx.env["gpus"].count(", ") == 1

    def test_gpu_none_is_absent(self, monkeypatch):
        monkeypatch.setattr(hardware, "run_cmd", lambda cmd, timeout=5: "")
        assert isinstance(Gpu.detect(LINUX), Absent)


class TestAbsent:
    """Test suite for the Absent variant."""

    def test_publishes_nothing(self, ctx):
        a = Absent("gpu")
        a.prepare()
        a.publish(ctx)
        assert ctx.template_vars == {}
        assert ctx.env == {}
        assert not a
