"""Graphical session facts: resolution, window manager, desktop environment.

All three are optional: on a headless box `detect()` returns `Absent`.
"""
from __future__ import annotations
import os, re, sys
from typing import List, Optional, Tuple

import psutil

from ..util.commands import run_cmd
from .base import Absent, Inject
from .system import parse_version

Mode = Tuple[int, int, Optional[float]]

XRANDR_MODE_RE = re.compile(r"^\s+(\d+)x(\d+)\S*\s+(.*)$")
MACOS_RES_RE = re.compile(r"Resolution:\s*(\d+)\s*x\s*(\d+)")

# process name -> compositor name
WAYLAND_WMS = {
    "sway": "Sway", "Hyprland": "Hyprland", "kwin_wayland": "KWin",
    "gnome-shell": "Mutter", "weston": "Weston", "river": "river",
    "wayfire": "Wayfire", "labwc": "labwc", "niri": "niri", "cage": "Cage",
}

DE_NAMES = {
    "gnome": "GNOME", "kde": "Plasma", "plasma": "Plasma", "x-cinnamon": "Cinnamon",
    "cinnamon": "Cinnamon", "xfce": "Xfce", "mate": "MATE", "lxqt": "LXQt",
    "lxde": "LXDE", "budgie": "Budgie", "unity": "Unity", "pantheon": "Pantheon",
    "deepin": "Deepin",
}

DE_VERSION_CMDS = {
    "GNOME":    ["gnome-shell", "--version"],
    "Plasma":   ["plasmashell", "--version"],
    "Xfce":     ["xfce4-session", "--version"],
    "Cinnamon": ["cinnamon", "--version"],
    "MATE":     ["mate-session", "--version"],
    "LXQt":     ["lxqt-session", "--version"],
    "Budgie":   ["budgie-desktop", "--version"],
}


# ── resolution ──
def parse_xrandr(out: str) -> List[Mode]:
    """Active modes ("*"-marked) from `xrandr --current`."""
    modes: List[Mode] = []
    for line in out.splitlines():
        m = XRANDR_MODE_RE.match(line)
        if not m or "*" not in m.group(3):
            continue
        rate, last = None, ""
        for tok in m.group(3).split():
            num = tok.rstrip("*+")
            if num:
                last = num
            if "*" in tok:
                try: rate = float(last)
                except ValueError: rate = None
                break
        modes.append((int(m.group(1)), int(m.group(2)), rate))
    return modes

def parse_system_profiler(out: str) -> List[Mode]:
    return [(int(w), int(h), None) for w, h in MACOS_RES_RE.findall(out)]


class Resolution(Inject):
    name = "resolution"

    def __init__(self, modes: List[Mode]):
        self.modes = modes

    @classmethod
    def detect(cls):
        modes: List[Mode] = []
        if sys.platform.startswith("linux") and os.environ.get("DISPLAY"):
            modes = parse_xrandr(run_cmd(["xrandr", "--current"]))
        elif sys.platform == "darwin":
            modes = parse_system_profiler(run_cmd(["system_profiler", "SPDisplaysDataType"], timeout=10))
        return cls(modes) if modes else Absent(cls.name)

    def publish(self, ctx):
        shown = [f"{w}x{h}" + (f" @ {rate:g}Hz" if rate else "") for w, h, rate in self.modes]
        w, h, rate = self.modes[0]
        ctx.set("resolution", ", ".join(shown))
        ctx.set("resolution.width", w)
        ctx.set("resolution.height", h)
        if rate:
            ctx.set("resolution.refresh", rate)


# ── window manager ──
def parse_xprop_window(out: str) -> str:
    """Window id from `xprop -root _NET_SUPPORTING_WM_CHECK`."""
    m = re.search(r"#\s*(0x[0-9a-fA-F]+)", out)
    return m.group(1) if m else ""

def parse_xprop_name(out: str) -> str:
    m = re.search(r'_NET_WM_NAME\S*\s*=\s*"([^"]*)"', out)
    return m.group(1) if m else ""

def _x11_wm() -> str:
    wid = parse_xprop_window(run_cmd(["xprop", "-root", "-notype", "_NET_SUPPORTING_WM_CHECK"]))
    if not wid:
        return ""
    return parse_xprop_name(run_cmd(["xprop", "-id", wid, "-notype", "-len", "100", "-f", "_NET_WM_NAME", "8t"]))

def _wayland_wm() -> str:
    for proc in psutil.process_iter(["name"]):
        name = proc.info.get("name") or ""
        if name in WAYLAND_WMS:
            return WAYLAND_WMS[name]
    return ""


class Wm(Inject):
    name = "wm"
    requires = ("kernel",)

    def __init__(self, wm_name: str):
        self.wm_name = wm_name

    @classmethod
    def detect(cls, kernel):
        found = ""
        if kernel.system == "Darwin":
            found = "Quartz Compositor"
        elif kernel.system == "Windows":
            found = "DWM"
        elif os.environ.get("WAYLAND_DISPLAY"):
            found = _wayland_wm()
        elif os.environ.get("DISPLAY"):
            found = _x11_wm()
        return cls(found) if found else Absent(cls.name)

    def publish(self, ctx):
        ctx.set("wm", self.wm_name)


# ── desktop environment ──
def desktop_from_env(value: str, distro_id: str) -> str:
    """Desktop name from XDG_CURRENT_DESKTOP, skipping distro tags like "ubuntu:"."""
    for part in value.split(":"):
        part = part.strip()
        if part and part.lower() != distro_id.lower():
            return DE_NAMES.get(part.lower(), part)
    return ""

def windows_theme(version: str) -> str:
    major = version.split(".")[0]
    if major == "11": return "Fluent"
    if major in ("8", "10"): return "Metro"
    if major in ("7", "Vista"): return "Aero"
    return ""


class De(Inject):
    name = "de"
    requires = ("kernel", "distro")

    def __init__(self, de_name: str, version: str = ""):
        self.de_name = de_name
        self.version = version

    @classmethod
    def detect(cls, kernel, distro):
        if kernel.system == "Darwin":
            return cls("Aqua")
        if kernel.system == "Windows":
            theme = windows_theme(distro.version)
            return cls(theme) if theme else Absent(cls.name)
        raw = os.environ.get("XDG_CURRENT_DESKTOP") or os.environ.get("DESKTOP_SESSION") or ""
        found = desktop_from_env(raw, distro.id)
        if not found:
            return Absent(cls.name)
        cmd = DE_VERSION_CMDS.get(found)
        return cls(found, parse_version(run_cmd(cmd)) if cmd else "")

    def publish(self, ctx):
        ctx.set("de", f"{self.de_name} {self.version}".strip())
        ctx.set("de.name", self.de_name)
        ctx.set("de.version", self.version)
