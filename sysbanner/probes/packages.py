"""
Installed-package counts per package manager.

- Reads an ORDER you pass in (from config) and filters to installed managers
  that make sense on this kernel.
- Counts packages by running each manager's list command and counting lines.

Public API:
    available_managers(order: list[str], system: str) -> list[str]
    count_packages(manager: str) -> int
    PackageManagers(kernel, order)
"""

from __future__ import annotations
import shutil
from typing import Dict, List, Tuple

from ..util.commands import run_cmd
from .base import Inject

DEFAULT_ORDER = ["pacman", "dpkg", "rpm", "xbps", "apk", "nix", "port", "brew", "flatpak", "snap"]

# ---------------- Registry ----------------

# How to list installed packages, one per line
LIST_CMDS: Dict[str, List[str]] = {
    "pacman":  ["pacman", "-Qq"],
    "dpkg":    ["dpkg-query", "-f", ".\n", "-W"],
    "rpm":     ["rpm", "-qa"],
    "xbps":    ["xbps-query", "-l"],
    "apk":     ["apk", "info"],
    "nix":     ["nix-store", "-q", "--requisites", "/run/current-system/sw"],
    "port":    ["port", "installed"],
    "brew":    ["brew", "list", "--formula"],
    "flatpak": ["flatpak", "list", "--columns=application"],
    "snap":    ["snap", "list"],
}

# Kernels each manager is looked for on, and header lines to skip in its output
PM_INFO: Dict[str, Dict[str, object]] = {
    "pacman":  {"kernels": ("Linux",),          "header": 0},
    "dpkg":    {"kernels": ("Linux",),          "header": 0},
    "rpm":     {"kernels": ("Linux",),          "header": 0},
    "xbps":    {"kernels": ("Linux",),          "header": 0},
    "apk":     {"kernels": ("Linux",),          "header": 0},
    "nix":     {"kernels": ("Linux", "Darwin"), "header": 0},
    "port":    {"kernels": ("Darwin",),         "header": 1},
    "brew":    {"kernels": ("Darwin", "Linux"), "header": 0},
    "flatpak": {"kernels": ("Linux",),          "header": 0},
    "snap":    {"kernels": ("Linux",),          "header": 1},
}

def is_known_pm(name: str) -> bool:
    return name in LIST_CMDS and name in PM_INFO

# ---------------- Availability & order ----------------

def available_managers(order: List[str], system: str) -> List[str]:
    """
    Filter the configured order to managers installed on this kernel.
    Known managers missing from the order are appended after it.
    """
    out: List[str] = []
    for pm in list(order) + [pm for pm in LIST_CMDS if pm not in order]:
        if pm in out or not is_known_pm(pm):
            continue
        if system in PM_INFO[pm]["kernels"] and shutil.which(LIST_CMDS[pm][0]):
            out.append(pm)
    return out

# ---------------- Counting ----------------

def count_packages(pm: str) -> int:
    out = run_cmd(LIST_CMDS[pm], timeout=15)
    lines = [l for l in out.splitlines() if l.strip()]
    return len(lines[int(PM_INFO[pm]["header"]):])


class PackageManagers(Inject):
    name = "package_managers"
    requires = ("kernel",)

    def __init__(self, kernel, order: List[str] | None = None):
        self.counts: List[Tuple[str, int]] = []
        for pm in available_managers(order or DEFAULT_ORDER, kernel.system):
            n = count_packages(pm)
            if n > 0:
                self.counts.append((pm, n))

    def publish(self, ctx):
        ctx.set("packages", ", ".join(f"{n} ({pm})" for pm, n in self.counts))
        ctx.set("packages.total", sum(n for _, n in self.counts))
        ctx.set("package_managers", [pm for pm, _ in self.counts])
        for pm, n in self.counts:
            ctx.set(f"packages.{pm}", n)
