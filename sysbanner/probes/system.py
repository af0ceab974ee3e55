"""System identity: user, host, kernel, distro, uptime, shell."""
from __future__ import annotations
import getpass, os, platform, re, socket, time

import distro
import psutil

from ..errors import PrepareError
from ..util.commands import run_cmd, read_text
from .base import Inject

DMI_JUNK = {"", "To be filled by O.E.M.", "System Product Name", "Default string", "None"}
VERSION_RE = re.compile(r"(\d+(?:\.\d+)+)")


class User(Inject):
    name = "user"

    def __init__(self):
        try:
            self.login = getpass.getuser()
        except (KeyError, OSError):
            self.login = os.environ.get("USER", "")

    def publish(self, ctx):
        ctx.set("user", self.login)


class Host(Inject):
    name = "host"

    def __init__(self):
        self.hostname = socket.gethostname() or platform.node()
        self.model = _dmi_model()

    def publish(self, ctx):
        ctx.set("host", self.hostname)
        if self.model:
            ctx.set("host.model", self.model)


def _dmi_model() -> str:
    parts = []
    for f in ("product_name", "product_version"):
        v = (read_text(f"/sys/devices/virtual/dmi/id/{f}") or "").strip()
        if v not in DMI_JUNK:
            parts.append(v)
    return " ".join(parts)


class Kernel(Inject):
    name = "kernel"

    def __init__(self):
        u = platform.uname()
        self.system = u.system
        self.release = u.release
        self.machine = u.machine

    def publish(self, ctx):
        ctx.set("kernel", f"{self.system} {self.release}".strip())
        ctx.set("kernel.name", self.system)
        ctx.set("kernel.version", self.release)
        ctx.set("kernel.architecture", self.machine)


class Distro(Inject):
    name = "distro"
    requires = ("kernel",)

    def __init__(self, kernel: Kernel):
        self.codename = ""
        if kernel.system == "Linux":
            self.id = distro.id() or "linux"
            self.full_name = distro.name() or "Linux"
            self.version = distro.version()
            self.codename = distro.codename()
            self.pretty = distro.name(pretty=True) or self.full_name
        elif kernel.system == "Darwin":
            self.id, self.full_name = "macos", "macOS"
            self.version = platform.mac_ver()[0]
            self.pretty = f"macOS {self.version}".strip()
        elif kernel.system == "Windows":
            self.id, self.full_name = "windows", "Windows"
            self.version = platform.win32_ver()[0]
            self.pretty = f"Windows {self.version}".strip()
        else:
            self.id = kernel.system.lower()
            self.full_name = kernel.system
            self.version = kernel.release
            self.pretty = f"{kernel.system} {kernel.release}".strip()

    def publish(self, ctx):
        ctx.set("distro", self.pretty)
        ctx.set("distro.name", self.full_name)
        ctx.set("distro.id", self.id)
        ctx.set("distro.version", self.version)
        ctx.set("distro.codename", self.codename)


class Uptime(Inject):
    name = "uptime"
    requires = ("kernel",)

    def __init__(self, kernel: Kernel):
        self.now = time.time()
        self.boot_time = None
        if kernel.system == "Linux":
            raw = read_text("/proc/uptime") or ""
            try:
                self.boot_time = self.now - float(raw.split()[0])
            except (IndexError, ValueError):
                pass
        if self.boot_time is None:
            self.boot_time = psutil.boot_time()
        self.parts = (0, 0, 0, 0)

    def prepare(self):
        total = int(self.now - self.boot_time)
        if total < 0:
            raise PrepareError(f"boot time lies {-total}s in the future")
        days, rem = divmod(total, 86400)
        hours, rem = divmod(rem, 3600)
        minutes, seconds = divmod(rem, 60)
        self.parts = (days, hours, minutes, seconds)

    def publish(self, ctx):
        days, hours, minutes, seconds = self.parts
        ctx.set("uptime", format_uptime(days, hours, minutes))
        ctx.set("uptime.days", days)
        ctx.set("uptime.hours", hours)
        ctx.set("uptime.minutes", minutes)
        ctx.set("uptime.seconds", seconds)


def format_uptime(days: int, hours: int, minutes: int) -> str:
    out = []
    for n, unit in ((days, "day"), (hours, "hour"), (minutes, "min")):
        if n:
            out.append(f"{n} {unit}{'s' if n != 1 else ''}")
    return ", ".join(out) or "0 mins"


class Shell(Inject):
    name = "shell"
    requires = ("kernel",)

    def __init__(self, kernel: Kernel):
        if kernel.system == "Windows":
            self.path = os.environ.get("COMSPEC", "")
            self.version = ""
        else:
            self.path = os.environ.get("SHELL", "")
            self.version = parse_version(run_cmd([self.path, "--version"])) if self.path else ""
        self.shell_name = os.path.basename(self.path)
        if self.shell_name.lower().endswith(".exe"):
            self.shell_name = self.shell_name[:-4]

    def publish(self, ctx):
        ctx.set("shell", f"{self.shell_name} {self.version}".strip())
        ctx.set("shell.name", self.shell_name)
        ctx.set("shell.path", self.path)
        ctx.set("shell.version", self.version)


def parse_version(out: str) -> str:
    """First dotted version number on the first line of `--version` output."""
    first = out.strip().splitlines()[0] if out.strip() else ""
    m = VERSION_RE.search(first)
    return m.group(1) if m else ""
