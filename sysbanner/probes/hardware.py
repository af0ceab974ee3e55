"""CPU and GPU probes."""
from __future__ import annotations
import platform, re, shlex
from typing import List, Optional

import psutil

from ..util.commands import run_cmd, read_text
from .base import Absent, Inject

CPU_NOISE = [r"\((?:R|TM)\)", r"\s+CPU\b", r"\s*@\s*[\d.]+\s*GHz", r"\s+Processor\b", r"\s+\d+-Core\b"]
DISPLAY_CLASSES = ("VGA compatible controller", "3D controller", "Display controller")
VENDOR_SUFFIXES = re.compile(r",?\s+(?:Corporation|Corp\.|Inc\.|Co\., Ltd\.|Ltd\.)$")


def clean_cpu_name(name: str) -> str:
    for pat in CPU_NOISE:
        name = re.sub(pat, "", name, flags=re.IGNORECASE)
    return " ".join(name.split())

def cpuinfo_model(text: str) -> str:
    for key in ("model name", "Hardware", "Model", "cpu model"):
        m = re.search(rf"^{key}\s*:\s*(.+)$", text, re.MULTILINE)
        if m:
            return m.group(1).strip()
    return ""


class Cpu(Inject):
    name = "cpu"
    requires = ("kernel",)

    def __init__(self, model: str, cores: Optional[int], threads: Optional[int], mhz: Optional[float]):
        self.model = model
        self.cores = cores
        self.threads = threads
        self.mhz = mhz
        self.pretty = model
        self.ghz: Optional[float] = None

    @classmethod
    def detect(cls, kernel):
        model = ""
        if kernel.system == "Linux":
            model = cpuinfo_model(read_text("/proc/cpuinfo") or "")
        elif kernel.system == "Darwin":
            model = run_cmd(["sysctl", "-n", "machdep.cpu.brand_string"]).strip()
        model = model or platform.processor()
        if not model:
            return Absent(cls.name)
        try:
            freq = psutil.cpu_freq()
        except (OSError, NotImplementedError):
            freq = None
        mhz = (freq.max or freq.current) if freq else None
        return cls(model, psutil.cpu_count(logical=False), psutil.cpu_count(), mhz or None)

    def prepare(self):
        self.pretty = clean_cpu_name(self.model) or self.model
        if self.mhz:
            self.ghz = round(self.mhz / 1000, 2)

    def publish(self, ctx):
        shown = self.pretty
        if self.threads:
            shown += f" ({self.threads})"
        if self.ghz:
            shown += f" @ {self.ghz:.2f}GHz"
        ctx.set("cpu", shown)
        ctx.set("cpu.name", self.pretty)
        ctx.set("cpu.cores", self.cores)
        ctx.set("cpu.threads", self.threads)
        if self.ghz:
            ctx.set("cpu.freq", self.ghz)


def short_vendor(vendor: str) -> str:
    m = re.search(r"\[([^\]/]+)", vendor)
    if m:
        return m.group(1)
    return VENDOR_SUFFIXES.sub("", vendor).strip()

def parse_lspci(out: str) -> List[str]:
    """GPU names from `lspci -mm` (display-class devices only)."""
    gpus: List[str] = []
    for line in out.splitlines():
        try:
            fields = shlex.split(line)
        except ValueError:
            continue
        if len(fields) < 4 or fields[1] not in DISPLAY_CLASSES:
            continue
        gpus.append(f"{short_vendor(fields[2])} {fields[3]}".strip())
    return gpus

def parse_chipsets(out: str) -> List[str]:
    return [m.strip() for m in re.findall(r"Chipset Model:\s*(.+)", out)]


class Gpu(Inject):
    name = "gpu"
    requires = ("kernel",)

    def __init__(self, names: List[str]):
        self.names = names

    @classmethod
    def detect(cls, kernel):
        names: List[str] = []
        if kernel.system == "Linux":
            names = parse_lspci(run_cmd(["lspci", "-mm"]))
        elif kernel.system == "Darwin":
            names = parse_chipsets(run_cmd(["system_profiler", "SPDisplaysDataType"], timeout=10))
        return cls(names) if names else Absent(cls.name)

    def publish(self, ctx):
        ctx.set("gpu", self.names[0])
        ctx.set("gpus", list(self.names))
        ctx.set("gpu.count", len(self.names))
