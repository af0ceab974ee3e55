"""
Info: builds every probe, publishes their facts, renders the banner text.

Probes are built in ORDER, a fixed topological order of the `requires`
declared on each probe class. A new probe must be slotted in after
everything it requires.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import Settings, info_template_path
from .context.store import Context
from .probes.base import Inject
from .probes.display import De, Resolution, Wm
from .probes.hardware import Cpu, Gpu
from .probes.packages import PackageManagers
from .probes.system import Distro, Host, Kernel, Shell, Uptime, User
from .render.template import Renderer, load_source
from .util.ansi import dimensions

ORDER = ("user", "host", "kernel", "distro", "uptime", "package_managers",
         "shell", "resolution", "wm", "de", "cpu", "gpu")

PROBE_TYPES = {
    "user": User, "host": Host, "kernel": Kernel, "distro": Distro,
    "uptime": Uptime, "package_managers": PackageManagers, "shell": Shell,
    "resolution": Resolution, "wm": Wm, "de": De, "cpu": Cpu, "gpu": Gpu,
}


@dataclass
class Probes:
    user: Inject
    host: Inject
    kernel: Inject
    distro: Inject
    uptime: Inject
    package_managers: Inject
    shell: Inject
    resolution: Inject
    wm: Inject
    de: Inject
    cpu: Inject
    gpu: Inject

    def in_order(self) -> List[Inject]:
        return [getattr(self, name) for name in ORDER]


def collect(settings: Settings) -> Probes:
    user = User()
    host = Host()
    kernel = Kernel()
    distro = Distro(kernel)
    uptime = Uptime(kernel)
    package_managers = PackageManagers(kernel, settings.pm_order)
    shell = Shell(kernel)
    resolution = Resolution.detect()
    wm = Wm.detect(kernel)
    de = De.detect(kernel, distro)
    cpu = Cpu.detect(kernel)
    gpu = Gpu.detect(kernel)
    return Probes(user, host, kernel, distro, uptime, package_managers,
                  shell, resolution, wm, de, cpu, gpu)


class Info(Inject):
    name = "info"

    def __init__(self, probes: Optional[Probes] = None, settings: Optional[Settings] = None,
                 template_path: Optional[Path] = None, ctx: Optional[Context] = None):
        self.settings = settings or Settings()
        self.probes = probes if probes is not None else collect(self.settings)
        self.template_path = template_path or info_template_path()
        self.ctx = ctx if ctx is not None else Context()
        self.rendered = ""
        self.width = 0
        self.height = 0

    def render(self) -> None:
        self.rendered = Renderer(self.ctx).render(load_source(self.template_path))

    def prepare(self) -> None:
        for probe in self.probes.in_order():
            probe.prepare()
            probe.publish(self.ctx)
        self.render()
        self.width, self.height = dimensions(self.rendered)

    def publish(self, ctx: Context) -> None:
        (ctx
            .set("info", self.rendered)
            .set("info.width", self.width)
            .set("info.height", self.height))

    def run(self) -> str:
        self.prepare()
        self.publish(self.ctx)
        return self.rendered
