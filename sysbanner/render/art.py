"""Distro logos shown beside the info block."""
from __future__ import annotations

from ..probes.base import Inject
from ..util import ansi
from ..util.ansi import dimensions

# name -> (primary color, secondary color, logo); {c1}/{c2} switch colors
LOGOS = {
    "tux": ("1;37", "1;33", "\n".join([
        "{c1}    .--.",
        "{c1}   |o_o |",
        "{c1}   |{c2}:_/{c1} |",
        "{c1}  //   \\ \\",
        "{c1} (|     | )",
        "{c2}/'\\_   _/`\\",
        "{c2}\\___)=(___/",
    ])),
    "arch": ("1;36", "1;36", "\n".join([
        "{c1}       /\\",
        "{c1}      /  \\",
        "{c1}     /\\   \\",
        "{c1}    /      \\",
        "{c1}   /   ,,   \\",
        "{c1}  /   |  |  -\\",
        "{c1} /_-''    ''-_\\",
    ])),
    "debian": ("1;31", "1;31", "\n".join([
        "{c1}  _____",
        "{c1} /  __ \\",
        "{c1}|  /    |",
        "{c1}|  \\___-",
        "{c1}-_",
        "{c1}  --_",
    ])),
    "ubuntu": ("1;33", "1;31", "\n".join([
        "{c2}         _",
        "{c1}     ---{c2}(_)",
        "{c1} _/  ---  \\",
        "{c2}(_){c1} |   |",
        "{c1}  \\  --- {c2}_/",
        "{c1}     ---{c2}(_)",
    ])),
    "apple": ("1;32", "1;31", "\n".join([
        "{c1}        .:'",
        "{c1}    __ :'__",
        "{c2} .'`  `-'  ``.",
        "{c2}:          .-'",
        "{c2}:         :",
        "{c1} :         `-;",
        "{c1}  `.__.-.__.'",
    ])),
}

ALIASES = {"arch": "arch", "endeavouros": "arch", "debian": "debian", "raspbian": "debian",
           "ubuntu": "ubuntu", "pop": "ubuntu", "macos": "apple"}


def colorize(logo: str, c1: str, c2: str) -> str:
    if not ansi.USE_COLOR:
        return logo.replace("{c1}", "").replace("{c2}", "")
    text = logo.replace("{c1}", f"\033[{c1}m").replace("{c2}", f"\033[{c2}m")
    return "\n".join(line + "\033[0m" for line in text.split("\n"))


class Art(Inject):
    name = "art"
    requires = ("distro",)

    def __init__(self, distro):
        self.logo = ALIASES.get(distro.id, "tux")
        self.text = ""
        self.width = 0
        self.height = 0

    def prepare(self):
        c1, c2, logo = LOGOS[self.logo]
        self.text = colorize(logo, c1, c2)
        self.width, self.height = dimensions(self.text)

    def publish(self, ctx):
        ctx.set("art", self.text)
        ctx.set("art.width", self.width)
        ctx.set("art.height", self.height)
