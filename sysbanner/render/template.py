"""
Template expansion against a Context.

Markup:
    ${key}        template variable (dotted name), error if undefined
    %{expr}       Python expression over the scripting globals
    #{command}    shell command, run with the context's shell environment
    \\$ \\% \\# \\\\   literal characters

Braces inside a block must balance.
"""
from __future__ import annotations
import subprocess
from pathlib import Path
from typing import Iterator, Tuple

from ..context.store import Context, stringify
from ..errors import TemplateError, TemplateReadError

OPENERS = {"$": "var", "%": "script", "#": "shell"}
ESCAPABLE = "$%#\\"

DEFAULT_TEMPLATE = r"""%{ bold(user) }@%{ bold(host) }
%{ "-" * (len(user) + len(host) + 1) }
%{ label("OS") }${distro} ${kernel.architecture}%{ field("Host", "hostModel") }
%{ label("Kernel") }${kernel.version}
%{ label("Uptime") }${uptime}%{ field("Packages", "packages") }
%{ label("Shell") }${shell}%{ field("Resolution", "resolution") }%{ field("DE", "de") }%{ field("WM", "wm") }%{ field("CPU", "cpu") }%{ field("GPU", "gpus") }%{ "\n\n" + palette() if palette() else "" }"""


def load_source(path: Path) -> str:
    """The override template if it exists, the bundled default otherwise.

    An override that exists but cannot be read is an error, not a reason to
    fall back to the default.
    """
    if not path.exists():
        return DEFAULT_TEMPLATE
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateReadError(path, e) from e


def _line_of(source: str, pos: int) -> int:
    return source.count("\n", 0, pos) + 1

def _closing_brace(source: str, start: int) -> int:
    depth = 0
    for j in range(start, len(source)):
        if source[j] == "{":
            depth += 1
        elif source[j] == "}":
            depth -= 1
            if depth == 0:
                return j
    raise TemplateError(f"line {_line_of(source, start)}: unterminated block")

def scan(source: str) -> Iterator[Tuple[str, str, int]]:
    """Yield (kind, body, line) pieces; kind is "text", "var", "script" or "shell"."""
    buf: list[str] = []
    i, n = 0, len(source)
    while i < n:
        ch = source[i]
        if ch == "\\" and i + 1 < n and source[i + 1] in ESCAPABLE:
            buf.append(source[i + 1]); i += 2
            continue
        if ch in OPENERS and source.startswith("{", i + 1):
            end = _closing_brace(source, i + 1)
            if buf:
                yield "text", "".join(buf), 0
                buf = []
            yield OPENERS[ch], source[i + 2:end], _line_of(source, i)
            i = end + 1
            continue
        buf.append(ch); i += 1
    if buf:
        yield "text", "".join(buf), 0


class Renderer:
    def __init__(self, ctx: Context):
        self.ctx = ctx

    def render(self, source: str) -> str:
        out = []
        for kind, body, line in scan(source):
            if kind == "text":
                out.append(body)
            elif kind == "var":
                out.append(self._var(body.strip(), line))
            elif kind == "script":
                out.append(self._script(body, line))
            else:
                out.append(self._shell(body, line))
        return "".join(out)

    def _var(self, key: str, line: int) -> str:
        if key not in self.ctx.template_vars:
            raise TemplateError(f"line {line}: undefined variable '{key}'")
        return stringify(self.ctx.template_vars[key])

    def _script(self, expr: str, line: int) -> str:
        try:
            value = self.ctx.script.evaluate(expr)
        except Exception as e:
            raise TemplateError(f"line {line}: %{{{expr.strip()}}}: {type(e).__name__}: {e}") from e
        return "" if value is None else str(value)

    def _shell(self, command: str, line: int) -> str:
        try:
            r = subprocess.run(command, shell=True, capture_output=True, text=True,
                               stdin=subprocess.DEVNULL, env=self.ctx.shell_env, timeout=10)
        except (subprocess.SubprocessError, OSError, ValueError) as e:
            raise TemplateError(f"line {line}: #{{{command.strip()}}}: {e}") from e
        if r.returncode != 0:
            raise TemplateError(
                f"line {line}: #{{{command.strip()}}} exited with {r.returncode}: {r.stderr.strip()}")
        return r.stdout.rstrip("\n")
