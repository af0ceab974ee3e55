"""Scripting globals: the namespace `%{...}` template blocks are evaluated in."""
from __future__ import annotations
import keyword
from typing import Any, Dict

from ..errors import ScriptAssignmentError
from ..util import ansi

SCRIPT_TYPES = (str, int, float, bool, type(None), list, tuple, dict)


class ScriptGlobals:
    def __init__(self):
        self.namespace: Dict[str, Any] = {}
        self.helpers = {
            "defined": self.defined,
            "field": self.field,
            "label": label,
            "bold": lambda s: ansi.BOLD(str(s)),
            "dim": lambda s: ansi.DIM(str(s)),
            "color": lambda s, code: ansi.c(str(s), code),
            "palette": palette,
        }
        self.namespace.update(self.helpers)

    def set(self, name: str, value: Any) -> None:
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ScriptAssignmentError(f"'{name}' is not a valid global name")
        if name in self.helpers:
            raise ScriptAssignmentError(f"'{name}' would shadow a template helper")
        if not isinstance(value, SCRIPT_TYPES):
            raise ScriptAssignmentError(
                f"cannot assign {type(value).__name__} to global '{name}'")
        self.namespace[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        if name in self.helpers:
            return default
        return self.namespace.get(name, default)

    def __contains__(self, name: str) -> bool:
        return name in self.namespace and name not in self.helpers

    def evaluate(self, expr: str) -> Any:
        # eval() adds __builtins__ to the dict it is given; keep that off the namespace
        return eval(compile(expr.strip(), "<template>", "eval"), dict(self.namespace))

    # ── helpers ──
    def defined(self, *names: str) -> bool:
        return all(n in self for n in names)

    def field(self, title: str, *names: str, sep: str = " ") -> str:
        """A "\\nTitle: value" line, or "" when any of `names` is missing or empty."""
        values = [self.get(n) for n in names]
        if not values or any(v in (None, "", [], ()) for v in values):
            return ""
        shown = [", ".join(map(str, v)) if isinstance(v, (list, tuple)) else str(v) for v in values]
        return "\n" + label(title) + sep.join(shown)


def label(title: str) -> str:
    return ansi.c(title, "1;34") + ": "

def palette() -> str:
    if not ansi.USE_COLOR:
        return ""
    return "".join(ansi.c("   ", f"4{i}") for i in range(8))
