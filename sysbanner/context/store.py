"""
The shared context facts are published into.

A single `Context.set(key, value)` replicates the value into every surface:

    template_vars   "info.width" -> 2        read by ${...} blocks
    env             "info_width" -> "2"      environment-style mapping
    shell_env       "info_width" -> "2"      env for #{...} blocks (process env + env)
    script          "infoWidth"  -> 2        globals for %{...} blocks

Probes only ever write; the orchestrator and the layout read.
"""
from __future__ import annotations
import os, re
from typing import Any, Dict, Mapping, Optional

from .. import errors
from .scripting import ScriptGlobals


def env_name(key: str) -> str:
    return key.replace(".", "_")

def script_name(key: str) -> str:
    head, *rest = re.split(r"[._]", key)
    return head + "".join(p[:1].upper() + p[1:] for p in rest)

def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(v) for v in value)
    return str(value)


class Context:
    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.template_vars: Dict[str, Any] = {}
        self.env: Dict[str, str] = {}
        self.shell_env: Dict[str, str] = dict(os.environ if environ is None else environ)
        self.script = ScriptGlobals()

    def set(self, key: str, value: Any) -> "Context":
        self.template_vars[key] = value

        text = stringify(value)
        self.env[env_name(key)] = text
        self.shell_env[env_name(key)] = text

        try:
            self.script.set(script_name(key), value)
        except errors.ScriptAssignmentError as e:
            errors.handle(f"script global for '{key}' dropped: {e}")
        return self

    def __contains__(self, key: str) -> bool:
        return key in self.template_vars
