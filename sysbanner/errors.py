"""Error types and diagnostics."""
from __future__ import annotations
import sys

from .util.ansi import RED


class FetchError(Exception):
    """A failure that ends the run: nothing is printed to stdout after it."""


class PrepareError(FetchError):
    pass


class TemplateReadError(FetchError):
    def __init__(self, path, cause: Exception):
        super().__init__(f"could not read template {str(path)!r}: {cause}")
        self.path = path
        self.cause = cause


class ConfigReadError(FetchError):
    def __init__(self, path, cause: Exception):
        super().__init__(f"could not read config {str(path)!r}: {cause}")
        self.path = path
        self.cause = cause


class TemplateError(FetchError):
    pass


class ScriptAssignmentError(Exception):
    """The scripting namespace refused a global; only that key is lost."""


def handle(message: str) -> None:
    print(f"{RED('error')}: {message}", file=sys.stderr)
