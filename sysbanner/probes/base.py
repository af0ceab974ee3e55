"""Two-phase injection contract shared by probes and the orchestrator.

    prepare()       derive anything that can fail; raise FetchError to abort the run
    publish(ctx)    write the derived facts with ctx.set(); no I/O here

Probes gather their raw facts in __init__, from the probes listed in
`requires` (passed in, never stored).
"""
from __future__ import annotations
from typing import Tuple


class Inject:
    name: str = ""
    requires: Tuple[str, ...] = ()

    def prepare(self) -> None:
        pass

    def publish(self, ctx) -> None:
        raise NotImplementedError


class Absent(Inject):
    """A fact this machine does not have. Publishes nothing."""

    def __init__(self, name: str):
        self.name = name

    def publish(self, ctx) -> None:
        pass

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Absent({self.name!r})"
