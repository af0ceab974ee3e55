# tests/conftest.py
"""
Shared pytest fixtures for sysbanner tests.
"""

import os

import pytest

from sysbanner.context.store import Context
from sysbanner.info import ORDER, Probes
from sysbanner.probes.base import Inject
from sysbanner.util import ansi


class FakeProbe(Inject):
    """Publishes a fixed set of facts; optionally fails in prepare()."""

    def __init__(self, name, facts=None, fail=None, log=None):
        self.name = name
        self.facts = dict(facts or {})
        self.fail = fail
        self.log = log
        self.prepared = False

    def prepare(self):
        if self.log is not None:
            self.log.append(("prepare", self.name))
        if self.fail:
            raise self.fail
        self.prepared = True

    def publish(self, ctx):
        if self.log is not None:
            self.log.append(("publish", self.name))
        for key, value in self.facts.items():
            ctx.set(key, value)


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    """Render without escape codes unless a test turns them on."""
    monkeypatch.setattr(ansi, "USE_COLOR", False)


@pytest.fixture
def ctx():
    return Context(environ={"PATH": os.environ.get("PATH", "/usr/bin:/bin")})


@pytest.fixture
def fake_probe():
    return FakeProbe


@pytest.fixture
def base_facts():
    """Facts the bundled default template needs."""
    return {
        "user": {"user": "alice"},
        "host": {"host": "box"},
        "kernel": {"kernel.version": "6.9.1", "kernel.architecture": "x86_64"},
        "distro": {"distro": "Arch Linux", "distro.id": "arch"},
        "uptime": {"uptime": "1 hour"},
        "package_managers": {"packages": ""},
        "shell": {"shell": "bash 5.2"},
    }


@pytest.fixture
def make_probes():
    """Build a Probes set of FakeProbes; keyword args replace single probes."""

    def make(facts=None, log=None, **overrides):
        facts = facts or {}
        probes = {name: FakeProbe(name, facts.get(name, {}), log=log) for name in ORDER}
        probes.update(overrides)
        return Probes(**probes)

    return make
