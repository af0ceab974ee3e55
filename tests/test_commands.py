"""Tests for the command and file helpers."""

import subprocess

from sysbanner.util import commands
from sysbanner.util.commands import read_text, run_cmd


class TestRunCmd:
    """Test suite for run_cmd."""

    def test_stdout_on_success(self):
        assert run_cmd(["sh", "-c", "echo ok"]) == "ok\n"

    def test_failure_is_empty(self):
        assert run_cmd(["sh", "-c", "echo no; exit 1"]) == ""

    def test_missing_binary_is_empty(self):
        assert run_cmd(["definitely-not-a-real-binary-xyz"]) == ""

    def test_stdin_is_closed(self, monkeypatch):
        """Commands never inherit the terminal's stdin."""
        seen = {}

        def fake_run(cmd, **kwargs):
            seen.update(kwargs)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        monkeypatch.setattr(commands.subprocess, "run", fake_run)
        run_cmd(["bash", "--version"])
        assert seen["stdin"] is subprocess.DEVNULL

    def test_reading_command_sees_eof(self):
        assert run_cmd(["cat"]) == ""


class TestReadText:
    """Test suite for read_text."""

    def test_missing_file(self, tmp_path):
        assert read_text(str(tmp_path / "nope")) is None

    def test_reads_file(self, tmp_path):
        p = tmp_path / "f"
        p.write_text("x", encoding="utf-8")
        assert read_text(str(p)) == "x"
