"""
Tests for the package-name listing service.
"""

import subprocess
from pathlib import Path

import pytest

from installcheck.core.services import package_names
from installcheck.core.services.package_names import list_package_names


@pytest.fixture
def tool(tmp_path: Path) -> Path:
    path = tmp_path / "tools" / "pkgs" / "names" / "bin" / "cli"
    path.parent.mkdir(parents=True)
    path.write_text("#!/usr/bin/env node\n")
    return path


@pytest.fixture
def node_on_path(monkeypatch):
    monkeypatch.setattr(package_names.shutil, "which", lambda name: f"/usr/bin/{name}")


class FakeRun:
    """Records subprocess.run calls and returns a canned result."""

    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0):
        self.result = subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)
        self.calls: list[dict] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append({"cmd": cmd, **kwargs})
        return self.result


@pytest.mark.usefixtures("node_on_path")
class TestListPackageNames:
    def test_collects_names(self, tool, tmp_path, monkeypatch):
        fake = FakeRun(stdout="@stdlib/math\n@stdlib/utils\n\n")
        monkeypatch.setattr(package_names.subprocess, "run", fake)

        result = list_package_names(tool, tmp_path / "lib")
        assert result.ok
        assert result.names == ["@stdlib/math", "@stdlib/utils"]
        assert result.count == 2
        assert fake.calls[0]["cmd"] == ["node", str(tool), str(tmp_path / "lib")]

    def test_flags_and_node_path(self, tool, tmp_path, monkeypatch):
        fake = FakeRun()
        monkeypatch.setattr(package_names.subprocess, "run", fake)

        list_package_names(tool, tmp_path, flags=["--pattern=*.json"], node_path="/opt/lib")
        call = fake.calls[0]
        assert call["cmd"][2] == "--pattern=*.json"
        assert call["env"]["NODE_PATH"] == "/opt/lib"

    def test_tool_failure(self, tool, tmp_path, monkeypatch):
        monkeypatch.setattr(package_names.subprocess, "run", FakeRun(stderr="boom", returncode=2))
        result = list_package_names(tool, tmp_path)
        assert not result.ok
        assert result.error == "boom"
        assert result.to_dict()["error"] == "boom"

    def test_timeout(self, tool, tmp_path, monkeypatch):
        def slow(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, 1)

        monkeypatch.setattr(package_names.subprocess, "run", slow)
        result = list_package_names(tool, tmp_path, timeout=1)
        assert "timed out" in result.error

    def test_missing_tool(self, tmp_path):
        result = list_package_names(tmp_path / "nope", tmp_path)
        assert "not found" in result.error


def test_missing_node(tool, tmp_path, monkeypatch):
    monkeypatch.setattr(package_names.shutil, "which", lambda name: None)
    result = list_package_names(tool, tmp_path)
    assert result.error == "'node' not found on PATH"
