"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from installcheck.adapters.mock import MockAdapter
from installcheck.adapters.registry import AdapterRegistry
from installcheck.adapters.shell.filesystem import FilesystemAdapter
from installcheck.core.context import RunContext
from installcheck.core.models.action import Receipt
from installcheck.core.models.settings import Settings
from installcheck.core.observability.heartbeat import Heartbeat
from installcheck.core.reliability.retry import RetryPolicy


class SleepRecorder:
    """Stand-in for time.sleep that records the requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    """Scratch directory path (not created — scenarios create it)."""
    return tmp_path / "install-check"


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "install-check.log"


@pytest.fixture
def node() -> MockAdapter:
    """Mock npm/node adapter; reports Node 20 for the version probe."""
    mock = MockAdapter(adapter_name="node")
    mock.set_response(
        "node:version",
        Receipt.success(
            adapter="node",
            action_id="node:version",
            output="v20.11.0",
            metadata={"node_version": "20.11.0", "node_major": 20, "return_code": 0},
        ),
    )
    return mock


@pytest.fixture
def shell() -> MockAdapter:
    """Mock shell adapter (the package's CLI entry point)."""
    return MockAdapter(adapter_name="shell")


@pytest.fixture
def registry(node: MockAdapter, shell: MockAdapter) -> AdapterRegistry:
    """Real filesystem, mocked npm/node/shell."""
    reg = AdapterRegistry()
    reg.register(FilesystemAdapter())
    reg.register(node)
    reg.register(shell)
    return reg


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def retry(sleeps: SleepRecorder) -> RetryPolicy:
    """Reference retry policy (2 attempts, 15s) with a recording sleep."""
    return RetryPolicy(max_attempts=2, delay=15.0, sleep=sleeps)


@pytest.fixture
def beats() -> list[str]:
    return []


@pytest.fixture
def heartbeat(beats: list[str]) -> Heartbeat:
    return Heartbeat(interval=60.0, emit=beats.append)


@pytest.fixture
def run_ctx(install_dir: Path, log_file: Path, settings: Settings) -> RunContext:
    return RunContext(
        package_manager="npm",
        install_dir=install_dir,
        log_file=log_file,
        settings=settings,
        node_major=20,
    )
