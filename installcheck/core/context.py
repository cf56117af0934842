"""
Run context — the explicit state of one install-check run.

Everything a scenario step needs to know about "where are we and what
are we testing" travels in this object: the package manager, the
working directory, the log file, the directory the run started from,
the Node runtime version and the heartbeat handle.  Steps never change
the process's current directory; each command gets its ``cwd`` from
here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from installcheck.core.models.settings import Settings
from installcheck.core.observability.heartbeat import Heartbeat
from installcheck.core.persistence.transcript import TranscriptWriter


@dataclass
class RunContext:
    """Explicit per-run state passed to every scenario."""

    package_manager: str
    install_dir: Path
    log_file: Path
    settings: Settings = field(default_factory=Settings)
    original_dir: Path = field(default_factory=Path.cwd)
    node_major: int | None = None
    heartbeat: Heartbeat | None = None
    transcript: TranscriptWriter = field(init=False)

    def __post_init__(self) -> None:
        self.install_dir = Path(self.install_dir)
        self.log_file = Path(self.log_file)
        self.transcript = TranscriptWriter(self.log_file)

    @property
    def supports_esm(self) -> bool:
        """Whether the Node runtime is new enough for the ES module probes."""
        if self.node_major is None:
            return False
        return self.node_major >= self.settings.esm_min_node_major
