"""
Scenario models — what an install scenario is and how it ended.

A scenario is one end-to-end install-and-verify sequence for a
specific install mode (local or global) and package source
(registry version or source-control reference).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class Phase(StrEnum):
    """Which part of a scenario a step belongs to."""

    INIT = "init"
    INSTALL = "install"
    TEST = "test"
    CLEANUP = "cleanup"


# Human-readable failure reason per phase (written to the log).
FAILURE_REASONS: dict[Phase, str] = {
    Phase.INIT: "initialization failed",
    Phase.INSTALL: "installation failed",
    Phase.TEST: "test script failed",
    Phase.CLEANUP: "cleanup failed",
}


class InstallMode(StrEnum):
    LOCAL = "local"
    GLOBAL = "global"


class InstallSource(StrEnum):
    REGISTRY = "registry"
    GIT = "git"


class ScenarioSpec(BaseModel):
    """Parameterized description of one install scenario."""

    mode: InstallMode
    source: InstallSource = InstallSource.REGISTRY

    @property
    def name(self) -> str:
        """Scenario identifier, e.g. ``local`` or ``global-git``."""
        if self.source == InstallSource.GIT:
            return f"{self.mode.value}-git"
        return self.mode.value

    @property
    def description(self) -> str:
        where = "from source control" if self.source == InstallSource.GIT else "from the registry"
        return f"{self.mode.value} install {where}"


# Fixed run order.
DEFAULT_SCENARIOS: tuple[ScenarioSpec, ...] = (
    ScenarioSpec(mode=InstallMode.LOCAL, source=InstallSource.REGISTRY),
    ScenarioSpec(mode=InstallMode.LOCAL, source=InstallSource.GIT),
    ScenarioSpec(mode=InstallMode.GLOBAL, source=InstallSource.REGISTRY),
    ScenarioSpec(mode=InstallMode.GLOBAL, source=InstallSource.GIT),
)


class ScenarioResult(BaseModel):
    """Outcome of a scenario after all of its attempts."""

    name: str
    status: str = "pending"  # pending, ok, failed
    attempts: int = 0
    reason: str | None = None
    error: str | None = None
    steps_run: int = 0
    delays: list[float] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
