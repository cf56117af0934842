"""
Domain models — Pydantic types for the install check.

All models are re-exported here for convenient access:

    from installcheck.core.models import Action, Receipt, ScenarioSpec, Settings
"""

from installcheck.core.models.action import Action, Receipt
from installcheck.core.models.scenario import (
    DEFAULT_SCENARIOS,
    FAILURE_REASONS,
    InstallMode,
    InstallSource,
    Phase,
    ScenarioResult,
    ScenarioSpec,
)
from installcheck.core.models.settings import (
    ContributorsSettings,
    Settings,
    TargetPackage,
    ToolSettings,
)

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # scenario.py
    "DEFAULT_SCENARIOS",
    "FAILURE_REASONS",
    "InstallMode",
    "InstallSource",
    "Phase",
    "ScenarioResult",
    "ScenarioSpec",
    # settings.py
    "ContributorsSettings",
    "Settings",
    "TargetPackage",
    "ToolSettings",
]
