"""
Adapter base — how the engine talks to npm, node, the shell and the disk.

An adapter owns one kind of external side effect.  The registry gives
it an ExecutionContext (the step plus where to run it) and gets a
Receipt back; adapters report failure through the Receipt and do not
raise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from installcheck.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """The step to run and the directory to run it in."""

    action: Action
    cwd: str = "."

    @property
    def working_dir(self) -> str:
        """A step-level ``cwd`` param wins over the run's directory."""
        return self.action.params.get("cwd") or self.cwd


class Adapter(ABC):
    """Contract every adapter implements.

    ``validate`` rejects malformed steps before anything runs;
    ``execute`` performs the step.  Both must return rather than raise.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, referenced by ``Action.adapter``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool can be found.  Fast, never raises."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """``(True, "")`` or ``(False, reason)``."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the step and describe the outcome."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
