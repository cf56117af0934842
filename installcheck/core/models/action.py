"""
Action and Receipt — one scenario step and what came of it.

The scenario builder emits Actions; the registry hands each to an
adapter, which answers with a Receipt.  A failing ``npm install`` is a
Receipt with status 'failed', never an exception; the executor decides
what a failure means for the scenario.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from installcheck.core.models.scenario import Phase

ReceiptStatus = Literal["ok", "failed"]


class Action(BaseModel):
    """One step of a scenario.

    ``id`` is ``"<scenario>:<step>"`` (e.g. ``local:install``); ``phase``
    decides which failure reason a non-zero exit maps to.
    """

    id: str
    adapter: str
    name: str = ""
    phase: Phase = Phase.TEST
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Outcome of one step: status, combined output, exit code."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"
    output: str = ""
    error: str | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def return_code(self) -> int | None:
        return self.metadata.get("return_code")

    @property
    def command(self) -> str:
        """The command line that ran, when the adapter recorded one."""
        return self.metadata.get("command", "")

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)
