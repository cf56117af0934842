"""
Mock adapter — scriptable stand-in for npm, node or the package CLI.

Registered under any adapter name, it answers every step with a
success unless told otherwise.  Steps can be scripted to fail always,
or only for their first N executions (a transient failure that the
retry policy should absorb).
"""

from __future__ import annotations

from installcheck.adapters.base import Adapter, ExecutionContext
from installcheck.core.models.action import Receipt


class MockAdapter(Adapter):
    """Records every step it receives and replays scripted receipts."""

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        # Remaining scripted replies per step; None = unlimited.
        self._remaining: dict[str, int | None] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    def calls_for(self, action_id: str) -> int:
        return sum(1 for ctx in self.call_log if ctx.action.id == action_id)

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        """Always answer ``action_id`` with ``receipt``."""
        self._responses[action_id] = receipt
        self._remaining[action_id] = None

    def set_failure(
        self,
        action_id: str,
        error: str = "Mock failure",
        times: int | None = None,
    ) -> None:
        """Fail ``action_id`` with exit code 1; ``times=N`` fails only the first N runs."""
        self._responses[action_id] = Receipt.failure(
            adapter=self._name,
            action_id=action_id,
            error=error,
            metadata={"return_code": 1},
        )
        self._remaining[action_id] = times

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        action_id = context.action.id

        scripted = self._responses.get(action_id)
        if scripted is not None:
            left = self._remaining.get(action_id)
            if left is None:
                return scripted.model_copy(deep=True)
            if left > 0:
                self._remaining[action_id] = left - 1
                return scripted.model_copy(deep=True)

        return Receipt.success(
            adapter=self._name,
            action_id=action_id,
            output=self._default_output,
            metadata={"mock": True, "return_code": 0},
        )

    def reset(self) -> None:
        self.call_log.clear()
        self._responses.clear()
        self._remaining.clear()
