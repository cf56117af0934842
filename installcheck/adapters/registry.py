"""
Adapter registry — routes each scenario step to the tool that runs it.

Scenario steps name an adapter ("node", "shell", "filesystem"); the
registry looks it up, validates the step and executes it, always
handing back a Receipt.  In mock mode every external tool is replaced
by a canned success while the filesystem adapter keeps working, so a
mocked run still creates and removes its working directory.
"""

from __future__ import annotations

import logging
import time

from installcheck.adapters.base import Adapter, ExecutionContext
from installcheck.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)

# Adapters that keep running for real in mock mode.
_LOCAL_ADAPTERS = frozenset({"filesystem"})

# Node major a mocked ``node --version`` reports; new enough for the ESM probes.
MOCK_NODE_MAJOR = 20


class AdapterRegistry:
    """Name → adapter table plus the step dispatcher."""

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %s", adapter.name)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return sorted(self._adapters)

    def unavailable(self) -> list[str]:
        """Registered adapters whose underlying tool is missing."""
        return [name for name, adapter in sorted(self._adapters.items()) if not adapter.is_available()]

    def execute_action(self, action: Action, cwd: str = ".") -> Receipt:
        """Validate and run one step.  Never raises.

        A step for an unknown adapter, a step that fails validation and a
        step whose adapter blows up all come back as failed receipts.
        """
        if self._mock_mode and action.adapter not in _LOCAL_ADAPTERS:
            return _mock_receipt(action)

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(action=action, cwd=cwd)

        valid, reason = adapter.validate(context)
        if not valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {reason}",
            )

        started = time.monotonic()
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised on %s: %s", action.adapter, action.id, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )
        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt


def _mock_receipt(action: Action) -> Receipt:
    metadata: dict = {"mock": True, "return_code": 0}
    if action.params.get("operation") == "version":
        metadata["node_version"] = f"{MOCK_NODE_MAJOR}.0.0"
        metadata["node_major"] = MOCK_NODE_MAJOR
    return Receipt.success(
        adapter=action.adapter,
        action_id=action.id,
        output=f"[mock] {action.adapter}:{action.id} executed",
        metadata=metadata,
    )


def default_registry(mock_mode: bool = False, node: str = "node") -> AdapterRegistry:
    """Registry with every adapter an install-check run needs."""
    from installcheck.adapters.languages.node import NodeAdapter
    from installcheck.adapters.shell.command import ShellCommandAdapter
    from installcheck.adapters.shell.filesystem import FilesystemAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(FilesystemAdapter())
    registry.register(NodeAdapter(node=node))
    registry.register(ShellCommandAdapter())
    return registry
