"""
Filesystem adapter — the working directory lifecycle of a scenario.

Every scenario starts by (re)creating its isolated directory, local
scenarios then write ``package.json`` and the probe programs into it,
and every scenario ends by removing it.  These steps go through the
registry like the npm/node commands so they show up in the transcript
and fail the same way.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path

from installcheck.adapters.base import Adapter, ExecutionContext
from installcheck.core.models.action import Receipt

logger = logging.getLogger(__name__)


class FilesystemAdapter(Adapter):
    """Directory and file steps.

    Action params:
        operation (str): 'mkdir', 'write' or 'remove'.
        path (str): Absolute, or relative to the step's working directory.
        content (str): File content for 'write'.
        fresh (bool): 'mkdir' only; wipe whatever is already there.
    """

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def _operations(self) -> dict[str, Callable[[ExecutionContext, Path], str]]:
        return {
            "mkdir": self._mkdir,
            "write": self._write,
            "remove": self._remove,
        }

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation")
        ops = self._operations()
        if operation not in ops:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(ops))}"
        if not params.get("path"):
            return False, "Missing required param: 'path'"
        if operation == "write" and "content" not in params:
            return False, "Missing required param: 'content' for write"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.action.params
        target = Path(params["path"])
        if not target.is_absolute():
            target = Path(context.working_dir) / target

        meta = {"operation": params["operation"], "path": str(target)}
        try:
            output = self._operations()[params["operation"]](context, target)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata=meta,
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=output,
            metadata=meta,
        )

    # ── Operations ──────────────────────────────────────────────

    def _mkdir(self, ctx: ExecutionContext, target: Path) -> str:
        if ctx.action.params.get("fresh") and target.exists():
            logger.debug("Wiping leftover %s", target)
            _rmtree(target)
        target.mkdir(parents=True, exist_ok=True)
        return f"Directory created: {target}"

    def _write(self, ctx: ExecutionContext, target: Path) -> str:
        content = ctx.action.params["content"]
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return f"Wrote {len(content)} bytes to {target.name}"

    def _remove(self, ctx: ExecutionContext, target: Path) -> str:
        if not target.exists() and not target.is_symlink():
            return f"Nothing to remove at {target}"
        _rmtree(target)
        return f"Removed {target}"


def _rmtree(target: Path) -> None:
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink()
