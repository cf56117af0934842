"""
Node.js adapter — Node runtime and npm operations.

Runs the package manager (install, list, uninstall; locally or with
``--global``) and executes probe programs with ``node``.
"""

from __future__ import annotations

import logging
import re
import shutil

from installcheck.adapters.base import Adapter, ExecutionContext
from installcheck.adapters.shell.command import DEFAULT_TIMEOUT_S, exec_command
from installcheck.core.models.action import Receipt

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"v?(\d+)\.(\d+)\.(\d+)")


def parse_node_major(version: str) -> int | None:
    """``"v20.11.0"`` → ``20``; None when unparseable."""
    m = _VERSION_RE.search(version or "")
    return int(m.group(1)) if m else None


class NodeAdapter(Adapter):
    """Node.js toolchain adapter.

    Action params:
        operation (str): One of 'version', 'install', 'list', 'uninstall', 'run'.
        package_manager (str): Package manager executable (default: 'npm').
        spec (str): Package spec to install ('pkg@1.0.0', 'git+https://…#ref').
        package (str): Package name to uninstall.
        global (bool): Operate on the global package namespace.
        script (str): Script path to run with node (for 'run').
        timeout (int): Timeout in seconds (default: 1800).
    """

    VALID_OPS = frozenset({"version", "install", "list", "uninstall", "run"})

    def __init__(self, node: str = "node"):
        self._node = node

    @property
    def name(self) -> str:
        return "node"

    def is_available(self) -> bool:
        return shutil.which(self._node) is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"
        if operation not in self.VALID_OPS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self.VALID_OPS))}"

        if operation == "install" and not params.get("spec"):
            return False, "Missing required param: 'spec' for install"
        if operation == "uninstall" and not params.get("package"):
            return False, "Missing required param: 'package' for uninstall"
        if operation == "run" and not params.get("script"):
            return False, "Missing required param: 'script' for run"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.action.params
        operation = params["operation"]
        pm = params.get("package_manager", "npm")
        global_flag = ["--global"] if params.get("global") else []

        if operation == "version":
            return self._version(context)
        elif operation == "install":
            cmd = [pm, "install", *global_flag, params["spec"]]
        elif operation == "list":
            cmd = [pm, "ls", *global_flag, "--depth=0"]
        elif operation == "uninstall":
            cmd = [pm, "uninstall", *global_flag, params["package"]]
        elif operation == "run":
            cmd = [self._node, params["script"]]
        else:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Unknown operation: {operation}",
            )

        return self._exec(context, cmd)

    # ── Operations ──────────────────────────────────────────────

    def _version(self, ctx: ExecutionContext) -> Receipt:
        receipt = self._exec(ctx, [self._node, "--version"], timeout=30)
        if receipt.ok:
            version = receipt.output.strip().lstrip("v")
            receipt.metadata["node_version"] = version
            receipt.metadata["node_major"] = parse_node_major(version)
        return receipt

    # ── Helpers ─────────────────────────────────────────────────

    def _exec(
        self,
        ctx: ExecutionContext,
        cmd: list[str],
        timeout: int = DEFAULT_TIMEOUT_S,
    ) -> Receipt:
        return exec_command(
            self.name,
            ctx.action.id,
            cmd,
            cwd=ctx.working_dir,
            timeout=ctx.action.params.get("timeout", timeout),
        )
