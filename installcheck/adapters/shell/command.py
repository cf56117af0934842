"""
Shell command adapter — run a program and capture what it prints.

This is the most fundamental adapter: it runs commands and captures
their output.  The node adapter is built on the same ``exec_command``
helper.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from pathlib import Path

from installcheck.adapters.base import Adapter, ExecutionContext
from installcheck.core.models.action import Receipt

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 1800


def exec_command(
    adapter: str,
    action_id: str,
    command: list[str],
    *,
    cwd: str,
    timeout: int = DEFAULT_TIMEOUT_S,
) -> Receipt:
    """Run a command and turn its exit status into a Receipt.

    stderr is folded into the output so the transcript shows what the
    command printed, in order.  Never raises.
    """
    display = shlex.join(command)

    logger.debug("Executing: %s (cwd=%s)", display, cwd)
    start = time.monotonic()

    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return Receipt.failure(
            adapter=adapter,
            action_id=action_id,
            error=f"Command timed out after {timeout}s",
            metadata={"command": display, "timeout": timeout},
        )
    except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
        return Receipt.failure(
            adapter=adapter,
            action_id=action_id,
            error=f"Command execution error: {e}",
            metadata={"command": display},
        )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    output = (result.stdout or "").strip()

    if result.returncode == 0:
        return Receipt.success(
            adapter=adapter,
            action_id=action_id,
            output=output,
            duration_ms=elapsed_ms,
            metadata={"command": display, "return_code": 0},
        )
    return Receipt.failure(
        adapter=adapter,
        action_id=action_id,
        error=f"Command exited with code {result.returncode}",
        output=output,
        duration_ms=elapsed_ms,
        metadata={"command": display, "return_code": result.returncode},
    )


class ShellCommandAdapter(Adapter):
    """Execute commands and capture output.

    Action params:
        command (list[str]): The command and its arguments; run without a shell.
        timeout (int): Timeout in seconds (default: 1800).
        cwd (str): Override working directory (default: context.cwd).
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        # Commands are resolved per step; the package CLI only exists after install.
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.params.get("command", "")
        if not command:
            return False, "Missing required param: 'command'"
        if not isinstance(command, list):
            return False, "Param 'command' must be a list of arguments"

        cwd = context.working_dir
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        return exec_command(
            self.name,
            context.action.id,
            context.action.params["command"],
            cwd=context.working_dir,
            timeout=context.action.params.get("timeout", DEFAULT_TIMEOUT_S),
        )
