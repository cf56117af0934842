"""
Package-name listing — shell out to the Node-based names tool.

The tool walks a source tree and prints one package name per line.
We only consume it as "run this, capture output": the contract is the
exit status plus stdout.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class PackageNamesResult:
    """Outcome of one listing run."""

    root_dir: str = ""
    command: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def count(self) -> int:
        return len(self.names)

    def to_dict(self) -> dict:
        result: dict = {
            "root_dir": self.root_dir,
            "command": self.command,
            "names": self.names,
            "count": self.count,
        }
        if self.error:
            result["error"] = self.error
        return result


def list_package_names(
    tool: Path,
    root_dir: Path,
    flags: list[str] | tuple[str, ...] = (),
    node_path: str | None = None,
    node: str = "node",
    timeout: int = 300,
) -> PackageNamesResult:
    """Run ``node <tool> [flags] <root_dir>`` and collect the names it prints.

    Never raises; failures are reported in ``result.error``.
    """
    cmd = [node, str(tool), *flags, str(root_dir)]
    result = PackageNamesResult(root_dir=str(root_dir), command=cmd)

    if shutil.which(node) is None:
        result.error = f"'{node}' not found on PATH"
        return result
    if not tool.is_file():
        result.error = f"Package names tool not found: {tool}"
        return result

    env = dict(os.environ)
    if node_path:
        env["NODE_PATH"] = node_path

    logger.debug("Listing package names: %s", " ".join(cmd))
    try:
        r = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
    except subprocess.TimeoutExpired:
        result.error = f"Package names tool timed out after {timeout}s"
        return result

    if r.returncode != 0:
        result.error = r.stderr.strip() or f"Package names tool exited with code {r.returncode}"
        return result

    result.names = [line.strip() for line in r.stdout.splitlines() if line.strip()]
    logger.info("Found %d package(s) under %s", result.count, root_dir)
    return result
