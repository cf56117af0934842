"""
git and gh runners for the contributors refresh.

Both return the ``CompletedProcess``; a non-zero exit is the caller's
call to make.  Output is captured as text.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


def _run(tool: str, args: tuple[str, ...], cwd: Path, timeout: int):
    logger.debug("%s %s (cwd=%s)", tool, " ".join(args), cwd)
    return subprocess.run(
        [tool, *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def run_git(*args: str, cwd: Path, timeout: int = 60) -> subprocess.CompletedProcess[str]:
    return _run("git", args, cwd, timeout)


def run_gh(*args: str, cwd: Path, timeout: int = 60) -> subprocess.CompletedProcess[str]:
    """gh picks up credentials from ``GH_TOKEN`` in CI."""
    return _run("gh", args, cwd, timeout)


def working_tree_changes(project_root: Path) -> list[str]:
    """``git status --porcelain`` lines; empty list for a clean tree.

    Raises:
        RuntimeError: git itself failed (not a repository, etc.).
    """
    r = run_git("status", "--porcelain", cwd=project_root)
    if r.returncode != 0:
        raise RuntimeError(r.stderr.strip() or f"git status exited with code {r.returncode}")
    return [line for line in r.stdout.splitlines() if line.strip()]


def head_sha(project_root: Path, ref: str = "HEAD") -> str:
    """Commit ``ref`` points at, or "" when it can't be resolved."""
    r = run_git("rev-parse", ref, cwd=project_root)
    return r.stdout.strip() if r.returncode == 0 else ""
