"""
Contributors refresh — regenerate the contributors file and open a PR.

Flow:
    make update-contributors → git status --porcelain
        clean   → "No changes to commit.", changed=false
        dirty   → changed=true → branch, commit, force-push
                → open (or reuse) the pull request → step summary

The generator itself is an opaque Make target; the only thing we look
at afterwards is whether the working tree changed.  When running under
GitHub Actions, ``changed`` goes to ``$GITHUB_OUTPUT`` and a summary of
the pull request to ``$GITHUB_STEP_SUMMARY``.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from installcheck.core.models.settings import ContributorsSettings
from installcheck.core.services.git_ops import head_sha, run_gh, run_git, working_tree_changes

logger = logging.getLogger(__name__)

# Raised when a tool is missing from PATH or does not finish in time.
_TOOL_ERRORS = (OSError, subprocess.TimeoutExpired)


@dataclass
class ContributorsResult:
    """Outcome of a contributors refresh."""

    changed: bool = False
    files: list[str] = field(default_factory=list)
    dry_run: bool = False
    pr_operation: str | None = None  # created, updated
    pr_number: int | None = None
    pr_url: str | None = None
    head_sha: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {
            "changed": self.changed,
            "files": self.files,
            "dry_run": self.dry_run,
            "pull_request": {
                "operation": self.pr_operation,
                "number": self.pr_number,
                "url": self.pr_url,
                "head_sha": self.head_sha,
            } if self.pr_operation else None,
        }
        if self.error:
            result["error"] = self.error
        return result


def run_make_target(project_root: Path, target: str, timeout: int = 1800) -> subprocess.CompletedProcess[str]:
    """Run ``make <target>`` in the project root."""
    logger.info("make %s", target)
    return subprocess.run(
        ["make", target],
        cwd=str(project_root),
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def update_contributors(
    project_root: Path,
    settings: ContributorsSettings | None = None,
    dry_run: bool = False,
) -> ContributorsResult:
    """Regenerate the contributors list and open a pull request if it changed.

    Never raises for tool failures; they end up in ``result.error``.
    """
    settings = settings or ContributorsSettings()
    result = ContributorsResult(dry_run=dry_run)

    try:
        r = run_make_target(project_root, settings.make_target)
    except _TOOL_ERRORS as e:
        result.error = f"make {settings.make_target} failed: {e}"
        return result
    if r.returncode != 0:
        result.error = (
            f"make {settings.make_target} exited with code {r.returncode}: "
            f"{r.stderr.strip()[-500:]}"
        )
        return result

    try:
        result.files = working_tree_changes(project_root)
    except (RuntimeError, *_TOOL_ERRORS) as e:
        result.error = f"git status failed: {e}"
        return result

    result.changed = bool(result.files)
    write_github_output("changed", "true" if result.changed else "false")

    if not result.changed:
        logger.info("No changes to commit.")
        return result

    if dry_run:
        logger.info("Contributors changed (%d file(s)); dry run, no pull request", len(result.files))
        return result

    try:
        error = _commit_and_push(project_root, settings)
        if error:
            result.error = error
            return result
        _open_pull_request(project_root, settings, result)
    except _TOOL_ERRORS as e:
        result.error = f"Publishing the update failed: {e}"
        return result

    if result.ok:
        write_step_summary(_summary(result))
    return result


# ── Steps ────────────────────────────────────────────────────────


def _commit_and_push(project_root: Path, settings: ContributorsSettings) -> str | None:
    """Commit everything to the PR branch and force-push it."""
    original = run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=project_root).stdout.strip()
    identity = [
        "-c", f"user.name={settings.committer_name}",
        "-c", f"user.email={settings.committer_email}",
    ]
    steps: list[tuple[str, ...]] = [
        ("checkout", "-B", settings.branch),
        ("add", "--all"),
        (*identity, "commit", "--message", settings.commit_message),
        ("push", "--force", settings.remote, f"{settings.branch}:{settings.branch}"),
    ]
    for args in steps:
        r = run_git(*args, cwd=project_root, timeout=120)
        if r.returncode != 0:
            return f"git {' '.join(args)} failed: {r.stderr.strip() or r.stdout.strip()}"

    if original and original not in ("HEAD", settings.branch):
        r = run_git("checkout", original, cwd=project_root)
        if r.returncode != 0:
            logger.warning("Could not switch back to %s: %s", original, r.stderr.strip())
    return None


def _open_pull_request(
    project_root: Path,
    settings: ContributorsSettings,
    result: ContributorsResult,
) -> None:
    result.head_sha = head_sha(project_root, settings.branch) or None

    existing = _find_open_pull_request(project_root, settings)
    if existing:
        result.pr_operation = "updated"
        result.pr_number = existing.get("number")
        result.pr_url = existing.get("url")
        logger.info("Updated pull request #%s", result.pr_number)
        return

    args = [
        "pr", "create",
        "--base", settings.base,
        "--head", settings.branch,
        "--title", settings.title,
        "--body", settings.body,
    ]
    for label in settings.labels:
        args += ["--label", label]
    for reviewer in settings.reviewers:
        args += ["--reviewer", reviewer]

    r = run_gh(*args, cwd=project_root)
    if r.returncode != 0:
        result.error = f"gh pr create failed: {r.stderr.strip()}"
        return

    url = r.stdout.strip().splitlines()[-1] if r.stdout.strip() else ""
    result.pr_operation = "created"
    result.pr_url = url or None
    result.pr_number = _number_from_url(url)
    logger.info("Created pull request %s", url)


def _find_open_pull_request(project_root: Path, settings: ContributorsSettings) -> dict | None:
    r = run_gh(
        "pr", "list",
        "--head", settings.branch,
        "--base", settings.base,
        "--state", "open",
        "--json", "number,url",
        cwd=project_root,
    )
    if r.returncode != 0:
        logger.debug("gh pr list failed: %s", r.stderr.strip())
        return None
    try:
        prs = json.loads(r.stdout or "[]")
    except json.JSONDecodeError:
        return None
    return prs[0] if prs else None


def _number_from_url(url: str) -> int | None:
    tail = url.rstrip("/").rsplit("/", 1)[-1]
    return int(tail) if tail.isdigit() else None


# ── GitHub Actions integration ───────────────────────────────────


def write_github_output(key: str, value: str) -> None:
    """Append ``key=value`` to ``$GITHUB_OUTPUT`` when set."""
    path = os.environ.get("GITHUB_OUTPUT")
    if not path:
        return
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{key}={value}\n")


def write_step_summary(markdown: str) -> None:
    """Append to ``$GITHUB_STEP_SUMMARY`` when set."""
    path = os.environ.get("GITHUB_STEP_SUMMARY")
    if not path:
        return
    with open(path, "a", encoding="utf-8") as f:
        f.write(markdown)


def _summary(result: ContributorsResult) -> str:
    url = result.pr_url or ""
    sha = result.head_sha or ""
    return (
        "# :tada: Pull Request created! :tada:\n"
        "\n"
        f"Pull request {result.pr_number} was successfully {result.pr_operation}.\n"
        f":link: [{url}]({url}).\n"
        f"Head SHA: [{sha}]({url}/commits/{sha}).\n"
    )
