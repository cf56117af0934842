"""
Transcript — append-only log of every external command a run executes.

This is the run's log file: for each command, a header line with the
step, command, exit code and duration, followed by the command's
output.  Free-form notes (scenario boundaries, failure reasons) are
interleaved.  The file is only ever appended to, never truncated.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from installcheck.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


def _stamp() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class TranscriptWriter:
    """Append-only transcript writer.

    Each call appends to the file; it is created (with parents) if it
    doesn't exist.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def note(self, message: str) -> None:
        """Append a single timestamped line."""
        self._append(f"[{_stamp()}] {message}\n")

    def record(self, action: Action, receipt: Receipt) -> None:
        """Append the outcome of one command."""
        command = receipt.command or action.name or action.id
        rc = receipt.return_code
        header = (
            f"[{_stamp()}] $ {command}"
            f"  (step={action.id}, status={receipt.status}"
            f"{f', exit={rc}' if rc is not None else ''}"
            f", {receipt.duration_ms}ms)\n"
        )
        body = receipt.output
        if receipt.error:
            body = f"{body}\n{receipt.error}" if body else receipt.error
        if body and not body.endswith("\n"):
            body += "\n"
        self._append(header + body)

    def read(self) -> str:
        if not self._path.is_file():
            return ""
        return self._path.read_text(encoding="utf-8")

    def _append(self, text: str) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            logger.error("Failed to write transcript %s: %s", self._path, e)
