"""
Error taxonomy for an install-check run.

Adapters never raise; the executor turns failed receipts into these
exceptions, the retry policy decides which ones get a second attempt,
and the driver maps all of them to a non-zero exit.
"""

from __future__ import annotations

from installcheck.core.models.scenario import FAILURE_REASONS, Phase


class InstallCheckError(Exception):
    """Base class for every failure of an install-check run."""

    phase: Phase | None = None

    @property
    def reason(self) -> str:
        if self.phase is None:
            return "unexpected error"
        return FAILURE_REASONS[self.phase]


class ConfigurationError(InstallCheckError):
    """Unsupported package-manager selector or unusable run arguments."""

    @property
    def reason(self) -> str:
        return "configuration error"


class WorkspaceError(InstallCheckError):
    """The isolated working directory could not be prepared."""

    phase = Phase.INIT


class CommandFailedError(InstallCheckError):
    """An external command (package manager or probe) exited non-zero."""

    def __init__(
        self,
        message: str,
        *,
        phase: Phase = Phase.TEST,
        step: str = "",
        return_code: int | None = None,
    ):
        super().__init__(message)
        self.phase = phase
        self.step = step
        self.return_code = return_code


class CleanupError(InstallCheckError):
    """The working directory could not be removed."""

    phase = Phase.CLEANUP
