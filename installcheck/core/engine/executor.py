"""
Engine executor — run one scenario attempt.

Flow:
    steps (in order, stop at first failure) → cleanup (always) → result

Every receipt is appended to the transcript.  A failed receipt is
turned into the matching exception from ``engine.errors``; the working
directory is still removed best-effort before the exception leaves.
"""

from __future__ import annotations

import logging

from installcheck.adapters.registry import AdapterRegistry
from installcheck.core.context import RunContext
from installcheck.core.engine.errors import (
    CleanupError,
    CommandFailedError,
    InstallCheckError,
    WorkspaceError,
)
from installcheck.core.models.action import Action, Receipt
from installcheck.core.models.scenario import Phase, ScenarioResult
from installcheck.core.services.scenarios import ScenarioPlan

logger = logging.getLogger(__name__)


def error_for(action: Action, receipt: Receipt) -> InstallCheckError:
    """Map a failed receipt to the exception for its step."""
    detail = receipt.error or "unknown error"
    message = f"{action.name or action.id}: {detail}"

    if action.adapter == "filesystem":
        if action.phase == Phase.CLEANUP:
            return CleanupError(message)
        return WorkspaceError(message)

    return CommandFailedError(
        message,
        phase=action.phase,
        step=action.id,
        return_code=receipt.return_code,
    )


def _dispatch(action: Action, registry: AdapterRegistry, ctx: RunContext) -> Receipt:
    receipt = registry.execute_action(action, cwd=str(ctx.install_dir))
    ctx.transcript.record(action, receipt)

    marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
    logger.debug("%s %s → %s", marker, action.id, receipt.status)
    return receipt


def run_scenario(
    plan: ScenarioPlan,
    registry: AdapterRegistry,
    ctx: RunContext,
) -> ScenarioResult:
    """Execute one attempt of a scenario.

    Returns:
        ScenarioResult with status 'ok'.

    Raises:
        InstallCheckError subclass for the first failing step.
    """
    result = ScenarioResult(name=plan.name)
    ctx.transcript.note(f"--- scenario {plan.name}: {plan.spec.description} ---")
    logger.info("Running %s (%s)", plan.name, plan.spec.description)

    failure: InstallCheckError | None = None
    for action in plan.steps:
        receipt = _dispatch(action, registry, ctx)
        result.steps_run += 1
        if receipt.failed:
            failure = error_for(action, receipt)
            break

    if failure is not None:
        ctx.transcript.note(f"Error: {failure.reason} ({failure})")
        logger.error("%s: %s — %s", plan.name, failure.reason, failure)
        _cleanup_best_effort(plan, registry, ctx)
        raise failure

    if plan.cleanup is not None:
        receipt = _dispatch(plan.cleanup, registry, ctx)
        if receipt.failed:
            error = error_for(plan.cleanup, receipt)
            ctx.transcript.note(f"Error: {error.reason} ({error})")
            raise error

    result.status = "ok"
    ctx.transcript.note(f"Scenario {plan.name} succeeded.")
    return result


def _cleanup_best_effort(plan: ScenarioPlan, registry: AdapterRegistry, ctx: RunContext) -> None:
    if plan.cleanup is None:
        return
    receipt = _dispatch(plan.cleanup, registry, ctx)
    if receipt.failed:
        logger.warning("Cleanup after failure also failed: %s", receipt.error)
