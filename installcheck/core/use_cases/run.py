"""
Run use case — the install check, end to end.

This is the top-level driver: it starts the heartbeat, validates the
package-manager selector, probes the Node runtime, runs the four
scenarios in order (each with one retry), and maps the outcome to an
exit code.  The heartbeat is stopped on every exit path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from installcheck.adapters.registry import AdapterRegistry, default_registry
from installcheck.core.context import RunContext
from installcheck.core.engine.errors import ConfigurationError, InstallCheckError
from installcheck.core.engine.executor import run_scenario
from installcheck.core.models.action import Action
from installcheck.core.models.scenario import DEFAULT_SCENARIOS, Phase, ScenarioResult, ScenarioSpec
from installcheck.core.models.settings import Settings
from installcheck.core.observability.heartbeat import Heartbeat
from installcheck.core.reliability.retry import RetryPolicy
from installcheck.core.services.scenarios import build_scenario

logger = logging.getLogger(__name__)

SUPPORTED_PACKAGE_MANAGERS = frozenset({"npm"})


class RunState(StrEnum):
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class RunResult:
    """Result of an install-check run."""

    package_manager: str = ""
    install_dir: Path | None = None
    log_file: Path | None = None
    state: RunState = RunState.RUNNING
    scenarios: list[ScenarioResult] = field(default_factory=list)
    node_major: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(s.ok for s in self.scenarios)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        result: dict = {
            "ok": self.ok,
            "exit_code": self.exit_code,
            "package_manager": self.package_manager,
            "install_dir": str(self.install_dir) if self.install_dir else None,
            "log_file": str(self.log_file) if self.log_file else None,
            "node_major": self.node_major,
            "scenarios": [s.to_dict() for s in self.scenarios],
        }
        if self.error:
            result["error"] = self.error
        return result


def validate_package_manager(package_manager: str) -> None:
    """Raise ConfigurationError for unsupported selectors."""
    if package_manager not in SUPPORTED_PACKAGE_MANAGERS:
        raise ConfigurationError(
            f"Unsupported package manager '{package_manager}'. "
            f"Supported: {', '.join(sorted(SUPPORTED_PACKAGE_MANAGERS))}"
        )


def validate_layout(install_dir: Path, log_file: Path) -> None:
    """Raise ConfigurationError when the transcript would live inside INSTALL_DIR.

    Every scenario wipes and removes INSTALL_DIR, which would take the
    append-only transcript with it.
    """
    if log_file.resolve().is_relative_to(install_dir.resolve()):
        raise ConfigurationError(
            f"Log file {log_file} must not be inside the install directory {install_dir}"
        )


def detect_node_major(registry: AdapterRegistry, ctx: RunContext) -> int | None:
    """Ask the runtime for its version; None when it can't be determined."""
    action = Action(
        id="node:version",
        name="node --version",
        adapter="node",
        phase=Phase.INIT,
        params={"operation": "version"},
    )
    receipt = registry.execute_action(action, cwd=str(ctx.original_dir))
    ctx.transcript.record(action, receipt)
    if receipt.failed:
        logger.warning("Could not determine Node.js version: %s", receipt.error)
        return None
    return receipt.metadata.get("node_major")


def run_with_retry(
    spec: ScenarioSpec,
    registry: AdapterRegistry,
    ctx: RunContext,
    retry: RetryPolicy,
) -> ScenarioResult:
    """Run one scenario under the retry policy.

    A fresh plan is built for every attempt.  Never raises for scenario
    failures: the returned result has status 'failed', the phase reason
    and the error detail.
    """

    def attempt() -> ScenarioResult:
        return run_scenario(build_scenario(spec, ctx), registry, ctx)

    try:
        result = retry.run(attempt, label=f"Scenario {spec.name}")
    except InstallCheckError as e:
        result = ScenarioResult(
            name=spec.name,
            status="failed",
            reason=e.reason,
            error=str(e),
        )

    result.attempts = retry.attempts
    result.delays = list(retry.delays)
    return result


def run_install_check(
    package_manager: str,
    install_dir: Path,
    log_file: Path,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
    retry: RetryPolicy | None = None,
    heartbeat: Heartbeat | None = None,
    scenarios: tuple[ScenarioSpec, ...] = DEFAULT_SCENARIOS,
    mock_mode: bool = False,
) -> RunResult:
    """Run every install scenario and report the outcome.

    Args:
        package_manager: Package-manager selector (only 'npm' is supported).
        install_dir: Working directory used (and removed) by each scenario.
        log_file: Append-only transcript of every command.
        settings: Loaded settings (default: built-in defaults).
        registry: Optional pre-configured adapter registry.
        retry: Optional retry policy (default: 2 attempts, settings.retry_delay apart).
        heartbeat: Optional heartbeat (default: stderr, settings.heartbeat_interval).
        scenarios: Scenarios to run, in order.
        mock_mode: If True and no registry is given, mock every external command.

    Returns:
        RunResult; ``exit_code`` is 0 only when every scenario succeeded.
    """
    settings = settings or Settings()
    ctx = RunContext(
        package_manager=package_manager,
        install_dir=Path(install_dir).resolve(),
        log_file=Path(log_file),
        settings=settings,
        heartbeat=heartbeat or Heartbeat(interval=settings.heartbeat_interval),
    )
    result = RunResult(
        package_manager=package_manager,
        install_dir=ctx.install_dir,
        log_file=ctx.log_file,
    )
    if retry is None:
        retry = RetryPolicy(delay=settings.retry_delay)
    if registry is None:
        registry = default_registry(mock_mode=mock_mode, node=settings.tools.node)

    assert ctx.heartbeat is not None
    ctx.heartbeat.start()
    try:
        validate_layout(ctx.install_dir, ctx.log_file)
        ctx.transcript.note(
            f"Install check: package manager={package_manager}, "
            f"target={settings.target.package}, dir={ctx.install_dir}"
        )
        validate_package_manager(package_manager)

        if not registry.mock_mode:
            missing = registry.unavailable()
            if missing:
                logger.warning("Tools not found on PATH: %s", ", ".join(missing))

        ctx.node_major = detect_node_major(registry, ctx)
        result.node_major = ctx.node_major

        for spec in scenarios:
            scenario_result = run_with_retry(spec, registry, ctx, retry)
            result.scenarios.append(scenario_result)
            if not scenario_result.ok:
                result.error = f"{spec.name}: {scenario_result.reason} ({scenario_result.error})"
                break
            logger.info("✓ %s", spec.name)

    except ConfigurationError as e:
        result.error = str(e)
    except Exception as e:
        logger.exception("Unexpected error during install check")
        result.error = f"Unexpected error: {e}"
    finally:
        ctx.heartbeat.stop()
        result.state = RunState.TERMINATED

    if result.error:
        ctx.transcript.note(f"Install check failed: {result.error}")
        logger.error("Install check failed: %s", result.error)
    else:
        ctx.transcript.note("Install check succeeded.")
        logger.info("Install check succeeded (%d scenarios)", len(result.scenarios))

    return result
