"""
Scenario builder — turn a ScenarioSpec into an ordered list of actions.

Local and global installs share one parameterized description:

    local   mkdir → manifest → npm install → probes → (rm -r)
    global  mkdir → npm install -g → npm ls -g → <cli> --help
            → npm uninstall -g → npm ls -g → (rm -r)

The trailing directory removal is kept apart from the steps so the
executor can run it on failure paths too.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from installcheck.core.context import RunContext
from installcheck.core.models.action import Action
from installcheck.core.models.scenario import InstallMode, InstallSource, Phase, ScenarioSpec
from installcheck.core.services.probes import manifest, probes_for


@dataclass
class ScenarioPlan:
    """Actions for one scenario attempt."""

    spec: ScenarioSpec
    steps: list[Action] = field(default_factory=list)
    cleanup: Action | None = None

    @property
    def name(self) -> str:
        return self.spec.name


def _step(scenario: ScenarioSpec, key: str, adapter: str, phase: Phase, name: str, **params) -> Action:
    return Action(
        id=f"{scenario.name}:{key}",
        name=name,
        adapter=adapter,
        phase=phase,
        params=params,
    )


def install_spec(spec: ScenarioSpec, ctx: RunContext) -> str:
    """What to hand to ``npm install`` for this scenario."""
    target = ctx.settings.target
    if spec.source == InstallSource.GIT:
        return target.git_spec
    return target.registry_spec


def build_scenario(spec: ScenarioSpec, ctx: RunContext) -> ScenarioPlan:
    """Build the action plan for one scenario."""
    plan = ScenarioPlan(spec=spec)
    install_dir = str(ctx.install_dir)
    pm = ctx.package_manager
    timeout = ctx.settings.timeout
    is_global = spec.mode == InstallMode.GLOBAL

    plan.steps.append(_step(
        spec, "mkdir", "filesystem", Phase.INIT,
        f"create {install_dir}",
        operation="mkdir", path=install_dir, fresh=True,
    ))

    if not is_global:
        plan.steps.append(_step(
            spec, "manifest", "filesystem", Phase.INIT,
            "write package.json",
            operation="write", path="package.json", content=manifest(),
        ))

    plan.steps.append(_step(
        spec, "install", "node", Phase.INSTALL,
        f"{pm} install{' --global' if is_global else ''} {install_spec(spec, ctx)}",
        operation="install", package_manager=pm, spec=install_spec(spec, ctx),
        timeout=timeout, **{"global": is_global},
    ))

    if is_global:
        plan.steps.extend(_global_checks(spec, ctx))
    else:
        plan.steps.extend(_local_probes(spec, ctx))

    plan.cleanup = _step(
        spec, "cleanup", "filesystem", Phase.CLEANUP,
        f"remove {install_dir}",
        operation="remove", path=install_dir,
    )
    return plan


def _local_probes(spec: ScenarioSpec, ctx: RunContext) -> list[Action]:
    steps: list[Action] = []
    for probe in probes_for(ctx.settings.target, esm=ctx.supports_esm):
        steps.append(_step(
            spec, f"write-{probe.name}", "filesystem", Phase.TEST,
            f"write {probe.filename}",
            operation="write", path=probe.filename, content=probe.source,
        ))
        steps.append(_step(
            spec, f"probe-{probe.name}", "node", Phase.TEST,
            f"node {probe.filename}",
            operation="run", script=probe.filename,
        ))
    return steps


def _global_checks(spec: ScenarioSpec, ctx: RunContext) -> list[Action]:
    pm = ctx.package_manager
    target = ctx.settings.target
    return [
        _step(
            spec, "list", "node", Phase.INSTALL,
            f"{pm} ls --global --depth=0",
            operation="list", package_manager=pm, **{"global": True},
        ),
        _step(
            spec, "cli-help", "shell", Phase.TEST,
            f"{target.cli_command} --help",
            command=[target.cli_command, "--help"],
        ),
        _step(
            spec, "uninstall", "node", Phase.CLEANUP,
            f"{pm} uninstall --global {target.package}",
            operation="uninstall", package_manager=pm, package=target.package,
            timeout=ctx.settings.timeout, **{"global": True},
        ),
        _step(
            spec, "list-after", "node", Phase.CLEANUP,
            f"{pm} ls --global --depth=0",
            operation="list", package_manager=pm, **{"global": True},
        ),
    ]
