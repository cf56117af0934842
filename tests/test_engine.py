"""
Tests for scenario building, probes, the executor and the transcript.
"""

import json
from pathlib import Path

import pytest

from installcheck.core.context import RunContext
from installcheck.core.engine.errors import (
    CleanupError,
    CommandFailedError,
    ConfigurationError,
    WorkspaceError,
)
from installcheck.core.engine.executor import error_for, run_scenario
from installcheck.core.models.action import Action, Receipt
from installcheck.core.models.scenario import (
    DEFAULT_SCENARIOS,
    InstallMode,
    InstallSource,
    Phase,
    ScenarioSpec,
)
from installcheck.core.models.settings import TargetPackage
from installcheck.core.persistence.transcript import TranscriptWriter
from installcheck.core.services.probes import manifest, namespace_probe, probes_for, submodule_probe
from installcheck.core.services.scenarios import build_scenario, install_spec

LOCAL = ScenarioSpec(mode=InstallMode.LOCAL)
LOCAL_GIT = ScenarioSpec(mode=InstallMode.LOCAL, source=InstallSource.GIT)
GLOBAL = ScenarioSpec(mode=InstallMode.GLOBAL)


def _keys(plan) -> list[str]:
    return [a.id.split(":", 1)[1] for a in plan.steps]


# ── Scenario specs ──────────────────────────────────────────────────


class TestScenarioSpec:
    def test_default_order(self):
        assert [s.name for s in DEFAULT_SCENARIOS] == ["local", "local-git", "global", "global-git"]

    def test_descriptions(self):
        assert LOCAL.description == "local install from the registry"
        assert LOCAL_GIT.description == "local install from source control"


# ── Probes ──────────────────────────────────────────────────────────


class TestProbes:
    def test_namespace_commonjs(self):
        probe = namespace_probe(TargetPackage())
        assert probe.filename == "namespace.js"
        assert "require( \"@stdlib/stdlib\" )" in probe.source
        assert 'ns["math"]["base"]["special"]["sin"]( 3.14 )' in probe.source
        assert "typeof out !== 'number'" in probe.source

    def test_namespace_esm(self):
        probe = namespace_probe(TargetPackage(), esm=True)
        assert probe.filename == "namespace.mjs"
        assert probe.source.startswith('import ns from "@stdlib/stdlib";')

    def test_submodule_esm_uses_entry_file(self):
        probe = submodule_probe(TargetPackage(), esm=True)
        assert probe.filename == "submodule.mjs"
        assert "/math/base/special/sin/lib/index.js" in probe.source

    def test_probes_for(self):
        target = TargetPackage()
        assert [p.name for p in probes_for(target, esm=False)] == ["namespace", "submodule"]
        assert [p.name for p in probes_for(target, esm=True)] == [
            "namespace", "submodule", "namespace-esm", "submodule-esm",
        ]

    def test_manifest_is_json(self):
        data = json.loads(manifest())
        assert data["private"] is True
        assert data["name"] == "installcheck-sandbox"


# ── Scenario builder ────────────────────────────────────────────────


class TestBuildScenario:
    def test_local_with_esm(self, run_ctx):
        plan = build_scenario(LOCAL, run_ctx)
        assert _keys(plan) == [
            "mkdir", "manifest", "install",
            "write-namespace", "probe-namespace",
            "write-submodule", "probe-submodule",
            "write-namespace-esm", "probe-namespace-esm",
            "write-submodule-esm", "probe-submodule-esm",
        ]
        assert plan.cleanup.id == "local:cleanup"
        assert plan.cleanup.phase == Phase.CLEANUP

    def test_local_without_esm_on_old_node(self, run_ctx):
        run_ctx.node_major = 12
        plan = build_scenario(LOCAL, run_ctx)
        assert "probe-namespace-esm" not in _keys(plan)
        assert "probe-submodule" in _keys(plan)

    def test_unknown_node_skips_esm(self, run_ctx):
        run_ctx.node_major = None
        assert not run_ctx.supports_esm
        assert "probe-submodule-esm" not in _keys(build_scenario(LOCAL, run_ctx))

    def test_local_install_params(self, run_ctx):
        plan = build_scenario(LOCAL, run_ctx)
        install = plan.steps[2]
        assert install.params["spec"] == "@stdlib/stdlib@latest"
        assert install.params["global"] is False
        assert install.phase == Phase.INSTALL

    def test_git_source(self, run_ctx):
        assert install_spec(LOCAL_GIT, run_ctx) == "git+https://github.com/stdlib-js/stdlib.git#develop"

    def test_global_steps(self, run_ctx):
        plan = build_scenario(GLOBAL, run_ctx)
        assert _keys(plan) == ["mkdir", "install", "list", "cli-help", "uninstall", "list-after"]
        by_key = {a.id.split(":", 1)[1]: a for a in plan.steps}
        assert by_key["install"].params["global"] is True
        assert by_key["cli-help"].params["command"] == ["stdlib", "--help"]
        assert by_key["uninstall"].params["package"] == "@stdlib/stdlib"
        assert by_key["uninstall"].phase == Phase.CLEANUP

    def test_mkdir_is_fresh(self, run_ctx):
        mkdir = build_scenario(LOCAL, run_ctx).steps[0]
        assert mkdir.params["fresh"] is True
        assert mkdir.params["path"] == str(run_ctx.install_dir)


# ── Error mapping ───────────────────────────────────────────────────


class TestErrorFor:
    def _failed(self, rc=None):
        meta = {"return_code": rc} if rc is not None else {}
        return Receipt.failure(adapter="x", action_id="a", error="boom", metadata=meta)

    def test_filesystem_init(self):
        err = error_for(Action(id="a", adapter="filesystem", phase=Phase.INIT), self._failed())
        assert isinstance(err, WorkspaceError)
        assert err.reason == "initialization failed"

    def test_filesystem_cleanup(self):
        err = error_for(Action(id="a", adapter="filesystem", phase=Phase.CLEANUP), self._failed())
        assert isinstance(err, CleanupError)
        assert err.reason == "cleanup failed"

    def test_command_failure(self):
        action = Action(id="local:install", adapter="node", phase=Phase.INSTALL)
        err = error_for(action, self._failed(rc=1))
        assert isinstance(err, CommandFailedError)
        assert err.reason == "installation failed"
        assert err.step == "local:install"
        assert err.return_code == 1

    def test_probe_failure_reason(self):
        err = error_for(Action(id="local:probe-namespace", adapter="node"), self._failed(rc=1))
        assert err.reason == "test script failed"

    def test_configuration_reason(self):
        assert ConfigurationError("yarn").reason == "configuration error"


# ── Executor ────────────────────────────────────────────────────────


class TestRunScenario:
    def test_success_removes_directory(self, registry, run_ctx, node):
        result = run_scenario(build_scenario(LOCAL, run_ctx), registry, run_ctx)
        assert result.ok
        assert result.steps_run == 11
        assert not run_ctx.install_dir.exists()
        assert node.calls_for("local:install") == 1
        assert node.calls_for("local:probe-submodule-esm") == 1

    def test_steps_run_in_install_dir(self, registry, run_ctx, node):
        run_scenario(build_scenario(LOCAL, run_ctx), registry, run_ctx)
        cwds = {c.cwd for c in node.call_log}
        assert cwds == {str(run_ctx.install_dir)}

    def test_probe_files_written_before_run(self, registry, run_ctx, node):
        seen: list[bool] = []
        original = node.execute

        def execute(ctx):
            if ctx.action.id == "local:probe-namespace":
                seen.append((run_ctx.install_dir / "namespace.js").is_file())
            return original(ctx)

        node.execute = execute
        run_scenario(build_scenario(LOCAL, run_ctx), registry, run_ctx)
        assert seen == [True]

    def test_stops_at_first_failure(self, registry, run_ctx, node):
        node.set_failure("local:install", error="Command exited with code 1")
        with pytest.raises(CommandFailedError) as exc:
            run_scenario(build_scenario(LOCAL, run_ctx), registry, run_ctx)
        assert exc.value.reason == "installation failed"
        assert node.calls_for("local:probe-namespace") == 0
        assert not run_ctx.install_dir.exists()

    def test_failure_reason_in_transcript(self, registry, run_ctx, node):
        node.set_failure("local:probe-submodule")
        with pytest.raises(CommandFailedError):
            run_scenario(build_scenario(LOCAL, run_ctx), registry, run_ctx)
        log = run_ctx.transcript.read()
        assert "Error: test script failed" in log
        assert "--- scenario local: local install from the registry ---" in log

    def test_global_cli_check_runs_through_shell(self, registry, run_ctx, shell, node):
        run_scenario(build_scenario(GLOBAL, run_ctx), registry, run_ctx)
        assert shell.calls_for("global:cli-help") == 1
        assert node.calls_for("global:uninstall") == 1

    def test_workspace_failure(self, registry, run_ctx, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        run_ctx.install_dir = blocker / "nested"
        with pytest.raises(WorkspaceError):
            run_scenario(build_scenario(LOCAL, run_ctx), registry, run_ctx)


# ── Transcript ──────────────────────────────────────────────────────


class TestTranscript:
    def test_append_only(self, tmp_path: Path):
        path = tmp_path / "logs" / "run.log"
        path.parent.mkdir()
        path.write_text("previous run\n")
        writer = TranscriptWriter(path)
        writer.note("hello")
        assert writer.read().startswith("previous run\n")
        assert writer.read().rstrip().endswith("hello")

    def test_creates_parents(self, tmp_path: Path):
        writer = TranscriptWriter(tmp_path / "a" / "b" / "run.log")
        writer.note("x")
        assert writer.path.is_file()

    def test_record_includes_output_and_exit(self, tmp_path: Path):
        writer = TranscriptWriter(tmp_path / "run.log")
        action = Action(id="local:install", name="npm install pkg", adapter="node")
        receipt = Receipt.failure(
            adapter="node",
            action_id="local:install",
            error="Command exited with code 1",
            output="npm ERR! 404",
            metadata={"command": "npm install pkg", "return_code": 1},
        )
        writer.record(action, receipt)
        log = writer.read()
        assert "$ npm install pkg" in log
        assert "exit=1" in log
        assert "npm ERR! 404" in log
        assert "Command exited with code 1" in log

    def test_read_missing(self, tmp_path: Path):
        assert TranscriptWriter(tmp_path / "nope.log").read() == ""


class TestRunContext:
    def test_paths_coerced(self, tmp_path: Path):
        ctx = RunContext(package_manager="npm", install_dir=str(tmp_path / "d"), log_file=str(tmp_path / "l"))
        assert isinstance(ctx.install_dir, Path)
        assert ctx.transcript.path == tmp_path / "l"

    def test_esm_threshold(self, run_ctx):
        run_ctx.node_major = 14
        assert run_ctx.supports_esm
        run_ctx.node_major = 13
        assert not run_ctx.supports_esm
