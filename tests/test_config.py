"""
Tests for installcheck.yml loading and the settings model.
"""

from pathlib import Path

import pytest

from installcheck.core.config.loader import CONFIG_FILE, ConfigError, find_config_file, load_settings
from installcheck.core.models.settings import ContributorsSettings, Settings, TargetPackage


class TestDefaults:
    def test_settings(self):
        s = Settings()
        assert s.heartbeat_interval == 60.0
        assert s.retry_delay == 15.0
        assert s.esm_min_node_major == 14
        assert s.target.package == "@stdlib/stdlib"

    def test_registry_and_git_specs(self):
        t = TargetPackage(package="pkg", version="1.2.3", repository="https://example.com/pkg.git", ref="main")
        assert t.registry_spec == "pkg@1.2.3"
        assert t.git_spec == "git+https://example.com/pkg.git#main"

    def test_git_spec_keeps_prefix(self):
        t = TargetPackage(repository="git+ssh://git@example.com/pkg.git")
        assert t.git_spec.startswith("git+ssh://")
        assert t.git_spec.count("git+") == 1

    def test_reviewers_qualified(self):
        c = ContributorsSettings(team_reviewers=["reviewers", "other-org/team"])
        assert c.reviewers == ["stdlib-js/reviewers", "other-org/team"]

    @pytest.mark.parametrize("interval", [0, -5])
    def test_heartbeat_interval_positive(self, interval):
        with pytest.raises(ValueError):
            Settings(heartbeat_interval=interval)


class TestFindConfigFile:
    def test_found_in_parent(self, tmp_path: Path):
        (tmp_path / CONFIG_FILE).write_text("retry_delay: 1\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / CONFIG_FILE).resolve()

    def test_not_found(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(
            "installcheck.core.config.loader.Path.is_file",
            lambda self: False,
        )
        assert find_config_file(tmp_path) is None


class TestLoadSettings:
    def _write(self, tmp_path: Path, text: str) -> Path:
        path = tmp_path / CONFIG_FILE
        path.write_text(text)
        return path

    def test_full(self, tmp_path: Path):
        path = self._write(
            tmp_path,
            "target:\n"
            "  package: my-pkg\n"
            "  version: 2.0.0\n"
            "  cli_command: my-pkg\n"
            "heartbeat_interval: 30\n"
            "retry_delay: 5\n"
            "tools:\n"
            "  node_path: /opt/lib\n",
        )
        s = load_settings(path)
        assert s.target.package == "my-pkg"
        assert s.target.registry_spec == "my-pkg@2.0.0"
        assert s.heartbeat_interval == 30
        assert s.retry_delay == 5
        assert s.tools.node_path == "/opt/lib"

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        assert load_settings(self._write(tmp_path, "")) == Settings()

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_auto_detect_missing_gives_defaults(self, monkeypatch):
        monkeypatch.setattr("installcheck.core.config.loader.find_config_file", lambda: None)
        assert load_settings() == Settings()

    def test_invalid_yaml(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(self._write(tmp_path, "target: [unclosed\n"))

    def test_not_a_mapping(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(self._write(tmp_path, "- a\n- b\n"))

    def test_schema_error(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(self._write(tmp_path, "heartbeat_interval: -1\n"))
