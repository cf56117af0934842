"""
Settings model — everything the install check can be configured with.

Loaded from ``installcheck.yml`` by ``core.config.loader``. Every field
has a default, so an empty (or missing) file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TargetPackage(BaseModel):
    """The published package under test and how to probe it."""

    package: str = "@stdlib/stdlib"
    version: str = "latest"
    repository: str = "https://github.com/stdlib-js/stdlib.git"
    ref: str = "develop"

    # Global installs must expose this command-line entry point.
    cli_command: str = "stdlib"

    # Dotted path from the whole namespace to one numeric function.
    namespace_function: str = "math.base.special.sin"

    # Independently loadable sub-module exposing an equivalent function.
    submodule: str = "@stdlib/stdlib/lib/node_modules/@stdlib/math/base/special/sin"
    # ES modules do not resolve directories; appended to ``submodule``.
    submodule_entry: str = "lib/index.js"

    probe_argument: float = 3.14

    @property
    def registry_spec(self) -> str:
        return f"{self.package}@{self.version}"

    @property
    def git_spec(self) -> str:
        url = self.repository
        if not url.startswith("git+"):
            url = f"git+{url}"
        return f"{url}#{self.ref}"


class ToolSettings(BaseModel):
    """Paths for the Node-based package tooling."""

    node: str = "node"
    node_path: str | None = None
    list_pkgs_names: str = "tools/pkgs/names/bin/cli"
    list_pkgs_names_flags: list[str] = Field(default_factory=list)
    list_pkgs_names_dir: str = "lib/node_modules"


class ContributorsSettings(BaseModel):
    """Metadata for the automated contributors pull request."""

    make_target: str = "update-contributors"
    base: str = "develop"
    branch: str = "update-contributors"
    title: str = "Update list of contributors"
    body: str = "This PR\n\n-   updates the list of contributors\n"
    commit_message: str = "docs: update list of contributors"
    committer_name: str = "stdlib-bot"
    committer_email: str = "noreply@stdlib.io"
    labels: list[str] = Field(default_factory=lambda: ["documentation", "automated-pr"])
    team_reviewers: list[str] = Field(default_factory=lambda: ["stdlib-reviewers"])
    # gh expects team reviewers as ORG/TEAM.
    reviewer_org: str = "stdlib-js"
    remote: str = "origin"

    @property
    def reviewers(self) -> list[str]:
        return [t if "/" in t else f"{self.reviewer_org}/{t}" for t in self.team_reviewers]


class Settings(BaseModel):
    """Root configuration."""

    target: TargetPackage = Field(default_factory=TargetPackage)
    heartbeat_interval: float = Field(default=60.0, gt=0)
    retry_delay: float = Field(default=15.0, ge=0)
    esm_min_node_major: int = 14
    timeout: int = 1800
    tools: ToolSettings = Field(default_factory=ToolSettings)
    contributors: ContributorsSettings = Field(default_factory=ContributorsSettings)
