# workflow.py
"""
Feature-flag driven CI workflow for Rust projects.

Turn features on or off in WorkflowConfig and a complete GitHub Actions
workflow is assembled from them:

    from ghflow import WorkflowConfig

    WorkflowConfig(auto_release=True).generate()

*IMPORTANT:* auto_release needs `secrets.CARGO_REGISTRY_TOKEN` set on the
repository.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict

from .dsl import JobBuilder, WorkflowBuilder, checkout, sh
from .expr import Expr, github, interpolate, is_branch, is_pull_request, is_push, secret
from .generate import generate as generate_workflow
from .model import (
    Event,
    Job,
    Level,
    Permissions,
    PullRequestTrigger,
    PullRequestType,
    PushTrigger,
    Workflow,
)
from .step_workflows.cargo import cargo
from .step_workflows.release import ReleaseCommand, release
from .step_workflows.toolchain import toolchain

DEFAULT_BRANCH = "main"

BUILD_JOB = "build"
RELEASE_JOB = "release"
RELEASE_PR_JOB = "release-pr"
AUTO_FIX_JOB = "auto-fix-lint-fmt"

AUTO_FIX_SCRIPT = """
    git config user.name "github-actions[bot]"
    git config user.email "github-actions[bot]@users.noreply.github.com"
    git add .
    git commit -m "style: Applied automatic formatting fixes via ghflow"
    git push
"""


class WorkflowConfig(BaseModel):
    """Feature flags for the generated workflow."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # When enabled, release and release-pr jobs are added.
    auto_release: bool = False
    # Name of the workflow.
    name: str = "CI"
    # When enabled, a benchmark step is appended to the build job.
    benchmarks: bool = False
    # When enabled, lint and fmt fixes are auto-committed on PRs.
    auto_fix: bool = False

    def build_and_test(self) -> Job:
        """Creates the "Build and Test" job."""
        b = (
            JobBuilder("Build and Test")
            .permissions(Permissions().contents(Level.READ))
            .add_step(checkout())
            .add_step(toolchain().add_stable().add_nightly().add_clippy().add_fmt().step())
            .add_step(cargo("test", "--all-features --workspace", name="Cargo Test"))
            .add_step(cargo("fmt", "--check", name="Cargo Fmt", nightly=True))
            .add_step(
                cargo(
                    "clippy",
                    "--all-features --workspace -- -D warnings",
                    name="Cargo Clippy",
                    nightly=True,
                )
            )
        )

        if self.benchmarks:
            b = b.add_step(cargo("bench", "--workspace", name="Cargo Bench"))

        return b.build()

    def to_github_workflow(self) -> Workflow:
        return assemble(self)

    def generate(self, root: str | Path | None = None, *, check: Optional[bool] = None) -> Path:
        """Assemble, render and write (or check) the workflow file."""
        return generate_workflow(self.to_github_workflow(), root=root, check=check)


def load_config(path: str | Path) -> WorkflowConfig:
    """Load WorkflowConfig from a YAML file. An empty file means all defaults."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return WorkflowConfig.model_validate(data)


# ---------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------

def triggers(branch: str = DEFAULT_BRANCH) -> Event:
    return Event(
        push=PushTrigger(branches=(branch,)),
        pull_request=PullRequestTrigger(
            types=(
                PullRequestType.OPENED,
                PullRequestType.SYNCHRONIZE,
                PullRequestType.REOPENED,
            ),
            branches=(branch,),
        ),
    )


def release_gate(branch: str = DEFAULT_BRANCH) -> Expr:
    return is_branch(branch) & is_push()


def release_permissions() -> Permissions:
    return (
        Permissions()
        .pull_requests(Level.WRITE)
        .packages(Level.WRITE)
        .contents(Level.WRITE)
    )


def _release_base(name: str, gate: Expr, build_id: str, permissions: Permissions) -> JobBuilder:
    return (
        JobBuilder(name)
        .cond(gate)
        .needs(build_id)
        .add_env("GITHUB_TOKEN", secret("GITHUB_TOKEN"))
        .add_env("CARGO_REGISTRY_TOKEN", secret("CARGO_REGISTRY_TOKEN"))
        .permissions(permissions)
    )


def release_pr_job(gate: Expr, build_id: str, permissions: Permissions) -> Job:
    # queue overlapping runs for the same ref; release-pr mutates the release branch
    group = f"release-{interpolate(github().attr('ref'))}"
    return (
        _release_base("Release PR", gate, build_id, permissions)
        .concurrency(group, cancel_in_progress=False)
        .add_step(checkout())
        .add_step(release(ReleaseCommand.RELEASE_PR))
        .build()
    )


def release_job(gate: Expr, build_id: str, permissions: Permissions) -> Job:
    return (
        _release_base("Release", gate, build_id, permissions)
        .add_step(checkout())
        .add_step(release(ReleaseCommand.RELEASE))
        .build()
    )


def lint_and_fmt_fix_job() -> Job:
    return (
        JobBuilder("Auto Fix Lint and Fmt")
        .permissions(Permissions().contents(Level.WRITE))
        .cond(is_pull_request())
        .add_step(checkout())
        .add_step(toolchain().add_stable().add_nightly().add_fmt().step())
        # no --check: rewrite files in place
        .add_step(cargo("fmt", name="Cargo Fmt (Fix)", nightly=True))
        .add_step(sh("Commit and Push Fixes", AUTO_FIX_SCRIPT))
        .build()
    )


def assemble(config: WorkflowConfig) -> Workflow:
    """Map feature flags to a validated Workflow."""
    gate = release_gate()
    build = config.build_and_test()

    wf = (
        WorkflowBuilder(config.name)
        .add_env("RUSTFLAGS", "-Dwarnings")
        .on(triggers())
        .add_job(BUILD_JOB, build)
    )

    if config.auto_release:
        permissions = release_permissions()
        wf = (
            wf.add_job(RELEASE_JOB, release_job(gate, BUILD_JOB, permissions))
            .add_job(RELEASE_PR_JOB, release_pr_job(gate, BUILD_JOB, permissions))
        )

    if config.auto_fix:
        wf = wf.add_job(AUTO_FIX_JOB, lint_and_fmt_fix_job())

    return wf.build()
