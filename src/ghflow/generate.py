# generate.py
"""
Render a Workflow to GitHub Actions YAML and write it to disk.

In check mode (default on CI runners) nothing is written; the file on disk
must already match the rendered text, otherwise GenerateError is raised.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from . import settings
from .git_facts.git import find_root
from .model import Job, Step, Workflow
from .ui.console import get_console

HEADER = (
    "# -------------------------------------------------------------------\n"
    "# Auto-generated by ghflow. DO NOT EDIT THIS FILE DIRECTLY.\n"
    "# Change the workflow configuration and run `ghflow generate` instead.\n"
    "# -------------------------------------------------------------------\n"
    "\n"
)


@dataclass
class GenerateError(Exception):
    """
    Structured generation error.

    kind is one of: "missing", "outdated", "write_failed".
    """
    kind: str
    path: str
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}", f"path={self.path}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Dict rendering
# ----------------------------------------------------------------------

def step_to_dict(step: Step) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": step.name}
    if step.uses:
        out["uses"] = step.uses
    if step.inputs:
        out["with"] = dict(step.inputs)
    if step.run is not None:
        out["run"] = step.run
    return out


def job_to_dict(job: Job) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": job.name, "runs-on": job.runs_on}
    if job.needs:
        out["needs"] = list(job.needs)
    if job.cond is not None:
        out["if"] = job.cond.to_expression()
    if job.permissions.grants:
        out["permissions"] = {scope: level.value for scope, level in job.permissions.grants}
    if job.concurrency is not None:
        out["concurrency"] = {
            "group": job.concurrency.group,
            "cancel-in-progress": job.concurrency.cancel_in_progress,
        }
    if job.env:
        out["env"] = dict(job.env)
    out["steps"] = [step_to_dict(s) for s in job.steps]
    return out


def to_dict(workflow: Workflow) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": workflow.name}
    if workflow.env:
        out["env"] = dict(workflow.env)

    on: Dict[str, Any] = {}
    if workflow.on.push is not None:
        on["push"] = {"branches": list(workflow.on.push.branches)}
    if workflow.on.pull_request is not None:
        pr = workflow.on.pull_request
        on["pull_request"] = {
            "types": [t.value for t in pr.types],
            "branches": list(pr.branches),
        }
    out["on"] = on

    out["jobs"] = {job_id: job_to_dict(job) for job_id, job in workflow.jobs}
    return out


# ----------------------------------------------------------------------
# YAML rendering
# ----------------------------------------------------------------------

class _Dumper(yaml.SafeDumper):
    """SafeDumper that keeps multi-line scripts readable and never emits anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_Dumper.add_representer(str, _str_representer)


def to_yaml(workflow: Workflow) -> str:
    body = yaml.dump(
        to_dict(workflow),
        Dumper=_Dumper,
        sort_keys=False,
        default_flow_style=False,
        width=1000,
    )
    return HEADER + body


# ----------------------------------------------------------------------
# Files
# ----------------------------------------------------------------------

def workflow_filename(workflow: Workflow) -> str:
    """Slug of the workflow name, e.g. CI -> ci.yml."""
    slug = re.sub(r"[^a-z0-9]+", "-", workflow.name.lower()).strip("-")
    return f"{slug or 'ci'}.yml"


def output_path(workflow: Workflow, root: str | Path | None = None) -> Path:
    base = Path(root) if root is not None else find_root()
    return base / settings.WORKFLOW_DIR / workflow_filename(workflow)


def generate(
    workflow: Workflow,
    root: str | Path | None = None,
    *,
    check: Optional[bool] = None,
    path: str | Path | None = None,
) -> Path:
    """
    Write the rendered workflow, or verify it in check mode.

    check=None means: check on CI, write everywhere else.

    Returns:
        Path of the workflow file.

    Raises:
        GenerateError: check failed or the file could not be written.
    """
    console = get_console()
    target = Path(path) if path is not None else output_path(workflow, root)
    content = to_yaml(workflow)
    if check is None:
        check = settings.in_ci()

    console.print_debug(f"workflow '{workflow.name}' -> {target} (check={check})")

    if check:
        if not target.exists():
            raise GenerateError(
                kind="missing",
                path=str(target),
                message="Workflow file does not exist",
                details={"hint": "run `ghflow generate` locally and commit the result"},
            )
        if target.read_text() != content:
            raise GenerateError(
                kind="outdated",
                path=str(target),
                message="Workflow file is outdated",
                details={"hint": "run `ghflow generate` locally and commit the result"},
            )
        console.print_debug(f"{target} is up to date")
        return target

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    except OSError as e:
        raise GenerateError(
            kind="write_failed",
            path=str(target),
            message="Could not write workflow file",
            details={"reason": str(e)},
        ) from e

    console.print_debug(f"wrote {len(content)} bytes to {target}")
    return target
