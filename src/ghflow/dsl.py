# dsl.py
from __future__ import annotations

import textwrap
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from .dag import validate
from .expr import Expr
from .model import (
    Concurrency,
    Event,
    Job,
    Permissions,
    Step,
    StepKind,
    Workflow,
)

CHECKOUT_ACTION = "actions/checkout@v4"


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def checkout() -> Step:
    """The canonical "checkout source" step."""
    return Step(name="Checkout Code", kind=StepKind.CHECKOUT, uses=CHECKOUT_ACTION)


def sh(name: str, script: str) -> Step:
    """Create a shell step. Multi-line scripts are dedented and kept in order."""
    return Step(name=name, kind=StepKind.RUN, run=textwrap.dedent(script).strip())


# ---------------------------------------------------------------------
# Job builder
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class JobBuilder:
    """
    Immutable job builder. Every method returns a new builder.

        JobBuilder("Build and Test")
            .permissions(Permissions().contents(Level.READ))
            .add_step(checkout())
            .build()
    """
    name: str
    _steps: Tuple[Step, ...] = ()
    _needs: Tuple[str, ...] = ()
    _permissions: Permissions = Permissions()
    _cond: Optional[Expr] = None
    _concurrency: Optional[Concurrency] = None
    _env: Tuple[Tuple[str, str], ...] = ()
    _runs_on: str = "ubuntu-latest"

    def add_step(self, *steps: Step) -> JobBuilder:
        return replace(self, _steps=self._steps + steps)

    def needs(self, *job_ids: str) -> JobBuilder:
        return replace(self, _needs=self._needs + job_ids)

    def permissions(self, permissions: Permissions) -> JobBuilder:
        return replace(self, _permissions=self._permissions.merge(permissions))

    def cond(self, expr: Expr) -> JobBuilder:
        return replace(self, _cond=expr)

    def concurrency(self, group: str, *, cancel_in_progress: bool = False) -> JobBuilder:
        return replace(self, _concurrency=Concurrency(group=group, cancel_in_progress=cancel_in_progress))

    def add_env(self, key: str, value: str) -> JobBuilder:
        # force values to str for stable output
        kept = tuple((k, v) for k, v in self._env if k != key)
        return replace(self, _env=kept + ((key, str(value)),))

    def runs_on(self, runner: str) -> JobBuilder:
        return replace(self, _runs_on=runner)

    def build(self) -> Job:
        if not self._steps:
            raise ValueError(f"Job '{self.name}' has no steps")

        # collapse repeated dependencies, keep first-seen order
        needs = tuple(dict.fromkeys(self._needs))

        return Job(
            name=self.name,
            steps=self._steps,
            needs=needs,
            permissions=self._permissions,
            cond=self._cond,
            concurrency=self._concurrency,
            env=self._env,
            runs_on=self._runs_on,
        )


def job(
    name: str,
    *steps: Step,  # allow: job("x", sh(...), sh(...))
    needs: Optional[Iterable[str]] = None,
    permissions: Optional[Permissions] = None,
    cond: Optional[Expr] = None,
    env: Optional[dict] = None,
) -> Job:
    """Functional shortcut over JobBuilder."""
    b = JobBuilder(name).add_step(*steps)
    if needs:
        b = b.needs(*needs)
    if permissions is not None:
        b = b.permissions(permissions)
    if cond is not None:
        b = b.cond(cond)
    for key, value in (env or {}).items():
        b = b.add_env(key, value)
    return b.build()


# ---------------------------------------------------------------------
# Workflow builder
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class WorkflowBuilder:
    """
    Immutable workflow builder.

    Jobs are kept in the order they are added. `build()` validates the job
    graph: unique ids, dependencies present and declared earlier, no cycles.
    """
    name: str
    _on: Event = Event()
    _jobs: Tuple[Tuple[str, Job], ...] = ()
    _env: Tuple[Tuple[str, str], ...] = ()

    def on(self, event: Event) -> WorkflowBuilder:
        return replace(self, _on=event)

    def add_env(self, key: str, value: str) -> WorkflowBuilder:
        kept = tuple((k, v) for k, v in self._env if k != key)
        return replace(self, _env=kept + ((key, str(value)),))

    def add_job(self, job_id: str, job: Job) -> WorkflowBuilder:
        return replace(self, _jobs=self._jobs + ((job_id, job),))

    def build(self) -> Workflow:
        validate(self._jobs)
        return Workflow(name=self.name, on=self._on, jobs=self._jobs, env=self._env)

