# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .expr import Expr


class Level(str, Enum):
    NONE = "none"
    READ = "read"
    WRITE = "write"


class StepKind(str, Enum):
    CHECKOUT = "checkout"
    TOOLCHAIN = "toolchain"
    RUN = "run"
    ACTION = "action"


class PullRequestType(str, Enum):
    OPENED = "opened"
    SYNCHRONIZE = "synchronize"
    REOPENED = "reopened"
    CLOSED = "closed"
    EDITED = "edited"


@dataclass(frozen=True)
class Step:
    """A single ordered action inside a job."""
    name: str
    kind: StepKind
    run: Optional[str] = None          # shell command (run steps)
    uses: Optional[str] = None         # action reference (checkout/toolchain/action)
    inputs: Tuple[Tuple[str, str], ...] = ()
    args: Tuple[str, ...] = ()
    variant: Optional[str] = None      # e.g. "nightly"


@dataclass(frozen=True)
class Permissions:
    """
    Resource scope -> access level.

    Grants only accumulate. Granting a scope again replaces its level but
    never drops another scope.
    """
    grants: Tuple[Tuple[str, Level], ...] = ()

    def grant(self, scope: str, level: Level) -> Permissions:
        kept = tuple((s, lv) for s, lv in self.grants if s != scope)
        return Permissions(grants=kept + ((scope, level),))

    def merge(self, other: Permissions) -> Permissions:
        out = self
        for scope, level in other.grants:
            out = out.grant(scope, level)
        return out

    def contents(self, level: Level) -> Permissions:
        return self.grant("contents", level)

    def pull_requests(self, level: Level) -> Permissions:
        return self.grant("pull-requests", level)

    def packages(self, level: Level) -> Permissions:
        return self.grant("packages", level)

    def as_dict(self) -> Dict[str, Level]:
        return dict(self.grants)


@dataclass(frozen=True)
class Concurrency:
    group: str
    cancel_in_progress: bool = False


@dataclass(frozen=True)
class Job:
    """
    A workflow job: ordered steps + gate + dependencies.

    `needs` holds job ids (keys in Workflow.jobs), not display names.
    """
    name: str
    steps: Tuple[Step, ...]
    needs: Tuple[str, ...] = ()
    permissions: Permissions = field(default_factory=Permissions)
    cond: Optional[Expr] = None
    concurrency: Optional[Concurrency] = None
    env: Tuple[Tuple[str, str], ...] = ()
    runs_on: str = "ubuntu-latest"


@dataclass(frozen=True)
class PushTrigger:
    branches: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PullRequestTrigger:
    types: Tuple[PullRequestType, ...] = ()
    branches: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Event:
    push: Optional[PushTrigger] = None
    pull_request: Optional[PullRequestTrigger] = None


@dataclass(frozen=True)
class Workflow:
    """
    Fully assembled workflow document.

    `jobs` keeps insertion order; dependencies always point backwards.
    Build it through WorkflowBuilder so the graph gets validated.
    """
    name: str
    on: Event
    jobs: Tuple[Tuple[str, Job], ...] = ()
    env: Tuple[Tuple[str, str], ...] = ()

    @property
    def job_ids(self) -> list[str]:
        return [job_id for job_id, _ in self.jobs]

    def job(self, job_id: str) -> Job:
        for key, job in self.jobs:
            if key == job_id:
                return job
        raise KeyError(f"Unknown job id: {job_id!r}. Known jobs: {self.job_ids}")

    def jobs_by_id(self) -> Dict[str, Job]:
        return dict(self.jobs)
