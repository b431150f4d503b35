# step_workflows/release.py
from __future__ import annotations

from enum import Enum

from ..model import Step, StepKind

RELEASE_ACTION = "release-plz/action@v0.5"


class ReleaseCommand(str, Enum):
    RELEASE = "release"
    RELEASE_PR = "release-pr"


def release(command: ReleaseCommand, *, name: str | None = None) -> Step:
    """Create a release-plz action step."""
    return Step(
        name=name or ("Release PR" if command is ReleaseCommand.RELEASE_PR else "Release"),
        kind=StepKind.ACTION,
        uses=RELEASE_ACTION,
        inputs=(("command", command.value),),
    )
