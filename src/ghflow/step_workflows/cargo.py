# step_workflows/cargo.py
from __future__ import annotations

import shlex

from ..model import Step, StepKind


# ---------------------------------------------------------------------
# Cargo step helper
# ---------------------------------------------------------------------

def cargo(
    subcommand: str,
    args: str | None = None,
    *,
    name: str | None = None,
    nightly: bool = False,
) -> Step:
    """
    Create a `cargo <subcommand>` run step.

    `args` is the raw argument string. It goes into the run line exactly as
    given and is split into an ordered tuple for inspection. Nothing is
    checked; cargo itself rejects bad flags at run time.
    """
    raw = (args or "").strip()
    try:
        arg_list = tuple(shlex.split(raw))
    except ValueError:
        # unbalanced quotes: fall back to whitespace split, the run line stays raw
        arg_list = tuple(raw.split())

    toolchain = " +nightly" if nightly else ""

    return Step(
        name=name or f"Cargo {subcommand.capitalize()}",
        kind=StepKind.RUN,
        run=f"cargo{toolchain} {subcommand} {raw}".strip(),
        args=(subcommand,) + arg_list,
        variant="nightly" if nightly else None,
    )
