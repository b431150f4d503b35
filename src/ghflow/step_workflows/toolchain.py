# step_workflows/toolchain.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from ..model import Step, StepKind

TOOLCHAIN_ACTION = "actions-rust-lang/setup-rust-toolchain@v1"


# ---------------------------------------------------------------------
# Toolchain step builder
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Toolchain:
    """
    Rust toolchain setup. Each `add_*` returns a new value.

    Example:
        toolchain().add_stable().add_nightly().add_clippy().add_fmt().step()
    """
    toolchains: Tuple[str, ...] = ()
    components: Tuple[str, ...] = ()
    name: str = "Setup Rust Toolchain"

    def _with_toolchain(self, value: str) -> Toolchain:
        if value in self.toolchains:
            return self
        return replace(self, toolchains=self.toolchains + (value,))

    def _with_component(self, value: str) -> Toolchain:
        if value in self.components:
            return self
        return replace(self, components=self.components + (value,))

    def add_stable(self) -> Toolchain:
        return self._with_toolchain("stable")

    def add_nightly(self) -> Toolchain:
        return self._with_toolchain("nightly")

    def add_clippy(self) -> Toolchain:
        return self._with_component("clippy")

    def add_fmt(self) -> Toolchain:
        return self._with_component("rustfmt")

    def step(self) -> Step:
        inputs = []
        if self.toolchains:
            inputs.append(("toolchain", ", ".join(self.toolchains)))
        if self.components:
            inputs.append(("components", ", ".join(self.components)))
        return Step(
            name=self.name,
            kind=StepKind.TOOLCHAIN,
            uses=TOOLCHAIN_ACTION,
            inputs=tuple(inputs),
        )


def toolchain() -> Toolchain:
    return Toolchain()
