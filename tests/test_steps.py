"""Tests for step helpers."""

from ghflow.dsl import checkout, sh
from ghflow.model import StepKind
from ghflow.step_workflows.cargo import cargo
from ghflow.step_workflows.release import ReleaseCommand, release
from ghflow.step_workflows.toolchain import toolchain


def test_checkout_step():
    """Checkout uses the checkout action."""
    step = checkout()
    assert step.kind == StepKind.CHECKOUT
    assert step.name == "Checkout Code"
    assert step.uses == "actions/checkout@v4"
    assert step.run is None


def test_toolchain_collects_toolchains_and_components():
    """Toolchains and components are kept in the order they were added."""
    step = toolchain().add_stable().add_nightly().add_clippy().add_fmt().step()

    assert step.kind == StepKind.TOOLCHAIN
    assert step.uses == "actions-rust-lang/setup-rust-toolchain@v1"
    assert dict(step.inputs) == {
        "toolchain": "stable, nightly",
        "components": "clippy, rustfmt",
    }


def test_toolchain_ignores_repeats_and_is_immutable():
    """add_* never mutates the original value and ignores duplicates."""
    base = toolchain().add_stable()
    extended = base.add_stable().add_fmt()

    assert base.toolchains == ("stable",)
    assert base.components == ()
    assert extended.toolchains == ("stable",)
    assert extended.components == ("rustfmt",)


def test_toolchain_without_components_omits_input():
    """Only non-empty inputs are emitted."""
    step = toolchain().add_stable().step()
    assert dict(step.inputs) == {"toolchain": "stable"}


def test_cargo_step_command_and_args():
    """cargo() builds the command line and keeps ordered args."""
    step = cargo("clippy", "--all-features --workspace -- -D warnings", name="Cargo Clippy", nightly=True)

    assert step.kind == StepKind.RUN
    assert step.name == "Cargo Clippy"
    assert step.run == "cargo +nightly clippy --all-features --workspace -- -D warnings"
    assert step.args == ("clippy", "--all-features", "--workspace", "--", "-D", "warnings")
    assert step.variant == "nightly"


def test_cargo_step_without_args():
    """An empty argument string adds nothing after the subcommand."""
    step = cargo("fmt", "", nightly=True)

    assert step.run == "cargo +nightly fmt"
    assert step.args == ("fmt",)
    assert step.name == "Cargo Fmt"


def test_cargo_step_stable_has_no_variant():
    """Stable cargo steps carry no variant."""
    step = cargo("test", "--workspace")
    assert step.run == "cargo test --workspace"
    assert step.variant is None


def test_cargo_step_keeps_quoted_args_in_run_line():
    """Quoted arguments reach the run line as written and stay grouped in args."""
    step = cargo("test", '--features "a b"')

    assert step.run == 'cargo test --features "a b"'
    assert step.args == ("test", "--features", "a b")


def test_cargo_step_tolerates_unbalanced_quotes():
    """An unbalanced quote is passed through; cargo reports it at run time."""
    step = cargo("test", "--features 'a")

    assert step.run == "cargo test --features 'a"
    assert step.args == ("test", "--features", "'a")


def test_sh_dedents_script():
    """Shell scripts are dedented and trimmed, line order kept."""
    step = sh("Commit", """
        git add .
        git commit -m "fix"
    """)

    assert step.kind == StepKind.RUN
    assert step.run == 'git add .\ngit commit -m "fix"'


def test_release_steps():
    """release() uses release-plz with the requested command."""
    pr = release(ReleaseCommand.RELEASE_PR)
    rel = release(ReleaseCommand.RELEASE)

    assert pr.kind == StepKind.ACTION
    assert pr.uses == "release-plz/action@v0.5"
    assert dict(pr.inputs) == {"command": "release-pr"}
    assert dict(rel.inputs) == {"command": "release"}
    assert pr.name == "Release PR"
    assert rel.name == "Release"
