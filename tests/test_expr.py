"""Tests for gating expressions."""

import pytest

from ghflow.expr import (
    And,
    Equals,
    Expr,
    Field,
    Not,
    Or,
    github,
    interpolate,
    is_branch,
    is_pull_request,
    is_push,
    secret,
)


def test_field_paths_render_dotted():
    """Context fields render as dotted paths."""
    assert github().attr("ref").render() == "github.ref"
    assert Field(("github", "event_name")).render() == "github.event_name"


def test_named_predicates_build_equality_nodes():
    """Named predicates are plain Equals nodes over github context fields."""
    assert is_branch("main") == Equals(Field(("github", "ref")), "refs/heads/main")
    assert is_push() == Equals(Field(("github", "event_name")), "push")
    assert is_pull_request() == Equals(Field(("github", "event_name")), "pull_request")


def test_operators_build_tree():
    """&, | and ~ build And, Or and Not nodes."""
    a, b = is_branch("main"), is_push()

    assert (a & b) == And(a, b)
    assert (a | b) == Or(a, b)
    assert ~a == Not(a)
    assert a.and_(b) == And(a, b)


def test_render_and_expression():
    """The release gate renders to the platform expression syntax."""
    gate = is_branch("main") & is_push()

    assert gate.render() == "(github.ref == 'refs/heads/main') && (github.event_name == 'push')"
    assert gate.to_expression() == (
        "${{ (github.ref == 'refs/heads/main') && (github.event_name == 'push') }}"
    )


def test_render_or_and_not():
    """Or and Not render with parentheses around operands."""
    expr = ~(is_push() | is_pull_request())
    assert expr.render() == (
        "!((github.event_name == 'push') || (github.event_name == 'pull_request'))"
    )


def test_equals_escapes_single_quotes():
    """Single quotes inside literals are doubled."""
    assert github().attr("ref").eq("it's").render() == "github.ref == 'it''s'"


def test_expressions_are_reusable_values():
    """Sharing one node between parents does not change it."""
    gate = is_branch("main") & is_push()
    first = And(gate, is_pull_request())
    second = Or(gate, is_pull_request())

    assert first.left is second.left
    assert gate == And(is_branch("main"), is_push())
    assert hash(gate) == hash(And(is_branch("main"), is_push()))


def test_interpolation_helpers():
    """interpolate and secret produce ${{ }} strings for plain values."""
    assert interpolate(github().attr("ref")) == "${{ github.ref }}"
    assert secret("CARGO_REGISTRY_TOKEN") == "${{ secrets.CARGO_REGISTRY_TOKEN }}"


def test_base_expression_cannot_be_instantiated():
    """Expr is abstract; only concrete nodes render."""
    with pytest.raises(TypeError):
        Expr()
