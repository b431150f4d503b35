# expr.py
"""
Gating expressions for jobs and steps.

Expressions are plain data. Nothing here evaluates them; GitHub Actions
does that at run time. `render()` produces the body of a `${{ ... }}`
expression, `to_expression()` the wrapped form.

    gate = is_branch("main") & is_push()
    gate.to_expression()
    # "${{ (github.ref == 'refs/heads/main') && (github.event_name == 'push') }}"
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple


class Expr(ABC):
    """Base node. Subclasses are frozen dataclasses, so nodes can be shared."""

    @abstractmethod
    def render(self) -> str:
        ...

    def to_expression(self) -> str:
        return f"${{{{ {self.render()} }}}}"

    def and_(self, other: Expr) -> And:
        return And(self, other)

    def or_(self, other: Expr) -> Or:
        return Or(self, other)

    def not_(self) -> Not:
        return Not(self)

    def __and__(self, other: Expr) -> And:
        return self.and_(other)

    def __or__(self, other: Expr) -> Or:
        return self.or_(other)

    def __invert__(self) -> Not:
        return self.not_()


@dataclass(frozen=True)
class Field(Expr):
    """A dotted path into a runtime context, e.g. ("github", "ref")."""
    path: Tuple[str, ...]

    def attr(self, name: str) -> Field:
        return Field(self.path + (name,))

    def eq(self, value: str) -> Equals:
        return Equals(self, value)

    def render(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True)
class Equals(Expr):
    field: Field
    value: str

    def render(self) -> str:
        escaped = self.value.replace("'", "''")
        return f"{self.field.render()} == '{escaped}'"


@dataclass(frozen=True)
class And(Expr):
    left: Expr
    right: Expr

    def render(self) -> str:
        return f"({self.left.render()}) && ({self.right.render()})"


@dataclass(frozen=True)
class Or(Expr):
    left: Expr
    right: Expr

    def render(self) -> str:
        return f"({self.left.render()}) || ({self.right.render()})"


@dataclass(frozen=True)
class Not(Expr):
    operand: Expr

    def render(self) -> str:
        return f"!({self.operand.render()})"


# ---------------------------------------------------------------------
# Runtime contexts
# ---------------------------------------------------------------------

def github() -> Field:
    return Field(("github",))


def secrets() -> Field:
    return Field(("secrets",))


def interpolate(field: Field) -> str:
    """Embed a context field in a plain string value."""
    return f"${{{{ {field.render()} }}}}"


def secret(name: str) -> str:
    return interpolate(secrets().attr(name))


# ---------------------------------------------------------------------
# Named predicates
# ---------------------------------------------------------------------

def is_branch(branch: str) -> Equals:
    return github().attr("ref").eq(f"refs/heads/{branch}")


def is_event(event_name: str) -> Equals:
    return github().attr("event_name").eq(event_name)


def is_push() -> Equals:
    return is_event("push")


def is_pull_request() -> Equals:
    return is_event("pull_request")
