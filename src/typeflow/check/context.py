"""Explicit checking context passed through every ``check`` call."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from typeflow.config import CheckConfig
from typeflow.errors import Diagnostics, InvariantViolation
from typeflow.flow.env import PropEnv

if TYPE_CHECKING:
    from typeflow.flow.results import TCResult
    from typeflow.nodes import Node
    from typeflow.types import Type


@dataclass(frozen=True)
class RecurTarget:
    """Argument signature a ``recur`` must match.

    Attributes:
        domain: Types of the leading arguments
        rest: Element type of a variadic tail
        dotted_rest: Element type of a dotted (polymorphic) variadic tail

    """

    domain: tuple[Type, ...]
    rest: Type | None = None
    dotted_rest: Type | None = None

    @property
    def variadic(self) -> bool:
        return self.rest is not None or self.dotted_rest is not None


@dataclass(frozen=True)
class CheckContext:
    """State of one point in a checking walk.

    Child checks receive a modified copy; nothing is mutated except the
    shared diagnostics sink of the walk.

    Attributes:
        env: The lexical environment
        diagnostics: Soft errors of the whole walk
        config: Checker settings
        recur_target: Signature of the enclosing loop when in tail position
        current_expr: The form being checked, for error locations

    """

    env: PropEnv = field(default_factory=PropEnv)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    config: CheckConfig = field(default_factory=CheckConfig)
    recur_target: RecurTarget | None = None
    current_expr: Node | None = None

    @classmethod
    def initial(cls, config: CheckConfig) -> CheckContext:
        """Context of a top-level form."""
        return cls(env=config.initial_env(), config=config)

    def with_env(self, env: PropEnv) -> CheckContext:
        return replace(self, env=env)

    def with_recur_target(self, target: RecurTarget) -> CheckContext:
        return replace(self, recur_target=target)

    def without_recur_target(self) -> CheckContext:
        """Context of a position that is not a tail of the enclosing loop."""
        if self.recur_target is None:
            return self
        return replace(self, recur_target=None)

    def at(self, expr: Node) -> CheckContext:
        return replace(self, current_expr=expr)


type CheckFn = Callable[[Node, TCResult | None, CheckContext], Node]


def expr_type(node: Node) -> TCResult:
    """The result attached to a checked node.

    Raises:
        InvariantViolation: If the node was never checked

    """
    if node.ret is None:
        msg = f"Expression {node.tag} has no inferred result"
        raise InvariantViolation(msg)
    return node.ret
