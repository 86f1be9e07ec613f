"""Checking conditionals and combining the results of their branches."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from typeflow.algebra import union
from typeflow.check.context import expr_type
from typeflow.errors import InvariantViolation
from typeflow.flow.narrow import narrow
from typeflow.flow.objects import EMPTY
from typeflow.flow.props import BOT_PROP, FilterSet, Prop, conj, disj
from typeflow.flow.results import TCResult, unreachable_result
from typeflow.printing import format_filter_set

if TYPE_CHECKING:
    from typeflow.ast import If
    from typeflow.check.context import CheckContext, CheckFn
    from typeflow.flow.env import PropEnv
    from typeflow.nodes import Node

logger = logging.getLogger(__name__)


def update_lex_reachable(env: PropEnv, prop: Prop) -> tuple[PropEnv, bool]:
    """Narrow ``env`` by one proposition."""
    return narrow(env, [prop])


def check_if_reachable(
    check: CheckFn,
    expr: Node,
    env: PropEnv,
    reachable: object,
    expected: TCResult | None,
    ctx: CheckContext,
) -> Node:
    """Check a branch, or mark it unreachable without looking at it.

    Raises:
        InvariantViolation: If ``reachable`` is not a bool

    """
    if not isinstance(reachable, bool):
        msg = f"Reachability must be a bool, got {reachable!r}"
        raise InvariantViolation(msg)
    if not reachable:
        logger.debug("Skipping unreachable branch %s", expr.tag)
        return replace(expr, ret=unreachable_result())
    return check(expr, expected, ctx.with_env(env).at(expr))


def _branch_prop(test: Prop, branch: Prop, env: PropEnv, *, reachable: bool) -> Prop:
    if not reachable:
        return BOT_PROP
    return conj(test, branch, *env.props)


def combine_results(
    test: FilterSet,
    then_ret: TCResult,
    env_then: PropEnv,
    else_ret: TCResult,
    env_else: PropEnv,
) -> TCResult:
    """Result of a conditional from the results of its two branches.

    Args:
        test: Filters of the test expression
        then_ret: Result of the then branch
        env_then: Environment the then branch was checked in
        else_ret: Result of the else branch
        env_else: Environment the else branch was checked in

    Returns:
        The union of the branch types, filters that remember which branch
        was taken and an object both branches agree on.

    """
    then_reachable = not then_ret.unreachable
    else_reachable = not else_ret.unreachable

    filters = FilterSet(
        disj(
            _branch_prop(test.then, then_ret.filters.then, env_then, reachable=then_reachable),
            _branch_prop(test.else_, else_ret.filters.then, env_else, reachable=else_reachable),
        ),
        disj(
            _branch_prop(test.then, then_ret.filters.else_, env_then, reachable=then_reachable),
            _branch_prop(test.else_, else_ret.filters.else_, env_else, reachable=else_reachable),
        ),
    )

    if not then_reachable:
        obj = else_ret.object
    elif not else_reachable:
        obj = then_ret.object
    else:
        obj = then_ret.object if then_ret.object == else_ret.object else EMPTY

    return TCResult(union(then_ret.type, else_ret.type), filters, obj)


def check_if(
    check: CheckFn,
    expr: If,
    expected: TCResult | None,
    ctx: CheckContext,
) -> If:
    """Check a conditional.

    Each branch is checked against ``expected`` in the environment its side
    of the test establishes, and skipped when that environment is
    unreachable.
    """
    ctest = check(expr.test, None, ctx.without_recur_target().at(expr.test))
    test = expr_type(ctest).filters
    logger.debug("Test of %s filters %s", expr.tag, format_filter_set(test))

    env_then, reachable_then = update_lex_reachable(ctx.env, test.then)
    env_else, reachable_else = update_lex_reachable(ctx.env, test.else_)

    cthen = check_if_reachable(check, expr.then, env_then, reachable_then, expected, ctx)
    celse = check_if_reachable(check, expr.else_, env_else, reachable_else, expected, ctx)
    ret = combine_results(test, expr_type(cthen), env_then, expr_type(celse), env_else)
    return replace(expr, test=ctest, then=cthen, else_=celse, ret=ret)
