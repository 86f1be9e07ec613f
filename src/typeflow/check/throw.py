"""Non-local exits."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from typeflow.check.below import check_below
from typeflow.flow.results import TCResult, unreachable_result

if TYPE_CHECKING:
    from typeflow.ast import Throw
    from typeflow.check.context import CheckContext, CheckFn


def check_throw(
    check: CheckFn,
    expr: Throw,
    expected: TCResult | None,
    ctx: CheckContext,
    exception_expected: TCResult | None = None,
) -> Throw:
    """Check a throw, which never returns normally."""
    inner = ctx.without_recur_target().at(expr.exception)
    cexception = check(expr.exception, exception_expected, inner)
    ret = check_below(unreachable_result(), expected, ctx)
    return replace(expr, exception=cexception, ret=ret)
