"""Re-entry into the enclosing loop."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from typeflow.check.below import check_below
from typeflow.errors import ArityError, RecurOutsideLoopError
from typeflow.flow.results import TCResult, unreachable_result

if TYPE_CHECKING:
    from typeflow.ast import Recur
    from typeflow.check.context import CheckContext, CheckFn


def check_recur(
    check: CheckFn,
    expr: Recur,
    expected: TCResult | None,
    ctx: CheckContext,
) -> Recur:
    """Check a recur against the signature of the enclosing loop.

    Arguments are always checked. Those beyond the domain of a variadic
    target are checked against its rest type.
    """
    target = ctx.recur_target
    inner = ctx.without_recur_target()
    if target is None:
        ctx.diagnostics.delayed_error(
            "Recur is not in tail position of a loop",
            form=expr,
            kind=RecurOutsideLoopError,
        )
        cargs = tuple(check(a, None, inner.at(a)) for a in expr.args)
        return replace(expr, args=cargs, ret=unreachable_result())

    count = len(expr.args)
    domain = len(target.domain)
    if count < domain or (count > domain and not target.variadic):
        ctx.diagnostics.delayed_error(
            f"Wrong number of arguments to recur: expected {domain}, got {count}",
            form=expr,
            kind=ArityError,
            expected_count=domain,
            actual_count=count,
        )

    cargs = []
    for i, arg in enumerate(expr.args):
        if i < domain:
            param = target.domain[i]
        else:
            param = target.rest if target.rest is not None else target.dotted_rest
        arg_expected = TCResult(param) if param is not None else None
        cargs.append(check(arg, arg_expected, inner.at(arg)))

    ret = check_below(unreachable_result(), expected, ctx)
    return replace(expr, args=tuple(cargs), ret=ret)
