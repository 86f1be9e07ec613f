"""Dispatching checker.

``Checker.check`` takes an expression, an optional expected result and a
context, and returns the expression with a ``TCResult`` attached to it and
to every reachable sub-expression. The flow-sensitive forms are delegated
to ``branch``, ``binding``, ``throw`` and ``recur``; the remaining forms
are handled here.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from typeflow.algebra import restrict
from typeflow.ast import Access, Ann, Const, If, Invoke, Let, Local, Loop, Recur, Throw
from typeflow.check.below import check_below
from typeflow.check.binding import check_let
from typeflow.check.branch import check_if
from typeflow.check.context import CheckContext, expr_type
from typeflow.check.recur import check_recur
from typeflow.check.throw import check_throw
from typeflow.config import CheckConfig
from typeflow.errors import (
    ArityError,
    CheckResult,
    NotCallableError,
    UnboundLocalNameError,
)
from typeflow.flow.objects import EMPTY, Path, accessor_type, extend_object
from typeflow.flow.props import (
    BOT_PROP,
    TOP_PROP,
    FilterSet,
    not_type_prop,
    truthiness_filters,
    type_prop,
)
from typeflow.flow.results import TCResult, unreachable_result
from typeflow.printing import type_name
from typeflow.types import ANY, FALSY, FnType, const_type, is_bottom

if TYPE_CHECKING:
    from typeflow.nodes import Node

logger = logging.getLogger(__name__)


class Checker:
    """Type checker for expression trees.

    Example:
        >>> checker = Checker(CheckConfig(base_env={"v": instance("Number")}))
        >>> result = checker.check_form(If(Local("v"), Const(1), Const("s")))
        >>> type_name(result.ret.type)  # a Number is never falsy
        '1'

    """

    def __init__(self, config: CheckConfig | None = None) -> None:
        self.config = config if config is not None else CheckConfig()

    def check(
        self,
        expr: Node,
        expected: TCResult | None = None,
        ctx: CheckContext | None = None,
    ) -> Node:
        """Check an expression and attach results to it.

        Args:
            expr: The expression to check
            expected: Result the expression must be compatible with
            ctx: Context to check in; a fresh top-level context if omitted

        Returns:
            A copy of ``expr`` annotated with its inferred result.

        """
        if ctx is None:
            ctx = CheckContext.initial(self.config)
        ctx = ctx.at(expr)

        match expr:
            case Const():
                return self._check_const(expr, expected, ctx)
            case Local():
                return self._check_local(expr, expected, ctx)
            case If():
                return check_if(self.check, expr, expected, ctx)
            case Loop(annotations=annotations):
                return check_let(
                    self.check,
                    expr,
                    expected,
                    ctx,
                    annotations=annotations,
                    is_loop=True,
                )
            case Let():
                return check_let(self.check, expr, expected, ctx)
            case Recur():
                return check_recur(self.check, expr, expected, ctx)
            case Throw():
                return check_throw(self.check, expr, expected, ctx)
            case Invoke():
                return self._check_invoke(expr, expected, ctx)
            case Access():
                return self._check_access(expr, expected, ctx)
            case Ann():
                return self._check_ann(expr, expected, ctx)

        msg = f"No checking rule for {type(expr).__name__}"
        raise TypeError(msg)

    def check_form(
        self,
        expr: Node,
        expected: TCResult | None = None,
    ) -> CheckResult:
        """Check a top-level form, collecting every soft error."""
        ctx = CheckContext.initial(self.config)
        node = self.check(expr, expected, ctx)
        errors = tuple(ctx.diagnostics.errors)
        logger.debug("Checked %s with %d error(s)", expr.tag, len(errors))
        return CheckResult(node, errors)

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _check_const(
        self,
        expr: Const,
        expected: TCResult | None,
        ctx: CheckContext,
    ) -> Const:
        if expr.value is None or expr.value is False:
            filters = FilterSet(BOT_PROP, TOP_PROP)
        else:
            filters = FilterSet(TOP_PROP, BOT_PROP)
        ret = check_below(TCResult(const_type(expr.value), filters), expected, ctx)
        return replace(expr, ret=ret)

    def _check_local(
        self,
        expr: Local,
        expected: TCResult | None,
        ctx: CheckContext,
    ) -> Local:
        binding = ctx.env.lookup(expr.name)
        if binding is None:
            ctx.diagnostics.delayed_error(
                f"Unbound local name '{expr.name}'",
                form=expr,
                kind=UnboundLocalNameError,
                name=expr.name,
            )
            return replace(expr, ret=TCResult(ANY))

        obj = binding.object if isinstance(binding.object, Path) else Path(expr.name)
        t = ctx.env.type_of(expr.name) or binding.type
        filters = FilterSet(not_type_prop(FALSY, obj), type_prop(FALSY, obj))
        ret = check_below(TCResult(t, filters, obj), expected, ctx)
        return replace(expr, ret=ret)

    def _check_invoke(
        self,
        expr: Invoke,
        expected: TCResult | None,
        ctx: CheckContext,
    ) -> Invoke:
        inner = ctx.without_recur_target()
        cfn = self.check(expr.fn, None, inner.at(expr.fn))
        fn_type = expr_type(cfn).type

        params: tuple[TCResult | None, ...] = (None,) * len(expr.args)
        if isinstance(fn_type, FnType):
            if len(fn_type.params) != len(expr.args):
                ctx.diagnostics.delayed_error(
                    f"Wrong number of arguments: expected {len(fn_type.params)}, "
                    f"got {len(expr.args)}",
                    form=expr,
                    kind=ArityError,
                    expected_count=len(fn_type.params),
                    actual_count=len(expr.args),
                )
            else:
                params = tuple(TCResult(p) for p in fn_type.params)
        elif not is_bottom(fn_type):
            ctx.diagnostics.delayed_error(
                f"Cannot call a value of type {type_name(fn_type)}",
                form=expr,
                kind=NotCallableError,
            )

        cargs = tuple(
            self.check(arg, param, inner.at(arg))
            for arg, param in zip(expr.args, params, strict=True)
        )
        rets = [expr_type(a) for a in cargs]

        if is_bottom(fn_type) or any(r.unreachable for r in rets):
            ret = unreachable_result()
        elif not isinstance(fn_type, FnType):
            ret = TCResult(ANY)
        elif fn_type.predicate is not None and rets:
            obj = rets[0].object
            filters = FilterSet(
                type_prop(fn_type.predicate, obj),
                not_type_prop(fn_type.predicate, obj),
            )
            ret = TCResult(fn_type.returns, filters)
        else:
            ret = TCResult(
                fn_type.returns,
                truthiness_filters(fn_type.returns, EMPTY),
            )
        return replace(expr, fn=cfn, args=cargs, ret=check_below(ret, expected, ctx))

    def _check_access(
        self,
        expr: Access,
        expected: TCResult | None,
        ctx: CheckContext,
    ) -> Access:
        ctarget = self.check(expr.target, None, ctx.without_recur_target().at(expr.target))
        target = expr_type(ctarget)
        if target.unreachable:
            return replace(expr, target=ctarget, ret=unreachable_result())

        t = accessor_type(target.type, expr.accessor)
        obj = extend_object(target.object, expr.accessor)
        if isinstance(obj, Path):
            refined = restrict(t, ctx.env.path_type(obj))
            if not is_bottom(refined):
                t = refined
        ret = TCResult(t, truthiness_filters(t, obj), obj)
        return replace(expr, target=ctarget, ret=check_below(ret, expected, ctx))

    def _check_ann(
        self,
        expr: Ann,
        expected: TCResult | None,
        ctx: CheckContext,
    ) -> Ann:
        cinner = self.check(expr.expr, TCResult(expr.annotation), ctx.at(expr.expr))
        ret = check_below(expr_type(cinner), expected, ctx)
        return replace(expr, expr=cinner, ret=ret)


def check_form(
    expr: Node,
    *,
    config: CheckConfig | None = None,
    expected: TCResult | None = None,
) -> CheckResult:
    """Check a top-level form with a fresh checker."""
    return Checker(config).check_form(expr, expected)
