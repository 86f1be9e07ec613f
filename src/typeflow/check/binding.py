"""Sequential binding forms: ``let`` and ``loop``."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from typeflow.algebra import overlap
from typeflow.check.context import RecurTarget, expr_type
from typeflow.errors import InvariantViolation, MissingAnnotationError
from typeflow.flow.erase import erase_filter_set, erase_objects
from typeflow.flow.narrow import narrow
from typeflow.flow.objects import EMPTY, Path
from typeflow.flow.props import Prop, conj, disj, not_type_prop, type_prop
from typeflow.flow.results import TCResult, unreachable_result
from typeflow.printing import format_env
from typeflow.types import ANY, FALSY, NOTHING

if TYPE_CHECKING:
    from typeflow.ast import Binding, Let, Loop
    from typeflow.check.context import CheckContext, CheckFn
    from typeflow.flow.env import PropEnv
    from typeflow.types import Type

logger = logging.getLogger(__name__)


def bind_result(env: PropEnv, name: str, ret: TCResult) -> tuple[PropEnv, bool]:
    """Extend ``env`` with ``name`` bound to the value described by ``ret``.

    A value read from a path is bound as an alias of that path and needs no
    new propositions. Otherwise the truthiness of ``name`` is tied to the
    value's filters.

    Returns:
        Tuple of (extended environment, reachable)

    """
    if ret.unreachable:
        return env.extend(name, ret.type), False
    obj = ret.object
    # A path through the name being shadowed would outlive its root.
    if isinstance(obj, Path) and obj.root == name:
        obj = EMPTY
    filters = erase_filter_set(frozenset({name}), ret.filters)

    props: list[Prop]
    if isinstance(obj, Path):
        props = []
    elif not overlap(ret.type, FALSY):
        props = [filters.then]
    else:
        x = Path(name)
        props = [
            disj(
                conj(not_type_prop(FALSY, x), filters.then),
                conj(type_prop(FALSY, x), filters.else_),
            ),
        ]
    return narrow(env.extend(name, ret.type, obj), props)


def _unchecked(binding: Binding) -> Binding:
    ret = unreachable_result()
    return replace(binding, init=replace(binding.init, ret=ret), ret=ret)


def _check_bindings(
    check: CheckFn,
    bindings: tuple[Binding, ...],
    annotations: tuple[Type, ...] | None,
    ctx: CheckContext,
) -> tuple[PropEnv, tuple[Binding, ...], bool]:
    env = ctx.env
    checked: list[Binding] = []
    reachable = True
    for i, binding in enumerate(bindings):
        if not reachable:
            checked.append(_unchecked(binding))
            continue
        expected = TCResult(annotations[i]) if annotations is not None else None
        inner = ctx.with_env(env).without_recur_target().at(binding.init)
        cinit = check(binding.init, expected, inner)
        ret = expr_type(cinit)
        # Loop names range over every value recur may pass, not just the first.
        bound = expected if expected is not None and not ret.unreachable else ret
        outer = env
        env, reachable = bind_result(env, binding.name, bound)
        if not reachable:
            logger.debug("Binding %s is unreachable in\n%s", binding.name, format_env(outer))
        checked.append(replace(binding, init=cinit, ret=ret))

    if len(checked) != len(bindings):
        msg = f"Checked {len(checked)} bindings, expected {len(bindings)}"
        raise InvariantViolation(msg)
    return env, tuple(checked), reachable


def check_let(
    check: CheckFn,
    expr: Let | Loop,
    expected: TCResult | None,
    ctx: CheckContext,
    *,
    annotations: tuple[Type, ...] | None = None,
    is_loop: bool = False,
) -> Let | Loop:
    """Check bindings left to right, then the body.

    Stops narrowing at the first binding that makes the rest unreachable;
    the remaining bindings and the body are then left unchecked. Names the
    form introduces are erased from the result it returns.

    Args:
        check: Checks a sub-expression
        expr: The binding form
        expected: Expected result of the whole form
        ctx: Context the form is checked in
        annotations: Declared types of the bindings, for loops. An
            unannotated loop binds Any when the configuration allows it
        is_loop: Install a recur target for the body

    """
    if is_loop and expr.bindings and annotations is None:
        if ctx.config.loop_requires_annotations:
            ctx.diagnostics.delayed_error(
                "Loop requires more annotations",
                form=expr,
                kind=MissingAnnotationError,
            )
            return replace(expr, ret=expected or TCResult(NOTHING))
        # Unannotated loop names range over every value.
        annotations = (ANY,) * len(expr.bindings)
    if annotations is not None and len(annotations) != len(expr.bindings):
        msg = (
            f"Loop declares {len(annotations)} annotations "
            f"for {len(expr.bindings)} bindings"
        )
        raise InvariantViolation(msg)

    env, cbindings, reachable = _check_bindings(check, expr.bindings, annotations, ctx)
    if not reachable:
        return replace(expr, bindings=cbindings, ret=expected or TCResult(NOTHING))

    body_ctx = ctx.with_env(env).at(expr.body)
    if is_loop:
        body_ctx = body_ctx.with_recur_target(RecurTarget(annotations or ()))
    cbody = check(expr.body, expected, body_ctx)

    names = {b.name for b in cbindings}
    ret = erase_objects(names, expr_type(cbody))
    return replace(expr, bindings=cbindings, body=cbody, ret=ret)
