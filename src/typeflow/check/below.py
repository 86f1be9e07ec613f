"""Compatibility of an inferred result with an expected one."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typeflow.algebra import is_subtype
from typeflow.errors import TypeMismatchError

if TYPE_CHECKING:
    from typeflow.check.context import CheckContext
    from typeflow.flow.results import TCResult


def check_below(
    actual: TCResult,
    expected: TCResult | None,
    ctx: CheckContext,
) -> TCResult:
    """Validate ``actual`` against ``expected``.

    A compatible result is returned unchanged, being at least as precise as
    the expected one. An incompatible result is reported and replaced by the
    expected result so checking can go on.
    """
    if expected is None or actual.unreachable:
        return actual
    if is_subtype(actual.type, expected.type):
        return actual

    ctx.diagnostics.delayed_error(
        "Type mismatch",
        form=ctx.current_expr,
        kind=TypeMismatchError,
        actual=actual.type,
        expected=expected.type,
    )
    return expected
