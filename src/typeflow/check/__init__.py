"""Checking rules for the flow-sensitive expression forms."""

from typeflow.check.below import check_below
from typeflow.check.binding import bind_result, check_let
from typeflow.check.branch import check_if, combine_results
from typeflow.check.checker import Checker, check_form
from typeflow.check.context import CheckContext, RecurTarget
from typeflow.check.recur import check_recur
from typeflow.check.throw import check_throw

__all__ = [
    "CheckContext",
    "Checker",
    "RecurTarget",
    "bind_result",
    "check_below",
    "check_form",
    "check_if",
    "check_let",
    "check_recur",
    "check_throw",
    "combine_results",
]
