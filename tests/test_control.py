"""Tests for loops, recur and throw."""

import pytest

from typeflow.ast import Binding, Const, If, Invoke, Let, Local, Loop, Recur, Throw
from typeflow.check.checker import Checker
from typeflow.check.context import CheckContext, RecurTarget
from typeflow.check.throw import check_throw
from typeflow.config import CheckConfig
from typeflow.errors import (
    ArityError,
    InvariantViolation,
    MissingAnnotationError,
    RecurOutsideLoopError,
    TypeMismatchError,
    UnboundLocalNameError,
)
from typeflow.flow.results import TCResult, unreachable_result
from typeflow.algebra import union
from typeflow.types import ANY, NIL, NOTHING, FnType, ValueType, instance

LONG = instance("Long")
STRING = instance("String")
MAYBE_LONG = union(LONG, NIL)


def _loop(body, *, init=None, annotations=(MAYBE_LONG,)) -> Loop:
    init = init if init is not None else Const(None)
    return Loop((Binding("i", init),), body, annotations)


def _error_types(result) -> list[type]:
    return [type(e) for e in result.errors]


class TestThrow:
    """Tests for throw."""

    def test_never_returns(self) -> None:
        """A throw has the unreachable result."""
        result = Checker().check_form(Throw(Const("boom")))
        assert result.success
        assert result.ret == unreachable_result()
        assert result.node.exception.checked

    def test_compatible_with_any_expectation(self) -> None:
        """A throw satisfies every expected type."""
        result = Checker().check_form(Throw(Const("boom")), TCResult(LONG))
        assert result.success
        assert result.ret.unreachable

    def test_branch_that_throws(self) -> None:
        """A throwing branch contributes nothing to the conditional."""
        config = CheckConfig(base_env={"v": MAYBE_LONG})
        expr = If(Local("v"), Local("v"), Throw(Const("no value")))
        result = Checker(config).check_form(expr)
        assert result.success
        assert result.ret.type == LONG

    def test_expected_exception(self) -> None:
        """The thrown value is checked against the expected exception type."""
        ctx = CheckContext()
        check_throw(Checker().check, Throw(Const(1)), None, ctx, TCResult(STRING))
        assert [type(e) for e in ctx.diagnostics.errors] == [TypeMismatchError]


class TestLoop:
    """Tests for annotated loops."""

    def test_recur_in_tail_position(self) -> None:
        """A loop exits through the branch that does not recur."""
        expr = _loop(If(Local("i"), Const("done"), Recur((Const(1),))))
        result = Checker().check_form(expr)
        assert result.success, result.format_errors()
        assert result.ret.type == ValueType("done")

    def test_names_range_over_annotation(self) -> None:
        """Loop names have their declared type, not the initial value's."""
        expr = _loop(Local("i"))
        result = Checker().check_form(expr)
        assert result.ret.type == MAYBE_LONG

    def test_recur_through_let(self) -> None:
        """The body of a nested let is still a tail position."""
        body = Let((Binding("j", Const(2)),), Recur((Local("j"),)))
        result = Checker().check_form(_loop(body))
        assert result.success, result.format_errors()
        assert result.ret.unreachable

    def test_init_mismatch(self) -> None:
        """Initial values are checked against the annotations."""
        result = Checker().check_form(_loop(Local("i"), init=Const("s")))
        assert _error_types(result) == [TypeMismatchError]

    def test_missing_annotations(self) -> None:
        """A loop without annotations is reported and not checked."""
        result = Checker().check_form(_loop(Local("i"), annotations=None))
        assert _error_types(result) == [MissingAnnotationError]
        assert result.ret == TCResult(NOTHING)
        assert not result.node.body.checked

    def test_missing_annotations_allowed(self) -> None:
        """Without required annotations, loop names are bound at Any."""
        config = CheckConfig(loop_requires_annotations=False)
        result = Checker(config).check_form(_loop(Local("i"), annotations=None))
        assert result.success
        assert result.ret.type == ANY
        assert result.node.body.checked

    def test_unannotated_loop_body_checked(self) -> None:
        """Errors in the body of an unannotated loop are still reported."""
        config = CheckConfig(loop_requires_annotations=False)
        result = Checker(config).check_form(_loop(Local("missing"), annotations=None))
        assert _error_types(result) == [UnboundLocalNameError]

    def test_annotation_count_mismatch(self) -> None:
        """Annotations that do not match the bindings are a broken invariant."""
        with pytest.raises(InvariantViolation):
            Checker().check_form(_loop(Local("i"), annotations=(LONG, LONG)))


class TestRecur:
    """Tests for recur."""

    def test_outside_loop(self) -> None:
        """A recur with no enclosing loop is reported."""
        result = Checker().check_form(Recur((Const(1),)))
        assert _error_types(result) == [RecurOutsideLoopError]
        assert result.ret == unreachable_result()
        assert result.node.args[0].checked

    def test_arity(self) -> None:
        """A recur must pass one value per loop binding."""
        result = Checker().check_form(_loop(Recur(())))
        assert _error_types(result) == [ArityError]
        error = result.errors[0]
        assert (error.expected_count, error.actual_count) == (1, 0)

    def test_argument_mismatch(self) -> None:
        """Recur arguments are checked against the annotations."""
        result = Checker().check_form(_loop(Recur((Const("s"),))))
        assert _error_types(result) == [TypeMismatchError]

    @pytest.mark.parametrize(
        "body",
        [
            If(Recur((Const(1),)), Const(1), Const(2)),
            Let((Binding("j", Recur((Const(1),))),), Local("j")),
            Throw(Recur((Const(1),))),
            Recur((Recur((Const(1),)),)),
        ],
        ids=["test", "binding", "throw", "argument"],
    )
    def test_not_in_tail_position(self, body) -> None:
        """Recur is only allowed in tail position of the loop body."""
        result = Checker().check_form(_loop(body))
        assert RecurOutsideLoopError in _error_types(result)

    def test_invoke_arguments_not_tail(self) -> None:
        """Arguments of a call are not in tail position."""
        config = CheckConfig(base_env={"f": FnType((LONG,), LONG)})
        body = Invoke(Local("f"), (Recur((Const(1),)),))
        result = Checker(config).check_form(_loop(body))
        assert _error_types(result) == [RecurOutsideLoopError]

    def test_variadic_target(self) -> None:
        """Extra arguments are checked against the rest type."""
        ctx = CheckContext().with_recur_target(RecurTarget((LONG,), rest=STRING))
        expr = Recur((Const(1), Const("a"), Const("b")))
        node = Checker().check(expr, None, ctx)
        assert ctx.diagnostics.errors == []
        assert node.ret == unreachable_result()

    def test_variadic_rest_mismatch(self) -> None:
        """An extra argument not matching the rest type is reported."""
        ctx = CheckContext().with_recur_target(RecurTarget((LONG,), dotted_rest=STRING))
        Checker().check(Recur((Const(1), Const(2))), None, ctx)
        assert [type(e) for e in ctx.diagnostics.errors] == [TypeMismatchError]

    def test_extra_arguments_fixed_target(self) -> None:
        """Extra arguments to a fixed target are an arity error."""
        ctx = CheckContext().with_recur_target(RecurTarget((LONG,)))
        Checker().check(Recur((Const(1), Const(2))), None, ctx)
        assert [type(e) for e in ctx.diagnostics.errors] == [ArityError]
