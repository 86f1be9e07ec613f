"""Diagnostics produced while checking.

User-facing type errors are frozen records collected by a ``Diagnostics``
sink so that one walk can report several of them. Broken engine invariants
raise ``InvariantViolation`` instead and abort the whole check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typeflow.flow.results import TCResult
    from typeflow.nodes import Node
    from typeflow.types import Type


@dataclass(frozen=True)
class SourceLocation:
    """Position of an expression in its source.

    Attributes:
        line: 1-based line number
        column: 1-based column number, if known
        file: Source file name, if known

    """

    line: int
    column: int | None = None
    file: str | None = None

    def describe(self) -> str:
        """Human-readable description of the location."""
        where = self.file or "<unknown>"
        if self.column is None:
            return f"{where}:{self.line}"
        return f"{where}:{self.line}:{self.column}"


@dataclass(frozen=True)
class TypeCheckError:
    """Base class for soft type errors.

    The checked form, when known, is kept for error reporting only.
    """

    message: str
    location: SourceLocation | None = None
    form: Node | None = field(default=None, compare=False, repr=False)

    def format(self) -> str:
        """Format the error for display."""
        if self.location is None:
            return self.message
        return f"{self.location.describe()}: {self.message}"


@dataclass(frozen=True)
class TypeMismatchError(TypeCheckError):
    """A value's type is not compatible with the expected type."""

    actual: Type | None = None
    expected: Type | None = None

    def format(self) -> str:
        """Format the mismatch for display."""
        from typeflow.printing import type_name

        lines = [super().format()]
        if self.expected is not None:
            lines.append(f"  Expected: {type_name(self.expected)}")
        if self.actual is not None:
            lines.append(f"  Actual:   {type_name(self.actual)}")
        return "\n".join(lines)


@dataclass(frozen=True)
class UnboundLocalNameError(TypeCheckError):
    """A local name that no enclosing binding introduces."""

    name: str = ""


@dataclass(frozen=True)
class ArityError(TypeCheckError):
    """Wrong number of arguments to a call or re-entry point."""

    expected_count: int = 0
    actual_count: int = 0


@dataclass(frozen=True)
class MissingAnnotationError(TypeCheckError):
    """A form that needs type annotations was not given them."""


@dataclass(frozen=True)
class NotCallableError(TypeCheckError):
    """Invocation of a value that is not a function."""


@dataclass(frozen=True)
class RecurOutsideLoopError(TypeCheckError):
    """Re-entry with no enclosing loop to return to."""


class InvariantViolation(Exception):  # noqa: N818
    """An internal invariant of the checker does not hold.

    This is a bug in the checker or in its input, never a user type error,
    and is not caught anywhere inside the checker.
    """


@dataclass
class Diagnostics:
    """Collects soft errors during one checking walk."""

    errors: list[TypeCheckError] = field(default_factory=list)

    def report(self, error: TypeCheckError) -> None:
        self.errors.append(error)

    def delayed_error(
        self,
        message: str,
        *,
        form: Node | None = None,
        location: SourceLocation | None = None,
        kind: type[TypeCheckError] = TypeCheckError,
        **details: Any,
    ) -> TypeCheckError:
        """Record an error and let checking continue.

        Args:
            message: What went wrong
            form: The offending form; its location is used by default
            location: Where it went wrong
            kind: Error class to record
            **details: Fields specific to ``kind``

        Returns:
            The recorded error.

        """
        if location is None and form is not None:
            location = form.loc
        error = kind(message, location, form, **details)
        self.report(error)
        return error


@dataclass(frozen=True)
class CheckResult:
    """Result of checking one top-level form.

    Contains the annotated form and every soft error found on the way.
    """

    node: Node
    errors: tuple[TypeCheckError, ...] = ()

    @property
    def success(self) -> bool:
        """Return True if no type errors were found."""
        return not self.errors

    @property
    def ret(self) -> TCResult | None:
        """The result inferred for the form itself."""
        return self.node.ret

    def __bool__(self) -> bool:
        return self.success

    def format_errors(self) -> str:
        """Format all errors for display.

        Returns:
            A multi-line string with all errors formatted.

        """
        if self.success:
            return "Type check passed."

        lines = [f"Type check failed with {len(self.errors)} error(s):\n"]
        for i, error in enumerate(self.errors, 1):
            lines.append(f"[{i}] {error.format()}\n")

        return "\n".join(lines)
