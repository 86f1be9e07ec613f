"""The result triple attached to every checked expression."""

from __future__ import annotations

from dataclasses import dataclass, replace

from typeflow.flow.objects import EMPTY, RObject
from typeflow.flow.props import NO_FILTERS, UNREACHABLE_FILTERS, FilterSet
from typeflow.types import NOTHING, Type, is_bottom


@dataclass(frozen=True)
class TCResult:
    """Type, filters and object inferred for one expression.

    Attributes:
        type: The static type of the value
        filters: Propositions holding when the value is truthy or falsy
        object: The location the value was read from, if any

    """

    type: Type
    filters: FilterSet = NO_FILTERS
    object: RObject = EMPTY

    @property
    def unreachable(self) -> bool:
        """True when evaluation can never produce a value here."""
        return is_bottom(self.type)

    def with_type(self, t: Type) -> TCResult:
        return replace(self, type=t)


def unreachable_result() -> TCResult:
    """Result of code that never returns normally."""
    return TCResult(NOTHING, UNREACHABLE_FILTERS, EMPTY)
