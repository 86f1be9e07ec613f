"""Tests for erasing out-of-scope names."""

from typeflow.flow.erase import erase_filter_set, erase_object, erase_objects, erase_prop
from typeflow.flow.objects import EMPTY, FirstAccessor, Path
from typeflow.flow.props import (
    NO_FILTERS,
    TOP_PROP,
    FilterSet,
    conj,
    disj,
    not_type_prop,
    type_prop,
)
from typeflow.flow.results import TCResult
from typeflow.types import FALSY, instance

LONG = instance("Long")
STRING = instance("String")

X = Path("x")
Y = Path("y")
NAMES = frozenset({"x"})


class TestEraseProp:
    """Tests for erasing propositions."""

    def test_atom_about_name(self) -> None:
        """Atoms about an erased name become top."""
        assert erase_prop(NAMES, type_prop(LONG, X)) == TOP_PROP
        assert erase_prop(NAMES, not_type_prop(LONG, Path("x", (FirstAccessor(),)))) == TOP_PROP

    def test_other_atoms_kept(self) -> None:
        """Atoms about other names survive."""
        assert erase_prop(NAMES, type_prop(LONG, Y)) == type_prop(LONG, Y)

    def test_conjunction(self) -> None:
        """Erased conjuncts are dropped."""
        p = conj(type_prop(LONG, X), type_prop(STRING, Y))
        assert erase_prop(NAMES, p) == type_prop(STRING, Y)

    def test_disjunction(self) -> None:
        """An erased disjunct makes the disjunction uninformative."""
        p = disj(type_prop(LONG, X), type_prop(STRING, Y))
        assert erase_prop(NAMES, p) == TOP_PROP


class TestEraseObjects:
    """Tests for erasing results."""

    def test_result_about_name(self) -> None:
        """A result read from an erased name loses its object and filters."""
        ret = TCResult(LONG, FilterSet(not_type_prop(FALSY, X), type_prop(FALSY, X)), X)
        assert erase_objects(["x"], ret) == TCResult(LONG, NO_FILTERS, EMPTY)

    def test_unrelated_result_unchanged(self) -> None:
        """A result not mentioning the names is returned as is."""
        ret = TCResult(LONG, FilterSet(type_prop(STRING, Y), TOP_PROP), Y)
        assert erase_objects(["x"], ret) == ret

    def test_no_names(self) -> None:
        """Erasing nothing is the identity."""
        ret = TCResult(LONG, NO_FILTERS, X)
        assert erase_objects([], ret) is ret

    def test_helpers(self) -> None:
        """Objects and filter sets are erased independently."""
        assert erase_object(NAMES, Path("x", (FirstAccessor(),))) is EMPTY
        assert erase_object(NAMES, Y) == Y
        assert erase_filter_set(NAMES, FilterSet(type_prop(LONG, X), type_prop(LONG, Y))) == (
            FilterSet(TOP_PROP, type_prop(LONG, Y))
        )
