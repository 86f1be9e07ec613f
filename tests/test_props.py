"""Tests for the proposition algebra."""

from typeflow.algebra import union
from typeflow.flow.objects import EMPTY, FirstAccessor, Path
from typeflow.flow.props import (
    BOT_PROP,
    NO_FILTERS,
    TOP_PROP,
    UNREACHABLE_FILTERS,
    AndProp,
    FilterSet,
    NotTypeProp,
    OrProp,
    TypeProp,
    conj,
    disj,
    negate,
    not_type_prop,
    prop_paths,
    truthiness_filters,
    type_prop,
)
from typeflow.types import ANY, FALSY, NIL, NOTHING, instance

LONG = instance("Long")
NUMBER = instance("Number")
STRING = instance("String")

X = Path("x")
Y = Path("y")
Z = Path("z")
X_FIRST = Path("x", (FirstAccessor(),))


class TestAtoms:
    """Tests for atomic constructors."""

    def test_empty_object_is_top(self) -> None:
        """Nothing can be said about a value with no location."""
        assert type_prop(LONG, EMPTY) == TOP_PROP
        assert not_type_prop(LONG, EMPTY) == TOP_PROP

    def test_trivial_types_fold(self) -> None:
        """Any and bottom fold to top or bottom propositions."""
        assert type_prop(ANY, X) == TOP_PROP
        assert type_prop(NOTHING, X) == BOT_PROP
        assert not_type_prop(ANY, X) == BOT_PROP
        assert not_type_prop(NOTHING, X) == TOP_PROP

    def test_atoms(self) -> None:
        """Ordinary atoms are kept as is."""
        assert type_prop(LONG, X) == TypeProp(LONG, X)
        assert not_type_prop(NIL, X) == NotTypeProp(NIL, X)


class TestConj:
    """Tests for conjunction."""

    def test_units(self) -> None:
        """Top is the unit, bottom the zero."""
        a = type_prop(LONG, X)
        assert conj() == TOP_PROP
        assert conj(a) == a
        assert conj(a, TOP_PROP) == a
        assert conj(a, BOT_PROP) == BOT_PROP

    def test_flattens(self) -> None:
        """Nested conjunctions are flattened."""
        a, b, c = type_prop(LONG, X), type_prop(STRING, Y), not_type_prop(NIL, Z)
        assert conj(a, conj(b, c)) == AndProp(frozenset({a, b, c}))
        assert conj(conj(a, b), c) == conj(a, conj(b, c))

    def test_contradiction(self) -> None:
        """An atom and its negation on one path give bottom."""
        assert conj(type_prop(LONG, X), not_type_prop(NUMBER, X)) == BOT_PROP
        assert conj(type_prop(NUMBER, X), type_prop(STRING, X)) == BOT_PROP

    def test_merges_positive_atoms(self) -> None:
        """Positive atoms on one path are intersected."""
        assert conj(type_prop(NUMBER, X), type_prop(LONG, X)) == type_prop(LONG, X)

    def test_accessor_paths_never_bottom(self) -> None:
        """Contradicting atoms on a derived path stay a conjunction."""
        p = conj(type_prop(LONG, X_FIRST), not_type_prop(NUMBER, X_FIRST))
        assert isinstance(p, AndProp)
        assert isinstance(conj(type_prop(LONG, X_FIRST), type_prop(STRING, X_FIRST)), AndProp)

    def test_absorption(self) -> None:
        """a and (a or b) is a."""
        a, b = type_prop(LONG, X), type_prop(STRING, Y)
        assert conj(a, disj(a, b)) == a


class TestDisj:
    """Tests for disjunction."""

    def test_units(self) -> None:
        """Bottom is the unit, top the zero."""
        a = type_prop(LONG, X)
        assert disj() == BOT_PROP
        assert disj(a, BOT_PROP) == a
        assert disj(a, TOP_PROP) == TOP_PROP

    def test_merges_positive_atoms(self) -> None:
        """Positive atoms on one path are united."""
        assert disj(type_prop(LONG, X), type_prop(STRING, X)) == type_prop(
            union(LONG, STRING),
            X,
        )

    def test_tautology(self) -> None:
        """An atom or its negation is top."""
        assert disj(type_prop(NUMBER, X), not_type_prop(NUMBER, X)) == TOP_PROP
        assert disj(not_type_prop(FALSY, X), type_prop(FALSY, X)) == TOP_PROP

    def test_keeps_independent_disjuncts(self) -> None:
        """Disjuncts about different paths are kept."""
        a, b = type_prop(LONG, X), type_prop(STRING, Y)
        assert disj(a, b) == OrProp(frozenset({a, b}))

    def test_absorption(self) -> None:
        """a or (a and b) is a."""
        a, b = type_prop(LONG, X), type_prop(STRING, Y)
        assert disj(a, conj(a, b)) == a


class TestNegate:
    """Tests for negation."""

    def test_atoms(self) -> None:
        """Atoms swap polarity."""
        assert negate(type_prop(LONG, X)) == not_type_prop(LONG, X)
        assert negate(not_type_prop(LONG, X)) == type_prop(LONG, X)

    def test_constants(self) -> None:
        """Top and bottom swap."""
        assert negate(TOP_PROP) == BOT_PROP
        assert negate(BOT_PROP) == TOP_PROP

    def test_de_morgan(self) -> None:
        """Negation pushes through conjunctions and disjunctions."""
        a, b = type_prop(LONG, X), type_prop(STRING, Y)
        assert negate(conj(a, b)) == disj(negate(a), negate(b))
        assert negate(disj(a, b)) == conj(negate(a), negate(b))


class TestFilterSets:
    """Tests for filter sets and helpers."""

    def test_constants(self) -> None:
        """The no-information and unreachable filter sets."""
        assert NO_FILTERS == FilterSet(TOP_PROP, TOP_PROP)
        assert UNREACHABLE_FILTERS == FilterSet(BOT_PROP, BOT_PROP)
        assert FilterSet() == NO_FILTERS

    def test_prop_paths(self) -> None:
        """All mentioned paths are collected."""
        p = disj(conj(type_prop(LONG, X), type_prop(STRING, Y)), not_type_prop(NIL, X_FIRST))
        assert prop_paths(p) == {X, Y, X_FIRST}
        assert prop_paths(TOP_PROP) == frozenset()

    def test_truthiness_never_falsy(self) -> None:
        """A value that cannot be falsy has an impossible else side."""
        assert truthiness_filters(LONG, X) == FilterSet(not_type_prop(FALSY, X), BOT_PROP)

    def test_truthiness_always_falsy(self) -> None:
        """A value that is always falsy has an impossible then side."""
        assert truthiness_filters(NIL, X) == FilterSet(BOT_PROP, type_prop(FALSY, X))

    def test_truthiness_either(self) -> None:
        """A nilable value can go both ways."""
        assert truthiness_filters(union(LONG, NIL), X) == FilterSet(
            not_type_prop(FALSY, X),
            type_prop(FALSY, X),
        )
