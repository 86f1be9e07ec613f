"""Tests for union, intersection, restrict and remove."""

from typeflow.algebra import intersection, remove, restrict, union
from typeflow.types import (
    ANY,
    BOOLEAN,
    FALSE,
    FALSY,
    NIL,
    NOTHING,
    TRUE,
    IntersectionType,
    UnionType,
    instance,
)

LONG = instance("Long")
NUMBER = instance("Number")
STRING = instance("String")
COMPARABLE = instance("Comparable")


class TestUnion:
    """Tests for union normal form."""

    def test_empty_is_bottom(self) -> None:
        """The union of nothing is bottom."""
        assert union() == NOTHING

    def test_single_member_collapses(self) -> None:
        """A union of one type is that type."""
        assert union(NIL) == NIL

    def test_subsumed_members_dropped(self) -> None:
        """Members below another member are absorbed."""
        assert union(LONG, NUMBER) == NUMBER
        assert union(TRUE, BOOLEAN) == BOOLEAN

    def test_top_absorbs(self) -> None:
        """Any absorbs every other member."""
        assert union(LONG, ANY) == ANY

    def test_bottom_dropped(self) -> None:
        """Bottom contributes nothing."""
        assert union(NOTHING, LONG) == LONG

    def test_normal_form(self) -> None:
        """Union is associative, commutative and idempotent."""
        assert union(NIL, FALSE) == FALSY
        assert union(FALSE, NIL) == FALSY
        assert union(union(LONG, STRING), NIL) == union(LONG, union(STRING, NIL))
        assert union(LONG, LONG) == LONG


class TestIntersection:
    """Tests for intersection normal form."""

    def test_empty_is_top(self) -> None:
        """The intersection of nothing is Any."""
        assert intersection() == ANY

    def test_disjoint_is_bottom(self) -> None:
        """Disjoint members give bottom."""
        assert intersection(NUMBER, STRING) == NOTHING

    def test_most_specific_kept(self) -> None:
        """A member below another member replaces it."""
        assert intersection(NUMBER, LONG) == LONG
        assert intersection(ANY, LONG) == LONG

    def test_distributes_over_union(self) -> None:
        """Intersections distribute over unions."""
        assert intersection(union(LONG, STRING), NUMBER) == LONG
        assert intersection(BOOLEAN, FALSY) == FALSE

    def test_irreducible(self) -> None:
        """Overlapping unrelated members stay as an intersection."""
        assert intersection(NUMBER, COMPARABLE) == IntersectionType(
            frozenset({NUMBER, COMPARABLE}),
        )


class TestRestrict:
    """Tests for narrowing to a type."""

    def test_restrict_union(self) -> None:
        """Members outside the target are removed."""
        assert restrict(union(LONG, NIL), NUMBER) == LONG

    def test_restrict_subtype_unchanged(self) -> None:
        """A type already below the target is kept."""
        assert restrict(LONG, NUMBER) == LONG

    def test_restrict_disjoint(self) -> None:
        """Narrowing to a disjoint type gives bottom."""
        assert restrict(LONG, STRING) == NOTHING


class TestRemove:
    """Tests for type difference."""

    def test_remove_falsy(self) -> None:
        """Removing the falsy set from a nilable type."""
        assert remove(union(LONG, NIL), FALSY) == LONG
        assert remove(BOOLEAN, FALSY) == TRUE

    def test_remove_everything(self) -> None:
        """Removing a supertype gives bottom."""
        assert remove(LONG, NUMBER) == NOTHING

    def test_remove_unexpressible(self) -> None:
        """A difference the types cannot express keeps the type whole."""
        assert remove(NUMBER, LONG) == NUMBER
        assert isinstance(remove(union(NUMBER, NIL), LONG), UnionType)
