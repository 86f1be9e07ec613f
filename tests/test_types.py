"""Tests for type representations and the type registry."""

import pytest

from typeflow.types import (
    ANY,
    BOOLEAN,
    FALSE,
    FALSY,
    NIL,
    NOTHING,
    TRUE,
    HMapType,
    HVecType,
    InstanceType,
    Keyword,
    Type,
    UnionType,
    ValueType,
    const_type,
    instance,
    is_bottom,
)


class TestRegistry:
    """Tests for tag registration of type classes."""

    def test_builtin_tags_registered(self) -> None:
        """Every built-in type registers under its tag."""
        assert Type.registry["union"] is UnionType
        assert Type.registry["hvec"] is HVecType
        assert Type.registry["any"] is type(ANY)

    def test_duplicate_tag_rejected(self) -> None:
        """A second class cannot claim an existing tag."""
        with pytest.raises(ValueError, match="already registered"):

            class Clash(Type, tag="union"):
                pass


class TestValueType:
    """Tests for singleton types."""

    def test_bool_and_int_distinct(self) -> None:
        """True and 1 are different singletons although equal in Python."""
        assert ValueType(True) != ValueType(1)  # noqa: FBT003
        assert len({ValueType(True), ValueType(1)}) == 2  # noqa: FBT003

    def test_constants(self) -> None:
        """The falsy set is nil and false."""
        assert NIL == ValueType(None)
        assert FALSY == UnionType(frozenset({NIL, FALSE}))
        assert BOOLEAN == UnionType(frozenset({TRUE, FALSE}))

    def test_keyword_str(self) -> None:
        """Keywords print with a leading colon."""
        assert str(Keyword("a")) == ":a"


class TestBottom:
    """Tests for the bottom type."""

    def test_empty_union_is_bottom(self) -> None:
        """The empty union is bottom."""
        assert is_bottom(NOTHING)
        assert is_bottom(UnionType(frozenset()))

    def test_other_types_not_bottom(self) -> None:
        """Inhabited types are not bottom."""
        assert not is_bottom(NIL)
        assert not is_bottom(ANY)
        assert not is_bottom(BOOLEAN)


class TestConstructors:
    """Tests for convenience constructors."""

    def test_instance_shorthand(self) -> None:
        """instance() packs its type arguments into a tuple."""
        assert instance("Seq", ANY) == InstanceType("Seq", (ANY,))
        assert instance("Long") == InstanceType("Long")

    def test_hmap_entries_order_insensitive(self) -> None:
        """Records built from mappings compare equal regardless of key order."""
        a = HMapType.of({"b": NIL, "a": TRUE})
        b = HMapType.of({"a": TRUE, "b": NIL})
        assert a == b
        assert hash(a) == hash(b)

    def test_hmap_with_mandatory(self) -> None:
        """with_mandatory replaces one entry and keeps the rest."""
        record = HMapType.of({"a": ANY, "b": NIL}, complete=True)
        updated = record.with_mandatory("a", TRUE)
        assert updated.mandatory_map == {"a": TRUE, "b": NIL}
        assert updated.complete


class TestConstType:
    """Tests for literal type inference."""

    def test_scalars_are_singletons(self) -> None:
        """Scalar literals get singleton types."""
        assert const_type(1) == ValueType(1)
        assert const_type(None) == NIL
        assert const_type(Keyword("k")) == ValueType(Keyword("k"))

    def test_vector_literal(self) -> None:
        """Lists become fixed-length vectors."""
        assert const_type([1, "a"]) == HVecType((ValueType(1), ValueType("a")))

    def test_map_literal(self) -> None:
        """Dicts become complete records."""
        assert const_type({"a": 1}) == HMapType.of({"a": ValueType(1)}, complete=True)
