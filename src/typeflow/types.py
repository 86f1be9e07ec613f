"""Runtime type representations for the flow engine.

Types are immutable and hashable. Unions and intersections hold their
members in a frozenset; use the constructors in ``typeflow.algebra`` to
build them in normal form rather than instantiating them directly.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, dataclass_transform


@dataclass(frozen=True)
class Keyword:
    """A keyword literal such as ``:a``."""

    name: str

    def __str__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True, field_specifiers=(field,))
class Type:
    """Base for type definitions."""

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[Type]]] = {}

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Register type subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__

        if (existing := Type.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        Type.registry[cls.tag] = cls


class TopType(Type, tag="any"):
    """Supertype of every value."""


class UnionType(Type, tag="union"):
    """Union of member types. The empty union is the bottom type."""

    members: frozenset[Type]


class IntersectionType(Type, tag="intersection"):
    """Intersection of member types."""

    members: frozenset[Type]


class ValueType(Type, tag="value"):
    """Singleton type: ValueType(None) is nil, ValueType(":a") a string.

    The Python class of the value takes part in equality so that
    ``ValueType(True)`` and ``ValueType(1)`` stay distinct.
    """

    value: Hashable
    kind: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", type(self.value).__name__)


class InstanceType(Type, tag="instance"):
    """Nominal class instance: Seq[Long] -> InstanceType("Seq", (Long,))."""

    name: str
    args: tuple[Type, ...] = ()


class HVecType(Type, tag="hvec"):
    """Fixed-arity heterogeneous vector with an optional rest type."""

    fixed: tuple[Type, ...] = ()
    rest: Type | None = None


type Entries = tuple[tuple[Hashable, Type], ...]


def _entries(mapping: Mapping[Hashable, Type] | None) -> Entries:
    if not mapping:
        return ()
    return tuple(sorted(mapping.items(), key=lambda kv: repr(kv[0])))


class HMapType(Type, tag="hmap"):
    """Structural keyed record with mandatory and optional entries.

    A complete record allows no keys beyond its mandatory and optional ones.
    """

    mandatory: Entries = ()
    optional: Entries = ()
    complete: bool = False

    @classmethod
    def of(
        cls,
        mandatory: Mapping[Hashable, Type] | None = None,
        optional: Mapping[Hashable, Type] | None = None,
        *,
        complete: bool = False,
    ) -> HMapType:
        """Build a record type from plain mappings."""
        return cls(_entries(mandatory), _entries(optional), complete)

    @property
    def mandatory_map(self) -> dict[Hashable, Type]:
        return dict(self.mandatory)

    @property
    def optional_map(self) -> dict[Hashable, Type]:
        return dict(self.optional)

    def with_mandatory(self, key: Hashable, value: Type) -> HMapType:
        """Return a copy with one mandatory entry replaced."""
        entries = self.mandatory_map
        entries[key] = value
        return HMapType(_entries(entries), self.optional, self.complete)


class CountRangeType(Type, tag="count_range"):
    """Sequence whose count lies in [lower, upper]; upper None is unbounded."""

    lower: int = 0
    upper: int | None = None


class KwArgsSeqType(Type, tag="kw_args_seq"):
    """Flat keyword-argument sequence ``k1 v1 k2 v2 ...``.

    Its count is always even: twice the number of entries present.
    """

    mandatory: Entries = ()
    optional: Entries = ()
    complete: bool = False

    @classmethod
    def of(
        cls,
        mandatory: Mapping[Hashable, Type] | None = None,
        optional: Mapping[Hashable, Type] | None = None,
        *,
        complete: bool = False,
    ) -> KwArgsSeqType:
        """Build a keyword-argument sequence type from plain mappings."""
        return cls(_entries(mandatory), _entries(optional), complete)

    @property
    def mandatory_map(self) -> dict[Hashable, Type]:
        return dict(self.mandatory)

    @property
    def optional_map(self) -> dict[Hashable, Type]:
        return dict(self.optional)


class FreeVarType(Type, tag="free"):
    """Unresolved type variable, optionally with an upper bound."""

    name: str
    bound: Type | None = None


class FnType(Type, tag="fn"):
    """Function type.

    When ``predicate`` is set, a truthy result means the first argument is
    of that type and a falsy result means it is not.
    """

    params: tuple[Type, ...]
    returns: Type
    predicate: Type | None = None


ANY = TopType()
NOTHING = UnionType(frozenset())
NIL = ValueType(None)
TRUE = ValueType(True)  # noqa: FBT003
FALSE = ValueType(False)  # noqa: FBT003
BOOLEAN = UnionType(frozenset({TRUE, FALSE}))
FALSY = UnionType(frozenset({NIL, FALSE}))


def is_bottom(t: Type) -> bool:
    """Return True for the empty union."""
    return isinstance(t, UnionType) and not t.members


def instance(name: str, *args: Type) -> InstanceType:
    """Shorthand for InstanceType(name, args)."""
    return InstanceType(name, tuple(args))


def const_type(value: Any) -> Type:
    """Infer the type of a literal value.

    Scalars become singletons, lists and tuples become vectors and dicts
    become complete records.
    """
    match value:
        case list() | tuple():
            return HVecType(tuple(const_type(v) for v in value))
        case dict():
            return HMapType.of(
                {k: const_type(v) for k, v in value.items()},
                complete=True,
            )
        case _:
            return ValueType(value)
