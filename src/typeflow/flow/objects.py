"""Symbolic objects: which runtime location a type or proposition describes.

A path is a root variable plus a chain of pure accessors. Paths denote
values, never mutable places, so two equal paths always denote the same
value within one scope.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from typeflow.algebra import union
from typeflow.classes import is_subclass
from typeflow.types import (
    ANY,
    NIL,
    HMapType,
    HVecType,
    InstanceType,
    Type,
    UnionType,
    ValueType,
    instance,
    is_bottom,
)


@dataclass(frozen=True)
class EmptyObject:
    """No addressable location, e.g. a freshly computed value."""

    def __repr__(self) -> str:
        return "EMPTY"


EMPTY = EmptyObject()


@dataclass(frozen=True)
class Accessor:
    """Base for deterministic observations of a value's structure."""


@dataclass(frozen=True)
class FirstAccessor(Accessor):
    """The first element of a sequence."""


@dataclass(frozen=True)
class CountAccessor(Accessor):
    """The number of elements of a collection."""


@dataclass(frozen=True)
class ClassAccessor(Accessor):
    """The runtime class of a value."""


@dataclass(frozen=True)
class KeyAccessor(Accessor):
    """The value stored under a key."""

    key: Hashable


@dataclass(frozen=True)
class NthAccessor(Accessor):
    """The element at a fixed index."""

    index: int


@dataclass(frozen=True)
class Path:
    """A root variable followed by accessors, applied left to right."""

    root: str
    accessors: tuple[Accessor, ...] = ()

    def extend(self, accessor: Accessor) -> Path:
        """Return the path of applying one more accessor."""
        return Path(self.root, (*self.accessors, accessor))

    @property
    def is_local(self) -> bool:
        """True when the path is the bound variable itself."""
        return not self.accessors


type RObject = EmptyObject | Path


def extend_object(obj: RObject, accessor: Accessor) -> RObject:
    """Extend a path with an accessor. The empty object stays empty."""
    match obj:
        case Path():
            return obj.extend(accessor)
    return EMPTY


def _element_type(t: Type, index: int) -> Type:
    match t:
        case HVecType(fixed=fixed, rest=rest):
            if index < len(fixed):
                return fixed[index]
            if rest is not None:
                return union(rest, NIL)
            return NIL
        case InstanceType(name=name, args=(arg,)) if is_subclass(name, "Seqable"):
            return union(arg, NIL)
        case ValueType(value=None):
            return NIL
    return ANY


def _key_type(t: Type, key: Hashable) -> Type:
    match t:
        case HMapType():
            if (value := t.mandatory_map.get(key)) is not None:
                return value
            if (value := t.optional_map.get(key)) is not None:
                return union(value, NIL)
            return NIL if t.complete else ANY
        case ValueType(value=None):
            return NIL
    return ANY


def accessor_type(t: Type, accessor: Accessor) -> Type:  # noqa: PLR0911
    """Type of the value an accessor observes on a value of type t.

    Args:
        t: Type of the accessed value
        accessor: The accessor applied to it

    Returns:
        The observed type, Top when nothing more precise is known.

    """
    if is_bottom(t):
        return t
    if isinstance(t, UnionType):
        return union(*(accessor_type(m, accessor) for m in t.members))

    match accessor:
        case CountAccessor():
            if isinstance(t, HVecType) and t.rest is None:
                return ValueType(len(t.fixed))
            return instance("Long")
        case ClassAccessor():
            return NIL if t == NIL else instance("Class")
        case FirstAccessor():
            return _element_type(t, 0)
        case NthAccessor(index=index):
            return _element_type(t, index)
        case KeyAccessor(key=key):
            return _key_type(t, key)
    return ANY
