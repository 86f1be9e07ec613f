"""Normal-form constructors for unions, intersections and differences."""

from __future__ import annotations

from collections.abc import Iterable
from itertools import combinations

from typeflow.algebra.overlap import overlap
from typeflow.algebra.subtype import is_subtype
from typeflow.types import (
    ANY,
    NOTHING,
    IntersectionType,
    TopType,
    Type,
    UnionType,
    is_bottom,
)


def _flatten[T: Type](types: Iterable[Type], kind: type[T]) -> list[Type]:
    flat: list[Type] = []
    for t in types:
        if isinstance(t, kind):
            flat.extend(_flatten(t.members, kind))  # type: ignore[attr-defined]
        else:
            flat.append(t)
    return list(dict.fromkeys(flat))


def _most_general(types: list[Type]) -> list[Type]:
    kept: list[Type] = []
    for t in types:
        if any(is_subtype(t, k) for k in kept):
            continue
        kept = [k for k in kept if not is_subtype(k, t)]
        kept.append(t)
    return kept


def _most_specific(types: list[Type]) -> list[Type]:
    kept: list[Type] = []
    for t in types:
        if any(is_subtype(k, t) for k in kept):
            continue
        kept = [k for k in kept if not is_subtype(t, k)]
        kept.append(t)
    return kept


def union(*types: Type) -> Type:
    """Build the union of the given types.

    Nested unions are flattened, members subsumed by another member are
    dropped and Top absorbs everything. ``union()`` is the bottom type.
    """
    flat = _flatten(types, UnionType)
    if any(isinstance(t, TopType) for t in flat):
        return ANY
    kept = _most_general(flat)
    if len(kept) == 1:
        return kept[0]
    return UnionType(frozenset(kept))


def intersection(*types: Type) -> Type:
    """Build the intersection of the given types.

    Intersections distribute over unions, so the result is a union of
    intersections. Members that cannot overlap make the whole result bottom.
    """
    flat = [t for t in _flatten(types, IntersectionType) if not isinstance(t, TopType)]
    if not flat:
        return ANY

    for i, t in enumerate(flat):
        if isinstance(t, UnionType):
            others = flat[:i] + flat[i + 1 :]
            return union(*(intersection(m, *others) for m in t.members))

    kept = _most_specific(flat)
    if any(not overlap(a, b) for a, b in combinations(kept, 2)):
        return NOTHING
    if len(kept) == 1:
        return kept[0]
    return IntersectionType(frozenset(kept))


def restrict(t: Type, u: Type) -> Type:
    """Narrow t to the values that are also of type u."""
    if is_subtype(t, u):
        return t
    if not overlap(t, u):
        return NOTHING
    return intersection(t, u)


def remove(t: Type, u: Type) -> Type:
    """Remove u from t as far as the type language can express it.

    Unions lose the members that are subtypes of u. Anything else is kept
    whole unless it is entirely contained in u.
    """
    if is_subtype(t, u):
        return NOTHING
    match t:
        case UnionType(members=ms):
            return union(*(remove(m, u) for m in ms))
        case IntersectionType(members=ms):
            parts = [remove(m, u) for m in ms]
            if any(is_bottom(p) for p in parts):
                return NOTHING
            return intersection(*parts)
    return t
