"""Propositions about runtime values and the filter sets built from them.

Propositions are only ever built through the smart constructors in this
module (``type_prop``, ``not_type_prop``, ``conj``, ``disj``), which keep
them in a partially simplified normal form: conjunctions and disjunctions
are flat, never contain Top or Bottom, and collapse when a contradiction or
a tautology on a single path is detected.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from typeflow.algebra import intersection, is_subtype, overlap, union
from typeflow.flow.objects import EmptyObject, Path, RObject
from typeflow.types import FALSY, TopType, Type, is_bottom


@dataclass(frozen=True)
class Prop:
    """Base for propositions."""


@dataclass(frozen=True)
class TopProp(Prop):
    """No information."""


@dataclass(frozen=True)
class BotProp(Prop):
    """Contradiction: the code path cannot execute."""


@dataclass(frozen=True)
class TypeProp(Prop):
    """The value at ``path`` is of type ``type``."""

    type: Type
    path: Path


@dataclass(frozen=True)
class NotTypeProp(Prop):
    """The value at ``path`` is not of type ``type``."""

    type: Type
    path: Path


@dataclass(frozen=True)
class AndProp(Prop):
    props: frozenset[Prop]


@dataclass(frozen=True)
class OrProp(Prop):
    props: frozenset[Prop]


type AtomicProp = TypeProp | NotTypeProp

TOP_PROP = TopProp()
BOT_PROP = BotProp()


@dataclass(frozen=True)
class FilterSet:
    """What holds when a value is used as true, and when used as false."""

    then: Prop = TOP_PROP
    else_: Prop = TOP_PROP


NO_FILTERS = FilterSet(TOP_PROP, TOP_PROP)
UNREACHABLE_FILTERS = FilterSet(BOT_PROP, BOT_PROP)


# =============================================================================
# Atomic constructors
# =============================================================================


def type_prop(t: Type, obj: RObject) -> Prop:
    """Proposition that the value at ``obj`` has type ``t``."""
    match obj:
        case EmptyObject():
            return TOP_PROP
    if isinstance(t, TopType):
        return TOP_PROP
    if is_bottom(t):
        return BOT_PROP
    return TypeProp(t, obj)


def not_type_prop(t: Type, obj: RObject) -> Prop:
    """Proposition that the value at ``obj`` does not have type ``t``."""
    match obj:
        case EmptyObject():
            return TOP_PROP
    if is_bottom(t):
        return TOP_PROP
    if isinstance(t, TopType):
        return BOT_PROP
    return NotTypeProp(t, obj)


# =============================================================================
# Compound constructors
# =============================================================================


def _flatten(props: Iterable[Prop], kind: type[AndProp | OrProp]) -> list[Prop]:
    flat: list[Prop] = []
    for p in props:
        if isinstance(p, kind):
            flat.extend(_flatten(p.props, kind))
        else:
            flat.append(p)
    return list(dict.fromkeys(flat))


def _merge_positive(
    props: list[Prop],
    combine: Callable[..., Type],
) -> list[Prop]:
    """Merge positive atoms on the same path with ``combine``."""
    by_path: dict[Path, list[Type]] = {}
    rest: list[Prop] = []
    for p in props:
        if isinstance(p, TypeProp):
            by_path.setdefault(p.path, []).append(p.type)
        else:
            rest.append(p)
    merged = [type_prop(combine(*types), path) for path, types in by_path.items()]
    return merged + rest


def _contradicts(a: Prop, b: Prop) -> bool:
    match (a, b):
        case (TypeProp(type=t, path=p), NotTypeProp(type=u, path=q)) | (
            NotTypeProp(type=u, path=q),
            TypeProp(type=t, path=p),
        ):
            return p == q and p.is_local and is_subtype(t, u)
    return False


def _complements(a: Prop, b: Prop) -> bool:
    match (a, b):
        case (TypeProp(type=t, path=p), NotTypeProp(type=u, path=q)) | (
            NotTypeProp(type=u, path=q),
            TypeProp(type=t, path=p),
        ):
            return p == q and is_subtype(u, t)
        case (NotTypeProp(type=t, path=p), NotTypeProp(type=u, path=q)):
            return p == q and not overlap(t, u)
    return False


def conj(*props: Prop) -> Prop:
    """Conjunction of propositions in normal form.

    Top is dropped, Bottom short-circuits, positive atoms on one path are
    intersected and an atom contradicted by another on the same local path
    makes the conjunction Bottom.
    """
    flat: list[Prop] = []
    for p in _flatten(props, AndProp):
        match p:
            case BotProp():
                return BOT_PROP
            case TopProp():
                continue
            case _:
                flat.append(p)

    # Only local paths: an accessor path never makes code unreachable.
    local = [p for p in flat if not (isinstance(p, TypeProp) and not p.path.is_local)]
    accessor = [p for p in flat if p not in local]
    flat = _merge_positive(local, intersection) + accessor
    if BOT_PROP in flat:
        return BOT_PROP
    if any(_contradicts(a, b) for i, a in enumerate(flat) for b in flat[i + 1 :]):
        return BOT_PROP

    # absorption: a & (a | b) == a
    flat = [
        p
        for p in flat
        if not (isinstance(p, OrProp) and any(q in p.props for q in flat if q != p))
    ]
    flat = list(dict.fromkeys(p for p in flat if p != TOP_PROP))

    if not flat:
        return TOP_PROP
    if len(flat) == 1:
        return flat[0]
    return AndProp(frozenset(flat))


def disj(*props: Prop) -> Prop:
    """Disjunction of propositions in normal form.

    Bottom is dropped, Top short-circuits, positive atoms on one path are
    united and complementary atoms on the same path make the disjunction Top.
    """
    flat: list[Prop] = []
    for p in _flatten(props, OrProp):
        match p:
            case TopProp():
                return TOP_PROP
            case BotProp():
                continue
            case _:
                flat.append(p)

    flat = _merge_positive(flat, union)
    if TOP_PROP in flat:
        return TOP_PROP
    if any(_complements(a, b) for i, a in enumerate(flat) for b in flat[i + 1 :]):
        return TOP_PROP

    # absorption: a | (a & b) == a
    flat = [
        p
        for p in flat
        if not (isinstance(p, AndProp) and any(q in p.props for q in flat if q != p))
    ]

    if not flat:
        return BOT_PROP
    if len(flat) == 1:
        return flat[0]
    return OrProp(frozenset(flat))


def negate(prop: Prop) -> Prop:
    """Logical negation, pushed down to the atoms."""
    match prop:
        case TopProp():
            return BOT_PROP
        case BotProp():
            return TOP_PROP
        case TypeProp(type=t, path=p):
            return not_type_prop(t, p)
        case NotTypeProp(type=t, path=p):
            return type_prop(t, p)
        case AndProp(props=ps):
            return disj(*(negate(p) for p in ps))
        case OrProp(props=ps):
            return conj(*(negate(p) for p in ps))
    msg = f"Unknown proposition: {prop!r}"
    raise TypeError(msg)


def prop_paths(prop: Prop) -> frozenset[Path]:
    """All paths a proposition mentions."""
    match prop:
        case TypeProp(path=p) | NotTypeProp(path=p):
            return frozenset({p})
        case AndProp(props=ps) | OrProp(props=ps):
            return frozenset().union(*(prop_paths(p) for p in ps))
    return frozenset()


def truthiness_filters(t: Type, obj: RObject) -> FilterSet:
    """Filters of an expression whose truthiness is that of its own value.

    A value that is always falsy has an impossible ``then`` side and one
    that can never be falsy an impossible ``else`` side.
    """
    then = BOT_PROP if is_subtype(t, FALSY) else not_type_prop(FALSY, obj)
    else_ = BOT_PROP if not overlap(t, FALSY) else type_prop(FALSY, obj)
    return FilterSet(then, else_)
