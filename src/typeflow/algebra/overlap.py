"""Overlap decision procedure.

Two types overlap unless they are provably disjoint. The relation is
conservative and symmetric; it drives reachability, since narrowing a
value to a type it cannot overlap yields the bottom type.
"""

from __future__ import annotations

from collections.abc import Hashable
from itertools import zip_longest

from typeflow.algebra.subtype import (
    FN_CLASS,
    MAP_CLASS,
    SEQ_CLASS,
    VECTOR_CLASS,
    count_bounds,
    is_subtype,
)
from typeflow.classes import OBJECT, class_of_value, is_subclass, lookup_class
from typeflow.types import (
    CountRangeType,
    FnType,
    FreeVarType,
    HMapType,
    HVecType,
    InstanceType,
    IntersectionType,
    KwArgsSeqType,
    TopType,
    Type,
    UnionType,
    ValueType,
    is_bottom,
)

type Bounds = tuple[int, int | None]


def class_names_overlap(a: str, b: str) -> bool:
    """Check whether two nominal classes can share an instance.

    Related classes overlap. Otherwise an instance of both would need a
    common subclass, which is possible only when one side is an interface
    and the other can still be extended.
    """
    if is_subclass(a, b) or is_subclass(b, a):
        return True
    info_a, info_b = lookup_class(a), lookup_class(b)
    if not info_a.interface and not info_b.interface:
        return False
    if info_a.interface and info_b.interface:
        return True
    other = info_b if info_a.interface else info_a
    return not other.final


def _instances_overlap(x: InstanceType, y: InstanceType) -> bool:
    if not class_names_overlap(x.name, y.name):
        return False
    if x.name == y.name and x.args and y.args:
        # Covariant in every argument, whatever the declared variance.
        return all(
            overlap(a, b) for a, b in zip(x.args, y.args, strict=False)
        )
    return True


def _padded(v: HVecType, length: int) -> tuple[Type, ...]:
    if v.rest is None or len(v.fixed) >= length:
        return v.fixed
    return v.fixed + (v.rest,) * (length - len(v.fixed))


def _vectors_overlap(x: HVecType, y: HVecType) -> bool:
    if x.rest is None and y.rest is None:
        return len(x.fixed) == len(y.fixed) and all(
            overlap(a, b) for a, b in zip(x.fixed, y.fixed, strict=True)
        )
    if x.rest is None:
        x, y = y, x
    if y.rest is None:
        # y has an exact length that x's fixed prefix must fit into.
        if len(y.fixed) < len(x.fixed):
            return False
        padded = _padded(x, len(y.fixed))
        return all(overlap(a, b) for a, b in zip(padded, y.fixed, strict=True))
    length = max(len(x.fixed), len(y.fixed))
    pairs = zip_longest(_padded(x, length), _padded(y, length))
    return all(overlap(a, b) for a, b in pairs) and overlap(x.rest, y.rest)


def _keys_overlap(
    a: tuple[dict[Hashable, Type], dict[Hashable, Type], bool],
    b: tuple[dict[Hashable, Type], dict[Hashable, Type], bool],
) -> bool:
    for (mandatory, _, _), (other_mand, other_opt, other_complete) in ((a, b), (b, a)):
        for key, t in mandatory.items():
            if key in other_mand:
                other = other_mand[key]
            elif key in other_opt:
                other = other_opt[key]
            elif other_complete:
                return False
            else:
                continue
            if not overlap(t, other):
                return False
    return True


def _intervals_overlap(a: Bounds, b: Bounds, *, even: bool = False) -> bool:
    lower = max(a[0], b[0])
    uppers = [u for u in (a[1], b[1]) if u is not None]
    if not uppers:
        return True
    upper = min(uppers)
    if even:
        lower += lower % 2
    return lower <= upper


def _counted_class(name: str) -> bool:
    """Whether instances of a class can have a count."""
    if lookup_class(name).final:
        return is_subclass(name, "Seqable") or is_subclass(name, "CharSequence")
    return True


def _map_bounds(m: HMapType) -> Bounds:
    lower = len(m.mandatory)
    return lower, lower + len(m.optional) if m.complete else None


def _value_overlaps(v: ValueType, other: Type) -> bool:
    """Overlap of a literal with a type that is not itself a literal.

    A literal's runtime class is exact, so the class decides, except for
    counts, where the literal's own length is known.
    """
    if is_subtype(v, other):
        return True
    cls = class_of_value(v.value)
    if cls == OBJECT:
        return True
    match other:
        case CountRangeType(lower=lower, upper=upper):
            match v.value:
                case None:
                    count = 0
                case str():
                    count = len(v.value)
                case _:
                    return False
            return _intervals_overlap((count, count), (lower, upper))
        case FnType():
            return cls is not None and is_subclass(cls, FN_CLASS)
        case InstanceType() | HVecType() | HMapType() | KwArgsSeqType():
            # never a collection
            return False
    return True


_STRUCTURAL_CLASSES: dict[type[Type], str] = {
    HVecType: VECTOR_CLASS,
    HMapType: MAP_CLASS,
    KwArgsSeqType: SEQ_CLASS,
    FnType: FN_CLASS,
}


def overlap(t1: Type, t2: Type) -> bool:  # noqa: C901, PLR0911
    """Check whether two types may share a value.

    Args:
        t1: First type.
        t2: Second type.

    Returns:
        False only when no value can inhabit both types.

    """
    if t1 == t2:
        return True
    if is_bottom(t1) or is_bottom(t2):
        return False

    match (t1, t2):
        case (TopType(), _) | (_, TopType()):
            return True
        case (FreeVarType(bound=bound), other) | (other, FreeVarType(bound=bound)):
            return bound is None or overlap(bound, other)
        case (UnionType(members=ms), other) | (other, UnionType(members=ms)):
            return any(overlap(m, other) for m in ms)
        case (IntersectionType(members=ms), other) | (
            other,
            IntersectionType(members=ms),
        ):
            return all(overlap(m, other) for m in ms)
        case (ValueType(), ValueType()):
            return False
        case (ValueType() as v, other) | (other, ValueType() as v):
            return _value_overlaps(v, other)
        case (InstanceType() as x, InstanceType() as y):
            return _instances_overlap(x, y)
        case (HVecType() as x, HVecType() as y):
            return _vectors_overlap(x, y)
        case (HMapType() as x, HMapType() as y):
            return _keys_overlap(
                (x.mandatory_map, x.optional_map, x.complete),
                (y.mandatory_map, y.optional_map, y.complete),
            )
        case (KwArgsSeqType() as x, KwArgsSeqType() as y):
            return _keys_overlap(
                (x.mandatory_map, x.optional_map, x.complete),
                (y.mandatory_map, y.optional_map, y.complete),
            ) and _intervals_overlap(count_bounds(x), count_bounds(y), even=True)
        case (HMapType() as m, CountRangeType() as c) | (CountRangeType() as c, HMapType() as m):
            return _intervals_overlap(_map_bounds(m), (c.lower, c.upper))
        case (KwArgsSeqType() as k, CountRangeType() as c) | (
            CountRangeType() as c,
            KwArgsSeqType() as k,
        ):
            # Keyword sequences have an implied even count.
            return _intervals_overlap(count_bounds(k), (c.lower, c.upper), even=True)
        case (CountRangeType() as x, CountRangeType() as y):
            return _intervals_overlap((x.lower, x.upper), (y.lower, y.upper))
        case (HVecType() as v, CountRangeType() as c) | (
            CountRangeType() as c,
            HVecType() as v,
        ):
            return _intervals_overlap(count_bounds(v), (c.lower, c.upper))
        case (CountRangeType(), InstanceType(name=name)) | (
            InstanceType(name=name),
            CountRangeType(),
        ):
            return _counted_class(name)
        case (HVecType() as v, InstanceType() as i) | (
            InstanceType() as i,
            HVecType() as v,
        ):
            if not class_names_overlap(VECTOR_CLASS, i.name):
                return False
            if len(i.args) == 1:
                return all(overlap(e, i.args[0]) for e in v.fixed)
            return True
        case (HMapType(), InstanceType(name=name)) | (
            InstanceType(name=name),
            HMapType(),
        ):
            return class_names_overlap(MAP_CLASS, name)
        case (KwArgsSeqType(), InstanceType(name=name)) | (
            InstanceType(name=name),
            KwArgsSeqType(),
        ):
            return class_names_overlap(SEQ_CLASS, name)
        case (FnType(), FnType()):
            return True
        case (FnType(), InstanceType(name=name)) | (InstanceType(name=name), FnType()):
            return class_names_overlap(FN_CLASS, name)

    # Collections and functions of different kinds share a value only when
    # their runtime classes can.
    classes = (_STRUCTURAL_CLASSES.get(type(t1)), _STRUCTURAL_CLASSES.get(type(t2)))
    if classes[0] is not None and classes[1] is not None:
        return class_names_overlap(classes[0], classes[1])
    return True
