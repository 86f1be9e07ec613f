"""Subtype relation over the flow engine's types."""

from __future__ import annotations

from collections.abc import Hashable

from typeflow.classes import class_of_value, is_subclass
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
)

VECTOR_CLASS = "PersistentVector"
MAP_CLASS = "PersistentMap"
SEQ_CLASS = "Seq"
FN_CLASS = "IFn"


def _trivial_args(args: tuple[Type, ...]) -> bool:
    return all(isinstance(a, TopType) for a in args)


def count_bounds(t: HVecType | KwArgsSeqType) -> tuple[int, int | None]:
    """Implied [lower, upper] count of a vector or keyword sequence.

    Args:
        t: The sized type

    Returns:
        Tuple of (lower, upper) where upper None means unbounded

    """
    match t:
        case HVecType(fixed=fixed, rest=None):
            return len(fixed), len(fixed)
        case HVecType(fixed=fixed):
            return len(fixed), None
        case KwArgsSeqType(mandatory=mandatory, optional=optional, complete=complete):
            upper = 2 * (len(mandatory) + len(optional)) if complete else None
            return 2 * len(mandatory), upper
    msg = f"No count bounds for {t!r}"
    raise TypeError(msg)


def _within(
    bounds: tuple[int, int | None],
    lower: int,
    upper: int | None,
) -> bool:
    lo, hi = bounds
    if lo < lower:
        return False
    if upper is None:
        return True
    return hi is not None and hi <= upper


def _entries_subtype(
    sub: tuple[dict[Hashable, Type], dict[Hashable, Type], bool],
    sup: tuple[dict[Hashable, Type], dict[Hashable, Type], bool],
) -> bool:
    s_mand, s_opt, s_complete = sub
    t_mand, t_opt, t_complete = sup
    for key, t in t_mand.items():
        if key not in s_mand or not is_subtype(s_mand[key], t):
            return False
    for key, t in t_opt.items():
        s = s_mand.get(key, s_opt.get(key))
        if s is not None and not is_subtype(s, t):
            return False
    if t_complete:
        allowed = t_mand.keys() | t_opt.keys()
        return s_complete and (s_mand.keys() | s_opt.keys()) <= allowed
    return True


def _vector_subtype(s: HVecType, t: HVecType) -> bool:
    if t.rest is None:
        return (
            s.rest is None
            and len(s.fixed) == len(t.fixed)
            and all(is_subtype(a, b) for a, b in zip(s.fixed, t.fixed, strict=True))
        )
    if len(s.fixed) < len(t.fixed):
        return False
    head, extra = s.fixed[: len(t.fixed)], s.fixed[len(t.fixed) :]
    return (
        all(is_subtype(a, b) for a, b in zip(head, t.fixed, strict=True))
        and all(is_subtype(a, t.rest) for a in extra)
        and (s.rest is None or is_subtype(s.rest, t.rest))
    )


def _instance_subtype(s: InstanceType, t: InstanceType) -> bool:
    if not is_subclass(s.name, t.name):
        return False
    if _trivial_args(t.args):
        return True
    # Type arguments are compared positionally and covariantly.
    return len(s.args) == len(t.args) and all(
        is_subtype(a, b) for a, b in zip(s.args, t.args, strict=True)
    )


def is_subtype(s: Type, t: Type) -> bool:  # noqa: C901, PLR0911, PLR0912
    """Check if s is a subtype of t.

    Args:
        s: The potential subtype.
        t: The potential supertype.

    Returns:
        True if every value of s is a value of t.

    """
    if s == t:
        return True

    match (s, t):
        case (_, TopType()):
            return True
        # Bottom (the empty union) is vacuously a subtype of everything
        case (UnionType(members=ms), _):
            return all(is_subtype(m, t) for m in ms)
        case (_, IntersectionType(members=ms)):
            return all(is_subtype(s, m) for m in ms)
        case (IntersectionType(members=ms), _):
            if any(is_subtype(m, t) for m in ms):
                return True
            return isinstance(t, UnionType) and any(is_subtype(s, m) for m in t.members)
        case (_, UnionType(members=ms)):
            return any(is_subtype(s, m) for m in ms)
        case (FreeVarType(bound=bound), _):
            return bound is not None and is_subtype(bound, t)
        case (TopType(), _) | (_, FreeVarType()):
            return False
        case (ValueType(), ValueType()):
            return False
        case (ValueType(value=v), InstanceType(name=name, args=args)):
            cls = class_of_value(v)
            return cls is not None and is_subclass(cls, name) and _trivial_args(args)
        case (InstanceType() as a, InstanceType() as b):
            return _instance_subtype(a, b)
        case (HVecType() as a, HVecType() as b):
            return _vector_subtype(a, b)
        case (HVecType(fixed=fixed, rest=rest), InstanceType(name=name, args=args)):
            if not is_subclass(VECTOR_CLASS, name):
                return False
            if _trivial_args(args):
                return True
            elements = fixed if rest is None else (*fixed, rest)
            return len(args) == 1 and all(is_subtype(e, args[0]) for e in elements)
        case (HVecType() | KwArgsSeqType() as a, CountRangeType(lower=lo, upper=hi)):
            return _within(count_bounds(a), lo, hi)
        case (HMapType() as a, HMapType() as b):
            return _entries_subtype(
                (a.mandatory_map, a.optional_map, a.complete),
                (b.mandatory_map, b.optional_map, b.complete),
            )
        case (KwArgsSeqType() as a, KwArgsSeqType() as b):
            return _entries_subtype(
                (a.mandatory_map, a.optional_map, a.complete),
                (b.mandatory_map, b.optional_map, b.complete),
            )
        case (HMapType(), InstanceType(name=name, args=args)):
            return is_subclass(MAP_CLASS, name) and _trivial_args(args)
        case (KwArgsSeqType(), InstanceType(name=name, args=args)):
            return is_subclass(SEQ_CLASS, name) and _trivial_args(args)
        case (CountRangeType(lower=lo1, upper=hi1), CountRangeType(lower=lo2, upper=hi2)):
            return _within((lo1, hi1), lo2, hi2)
        case (FnType() as f, FnType() as g):
            return (
                len(f.params) == len(g.params)
                # parameters are contravariant
                and all(is_subtype(b, a) for a, b in zip(f.params, g.params, strict=True))
                and is_subtype(f.returns, g.returns)
                and (g.predicate is None or f.predicate == g.predicate)
            )
        case (FnType(), InstanceType(name=name)):
            return is_subclass(FN_CLASS, name)

    return False
