"""Refining an environment under asserted propositions.

``narrow`` is the single entry point. It returns a new environment together
with a reachability flag; the input environment is never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from typeflow.algebra import is_subtype, remove, restrict, union
from typeflow.flow.env import PropEnv
from typeflow.flow.objects import (
    Accessor,
    FirstAccessor,
    KeyAccessor,
    NthAccessor,
)
from typeflow.flow.props import (
    AndProp,
    AtomicProp,
    BotProp,
    NotTypeProp,
    OrProp,
    Prop,
    TopProp,
    TypeProp,
    disj,
)
from typeflow.printing import format_prop
from typeflow.types import NOTHING, HMapType, HVecType, Type, UnionType, is_bottom

logger = logging.getLogger(__name__)

type Narrowed = tuple[PropEnv, bool]


def _rank(prop: Prop) -> int:
    match prop:
        case TypeProp(path=p) | NotTypeProp(path=p):
            return 0 if p.is_local else 1
        case AndProp():
            return 2
        case OrProp():
            return 3
    return 0


def _ordered(props: Iterable[Prop]) -> list[Prop]:
    """Atoms before compounds, so disjunctions see the narrowest bindings."""
    return sorted(props, key=_rank)


def narrow(env: PropEnv, props: Iterable[Prop]) -> Narrowed:
    """Assert propositions in an environment.

    Args:
        env: The environment to refine
        props: Propositions known to hold

    Returns:
        Tuple of (refined environment, reachable). When unreachable the
        returned environment is only meaningful for diagnostics.

    """
    for prop in _ordered(props):
        env, reachable = _assert(env, prop)
        if not reachable:
            return env, False
    return env, True


def _assert(env: PropEnv, prop: Prop) -> Narrowed:
    match prop:
        case TopProp():
            return env, True
        case BotProp():
            logger.debug("Asserted contradiction")
            return env, False
        case TypeProp() | NotTypeProp():
            return _refine(env, prop)
        case AndProp(props=ps):
            return narrow(env, ps)
        case OrProp():
            return _assert_or(env, prop)
    msg = f"Unknown proposition: {prop!r}"
    raise TypeError(msg)


def _updater(atom: AtomicProp) -> Callable[[Type], Type]:
    match atom:
        case TypeProp(type=u):
            return lambda t: restrict(t, u)
        case NotTypeProp(type=u):
            return lambda t: remove(t, u)


def _refine(env: PropEnv, atom: AtomicProp) -> Narrowed:
    path = atom.path
    binding = env.lookup(path.root)
    if binding is None:
        return env, True
    update = _updater(atom)

    if path.is_local:
        new = update(binding.type)
        if is_bottom(new):
            logger.debug("Binding %s became empty under %s", path.root, format_prop(atom))
            return env, False
        if new != binding.type:
            env = env.with_type(path.root, new)
        return _resolve_props(env)

    # Derived paths are recorded and refine record/vector structure only.
    env = env.add_props(atom)
    new = _refine_structure(binding.type, path.accessors, update)
    if not is_bottom(new) and new != binding.type:
        env = env.with_type(path.root, new)
    return env, True


def _position(accessor: Accessor) -> int | None:
    match accessor:
        case FirstAccessor():
            return 0
        case NthAccessor(index=index):
            return index
    return None


def _refine_structure(
    t: Type,
    accessors: tuple[Accessor, ...],
    update: Callable[[Type], Type],
) -> Type:
    """Apply ``update`` to the part of ``t`` an accessor chain reaches.

    Union members whose part becomes empty are dropped. Structure the
    chain cannot see into is returned unchanged.
    """
    if not accessors:
        return update(t)
    accessor, rest = accessors[0], accessors[1:]
    match t:
        case UnionType(members=ms):
            return union(*(_refine_structure(m, accessors, update) for m in ms))
        case HMapType() if isinstance(accessor, KeyAccessor):
            value = t.mandatory_map.get(accessor.key)
            if value is None:
                return t
            refined = _refine_structure(value, rest, update)
            return NOTHING if is_bottom(refined) else t.with_mandatory(accessor.key, refined)
        case HVecType(fixed=fixed) if (i := _position(accessor)) is not None and i < len(fixed):
            refined = _refine_structure(fixed[i], rest, update)
            if is_bottom(refined):
                return NOTHING
            return HVecType((*fixed[:i], refined, *fixed[i + 1 :]), t.rest)
    return t


def _contradicted(env: PropEnv, prop: Prop) -> bool:
    """Whether the current bindings already rule a proposition out."""
    match prop:
        case BotProp():
            return True
        case TypeProp(type=u, path=p) if p.is_local and (b := env.lookup(p.root)):
            return is_bottom(restrict(b.type, u))
        case NotTypeProp(type=u, path=p) if p.is_local and (b := env.lookup(p.root)):
            return is_subtype(b.type, u)
        case AndProp(props=ps):
            return any(_contradicted(env, q) for q in ps)
        case OrProp(props=ps):
            return all(_contradicted(env, q) for q in ps)
    return False


def _assert_or(env: PropEnv, prop: OrProp) -> Narrowed:
    live = [d for d in _ordered(prop.props) if not _contradicted(env, d)]
    outcomes = [(d, *_assert(env, d)) for d in live]
    reachable = [(d, e) for d, e, ok in outcomes if ok]

    if not reachable:
        logger.debug("No disjunct of %s is reachable", format_prop(prop))
        return env, False
    if len(reachable) == 1:
        return reachable[0][1], True

    joined = _join(env, [e for _, e in reachable])
    return joined.add_props(disj(*(d for d, _ in reachable))), True


def _join(base: PropEnv, envs: list[PropEnv]) -> PropEnv:
    """Per-binding union of the candidate environments."""
    joined = base
    for name in base.bindings:
        t = union(*(e.bindings[name].type for e in envs))
        if t != base.bindings[name].type:
            joined = joined.with_type(name, t)
    shared = [p for p in envs[0].props if all(p in e.props for e in envs[1:])]
    return joined.with_props(shared)


def _resolve_props(env: PropEnv) -> Narrowed:
    """Re-simplify recorded disjunctions against the current bindings.

    Disjuncts the bindings contradict are dropped. A disjunction left with a
    single disjunct is asserted and one left with none makes the environment
    unreachable.
    """
    for prop in env.props:
        if not isinstance(prop, OrProp):
            continue
        live = [d for d in prop.props if not _contradicted(env, d)]
        if len(live) == len(prop.props):
            continue
        rest = env.with_props(p for p in env.props if p != prop)
        if not live:
            logger.debug("Recorded %s is contradicted", format_prop(prop))
            return rest, False
        env, reachable = _assert(rest, disj(*live))
        if not reachable:
            return env, False
        return _resolve_props(env)
    return env, True
