"""Human-readable rendering of types, propositions, objects and envs.

Used in error messages and debug logging. Members of unordered groups are
sorted by their rendering so the output is stable.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any

from typeflow.flow.objects import (
    Accessor,
    ClassAccessor,
    CountAccessor,
    EmptyObject,
    FirstAccessor,
    KeyAccessor,
    NthAccessor,
    Path,
    RObject,
)
from typeflow.flow.props import (
    AndProp,
    BotProp,
    FilterSet,
    NotTypeProp,
    OrProp,
    Prop,
    TopProp,
    TypeProp,
)
from typeflow.types import (
    CountRangeType,
    Entries,
    FnType,
    FreeVarType,
    HMapType,
    HVecType,
    InstanceType,
    IntersectionType,
    Keyword,
    KwArgsSeqType,
    TopType,
    Type,
    UnionType,
    ValueType,
)

if TYPE_CHECKING:
    from typeflow.flow.env import PropEnv


# =============================================================================
# Types
# =============================================================================


def _literal(value: Hashable) -> str:
    match value:
        case None:
            return "nil"
        case bool():
            return "true" if value else "false"
        case str():
            return f'"{value}"'
        case Keyword():
            return str(value)
    return repr(value)


def _joined(types: frozenset[Type], sep: str) -> str:
    return sep.join(sorted(type_name(t) for t in types))


def _entries(mandatory: Entries, optional: Entries, *, complete: bool) -> str:
    parts = [f"{_literal(k)} {type_name(v)}" for k, v in mandatory]
    parts += [f"{_literal(k)}? {type_name(v)}" for k, v in optional]
    if not complete:
        parts.append("...")
    return ", ".join(parts)


def _vector(t: HVecType) -> str:
    parts = [type_name(e) for e in t.fixed]
    if t.rest is not None:
        parts.append(f"*{type_name(t.rest)}")
    return f"[{', '.join(parts)}]"


def _fn(t: FnType) -> str:
    params = ", ".join(type_name(p) for p in t.params)
    text = f"({params}) -> {type_name(t.returns)}"
    if t.predicate is not None:
        text += f" : {type_name(t.predicate)}"
    return text


_TYPE_FORMATTERS: dict[type[Type], Callable[[Any], str]] = {
    TopType: lambda _: "Any",
    UnionType: lambda t: _joined(t.members, " | ") if t.members else "Nothing",
    IntersectionType: lambda t: _joined(t.members, " & "),
    ValueType: lambda t: _literal(t.value),
    InstanceType: lambda t: (
        f"{t.name}[{', '.join(type_name(a) for a in t.args)}]" if t.args else t.name
    ),
    HVecType: _vector,
    HMapType: lambda t: (
        f"{{{_entries(t.mandatory, t.optional, complete=t.complete)}}}"
    ),
    CountRangeType: lambda t: (
        f"CountRange[{t.lower}, {'*' if t.upper is None else t.upper}]"
    ),
    KwArgsSeqType: lambda t: (
        f"KwArgs{{{_entries(t.mandatory, t.optional, complete=t.complete)}}}"
    ),
    FreeVarType: lambda t: (
        t.name if t.bound is None else f"{t.name} <: {type_name(t.bound)}"
    ),
    FnType: _fn,
}


def type_name(t: Type) -> str:
    """Get a human-readable name for a type."""
    if formatter := _TYPE_FORMATTERS.get(type(t)):
        return formatter(t)
    return t.tag


# =============================================================================
# Objects and propositions
# =============================================================================


def _accessor(accessor: Accessor) -> str:
    match accessor:
        case FirstAccessor():
            return ".first"
        case CountAccessor():
            return ".count"
        case ClassAccessor():
            return ".class"
        case KeyAccessor(key=key):
            return f"[{_literal(key)}]"
        case NthAccessor(index=index):
            return f"[{index}]"
    return f".{type(accessor).__name__}"


def format_object(obj: RObject) -> str:
    match obj:
        case EmptyObject():
            return "-"
        case Path(root=root, accessors=accessors):
            return root + "".join(_accessor(a) for a in accessors)
    return repr(obj)


def format_prop(prop: Prop) -> str:
    """Render a proposition, e.g. ``x : Long || x !: nil``."""
    match prop:
        case TopProp():
            return "tt"
        case BotProp():
            return "ff"
        case TypeProp(type=t, path=p):
            return f"{format_object(p)} : {type_name(t)}"
        case NotTypeProp(type=t, path=p):
            return f"{format_object(p)} !: {type_name(t)}"
        case AndProp(props=ps):
            return "(" + " && ".join(sorted(format_prop(p) for p in ps)) + ")"
        case OrProp(props=ps):
            return "(" + " || ".join(sorted(format_prop(p) for p in ps)) + ")"
    return repr(prop)


def format_filter_set(filters: FilterSet) -> str:
    return f"{{then: {format_prop(filters.then)}, else: {format_prop(filters.else_)}}}"


def format_env(env: PropEnv) -> str:
    """Render one binding per line followed by the recorded propositions."""
    lines = []
    for name, binding in sorted(env.bindings.items()):
        line = f"{name} : {type_name(binding.type)}"
        if isinstance(binding.object, Path):
            line += f" = {format_object(binding.object)}"
        lines.append(line)
    lines.extend(f"| {format_prop(p)}" for p in env.props)
    return "\n".join(lines)
