"""Nominal class hierarchy consulted by the subtype and overlap procedures.

Classes are declared once into a module-level registry, the same way node
and type subclasses register themselves by tag. The registry is read-only
during checking.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from typing import Any

from typeflow.types import Keyword

OBJECT = "Object"


@dataclass(frozen=True)
class ClassInfo:
    """Declaration of a nominal class or interface.

    Attributes:
        name: The class name
        supers: Direct superclasses and implemented interfaces
        final: Whether the class can be subclassed
        interface: Whether the class is an interface
        arity: Number of type parameters

    """

    name: str
    supers: tuple[str, ...] = ()
    final: bool = False
    interface: bool = False
    arity: int = 0


_CLASSES: dict[str, ClassInfo] = {}


def declare_class(
    name: str,
    *supers: str,
    final: bool = False,
    interface: bool = False,
    arity: int = 0,
) -> ClassInfo:
    """Declare a class, replacing any previous declaration of the same name."""
    if final and interface:
        msg = f"Class '{name}' cannot be both final and an interface"
        raise ValueError(msg)
    info = ClassInfo(name, tuple(supers), final=final, interface=interface, arity=arity)
    _CLASSES[name] = info
    is_subclass.cache_clear()
    return info


def lookup_class(name: str) -> ClassInfo:
    """Get the declaration for a class.

    Undeclared names are treated as non-final interfaces, which overlap
    with every non-final class.
    """
    if (info := _CLASSES.get(name)) is not None:
        return info
    return ClassInfo(name, interface=True)


@cache
def is_subclass(sub: str, sup: str) -> bool:
    """Check whether ``sub`` is ``sup`` or inherits from it."""
    if sub == sup or sup == OBJECT:
        return True
    return any(is_subclass(s, sup) for s in lookup_class(sub).supers)


def class_of_value(value: Any) -> str | None:
    """Name of the runtime class of a literal; None for nil."""
    match value:
        case None:
            return None
        case bool():
            return "Boolean"
        case int():
            return "Long"
        case float():
            return "Double"
        case str():
            return "String"
        case Keyword():
            return "Keyword"
        case _:
            return OBJECT


def _declare_base_classes() -> None:
    declare_class(OBJECT)
    # interfaces
    declare_class("Comparable", interface=True)
    declare_class("CharSequence", interface=True)
    declare_class("IMeta", interface=True)
    declare_class("IFn", interface=True)
    declare_class("Counted", interface=True)
    declare_class("Seqable", interface=True, arity=1)
    declare_class("Seq", "Seqable", interface=True, arity=1)
    # numbers
    declare_class("Number")
    declare_class("Long", "Number", "Comparable", final=True)
    declare_class("Integer", "Number", "Comparable", final=True)
    declare_class("Double", "Number", "Comparable", final=True)
    # other values
    declare_class("String", "CharSequence", "Comparable", final=True)
    declare_class("Boolean", "Comparable", final=True)
    declare_class("Keyword", "IFn", "Comparable", final=True)
    declare_class("Symbol", "IFn", "IMeta", "Comparable", final=True)
    declare_class("Class", final=True)
    declare_class("Buffer")
    # collections
    declare_class(
        "PersistentVector",
        "Seqable",
        "Counted",
        "IFn",
        "IMeta",
        arity=1,
    )
    declare_class("PersistentMap", "Seqable", "Counted", "IFn", "IMeta", arity=2)
    declare_class("Atom", "IMeta", final=True, arity=2)


_declare_base_classes()
