"""Removing references to names that go out of scope."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING

from typeflow.flow.objects import EMPTY, Path, RObject
from typeflow.flow.props import (
    TOP_PROP,
    AndProp,
    FilterSet,
    NotTypeProp,
    OrProp,
    Prop,
    TypeProp,
    conj,
    disj,
)

if TYPE_CHECKING:
    from typeflow.flow.results import TCResult

logger = logging.getLogger(__name__)


def erase_prop(names: frozenset[str], prop: Prop) -> Prop:
    """Replace every atom about one of ``names`` with Top."""
    match prop:
        case TypeProp(path=Path(root=root)) | NotTypeProp(path=Path(root=root)):
            return TOP_PROP if root in names else prop
        case AndProp(props=ps):
            return conj(*(erase_prop(names, p) for p in ps))
        case OrProp(props=ps):
            return disj(*(erase_prop(names, p) for p in ps))
    return prop


def erase_filter_set(names: frozenset[str], filters: FilterSet) -> FilterSet:
    return FilterSet(erase_prop(names, filters.then), erase_prop(names, filters.else_))


def erase_object(names: frozenset[str], obj: RObject) -> RObject:
    match obj:
        case Path(root=root) if root in names:
            return EMPTY
    return obj


def erase_objects(names: Iterable[str], ret: TCResult) -> TCResult:
    """Forget every proposition and object rooted at one of ``names``.

    Args:
        names: Names leaving scope
        ret: Result computed inside their scope

    Returns:
        A result that no longer mentions any of the names.

    """
    names = frozenset(names)
    if not names:
        return ret
    erased = replace(
        ret,
        filters=erase_filter_set(names, ret.filters),
        object=erase_object(names, ret.object),
    )
    if erased != ret:
        logger.debug("Erased %s from result", ", ".join(sorted(names)))
    return erased
