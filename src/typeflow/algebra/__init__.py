"""Type algebra: subtyping, overlap and normal-form constructors."""

from typeflow.algebra.ctors import intersection, remove, restrict, union
from typeflow.algebra.overlap import class_names_overlap, overlap
from typeflow.algebra.subtype import count_bounds, is_subtype

__all__ = [
    "class_names_overlap",
    "count_bounds",
    "intersection",
    "is_subtype",
    "overlap",
    "remove",
    "restrict",
    "union",
]
