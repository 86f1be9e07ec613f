"""typeflow - occurrence typing for a gradual type checker.

Tracks how conditionals, sequential bindings and non-local exits narrow the
static types of bound values.
"""

from typeflow.algebra import intersection, is_subtype, overlap, remove, restrict, union
from typeflow.ast import (
    Access,
    Ann,
    Binding,
    Const,
    If,
    Invoke,
    Let,
    Local,
    Loop,
    Recur,
    Throw,
)
from typeflow.check import CheckContext, Checker, RecurTarget, check_form
from typeflow.classes import declare_class, is_subclass, lookup_class
from typeflow.config import CheckConfig
from typeflow.errors import (
    CheckResult,
    Diagnostics,
    InvariantViolation,
    SourceLocation,
    TypeCheckError,
)
from typeflow.flow import (
    EMPTY,
    FilterSet,
    Path,
    PropEnv,
    TCResult,
    conj,
    disj,
    narrow,
    negate,
    not_type_prop,
    type_prop,
    unreachable_result,
)
from typeflow.nodes import Node
from typeflow.printing import format_env, format_filter_set, format_prop, type_name
from typeflow.types import (
    ANY,
    BOOLEAN,
    FALSE,
    FALSY,
    NIL,
    NOTHING,
    TRUE,
    FnType,
    HMapType,
    HVecType,
    Keyword,
    Type,
    ValueType,
    instance,
)

__version__ = "0.1.0"

__all__ = [
    "ANY",
    "BOOLEAN",
    "EMPTY",
    "FALSE",
    "FALSY",
    "NIL",
    "NOTHING",
    "TRUE",
    "Access",
    "Ann",
    "Binding",
    "CheckConfig",
    "CheckContext",
    "CheckResult",
    "Checker",
    "Const",
    "Diagnostics",
    "FilterSet",
    "FnType",
    "HMapType",
    "HVecType",
    "If",
    "InvariantViolation",
    "Invoke",
    "Keyword",
    "Let",
    "Local",
    "Loop",
    "Node",
    "Path",
    "PropEnv",
    "RecurTarget",
    "Recur",
    "SourceLocation",
    "TCResult",
    "Throw",
    "Type",
    "TypeCheckError",
    "ValueType",
    "check_form",
    "conj",
    "declare_class",
    "disj",
    "format_env",
    "format_filter_set",
    "format_prop",
    "instance",
    "intersection",
    "is_subclass",
    "is_subtype",
    "lookup_class",
    "narrow",
    "negate",
    "not_type_prop",
    "overlap",
    "remove",
    "restrict",
    "type_name",
    "type_prop",
    "union",
    "unreachable_result",
]
