"""Flow-sensitive substrate: propositions, objects, results and environments."""

from typeflow.flow.env import LocalBinding, PropEnv
from typeflow.flow.erase import erase_objects
from typeflow.flow.narrow import narrow
from typeflow.flow.objects import (
    EMPTY,
    ClassAccessor,
    CountAccessor,
    EmptyObject,
    FirstAccessor,
    KeyAccessor,
    NthAccessor,
    Path,
)
from typeflow.flow.props import (
    BOT_PROP,
    NO_FILTERS,
    TOP_PROP,
    UNREACHABLE_FILTERS,
    AndProp,
    BotProp,
    FilterSet,
    NotTypeProp,
    OrProp,
    TopProp,
    TypeProp,
    conj,
    disj,
    negate,
    not_type_prop,
    type_prop,
)
from typeflow.flow.results import TCResult, unreachable_result

__all__ = [
    "BOT_PROP",
    "EMPTY",
    "NO_FILTERS",
    "TOP_PROP",
    "UNREACHABLE_FILTERS",
    "AndProp",
    "BotProp",
    "ClassAccessor",
    "CountAccessor",
    "EmptyObject",
    "FilterSet",
    "FirstAccessor",
    "KeyAccessor",
    "LocalBinding",
    "NotTypeProp",
    "NthAccessor",
    "OrProp",
    "Path",
    "PropEnv",
    "TCResult",
    "TopProp",
    "TypeProp",
    "conj",
    "disj",
    "erase_objects",
    "narrow",
    "negate",
    "not_type_prop",
    "type_prop",
    "unreachable_result",
]
