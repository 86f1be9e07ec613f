"""Expression forms understood by the checker.

Every form is a frozen ``Node``. Checking returns a copy of the tree with a
``TCResult`` attached to each node it reached. Branches and bindings ruled
unreachable get ``unreachable_result()`` without being checked, and the
body after an unreachable binding is left without a result.
"""

from __future__ import annotations

from typing import Any

from typeflow.flow.objects import Accessor
from typeflow.nodes import Node
from typeflow.types import Type


class Const(Node):
    """A literal: nil, booleans, numbers, strings, keywords, vectors, maps."""

    value: Any


class Local(Node):
    """Reference to a bound name."""

    name: str


class If(Node):
    """Two-way conditional on the truthiness of ``test``."""

    test: Node
    then: Node
    else_: Node


class Binding(Node):
    """One ``name = init`` pair of a binding form."""

    name: str
    init: Node


class Let(Node):
    """Sequential bindings, each visible to the ones after it, then a body."""

    bindings: tuple[Binding, ...]
    body: Node


class Loop(Node):
    """Like ``Let``, but the body may re-enter with ``Recur``.

    ``annotations`` gives the declared type of each binding, in order.
    """

    bindings: tuple[Binding, ...]
    body: Node
    annotations: tuple[Type, ...] | None = None


class Recur(Node):
    """Re-enter the innermost enclosing loop with new binding values."""

    args: tuple[Node, ...]


class Throw(Node):
    """Raise ``exception``; never returns normally."""

    exception: Node


class Invoke(Node):
    """Call a function-typed expression."""

    fn: Node
    args: tuple[Node, ...] = ()


class Access(Node):
    """Apply a structural accessor such as first or a key lookup."""

    target: Node
    accessor: Accessor


class Ann(Node):
    """Check ``expr`` against a declared type."""

    expr: Node
    annotation: Type
