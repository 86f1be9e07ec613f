"""Core expression node infrastructure with automatic registration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, dataclass_transform

if TYPE_CHECKING:
    from typeflow.errors import SourceLocation
    from typeflow.flow.results import TCResult


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True, field_specifiers=(field,))
class Node:
    """Base for expression nodes.

    Every node may carry a source location and, once checked, the
    TCResult inferred for it. Both are keyword-only and excluded from
    equality so a checked tree compares equal to the tree it came from.
    """

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[Node]]] = {}

    loc: SourceLocation | None = field(
        default=None,
        kw_only=True,
        compare=False,
        repr=False,
    )
    ret: TCResult | None = field(
        default=None,
        kw_only=True,
        compare=False,
        repr=False,
    )

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Register node subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__.lower().removesuffix("node")

        if (existing := Node.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        Node.registry[cls.tag] = cls

    @property
    def checked(self) -> bool:
        """Return True once a TCResult has been attached."""
        return self.ret is not None
