"""Checker configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from typeflow.flow.env import PropEnv
from typeflow.types import Type


@dataclass(frozen=True)
class CheckConfig:
    """Settings shared by every walk of one checker.

    Attributes:
        base_env: Types of the names visible before any binding form,
            e.g. the signatures of library functions
        loop_requires_annotations: Report a loop whose bindings carry no
            type annotations

    """

    base_env: Mapping[str, Type] = field(default_factory=lambda: MappingProxyType({}))
    loop_requires_annotations: bool = True

    def initial_env(self) -> PropEnv:
        """Build the environment a top-level form is checked in."""
        return PropEnv.from_types(self.base_env)
