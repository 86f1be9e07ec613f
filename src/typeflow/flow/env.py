"""Lexical environment: bound names plus the propositions known to hold."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from typeflow.algebra import remove, restrict
from typeflow.flow.erase import erase_prop
from typeflow.flow.objects import EMPTY, Path, RObject, accessor_type
from typeflow.flow.props import TOP_PROP, NotTypeProp, Prop, TypeProp
from typeflow.types import ANY, Type, is_bottom


@dataclass(frozen=True)
class LocalBinding:
    """Type of a bound name and the location it aliases, if any."""

    type: Type
    object: RObject = EMPTY


def _frozen(bindings: Mapping[str, LocalBinding]) -> Mapping[str, LocalBinding]:
    return MappingProxyType(dict(bindings))


@dataclass(frozen=True)
class PropEnv:
    """Immutable lexical scope at one program point.

    Attributes:
        bindings: Name to binding, read-only
        props: Propositions asserted so far that are not already reflected
            in a binding's type, oldest first

    """

    bindings: Mapping[str, LocalBinding] = field(
        default_factory=lambda: MappingProxyType({}),
    )
    props: tuple[Prop, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.bindings, MappingProxyType):
            object.__setattr__(self, "bindings", _frozen(self.bindings))

    @classmethod
    def from_types(cls, types: Mapping[str, Type]) -> PropEnv:
        """Build an environment binding each name to a type."""
        return cls({name: LocalBinding(t) for name, t in types.items()})

    def lookup(self, name: str) -> LocalBinding | None:
        return self.bindings.get(name)

    def type_of(self, name: str) -> Type | None:
        """Current type of a name, following an alias to its root."""
        binding = self.bindings.get(name)
        if binding is None:
            return None
        match binding.object:
            case Path() as path if path.root != name and path.root in self.bindings:
                return restrict(binding.type, self.path_type(path))
        return binding.type

    def path_type(self, path: Path) -> Type:
        """Type of the value at a path, refined by recorded propositions.

        Recorded propositions never refine the type to bottom: if they
        would, the unrefined type is returned.
        """
        binding = self.bindings.get(path.root)
        if binding is None:
            return ANY
        t = binding.type
        for accessor in path.accessors:
            t = accessor_type(t, accessor)
        refined = t
        for prop in self.props:
            match prop:
                case TypeProp(type=u, path=p) if p == path:
                    refined = restrict(refined, u)
                case NotTypeProp(type=u, path=p) if p == path:
                    refined = remove(refined, u)
        return t if is_bottom(refined) else refined

    def with_type(self, name: str, t: Type) -> PropEnv:
        """Return an environment where ``name`` has type ``t``."""
        bindings = dict(self.bindings)
        bindings[name] = LocalBinding(t, bindings[name].object)
        return PropEnv(bindings, self.props)

    def with_props(self, props: Iterable[Prop]) -> PropEnv:
        return PropEnv(self.bindings, tuple(props))

    def add_props(self, *props: Prop) -> PropEnv:
        """Record propositions, skipping Top and ones already present."""
        new = [p for p in props if p != TOP_PROP and p not in self.props]
        if not new:
            return self
        return PropEnv(self.bindings, (*self.props, *dict.fromkeys(new)))

    def extend(self, name: str, t: Type, obj: RObject = EMPTY) -> PropEnv:
        """Bind ``name``, forgetting everything known about a shadowed one.

        Propositions about the previous binding are erased and names that
        aliased it keep their current type but lose the alias.
        """
        if name not in self.bindings:
            bindings = dict(self.bindings)
            bindings[name] = LocalBinding(t, obj)
            return PropEnv(bindings, self.props)

        bindings = {}
        for other, binding in self.bindings.items():
            match binding.object:
                case Path(root=root) if root == name:
                    bindings[other] = LocalBinding(self.type_of(other) or binding.type)
                case _:
                    bindings[other] = binding
        bindings[name] = LocalBinding(t, obj)
        props = (erase_prop(frozenset({name}), p) for p in self.props)
        return PropEnv(bindings, tuple(p for p in props if p != TOP_PROP))
