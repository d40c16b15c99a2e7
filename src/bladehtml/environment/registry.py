"""Template, component and directive registries for the bladehtml environment.

Provides a dict-like interface over name-keyed stores held on the
Environment.
"""

from __future__ import annotations

from collections.abc import Callable, ItemsView, Iterator, KeysView, ValuesView
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from bladehtml.environment.core import Environment

V = TypeVar("V")

# handler(args, context) -> str
DirectiveHandler = Callable[[str, Any], Any]


class Registry(Generic[V]):
    """Dict-like view of one Environment store.

    Supports:
        - env.templates['name'] = source
        - env.templates.register('name', source)
        - env.templates.update({'name': source})
        - source = env.templates['name']
        - 'name' in env.templates
        - del env.templates['name']

    All mutations use copy-on-write: readers always see a complete dict and
    never observe a half-applied update. Re-registering a name replaces the
    previous entry.
    """

    __slots__ = ("_attr", "_env")

    def __init__(self, env: Environment, attr: str):
        self._env = env
        self._attr = attr

    def _get_dict(self) -> dict[str, V]:
        return getattr(self._env, self._attr)

    def _set_dict(self, d: dict[str, V]) -> None:
        setattr(self._env, self._attr, d)

    def __getitem__(self, name: str) -> V:
        return self._get_dict()[name]

    def __setitem__(self, name: str, value: V) -> None:
        new = self._get_dict().copy()
        new[name] = value
        self._set_dict(new)

    def __delitem__(self, name: str) -> None:
        new = self._get_dict().copy()
        del new[name]
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict()

    def __iter__(self) -> Iterator[str]:
        return iter(self._get_dict())

    def __len__(self) -> int:
        return len(self._get_dict())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {sorted(self._get_dict())}>"

    def register(self, name: str, value: V) -> None:
        self[name] = value

    def remove(self, name: str) -> bool:
        """Remove ``name``; returns False when it was not registered."""
        if name not in self:
            return False
        del self[name]
        return True

    def get(self, name: str, default: V | None = None) -> V | None:
        return self._get_dict().get(name, default)

    def update(self, mapping: dict[str, V]) -> None:
        """Batch update."""
        new = self._get_dict().copy()
        new.update(mapping)
        self._set_dict(new)

    def copy(self) -> dict[str, V]:
        """Return a copy of the underlying dict."""
        return self._get_dict().copy()

    def keys(self) -> KeysView[str]:
        return self._get_dict().keys()

    def values(self) -> ValuesView[V]:
        return self._get_dict().values()

    def items(self) -> ItemsView[str, V]:
        return self._get_dict().items()


class TemplateRegistry(Registry[str]):
    """Template name → source text."""

    __slots__ = ()

    def __setitem__(self, name: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Template source for '{name}' must be str, got {type(value).__name__}")
        super().__setitem__(name, value)


class ComponentRegistry(Registry[Callable[..., Any]]):
    """Component name → factory(props) returning a component instance."""

    __slots__ = ()

    def __setitem__(self, name: str, value: Callable[..., Any]) -> None:
        if not callable(value):
            raise TypeError(f"Component '{name}' must be a class or factory, got {type(value).__name__}")
        super().__setitem__(name, value)


class DirectiveRegistry(Registry[DirectiveHandler]):
    """Directive name (without ``@``) → handler(args, context) → str."""

    __slots__ = ()

    def __setitem__(self, name: str, value: DirectiveHandler) -> None:
        if not callable(value):
            raise TypeError(f"Directive '@{name}' handler must be callable")
        super().__setitem__(name.lstrip("@"), value)
