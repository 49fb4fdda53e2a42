"""Filter and tag registries for the Liquor environment.

Each registry is a dict-like view over two tiers: the environment's
override table (host registrations) and an immutable built-in table.
Overrides are checked first, so a host filter named ``upcase`` replaces
the built-in, and the last registration of a name wins.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from liquor.environment.core import Environment

_NO_BUILTINS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class CustomTag:
    """A host-registered tag.

    Attributes:
        name: Tag keyword, e.g. ``"uppercase"`` for ``{% uppercase %}``
        func: ``func(args, body, context, render) -> str``
        block: True when the tag has a body closed by ``{% end<name> %}``
    """

    name: str
    func: Callable[..., Any]
    block: bool = False


class FilterRegistry:
    """Dict-like interface over an environment's override table.

    Supports:
        - env.filters['name'] = func
        - env.filters.update({'name': func})
        - func = env.filters['name']
        - 'name' in env.filters

    Reads fall through to ``builtins`` when the name is not overridden.
    All mutations use copy-on-write, so a render running on another
    thread keeps seeing the table it started with.
    """

    __slots__ = ("_attr", "_builtins", "_env")

    def __init__(
        self,
        env: Environment,
        attr: str,
        builtins: Mapping[str, Any] = _NO_BUILTINS,
    ):
        self._env = env
        self._attr = attr
        self._builtins = builtins

    def _get_dict(self) -> dict[str, Any]:
        return getattr(self._env, self._attr)

    def _set_dict(self, d: dict[str, Any]) -> None:
        setattr(self._env, self._attr, d)

    def __getitem__(self, name: str) -> Any:
        overrides = self._get_dict()
        if name in overrides:
            return overrides[name]
        return self._builtins[name]

    def __setitem__(self, name: str, value: Any) -> None:
        new = self._get_dict().copy()
        new[name] = value
        self._set_dict(new)

    def __delitem__(self, name: str) -> None:
        """Remove an override (built-ins cannot be removed)."""
        new = self._get_dict().copy()
        del new[name]
        self._set_dict(new)

    def __contains__(self, name: object) -> bool:
        return name in self._get_dict() or name in self._builtins

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def get(self, name: str, default: Any = None) -> Any:
        overrides = self._get_dict()
        if name in overrides:
            return overrides[name]
        return self._builtins.get(name, default)

    def update(self, mapping: Mapping[str, Any]) -> None:
        """Batch update overrides."""
        new = self._get_dict().copy()
        new.update(mapping)
        self._set_dict(new)

    def copy(self) -> dict[str, Any]:
        """Return the merged table as a plain dict."""
        merged = dict(self._builtins)
        merged.update(self._get_dict())
        return merged

    def keys(self) -> list[str]:
        return sorted(set(self._builtins) | set(self._get_dict()))

    def values(self) -> list[Any]:
        return [self[name] for name in self.keys()]

    def items(self) -> list[tuple[str, Any]]:
        return [(name, self[name]) for name in self.keys()]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.keys()}>"


class TagRegistry(FilterRegistry):
    """Registry of host tags; plain callables are stored as CustomTag.

    ``env.tags['shout'] = func`` registers a non-block tag. Use
    ``Environment.add_tag(name, func, block=True)`` for block tags.
    """

    __slots__ = ()

    def __setitem__(self, name: str, value: Any) -> None:
        super().__setitem__(name, _as_tag(name, value))

    def update(self, mapping: Mapping[str, Any]) -> None:
        super().update({name: _as_tag(name, value) for name, value in mapping.items()})


def _as_tag(name: str, value: Any) -> CustomTag:
    if isinstance(value, CustomTag):
        return value
    if not callable(value):
        raise TypeError(f"Tag '{name}' must be callable, got {type(value).__name__}")
    return CustomTag(name, value)
