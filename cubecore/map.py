"""Maps of components keyed by component type, either simple or patched over a base map."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from .changes import ComponentChanges
from .component import ComponentKey, ErasedComponentType

Entry = Tuple[ErasedComponentType, Any]


def _key(ty: Any) -> ComponentKey:
    return ty.key


class ComponentMap:
    """A map that stores components.

    A map is one of three kinds: empty, simple (a plain set of components)
    or patched (a shared base map plus changes on top of it). Lookups take
    either a typed :class:`~cubecore.component.ComponentType` or its
    registration, :class:`~cubecore.component.ErasedComponentType`.
    """

    def __init__(self) -> None:
        self._base: Optional[ComponentMap] = None
        self._changes: Optional[Dict[ComponentKey, Tuple[ErasedComponentType, Optional[Any]]]] = None
        self._simple: Optional[Dict[ComponentKey, Entry]] = None

    @classmethod
    def patched(cls, base: "ComponentMap", changes: Optional[ComponentChanges] = None) -> "ComponentMap":
        """A patched map over ``base``, starting with copies of ``changes`` if given."""
        result = cls()
        result._base = base
        result._changes = {}
        if changes is not None:
            for ty, value in changes:
                result._changes[ty.key] = (ty, copy.deepcopy(value))
        return result

    @classmethod
    def builder(cls) -> "ComponentMapBuilder":
        """Return a builder for a simple component map."""
        return ComponentMapBuilder()

    @property
    def is_patched(self) -> bool:
        return self._changes is not None

    def get(self, ty: Any) -> Optional[Any]:
        """The component value for ``ty``, or ``None``."""
        entry = self.get_entry(ty)
        return None if entry is None else entry[1]

    def get_entry(self, ty: Any) -> Optional[Entry]:
        """The registration and value of the component for ``ty``, or ``None``."""
        key = _key(ty)
        if self._changes is not None:
            if key in self._changes:
                found_ty, value = self._changes[key]
                return None if value is None else (found_ty, value)
            assert self._base is not None
            return self._base.get_entry(ty)
        if self._simple is not None:
            return self._simple.get(key)
        return None

    def __contains__(self, ty: object) -> bool:
        if getattr(ty, "key", None) is None:
            return False
        return self.get_entry(ty) is not None

    def get_mut(self, ty: Any) -> Optional[Any]:
        """The component value for ``ty``, ready to be modified in place.

        In a patched map a value coming from the base map is first copied
        into the changes, so the base map is never modified.
        """
        key = _key(ty)
        if self._changes is not None:
            if key not in self._changes:
                assert self._base is not None
                entry = self._base.get_entry(ty)
                if entry is None:
                    return None
                base_ty, value = entry
                self._changes[key] = (base_ty, copy.deepcopy(value))
            return self._changes[key][1]
        return self.get(ty)

    def insert(self, ty: ErasedComponentType, value: Any) -> Optional[Any]:
        """Insert ``value`` for ``ty`` and return the previous value, or ``None``.

        Raises ``TypeError`` if the value does not fit the component type.
        Inserting into an empty map turns it into a simple map.
        """
        ty.check_value(value)
        key = ty.key
        if self._changes is not None:
            assert self._base is not None
            old = self._base.get(ty)
            if old is not None and old == value:
                previous = self._changes.pop(key, None)
                return None if previous is None else previous[1]
            previous = self._changes.get(key)
            self._changes[key] = (ty, value)
            if previous is not None:
                return previous[1]
            return old
        if self._simple is None:
            self._simple = {}
        previous = self._simple.get(key)
        self._simple[key] = (ty, value)
        return None if previous is None else previous[1]

    def remove(self, ty: Any) -> Optional[Any]:
        """Remove the component for ``ty`` and return its value, or ``None``."""
        key = _key(ty)
        if self._changes is not None:
            assert self._base is not None
            old = self._base.get_entry(ty)
            now = self._changes.get(key)
            if old is not None and now is None:
                base_ty, value = old
                self._changes[key] = (base_ty, None)
                return value
            if old is not None and now is not None:
                now_ty, value = now
                self._changes[key] = (now_ty, None)
                return value
            if now is not None:
                del self._changes[key]
                return now[1]
            return None
        if self._simple is not None:
            entry = self._simple.pop(key, None)
            return None if entry is None else entry[1]
        return None

    def __len__(self) -> int:
        if self._simple is not None:
            return len(self._simple)
        return sum(1 for _ in self)

    def __iter__(self) -> Iterator[Entry]:
        if self._changes is not None:
            assert self._base is not None
            changes = self._changes
            for ty, value in list(changes.values()):
                if value is not None:
                    yield ty, value
            for ty, value in self._base:
                if ty.key not in changes:
                    yield ty, value
        elif self._simple is not None:
            yield from list(self._simple.values())

    def is_empty(self) -> bool:
        return len(self) == 0

    def changes(self) -> Optional[ComponentChanges]:
        """The changes of a patched map over its base, or ``None`` for other maps."""
        if self._changes is None:
            return None
        return ComponentChanges(self._changes.values())

    def copy(self) -> "ComponentMap":
        """A copy whose own values are independent; a patched copy shares the base map."""
        result = ComponentMap()
        if self._changes is not None:
            result._base = self._base
            result._changes = {
                key: (ty, copy.deepcopy(value)) for key, (ty, value) in self._changes.items()
            }
        elif self._simple is not None:
            result._simple = {
                key: (ty, copy.deepcopy(value)) for key, (ty, value) in self._simple.items()
            }
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComponentMap):
            return NotImplemented
        if len(self) != len(other):
            return False
        for ty, value in self:
            entry = other.get_entry(ty)
            if entry is None or entry[1] != value:
                return False
        return True

    def __hash__(self) -> int:
        return hash(frozenset((ty.key, hash(value)) for ty, value in self))

    def __repr__(self) -> str:
        if self._changes is not None:
            changes = ", ".join(f"{ty!r}: {value!r}" for ty, value in self._changes.values())
            return f"PatchedComponentMap(base={self._base!r}, changes={{{changes}}})"
        if self._simple is not None:
            items = ", ".join(f"{ty!r}: {value!r}" for ty, value in self._simple.values())
            return f"SimpleComponentMap({{{items}}})"
        return "EmptyComponentMap"


class ComponentMapBuilder:
    """Builds a simple :class:`ComponentMap`."""

    def __init__(self) -> None:
        self._map: Dict[ComponentKey, Entry] = {}

    def insert(self, ty: ErasedComponentType, value: Any) -> None:
        """Insert ``value`` for ``ty``; raises ``TypeError`` if the value does not fit."""
        ty.check_value(value)
        self._map[ty.key] = (ty, value)

    def extend(self, items: Iterable[Entry]) -> None:
        """Insert copies of the given components, skipping values that do not fit their type."""
        for ty, value in items:
            if isinstance(value, ty.value_type):
                self._map[ty.key] = (ty, copy.deepcopy(value))

    def build(self) -> ComponentMap:
        """Build the map; an empty builder gives an empty map."""
        result = ComponentMap()
        if self._map:
            result._simple = dict(self._map)
        return result

    def __repr__(self) -> str:
        return f"ComponentMapBuilder({[ty for ty, _ in self._map.values()]!r})"