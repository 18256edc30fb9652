"""Sets of component changes: additions, modifications and removals."""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Set, Tuple, TYPE_CHECKING

from .component import ComponentKey, ErasedComponentType

if TYPE_CHECKING:
    from .map import ComponentMap

REMOVED_PREFIX = "!"
"""Prefix marking a removed component type in serialized changes."""

Change = Tuple[ErasedComponentType, Optional[Any]]


class ComponentChanges:
    """Changes of components, keyed by component type.

    Each entry holds either a new value or ``None``, meaning the component
    was removed.
    """

    def __init__(self, entries: Iterable[Change] = ()) -> None:
        self._changed: Dict[ComponentKey, Change] = {}
        for ty, value in entries:
            if value is not None:
                ty.check_value(value)
            self._changed[ty.key] = (ty, value)

    @classmethod
    def builder(cls) -> "ChangesBuilder":
        """Return a builder for changes."""
        return ChangesBuilder()

    def __getitem__(self, ty: Any) -> Optional[Any]:
        """The changed value for ``ty``, ``None`` if it was removed.

        Raises ``KeyError`` if ``ty`` has no change.
        """
        try:
            return self._changed[ty.key][1]
        except KeyError:
            raise KeyError(ty) from None

    def __contains__(self, ty: object) -> bool:
        key = getattr(ty, "key", None)
        return key is not None and key in self._changed

    def __len__(self) -> int:
        return len(self._changed)

    def __iter__(self) -> Iterator[Change]:
        return iter(list(self._changed.values()))

    def is_empty(self) -> bool:
        return not self._changed

    @property
    def ser_count(self) -> int:
        """Number of entries that serialization writes."""
        return sum(1 for ty, _ in self._changed.values() if not ty.is_transient())

    def retain(self, predicate: Callable[[ErasedComponentType], bool]) -> "ComponentChanges":
        """New changes holding copies of the entries whose type satisfies ``predicate``."""
        return ComponentChanges(
            (ty, copy.deepcopy(value)) for ty, value in self._changed.values() if predicate(ty)
        )

    def into_added_removed(self) -> Tuple["ComponentMap", Set[ErasedComponentType]]:
        """Split into a map of added components and the set of removed types."""
        from .map import ComponentMap

        builder = ComponentMap.builder()
        removed: Set[ErasedComponentType] = set()
        for ty, value in self._changed.values():
            if value is None:
                removed.add(ty)
            else:
                builder.insert(ty, copy.deepcopy(value))
        return builder.build(), removed

    def __repr__(self) -> str:
        items = ", ".join(f"{ty!r}: {value!r}" for ty, value in self._changed.values())
        return f"ComponentChanges({{{items}}})"


class ChangesBuilder:
    """Builds :class:`ComponentChanges`."""

    def __init__(self) -> None:
        self._changes: Dict[ComponentKey, Change] = {}

    def insert(self, ty: ErasedComponentType, value: Any) -> None:
        """Record ``value`` for ``ty``; raises ``TypeError`` if the value does not fit."""
        ty.check_value(value)
        self._changes[ty.key] = (ty, value)

    def remove(self, ty: ErasedComponentType) -> None:
        """Record the removal of ``ty``."""
        self._changes[ty.key] = (ty, None)

    def build(self) -> ComponentChanges:
        """Build the changes."""
        return ComponentChanges(self._changes.values())

    def __repr__(self) -> str:
        return f"ChangesBuilder({[ty for ty, _ in self._changes.values()]!r})"