"""Local contexts carried alongside values, and tables for looking them up dynamically."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Hashable, Iterator, Optional, TypeVar

C = TypeVar("C")
T = TypeVar("T")

Getter = Callable[[Any], Any]


def _describe(key: Hashable) -> str:
    name = getattr(key, "__qualname__", None)
    return name if isinstance(name, str) else repr(key)


class ContextNotFoundError(LookupError):
    """Raised when a dynamic context has no entry for the requested key."""

    def __init__(self, key: Hashable) -> None:
        super().__init__(f"type {_describe(key)} not found for dynamic context")
        self.key = key


@dataclass(frozen=True, repr=False)
class WithLocalCx(Generic[T, C]):
    """A value paired with the local context it should be processed with."""

    local_cx: C
    inner: T

    def __repr__(self) -> str:
        return repr(self.inner)


def with_context(local_cx: C, inner: T) -> WithLocalCx[T, C]:
    """Pair ``inner`` with ``local_cx``."""
    return WithLocalCx(local_cx=local_cx, inner=inner)


class ContextTable(Generic[C]):
    """Maps lookup keys to functions that fetch the matching data from a context."""

    def __init__(self, getters: Optional[Dict[Hashable, Getter]] = None) -> None:
        self._getters: Dict[Hashable, Getter] = dict(getters or {})

    def enable(self, key: Hashable, getter: Getter) -> None:
        """Allow ``key`` to be fetched dynamically through ``getter``."""
        self._getters[key] = getter

    def copy(self) -> "ContextTable[C]":
        """Return an independent copy of this table."""
        return ContextTable(self._getters)

    def __getitem__(self, key: Hashable) -> Getter:
        try:
            return self._getters[key]
        except KeyError:
            raise ContextNotFoundError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._getters

    def __len__(self) -> int:
        return len(self._getters)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._getters)

    def __repr__(self) -> str:
        keys = ", ".join(_describe(k) for k in self._getters)
        return f"ContextTable([{keys}])"


class DynamicContext(Generic[C]):
    """A context whose data is fetched by key through a :class:`ContextTable`."""

    def __init__(self, cx: C, table: ContextTable[C]) -> None:
        self.cx = cx
        self.table = table

    def acquire(self, key: Hashable) -> Any:
        """Fetch the data registered under ``key``.

        Raises :class:`ContextNotFoundError` if the key was never enabled.
        """
        return self.table[key](self.cx)

    def __repr__(self) -> str:
        return f"DynamicContext({self.cx!r}, {self.table!r})"