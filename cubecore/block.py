"""Block primitives: settings, raw blocks and block states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional


@dataclass
class Settings:
    """Settings of a block."""

    collidable: bool = False
    resistance: float = 0.0
    hardness: float = 0.0
    random_ticks: bool = False
    is_empty: bool = False
    opaque: bool = False


BlockSettings = Settings


@dataclass
class RawBlock:
    """A block holding its settings and its state manager."""

    settings: Settings
    states: Optional[Any] = None


@dataclass(frozen=True, eq=False)
class BlockState:
    """A registered block together with one of its states.

    Two block states are equal when their blocks are equal and they refer
    to the very same state object.
    """

    block: Hashable
    state: Any

    def luminance(self) -> int:
        """Luminance of this state, as reported by the state's ``data``.

        The ``data`` of the state must provide ``luminance(state)``.
        """
        return self.state.data.luminance(self.state)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockState):
            return NotImplemented
        return self.block == other.block and self.state is other.state

    def __hash__(self) -> int:
        return hash((self.block, id(self.state)))