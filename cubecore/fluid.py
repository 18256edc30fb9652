"""Fluid primitives: settings, raw fluids and fluid states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Optional


@dataclass
class Settings:
    """Settings of a fluid."""

    random_ticks: bool = False
    is_empty: bool = False


@dataclass
class RawFluid:
    """A fluid holding its settings and its state manager."""

    settings: Settings
    states: Optional[Any] = None


@dataclass(frozen=True, eq=False)
class FluidState:
    """A registered fluid together with one of its shared states.

    Two fluid states are equal when their fluids are equal and they share
    the very same state object.
    """

    fluid: Hashable
    state: Any

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FluidState):
            return NotImplemented
        return self.fluid == other.fluid and self.state is other.state

    def __hash__(self) -> int:
        return hash((self.fluid, id(self.state)))