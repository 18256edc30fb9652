"""Player movement input state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

_FORWARD_EPSILON = 1.0e-5


class CursorMovement(Enum):
    """The kind of a cursor movement."""

    ABSOLUTE = auto()
    RELATIVE = auto()
    END = auto()


def movement_modifier(positive: bool, negative: bool) -> float:
    """Return 1.0, -1.0 or 0.0 depending on which of two opposite keys is held."""
    if positive == negative:
        return 0.0
    return 1.0 if positive else -1.0


@dataclass
class Input:
    """Movement input state of a player.

    ``slow_down`` passed to :meth:`tick` is a factor to scale movement by,
    or ``None`` for no slow down.
    """

    movement_sideways: float = 0.0
    movement_forward: float = 0.0
    pressing_forward: bool = False
    pressing_backward: bool = False
    pressing_left: bool = False
    pressing_right: bool = False
    jumping: bool = False
    sneaking: bool = False

    def tick(self, slow_down: Optional[float] = None) -> None:
        """Advance the input by one tick; the plain input has nothing to update."""

    def movement_input(self) -> Tuple[float, float]:
        """Return the movement as ``(sideways, forward)``."""
        return (self.movement_sideways, self.movement_forward)

    def has_movement_forward(self) -> bool:
        """Whether there is any noticeable forward movement."""
        return self.movement_forward > _FORWARD_EPSILON


class KeyboardInput(Input):
    """Input driven by the keyboard."""

    def tick(self, slow_down: Optional[float] = None) -> None:
        self.pressing_forward = False
        self.pressing_backward = False
        self.pressing_left = False
        self.pressing_right = False

        self.movement_forward = movement_modifier(self.pressing_forward, self.pressing_backward)
        self.movement_sideways = movement_modifier(self.pressing_left, self.pressing_right)

        self.jumping = False
        self.sneaking = False

        if slow_down is not None:
            self.movement_forward *= slow_down
            self.movement_sideways *= slow_down