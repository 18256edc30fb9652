"""Slider callbacks for integer-valued game options."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional


def _map(value: float, from_min: float, from_max: float, to_min: float, to_max: float) -> float:
    return to_min + (value - from_min) / (from_max - from_min) * (to_max - to_min)


class IntSliderCallbacks(ABC):
    """Callbacks of a slider over an inclusive integer range."""

    @abstractmethod
    def min_inclusive(self) -> int:
        """Lowest value of the range."""

    @abstractmethod
    def max_inclusive(self) -> int:
        """Highest value of the range."""

    @abstractmethod
    def validate(self, value: Optional[int]) -> Optional[int]:
        """Return a valid value for ``value``, or ``None``."""

    def to_slider_progress(self, value: int) -> float:
        """Map ``value`` from the range onto ``[0, 1]``."""
        return _map(float(value), float(self.min_inclusive()), float(self.max_inclusive()), 0.0, 1.0)

    def to_value(self, slider_progress: float) -> int:
        """Map slider progress in ``[0, 1]`` back onto the range, rounding down."""
        return math.floor(
            _map(slider_progress, 0.0, 1.0, float(self.min_inclusive()), float(self.max_inclusive()))
        )

    def with_modifier(
        self,
        progress_to_value: Callable[[Optional[int]], Any],
        value_to_progress: Callable[[Any], Optional[int]],
    ) -> "ModifiedSliderCallbacks":
        """Wrap these callbacks so they work on values converted from and to integers."""
        return ModifiedSliderCallbacks(
            progress_to_value=progress_to_value,
            value_to_progress=value_to_progress,
            int_validate=self.validate,
            int_to_slider_progress=self.to_slider_progress,
            int_to_value=self.to_value,
        )


@dataclass
class ValidatingIntSliderCallbacks(IntSliderCallbacks):
    """Integer slider that rejects values outside a fixed range."""

    min: int
    max: int

    def min_inclusive(self) -> int:
        return self.min

    def max_inclusive(self) -> int:
        return self.max

    def validate(self, value: Optional[int]) -> Optional[int]:
        if value is not None and self.min <= value <= self.max:
            return value
        return None


@dataclass
class SuppliableIntCallbacks(IntSliderCallbacks):
    """Integer slider whose bounds are supplied on demand and which clamps values."""

    min_boundary: Callable[[], int]
    max_boundary: Callable[[], int]

    def min_inclusive(self) -> int:
        return self.min_boundary()

    def max_inclusive(self) -> int:
        return self.max_boundary()

    def validate(self, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        return int(max(self.min_inclusive(), min(value, self.max_inclusive())))

    def is_cycling(self) -> bool:
        return True


@dataclass
class ModifiedSliderCallbacks:
    """Slider callbacks over values converted to and from an integer slider."""

    progress_to_value: Callable[[Optional[int]], Any]
    value_to_progress: Callable[[Any], Optional[int]]
    int_validate: Callable[[Optional[int]], Optional[int]]
    int_to_slider_progress: Callable[[int], float]
    int_to_value: Callable[[float], int]

    def to_slider_progress(self, value: Any) -> float:
        """Slider progress of ``value``; raises ``ValueError`` if it has no integer form."""
        progress = self.value_to_progress(value)
        if progress is None:
            raise ValueError(f"value {value!r} cannot be converted to slider progress")
        return self.int_to_slider_progress(progress)

    def to_value(self, slider_progress: float) -> Any:
        """Value at ``slider_progress``; raises ``ValueError`` if none can be produced."""
        value = self.progress_to_value(self.int_to_value(slider_progress))
        if value is None:
            raise ValueError(f"slider progress {slider_progress!r} has no value")
        return value

    def validate(self, value: Any) -> Any:
        return self.progress_to_value(self.int_validate(self.value_to_progress(value)))