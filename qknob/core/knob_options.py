from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional


def validate_unlock_distance(unlock_distance: float) -> float:
    """
    Check a precision lock threshold. 0 unlocks on the first move.

    :raises ValueError: if the distance is negative or not finite
    """
    d = float(unlock_distance)
    if not math.isfinite(d) or d < 0:
        raise ValueError(f"unlock_distance must be a finite value >= 0, got {unlock_distance}.")
    return d


def format_value(value: float) -> str:
    """Default display text: value rounded to an integer."""
    return f"{value:.0f}"


@dataclass
class KnobOptions:
    """
    Construction-time configuration of a knob.

    :ivar value: Controlled value. Leave None for an uncontrolled knob.
    :ivar default_value: Seed of the local value in uncontrolled mode
    :ivar min: Lower domain bound
    :ivar max: Upper domain bound
    :ivar step: Increment of the companion numeric input (not used by dragging)
    :ivar format: Value -> display text
    :ivar on_change: Called with every new value, in both modes
    :ivar precise_mode: Hold the value until the pointer travels unlock_distance
    :ivar unlock_distance: Precision lock threshold in pixels
    """
    value: Optional[float] = None
    default_value: float = 0.0
    min: float = 0.0
    max: float = 100.0
    step: float = 1.0
    format: Callable[[float], str] = format_value
    on_change: Optional[Callable[[float], None]] = None
    precise_mode: bool = True
    unlock_distance: float = 100.0

    def __post_init__(self) -> None:
        self.unlock_distance = validate_unlock_distance(self.unlock_distance)
        if self.step <= 0:
            raise ValueError(f"step must be > 0, got {self.step}.")
