"""Angle geometry for the dial: pointer angle, normalization and the value scale."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

FULL_TURN: float = 360.0

Point = Tuple[float, float]


def point_angle(dx: float, dy: float) -> float:
    """
    Angle of the vector (dx, dy) measured from the dial center.

    Screen coordinates are y-down. Straight up is 0 degrees and the angle
    grows clockwise, so right is 90, down is 180 and left is 270.

    :param dx: Horizontal offset from the center
    :param dy: Vertical offset from the center (positive is down)
    :return: Angle in [0, 360)
    """
    if dx == 0 and dy == 0:
        return 0.0
    return normalize_angle(math.degrees(math.atan2(dx, -dy)))


def normalize_angle(angle: float) -> float:
    """
    Wrap any angle into [0, 360).

    Works for deltas of several full turns in either direction.
    """
    wrapped = math.fmod(angle, FULL_TURN)
    if wrapped < 0:
        wrapped += FULL_TURN
    # -1e-20 + 360 rounds to 360.0
    if wrapped >= FULL_TURN:
        wrapped = 0.0
    return wrapped


def distance(dx: float, dy: float) -> float:
    """Length of the offset (dx, dy)."""
    return math.hypot(dx, dy)


def offset_from(point: Point, center: Point) -> Point:
    """Vector from center to point."""
    return point[0] - center[0], point[1] - center[1]


@dataclass(frozen=True)
class AngleScale:
    """
    Affine map between the domain [domain_min, domain_max] and an angle range.

    The map does not clamp: values outside the domain extrapolate linearly.
    Use clamp_value() where the domain bound has to be enforced.
    """
    domain_min: float
    domain_max: float
    angle_min: float = 0.0
    angle_max: float = FULL_TURN

    def __post_init__(self) -> None:
        """Validate the domain and the angle range."""
        for name in ("domain_min", "domain_max", "angle_min", "angle_max"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)}.")
        if self.domain_min >= self.domain_max:
            raise ValueError(
                f"Scale domain must satisfy min < max, got [{self.domain_min}, {self.domain_max}].")
        if self.angle_min >= self.angle_max:
            raise ValueError(
                f"Scale angle range must satisfy min < max, got [{self.angle_min}, {self.angle_max}].")

    def __str__(self) -> str:
        return (f"[{self.domain_min:g}, {self.domain_max:g}] -> "
                f"[{self.angle_min:g}, {self.angle_max:g}] deg")

    @property
    def degrees_per_unit(self) -> float:
        """Slope of the map."""
        return (self.angle_max - self.angle_min) / (self.domain_max - self.domain_min)

    def to_angle(self, value: float) -> float:
        """Domain value -> angle in degrees."""
        return self.angle_min + (value - self.domain_min) * self.degrees_per_unit

    def to_value(self, angle: float) -> float:
        """Angle in degrees -> domain value. Exact inverse of to_angle()."""
        return self.domain_min + (angle - self.angle_min) / self.degrees_per_unit

    def contains(self, value: float) -> bool:
        return self.domain_min <= value <= self.domain_max

    def clamp_value(self, value: float) -> float:
        """Clamp a domain value to [domain_min, domain_max]."""
        return max(self.domain_min, min(self.domain_max, value))

    def with_domain(self, domain_min: float, domain_max: float) -> AngleScale:
        """
        Return a new scale over another domain, keeping the angle range.

        :param domain_min: New lower bound
        :param domain_max: New upper bound
        :return: New AngleScale instance
        """
        return AngleScale(domain_min, domain_max, self.angle_min, self.angle_max)
