"""Per-gesture drag state machine turning pointer samples into dial angles."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Optional, Tuple

from qknob.core.angle_math import (
    AngleScale,
    Point,
    distance,
    normalize_angle,
    offset_from,
    point_angle,
)

logger = logging.getLogger(__name__)

# (x, y, width, height) of the container receiving the pointer events.
Bounds = Tuple[float, float, float, float]


class DragState(Enum):
    """Lifecycle of one gesture."""
    IDLE = auto()
    STARTED = auto()
    LOCKED = auto()  # precise mode, pointer has not yet travelled unlock_distance
    ACTIVE = auto()


@dataclass(frozen=True)
class GestureOrigin:
    """Captured once when a gesture starts."""
    center: Point
    start_value: float
    initial_angle: float


@dataclass(frozen=True)
class GestureReference:
    """Zero point the angular delta is measured from."""
    offset: Point
    angle: float

    @classmethod
    def at(cls, offset: Point) -> GestureReference:
        return cls(offset=offset, angle=point_angle(*offset))


@dataclass(frozen=True)
class DragSnapshot:
    """
    Immutable view of the gesture for painting.

    :ivar dragging: True between gesture start and end
    :ivar drag_distance: Distance of the pointer from the dial center
    :ivar pointer_pos: Raw device coordinates of the pointer
    :ivar pointer_offset: Pointer position relative to the dial center
    :ivar value_angle: Displayed angle while dragging, in [0, 360)
    :ivar state: Current gesture state
    """
    dragging: bool = False
    drag_distance: float = 0.0
    pointer_pos: Point = (0.0, 0.0)
    pointer_offset: Point = (0.0, 0.0)
    value_angle: float = 0.0
    state: DragState = DragState.IDLE

    @staticmethod
    def idle() -> DragSnapshot:
        return DragSnapshot()


def bounds_center(bounds: Bounds) -> Point:
    """Center point of an (x, y, width, height) rectangle."""
    x, y, width, height = bounds
    return x + width / 2.0, y + height / 2.0


class DragSession:
    """
    Tracks a single pointer gesture on the dial.

    States: IDLE -> STARTED -> LOCKED/ACTIVE -> IDLE.

    - In precise mode the gesture starts LOCKED. Nothing is emitted until the
      pointer is at least unlock_distance away from the center; at that moment
      the reference point is reset to the current pointer so the first unlocked
      sample rotates by zero.
    - Without precise mode the gesture goes straight to ACTIVE.
    - ACTIVE moves emit normalize(initial_angle + angle(pointer) - reference angle).

    Angles are always recomputed from the absolute pointer position, so
    dropped samples need no recovery.
    """

    def __init__(self, precise_mode: bool = True, unlock_distance: float = 100.0):
        self.precise_mode = precise_mode
        self.unlock_distance = unlock_distance

        self._state: DragState = DragState.IDLE
        self._origin: GestureOrigin | None = None
        self._reference: GestureReference | None = None
        self._snapshot: DragSnapshot = DragSnapshot.idle()

        self._on_state_changed_callbacks: list[Callable[[DragState, DragState], None]] = []

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def in_progress(self) -> bool:
        """True while a gesture is in flight."""
        return self._state is not DragState.IDLE

    @property
    def locked(self) -> bool:
        return self._state is DragState.LOCKED

    @property
    def snapshot(self) -> DragSnapshot:
        return self._snapshot

    @property
    def origin(self) -> GestureOrigin | None:
        return self._origin

    @property
    def reference(self) -> GestureReference | None:
        return self._reference

    def add_state_changed_callback(
            self,
            callback: Callable[[DragState, DragState], None]
    ) -> None:
        """
        Add a callback for gesture state transitions.

        Callback signature: callback(old_state: DragState, new_state: DragState) -> None
        """
        self._on_state_changed_callbacks.append(callback)

    def start(self,
              pos: Point,
              bounds: Bounds,
              start_value: float,
              scale: AngleScale,
              pointer_pos: Optional[Point] = None) -> DragSnapshot:
        """
        Begin a gesture.

        :param pos: Pointer position in the container's coordinates
        :param bounds: Container rectangle (x, y, width, height), same coordinates as pos
        :param start_value: Domain value when the gesture starts
        :param scale: Current value scale
        :param pointer_pos: Raw device coordinates, defaults to pos
        :return: Snapshot after the start
        """
        if self.in_progress:
            logger.debug("Gesture restarted while %s; previous gesture dropped", self._state.name)

        center = bounds_center(bounds)
        start_offset = offset_from(pos, center)
        initial_angle = scale.to_angle(start_value)
        self._origin = GestureOrigin(center=center, start_value=start_value,
                                     initial_angle=initial_angle)
        self._reference = GestureReference.at(start_offset)

        self._set_state(DragState.STARTED)
        self._snapshot = DragSnapshot(
            dragging=True,
            drag_distance=0.0,
            pointer_pos=pointer_pos if pointer_pos is not None else pos,
            pointer_offset=start_offset,
            value_angle=normalize_angle(initial_angle),
            state=DragState.STARTED,
        )
        self._set_state(DragState.LOCKED if self.precise_mode else DragState.ACTIVE)
        self._snapshot = replace(self._snapshot, state=self._state)

        logger.debug("Gesture started at offset %s, center %s, initial angle %.2f",
                     start_offset, center, initial_angle)
        return self._snapshot

    def move(self, pos: Point, pointer_pos: Optional[Point] = None) -> float | None:
        """
        Feed one pointer sample.

        :param pos: Pointer position in the container's coordinates
        :param pointer_pos: Raw device coordinates, defaults to pos
        :return: Emitted angle in [0, 360), or None when nothing is emitted
        """
        if not self.in_progress:
            logger.debug("Pointer move without a gesture ignored")
            return None

        offset = offset_from(pos, self._origin.center)
        dist = distance(*offset)
        raw_pos = pointer_pos if pointer_pos is not None else pos

        if self._state is DragState.LOCKED:
            if dist < self.unlock_distance:
                self._snapshot = replace(
                    self._snapshot,
                    drag_distance=dist,
                    pointer_pos=raw_pos,
                    pointer_offset=offset,
                    value_angle=normalize_angle(self._origin.initial_angle),
                )
                return None
            # Drop the pre-unlock wobble: the reference restarts here.
            self._reference = GestureReference.at(offset)
            logger.debug("Precision lock released at distance %.1f (>= %.1f)",
                         dist, self.unlock_distance)
            self._set_state(DragState.ACTIVE)

        delta = point_angle(*offset) - self._reference.angle
        final_angle = normalize_angle(self._origin.initial_angle + delta)
        self._snapshot = DragSnapshot(
            dragging=True,
            drag_distance=dist,
            pointer_pos=raw_pos,
            pointer_offset=offset,
            value_angle=final_angle,
            state=self._state,
        )
        return final_angle

    def end(self) -> bool:
        """
        Finish the gesture.

        :return: True if a gesture was ended, False if none was in progress
        """
        if not self.in_progress:
            logger.debug("Pointer end without a gesture ignored")
            return False

        self._set_state(DragState.IDLE)
        self._snapshot = replace(self._snapshot, dragging=False, state=DragState.IDLE)
        self._origin = None
        self._reference = None
        logger.debug("Gesture ended")
        return True

    def _set_state(self, state: DragState) -> None:
        if state is self._state:
            return
        old_state = self._state
        self._state = state
        self._notify_state_changed(old_state, state)

    def _notify_state_changed(self, old_state: DragState, new_state: DragState) -> None:
        """Notify callbacks of state transitions."""
        for callback in self._on_state_changed_callbacks:
            try:
                callback(old_state, new_state)
            except Exception as e:
                logger.exception(f"Error in state changed callback: {e}")
