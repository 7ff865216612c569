"""Interaction controller - turns pointer gestures and typed input into knob values."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from qknob.core.angle_math import AngleScale, Point, normalize_angle
from qknob.core.drag_session import Bounds, DragSession, DragSnapshot, DragState
from qknob.core.knob_options import KnobOptions, validate_unlock_distance
from qknob.core.value_store import ValueStore

logger = logging.getLogger(__name__)


class InteractionController:
    """
    Central coordinator of one knob instance.

    This class bridges the widget's pointer events and the value model, managing:
    - The drag session (gesture lifecycle, precision lock)
    - The value scale (rebuilt when the bounds change)
    - The value store (controlled / uncontrolled)
    - Callbacks for render snapshots, state changes and focus requests

    Usage:
        controller = InteractionController(KnobOptions(min=0, max=10))
        controller.add_snapshot_changed_callback(view.update)
        controller.pointer_start((10, 5), (0, 0, 50, 50))
        controller.pointer_move((40, 25))
        controller.pointer_end()
    """

    def __init__(self, options: KnobOptions | None = None):
        """Initialize the interaction controller."""
        # a private copy; the setters below change it
        self._options = replace(options) if options is not None else KnobOptions()
        self._scale = AngleScale(self._options.min, self._options.max)
        self._store = ValueStore(
            value=self._options.value,
            default_value=self._options.default_value,
            on_change=self._options.on_change,
        )
        self._session = DragSession(
            precise_mode=self._options.precise_mode,
            unlock_distance=self._options.unlock_distance,
        )
        self._warned_out_of_range: float | None = None

        # Callbacks for interaction events
        self._on_snapshot_changed_callbacks: list[Callable[[DragSnapshot], None]] = []
        self._on_focus_requested_callbacks: list[Callable[[], None]] = []

    @property
    def options(self) -> KnobOptions:
        return self._options

    @property
    def scale(self) -> AngleScale:
        return self._scale

    @property
    def store(self) -> ValueStore:
        return self._store

    @property
    def session(self) -> DragSession:
        return self._session

    @property
    def snapshot(self) -> DragSnapshot:
        """Render-facing gesture snapshot."""
        return self._session.snapshot

    @property
    def state(self) -> DragState:
        return self._session.state

    @property
    def dragging(self) -> bool:
        return self._session.in_progress

    @property
    def value(self) -> float:
        """Current domain value."""
        return self._store.read()

    @property
    def angle(self) -> float:
        """
        Angle the dial graphic is rotated to.

        The live gesture angle while dragging, the scaled value otherwise.
        """
        if self.dragging:
            return self.snapshot.value_angle
        return self._angle_for_value(self.value)

    @property
    def display_text(self) -> str:
        return self._options.format(self.value)

    @property
    def show_visual_helpers(self) -> bool:
        """Overlay guides are drawn only while dragging in precise mode."""
        return self.dragging and self._session.precise_mode

    @property
    def precise_mode(self) -> bool:
        return self._session.precise_mode

    @property
    def unlock_distance(self) -> float:
        return self._session.unlock_distance

    def set_precise_mode(self, enabled: bool) -> None:
        """Takes effect from the next gesture."""
        self._options.precise_mode = enabled
        self._session.precise_mode = enabled

    def set_unlock_distance(self, unlock_distance: float) -> None:
        d = validate_unlock_distance(unlock_distance)
        self._options.unlock_distance = d
        self._session.unlock_distance = d

    def set_bounds(self, domain_min: float, domain_max: float) -> None:
        """
        Change the domain and rebuild the scale.

        A gesture in flight keeps its initial angle; later emissions use the new scale.
        :raises ValueError: if domain_min >= domain_max
        """
        if (domain_min, domain_max) == (self._scale.domain_min, self._scale.domain_max):
            return
        self._scale = self._scale.with_domain(domain_min, domain_max)
        self._options.min = domain_min
        self._options.max = domain_max
        logger.debug("Scale rebuilt: %s", self._scale)
        self._publish_snapshot()

    def pointer_start(self,
                      pos: Point,
                      bounds: Bounds,
                      global_pos: Optional[Point] = None) -> None:
        """
        Handle the start of a gesture.

        :param pos: Pointer position in the container's coordinates
        :param bounds: Container rectangle (x, y, width, height)
        :param global_pos: Raw device coordinates of the pointer
        """
        start_value = self._domain_value_for_angle(self.value)
        self._session.start(pos, bounds, start_value, self._scale, pointer_pos=global_pos)
        self._publish_snapshot()

    def pointer_move(self, pos: Point, global_pos: Optional[Point] = None) -> float | None:
        """
        Handle one move sample.

        :return: The emitted domain value, or None when locked or idle
        """
        if not self._session.in_progress:
            logger.debug("pointer_move before pointer_start ignored")
            return None

        final_angle = self._session.move(pos, pointer_pos=global_pos)
        emitted = None
        if final_angle is not None:
            emitted = self._scale.to_value(final_angle)
            self._store.write(emitted)
        self._publish_snapshot()
        return emitted

    def pointer_end(self) -> bool:
        """
        Handle the end of a gesture and hand keyboard focus to the companion input.

        :return: True if a gesture was ended
        """
        if not self._session.end():
            return False
        self._publish_snapshot()
        self._request_focus()
        return True

    def set_value(self, value: float) -> None:
        """
        Set the value from the companion numeric input.

        No gesture or precision lock is involved.
        """
        logger.debug("Value set from input: %s", value)
        self._store.write(value)
        self._publish_snapshot()

    def set_external_value(self, value: float) -> None:
        """Feed back the owner's value of a controlled knob."""
        if self._store.set_external_value(value):
            self._publish_snapshot()

    def add_value_changed_callback(self, callback: Callable[[float], None]) -> None:
        """
        Add a callback for value changes.

        Callback signature: callback(value: float) -> None
        Exceptions raised by the callback propagate to the caller.
        """
        self._store.add_change_callback(callback)

    def add_snapshot_changed_callback(self, callback: Callable[[DragSnapshot], None]) -> None:
        """
        Add a callback for render updates.

        Callback signature: callback(snapshot: DragSnapshot) -> None
        """
        self._on_snapshot_changed_callbacks.append(callback)

    def add_state_changed_callback(
            self,
            callback: Callable[[DragState, DragState], None]
    ) -> None:
        """
        Add a callback for gesture state changes.

        Callback signature: callback(old_state: DragState, new_state: DragState) -> None
        """
        self._session.add_state_changed_callback(callback)

    def add_focus_requested_callback(self, callback: Callable[[], None]) -> None:
        """Add a callback asked to focus the companion input after a gesture."""
        self._on_focus_requested_callbacks.append(callback)

    def _angle_for_value(self, value: float) -> float:
        return normalize_angle(self._scale.to_angle(self._domain_value_for_angle(value)))

    def _domain_value_for_angle(self, value: float) -> float:
        """Controlled values outside the domain are shown at the nearest bound."""
        if self._scale.contains(value):
            return value
        if self._warned_out_of_range != value:
            self._warned_out_of_range = value
            logger.warning("Value %s outside [%s, %s]; dial shown at the nearest bound",
                           value, self._scale.domain_min, self._scale.domain_max)
        return self._scale.clamp_value(value)

    def _publish_snapshot(self) -> None:
        """Notify render callbacks of the current snapshot."""
        snapshot = self._session.snapshot
        for callback in self._on_snapshot_changed_callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.exception(f"Error in snapshot changed callback: {e}")

    def _request_focus(self) -> None:
        for callback in self._on_focus_requested_callbacks:
            try:
                callback()
            except Exception as e:
                logger.exception(f"Error in focus requested callback: {e}")
