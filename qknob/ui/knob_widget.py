"""Knob widget - dial plus numeric companion input around one controller."""
from __future__ import annotations

import logging

from PySide6 import QtCore, QtWidgets
from PySide6.QtCore import Qt

from qknob.controllers.interaction_controller import InteractionController
from qknob.core.drag_session import DragSnapshot
from qknob.core.knob_options import KnobOptions
from qknob.ui.dial_view import DialView
from qknob.ui.skin import Skin
from qknob.ui.value_input import ValueInput

logger = logging.getLogger(__name__)


class KnobWidget(QtWidgets.QWidget):
    """
    Rotatable dial bound to a numeric value.

    Drag the dial to change the value; with precise mode on, the value only
    starts to follow once the pointer is unlock_distance away from the center.
    The spin box below mirrors the value and accepts typed input. It takes
    keyboard focus after each drag so the arrow keys keep working.

    Controlled use (options.value given): the widget never keeps the value
    itself, the owner answers valueChanged with setValue().
    """

    # Signals
    valueChanged = QtCore.Signal(float)

    def __init__(self,
                 options: KnobOptions | None = None,
                 skin: Skin | None = None,
                 input_visible: bool = True,
                 parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller = InteractionController(options)
        opts = self.controller.options

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.dial = DialView(self.controller, skin, self)
        layout.addWidget(self.dial, 1)

        self.input = ValueInput(opts.min, opts.max, opts.step, self)
        self.input.setVisible(input_visible)
        layout.addWidget(self.input)
        self.input.set_mirrored_value(self.controller.value)

        self.input.valueChanged.connect(self._on_input_changed)
        self.controller.add_value_changed_callback(
            lambda value: self.valueChanged.emit(float(value)))
        self.controller.add_snapshot_changed_callback(self._on_snapshot_changed)
        self.controller.add_focus_requested_callback(
            lambda: self.input.setFocus(Qt.MouseFocusReason))

    def value(self) -> float:
        return self.controller.value

    def angle(self) -> float:
        return self.controller.angle

    def setValue(self, value: float) -> None:
        """
        Set the value from outside.

        Controlled knobs take the owner's value as is; uncontrolled knobs
        store it and emit valueChanged.
        """
        if self.controller.store.controlled:
            self.controller.set_external_value(value)
        else:
            self.controller.set_value(value)

    def setRange(self, minimum: float, maximum: float) -> None:
        self.controller.set_bounds(minimum, maximum)
        self.input.set_bounds(minimum, maximum)
        self.input.set_mirrored_value(self.controller.value)

    def _on_input_changed(self, value: float) -> None:
        self.controller.set_value(value)

    def _on_snapshot_changed(self, snapshot: DragSnapshot) -> None:
        self.input.set_mirrored_value(self.controller.value)
