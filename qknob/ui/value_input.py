from __future__ import annotations

import logging

from PySide6.QtCore import QSignalBlocker
from PySide6.QtWidgets import QDoubleSpinBox, QWidget

logger = logging.getLogger(__name__)


def decimals_for_step(step: float, minimum: int = 2) -> int:
    """Enough decimals to show values that are multiples of step."""
    text = f"{step:.6f}".rstrip("0").rstrip(".")
    decimals = len(text.split(".")[1]) if "." in text else 0
    return max(minimum, decimals)


class ValueInput(QDoubleSpinBox):
    """
    Numeric companion of the dial.

    Shows the knob value and lets the user type or step it with the arrow
    keys. Values coming from the knob are mirrored without emitting
    valueChanged, so only user edits reach the controller.
    """

    def __init__(self, minimum: float, maximum: float, step: float,
                 parent: QWidget | None = None):
        super().__init__(parent)
        self.setObjectName("knobValueInput")
        self.setRange(minimum, maximum)
        self.setSingleStep(step)
        self.setDecimals(decimals_for_step(step))
        self.setKeyboardTracking(False)

    def set_bounds(self, minimum: float, maximum: float) -> None:
        """Change the range without reporting the clamped value as an edit."""
        blocker = QSignalBlocker(self)
        try:
            self.setRange(minimum, maximum)
        finally:
            blocker.unblock()

    def set_mirrored_value(self, value: float) -> None:
        """Display value without notifying listeners."""
        blocker = QSignalBlocker(self)
        try:
            self.setValue(value)
        finally:
            blocker.unblock()
