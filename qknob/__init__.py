"""Rotatable dial control for PySide6 with a precision-locked drag-to-value engine."""

from qknob.controllers.interaction_controller import InteractionController
from qknob.core import AngleScale, DragSnapshot, DragState, KnobOptions

__all__ = [
    "AngleScale",
    "DragSnapshot",
    "DragState",
    "InteractionController",
    "KnobOptions",
]

__version__ = "0.1.0"
