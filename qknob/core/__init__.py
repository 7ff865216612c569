"""Core components layer - Qt-independent knob geometry, gesture and value model."""

from qknob.core.angle_math import AngleScale, normalize_angle, point_angle
from qknob.core.drag_session import DragSession, DragSnapshot, DragState
from qknob.core.knob_options import KnobOptions
from qknob.core.value_store import OwnershipMode, ValueStore

__all__ = [
    "AngleScale",
    "normalize_angle",
    "point_angle",
    "DragSession",
    "DragSnapshot",
    "DragState",
    "KnobOptions",
    "OwnershipMode",
    "ValueStore",
]
