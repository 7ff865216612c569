from dataclasses import dataclass
from typing import Callable

from qknob.core.drag_session import DragState


@dataclass
class StatusField:
    """
    Represents a status field containing a label, format, formatter function, and a value.

    :ivar label: The label/name of the status field.
    :type label: str
    :ivar fmt: The format string used for formatting the field's value.
    :type fmt: str
    :ivar formatter: Callable function to format the field value. Defaults to a formatter
        using the provided `fmt` string, unless explicitly specified.
    :type formatter: Callable[[any], str]
    :ivar value: The value associated with the status field.
    """
    label: str
    fmt: str = "{}"
    formatter: Callable[[any], str] = None
    value: object = 0.0

    def __post_init__(self):
        if self.formatter is None:
            self.formatter = lambda v, fmt = self.fmt: fmt.format(v)

    def text(self) -> str:
        return f"{self.label}: {self.formatter(self.value)}"


def format_state(state: DragState) -> str:
    """Gesture state as shown in the status bar."""
    if state is DragState.LOCKED:
        return "locked"
    if state in (DragState.STARTED, DragState.ACTIVE):
        return "dragging"
    return "idle"


# To add a field, add it here and update it from MainWindow._refresh_status.
STATUS_FIELDS = {
    "value": StatusField(label="Value", fmt="{:.2f}"),
    "angle": StatusField(label="Angle", fmt="{:.1f}°"),
    "drag_distance": StatusField(label="Distance", fmt="{:.0f} px"),
    "state": StatusField(label="Gesture", formatter=format_state, value=DragState.IDLE),
}
