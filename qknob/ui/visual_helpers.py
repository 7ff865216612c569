"""Overlay guides painted while a precise-mode drag is in progress."""
from __future__ import annotations

import math

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QPainter, QPen

from qknob.core.drag_session import DragSnapshot, DragState

LOCKED_COLOR = QColor(200, 80, 60, 200)
UNLOCKED_COLOR = QColor(90, 180, 90, 200)
GUIDE_COLOR = QColor(160, 160, 160, 160)


def angle_direction(angle: float) -> QPointF:
    """Unit vector for a dial angle (0 = up, clockwise, y-down)."""
    rad = math.radians(angle)
    return QPointF(math.sin(rad), -math.cos(rad))


def paint_visual_helpers(painter: QPainter,
                         center: QPointF,
                         snapshot: DragSnapshot,
                         unlock_distance: float) -> None:
    """
    Paint the precision guides.

    - dashed circle: the unlock distance
    - solid circle: the current drag distance, red while locked
    - ray from the center to the pointer
    - ray along the current value angle
    """
    unlocked = snapshot.state is DragState.ACTIVE
    color = UNLOCKED_COLOR if unlocked else LOCKED_COLOR

    painter.save()
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(Qt.NoBrush)

    guide_pen = QPen(GUIDE_COLOR, 1.0, Qt.DashLine)
    painter.setPen(guide_pen)
    painter.drawEllipse(center, unlock_distance, unlock_distance)

    painter.setPen(QPen(color, 1.5))
    painter.drawEllipse(center, snapshot.drag_distance, snapshot.drag_distance)

    dx, dy = snapshot.pointer_offset
    pointer = QPointF(center.x() + dx, center.y() + dy)
    painter.drawLine(center, pointer)

    radius = max(snapshot.drag_distance, unlock_distance)
    direction = angle_direction(snapshot.value_angle)
    painter.setPen(QPen(color, 2.5))
    painter.drawLine(center, center + direction * radius)
    painter.restore()
