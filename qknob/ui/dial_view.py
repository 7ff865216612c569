"""Dial view - paints the skin and feeds mouse gestures to the controller."""
from __future__ import annotations

import logging

from PySide6 import QtCore, QtGui, QtWidgets
from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QPainter

from qknob.controllers.interaction_controller import InteractionController
from qknob.core.drag_session import DragState
from qknob.ui.skin import BASE_ELEMENT, KNOB_ELEMENT, Skin, default_skin
from qknob.ui.visual_helpers import paint_visual_helpers

logger = logging.getLogger(__name__)


class DialView(QtWidgets.QWidget):
    """
    Rotating dial graphic.

    The knob element of the skin is rotated by controller.angle around the
    skin's knob center. While a precise-mode drag is running the visual
    helpers are painted on top. The "dragging" dynamic property follows the
    gesture so style sheets can react to it.
    """

    def __init__(self,
                 controller: InteractionController,
                 skin: Skin | None = None,
                 parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("knobDial")
        self.setMinimumSize(50, 50)
        self.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Expanding)
        self.setProperty("dragging", False)

        self._controller = controller
        self._skin = skin or default_skin()
        self._renderer = self._skin.renderer()

        controller.add_snapshot_changed_callback(lambda snapshot: self.update())
        controller.add_state_changed_callback(self._on_state_changed)

    @property
    def skin(self) -> Skin:
        return self._skin

    def set_skin(self, skin: Skin) -> None:
        self._renderer = skin.renderer()
        self._skin = skin
        self.update()

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(160, 160)

    def dial_center(self) -> QPointF:
        return QRectF(self.rect()).center()

    def _bounds(self) -> tuple[float, float, float, float]:
        r = self.rect()
        return float(r.x()), float(r.y()), float(r.width()), float(r.height())

    # ---------- painting ---------------
    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.Antialiasing, True)
            self._paint_skin(painter)
            self._paint_text(painter)
            if self._controller.show_visual_helpers:
                paint_visual_helpers(painter, self.dial_center(),
                                     self._controller.snapshot,
                                     self._controller.unlock_distance)
        finally:
            painter.end()

    def _paint_skin(self, painter: QPainter) -> None:
        view_box = self._renderer.viewBoxF()
        if view_box.isEmpty():
            return
        side = min(self.width(), self.height())
        factor = side / max(view_box.width(), view_box.height())

        painter.save()
        painter.translate((self.width() - view_box.width() * factor) / 2.0,
                          (self.height() - view_box.height() * factor) / 2.0)
        painter.scale(factor, factor)
        painter.translate(-view_box.x(), -view_box.y())

        if self._renderer.elementExists(BASE_ELEMENT):
            self._renderer.render(painter, BASE_ELEMENT, self._renderer.boundsOnElement(BASE_ELEMENT))

        knob_x, knob_y = self._skin.center
        painter.translate(knob_x, knob_y)
        painter.rotate(self._controller.angle)
        painter.translate(-knob_x, -knob_y)
        self._renderer.render(painter, KNOB_ELEMENT, self._renderer.boundsOnElement(KNOB_ELEMENT))
        painter.restore()

    def _paint_text(self, painter: QPainter) -> None:
        painter.save()
        painter.setPen(self.palette().color(QtGui.QPalette.BrightText))
        painter.drawText(self.rect(), Qt.AlignCenter, self._controller.display_text)
        painter.restore()

    # ---------- mouse gestures ---------------
    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        global_pos = event.globalPosition()
        self._controller.pointer_start((pos.x(), pos.y()), self._bounds(),
                                       (global_pos.x(), global_pos.y()))
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        if not self._controller.dragging:
            super().mouseMoveEvent(event)
            return
        pos = event.position()
        global_pos = event.globalPosition()
        self._controller.pointer_move((pos.x(), pos.y()), (global_pos.x(), global_pos.y()))
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._controller.pointer_end()
        event.accept()

    def _on_state_changed(self, old_state: DragState, new_state: DragState) -> None:
        dragging = new_state is not DragState.IDLE
        if self.property("dragging") == dragging:
            return
        self.setProperty("dragging", dragging)
        self.style().unpolish(self)
        self.style().polish(self)
