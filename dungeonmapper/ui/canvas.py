"""
Map Canvas - Widget showing the engine's pixel surface and feeding it pointer events
"""
from typing import Optional

from PyQt6 import QtCore, QtGui, QtWidgets

from dungeonmapper.core.engine import MappingEngine
from dungeonmapper.core.logging import log_ui
from dungeonmapper.core.selection import SelectionController

# Surface offset inside the widget, in pixels
CANVAS_MARGIN = 8


class MapCanvas(QtWidgets.QWidget):
    """
    Displays the map surface 1:1 and turns mouse input into selection events.

    Widget coordinates become surface coordinates by subtracting the fixed
    margin. The widget keeps the mouse grabbed during a drag, so a release
    anywhere on screen finishes the selection.
    """

    def __init__(self, engine: MappingEngine, controller: Optional[SelectionController] = None,
                 parent=None):
        super().__init__(parent)
        self.engine = engine
        self.controller = controller or SelectionController(engine, self)
        self.offset = QtCore.QPoint(CANVAS_MARGIN, CANVAS_MARGIN)
        self._image: Optional[QtGui.QImage] = None

        width, height = engine.surface_size()
        self.setFixedSize(width + 2 * CANVAS_MARGIN, height + 2 * CANVAS_MARGIN)

        self.engine.on_surface_changed = self.refresh
        self.refresh()

    def refresh(self):
        """Rebuild the displayed image from the surface buffer"""
        surface = self.engine.surface
        image = QtGui.QImage(bytes(surface.data), surface.width, surface.height,
                             surface.width * 4, QtGui.QImage.Format.Format_RGBA8888)
        # Detach from the temporary bytes object
        self._image = image.copy()
        self.update()

    def to_surface(self, event: QtGui.QMouseEvent) -> QtCore.QPoint:
        return event.position().toPoint() - self.offset

    def paintEvent(self, event: QtGui.QPaintEvent):
        painter = QtGui.QPainter(self)
        if self._image is not None:
            painter.drawImage(self.offset, self._image)
        painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent):
        if event.button() != QtCore.Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        pos = self.to_surface(event)
        if self.controller.pointer_down_at(pos.x(), pos.y()):
            self.grabMouse()
            log_ui(f"Drag started at surface ({pos.x()}, {pos.y()})")
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent):
        if not self.controller.tracking_moves:
            super().mouseMoveEvent(event)
            return

        pos = self.to_surface(event)
        self.controller.pointer_move_at(pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent):
        if event.button() != QtCore.Qt.MouseButton.LeftButton or not self.controller.is_dragging():
            super().mouseReleaseEvent(event)
            return

        self.releaseMouse()
        self.controller.pointer_up_at()
        event.accept()
