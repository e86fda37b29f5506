"""
Mapper widgets - Type/orientation form and the main window
"""
from typing import Optional
from dataclasses import replace

from PyQt6 import QtCore, QtWidgets

from dungeonmapper.core.config import save_config
from dungeonmapper.core.engine import MappingEngine
from dungeonmapper.core.logging import log_ui
from dungeonmapper.ui.canvas import MapCanvas


class MapControls(QtWidgets.QWidget):
    """
    Form with the selected type and orientation and an Update button.

    Signals:
        selection_updated: Emitted after the engine accepted new values (type, orientation)
    """

    selection_updated = QtCore.pyqtSignal(str, str)

    def __init__(self, engine: MappingEngine, parent=None):
        super().__init__(parent)
        self.engine = engine
        self.init_ui()

    def init_ui(self):
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)

        layout.addWidget(QtWidgets.QLabel("Type:"))
        self.type_edit = QtWidgets.QLineEdit(self.engine.selected_type)
        self.type_edit.setToolTip("Registered types: " + ", ".join(self.engine.registry.tags()))
        layout.addWidget(self.type_edit)

        layout.addWidget(QtWidgets.QLabel("Orientation:"))
        self.orientation_edit = QtWidgets.QLineEdit(self.engine.selected_orientation.value)
        self.orientation_edit.setToolTip("north, east, south or west")
        layout.addWidget(self.orientation_edit)

        self.update_button = QtWidgets.QPushButton("Update")
        self.update_button.clicked.connect(self.on_update_clicked)
        layout.addWidget(self.update_button)

    def on_update_clicked(self):
        type_tag = self.type_edit.text().strip()
        orientation = self.orientation_edit.text().strip()

        try:
            self.engine.set_selected_orientation(orientation)
        except ValueError as e:
            log_ui(f"Rejected orientation: {e}")
            QtWidgets.QMessageBox.warning(self, "Dungeon Mapper", str(e))
            return

        self.engine.set_selected_type(type_tag)
        if not self.engine.is_registered(type_tag):
            QtWidgets.QMessageBox.warning(
                self, "Dungeon Mapper",
                f"Unknown type '{type_tag}'. Selections will not change any cell.")

        self.selection_updated.emit(type_tag, self.engine.selected_orientation.value)


class MapperWindow(QtWidgets.QMainWindow):
    """Main window: the form above the map canvas"""

    def __init__(self, engine: MappingEngine, settings: Optional[QtCore.QSettings] = None,
                 parent=None):
        super().__init__(parent)
        self.engine = engine
        self.settings = settings
        self.setWindowTitle("Dungeon Mapper")

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        self.controls = MapControls(engine)
        self.canvas = MapCanvas(engine)
        layout.addWidget(self.controls)
        layout.addWidget(self.canvas, 0, QtCore.Qt.AlignmentFlag.AlignCenter)
        self.setCentralWidget(central)

        self.controls.selection_updated.connect(self.on_selection_updated)
        self.canvas.controller.selection_committed.connect(self.on_selection_committed)
        self.statusBar().showMessage(self._status_text())

        self.engine.redraw_all()

    def _status_text(self) -> str:
        return f"Painting '{self.engine.selected_type}' facing {self.engine.selected_orientation.value}"

    def on_selection_updated(self, type_tag: str, orientation: str):
        self.statusBar().showMessage(self._status_text())

    def on_selection_committed(self, cells: list):
        self.statusBar().showMessage(f"{self._status_text()} - {len(cells)} cells updated", 3000)

    def closeEvent(self, event):
        if self.settings is not None:
            config = replace(self.engine.config,
                             selected_type=self.engine.selected_type,
                             selected_orientation=self.engine.selected_orientation.value)
            save_config(self.settings, config)
            log_ui("Preferences saved")
        super().closeEvent(event)
