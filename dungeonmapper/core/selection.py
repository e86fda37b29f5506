"""
Selection Controller - Drag selection state machine

Translates pointer events into a highlighted run of cells and, on release,
commits the selected type and orientation to every cell of the run.
"""
from typing import List, Optional
from enum import Enum

from PyQt6 import QtCore

from .engine import MappingEngine
from .grid import Cell
from .logging import log_selection
from .rasterizer import rasterize


class SelectionState(Enum):
    """Selection state enumeration"""
    IDLE = "idle"
    DRAGGING = "dragging"


class SelectionController(QtCore.QObject):
    """
    Handles pointer events for drag selection.

    The selected run is the Bresenham line from the start cell to the cell
    under the pointer, in grid coordinates.

    Signals:
        selection_started: Emitted on pointer down
        selection_changed: Emitted when the run changes (list of Cells)
        selection_committed: Emitted on pointer up (list of Cells)
    """

    # Signals
    selection_started = QtCore.pyqtSignal()
    selection_changed = QtCore.pyqtSignal(list)
    selection_committed = QtCore.pyqtSignal(list)

    def __init__(self, engine: MappingEngine, parent=None):
        super().__init__(parent)
        self.engine = engine
        self.state = SelectionState.IDLE

        self.start_cell: Optional[Cell] = None
        self.end_cell: Optional[Cell] = None
        self.selected_cells: List[Cell] = []

    @property
    def tracking_moves(self) -> bool:
        """True while pointer moves should be forwarded"""
        return self.state == SelectionState.DRAGGING

    def is_dragging(self) -> bool:
        return self.state == SelectionState.DRAGGING

    # =========================================================================
    # POINTER EVENTS (grid cells)
    # =========================================================================

    def on_pointer_down(self, cell: Optional[Cell]) -> bool:
        """
        Start a drag at a cell.

        Returns:
            True if a drag started
        """
        if cell is None or self.state != SelectionState.IDLE:
            return False

        self.start_cell = cell
        self.end_cell = cell
        self.selected_cells = [cell]
        self.state = SelectionState.DRAGGING

        with self.engine.draw_session():
            self._mark(self.selected_cells, True)
            self.engine.draw_cell(cell)

        self.selection_started.emit()
        self.selection_changed.emit(list(self.selected_cells))
        return True

    def on_pointer_move(self, cell: Optional[Cell]) -> bool:
        """
        Extend the drag to a cell.

        Returns:
            True if the selected run changed
        """
        if self.state != SelectionState.DRAGGING or cell is None:
            return False
        if cell is self.end_cell:
            return False

        self.end_cell = cell
        previous = self.selected_cells
        self.selected_cells = self.cells_between(self.start_cell, self.end_cell)

        # Flags first, so a cell in both runs is painted once in its final state
        with self.engine.draw_session():
            self._mark(previous, False)
            self._mark(self.selected_cells, True)
            for each in previous + self.selected_cells:
                self.engine.draw_cell(each)

        self.selection_changed.emit(list(self.selected_cells))
        return True

    def on_pointer_up(self) -> bool:
        """
        Finish the drag, committing the selected type to the run.

        Returns:
            True if a drag was finished
        """
        if self.state != SelectionState.DRAGGING:
            return False

        cells = self.selected_cells
        type_tag = self.engine.selected_type
        orientation = self.engine.selected_orientation

        if self.engine.is_registered(type_tag):
            for cell in cells:
                self.engine.assign(cell, type_tag, orientation)
            log_selection(f"Committed {len(cells)} cells as '{type_tag}' ({orientation.value})")
        else:
            log_selection(f"Type '{type_tag}' is not registered, {len(cells)} cells left unchanged")

        with self.engine.draw_session():
            self._mark(cells, False)
            for cell in cells:
                self.engine.draw_cell(cell)

        self.state = SelectionState.IDLE
        self.selection_committed.emit(list(cells))
        return True

    # =========================================================================
    # POINTER EVENTS (surface pixels)
    # =========================================================================

    def pointer_down_at(self, px: int, py: int) -> bool:
        return self.on_pointer_down(self.engine.cell_at_pixel(px, py))

    def pointer_move_at(self, px: int, py: int) -> bool:
        return self.on_pointer_move(self.engine.cell_at_pixel(px, py))

    def pointer_up_at(self) -> bool:
        return self.on_pointer_up()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def cells_between(self, start: Cell, end: Cell) -> List[Cell]:
        """Cells on the Bresenham line from start to end, without duplicates"""
        cells = []
        for x, y in rasterize(start.x, start.y, end.x, end.y):
            cell = self.engine.get_cell(x, y)
            if cell is not None and cell not in cells:
                cells.append(cell)
        return cells

    @staticmethod
    def _mark(cells: List[Cell], selected: bool):
        for cell in cells:
            cell.is_highlighted = selected
            cell.is_selected = selected
