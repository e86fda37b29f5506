"""
Draw Session - Per-batch dedup scope for cell repaints

Bulk operations (selection highlight, type commit) draw many possibly
overlapping cells. While a session is open every cell is painted at most
once; the session never reorders paints.
"""
from typing import Set

from .errors import DrawSessionError
from .grid import Cell


class DrawSession:
    """Tracks the cells painted since begin()"""

    def __init__(self):
        self._active = False
        self._painted: Set[Cell] = set()

    @property
    def active(self) -> bool:
        return self._active

    def begin(self):
        """
        Open the session.

        Raises:
            DrawSessionError: If a session is already open (nesting is a caller bug)
        """
        if self._active:
            raise DrawSessionError("Draw session already active; begin() and end() must be paired")
        self._active = True
        self._painted.clear()

    def end(self):
        """
        Close the session.

        Raises:
            DrawSessionError: If no session is open
        """
        if not self._active:
            raise DrawSessionError("No active draw session to end")
        self._active = False
        self._painted.clear()

    def contains(self, cell: Cell) -> bool:
        # Cells hash by identity
        return self._active and cell in self._painted

    def record(self, cell: Cell):
        """Mark a cell as painted; ignored outside a session"""
        if self._active:
            self._painted.add(cell)

    def __len__(self):
        return len(self._painted)
