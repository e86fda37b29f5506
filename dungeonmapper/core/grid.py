"""
Grid model - Cells, directions and grid geometry

Cells are allocated lazily the first time a coordinate is accessed and the
same Cell object is returned for every later access to that coordinate.
"""
from typing import Iterator, List, Optional, Tuple
from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """The 8 neighbor directions (y grows southward)"""
    NORTH = "north"
    NORTH_EAST = "north_east"
    EAST = "east"
    SOUTH_EAST = "south_east"
    SOUTH = "south"
    SOUTH_WEST = "south_west"
    WEST = "west"
    NORTH_WEST = "north_west"

    @property
    def delta(self) -> Tuple[int, int]:
        return _DELTAS[self]

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    @property
    def is_cardinal(self) -> bool:
        return self in CARDINALS

    @property
    def corners(self) -> Tuple['Direction', 'Direction']:
        """
        The two diagonal corners at the ends of a cardinal edge.

        Ordered along the edge: west to east for horizontal edges,
        north to south for vertical edges.
        """
        return _CORNERS[self]

    @property
    def adjacent_cardinals(self) -> Tuple['Direction', 'Direction']:
        """The two cardinal directions forming a diagonal"""
        return _DIAGONAL_CARDINALS[self]


_DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.NORTH_EAST: (1, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH_EAST: (1, 1),
    Direction.SOUTH: (0, 1),
    Direction.SOUTH_WEST: (-1, 1),
    Direction.WEST: (-1, 0),
    Direction.NORTH_WEST: (-1, -1),
}

_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.NORTH_EAST: Direction.SOUTH_WEST,
    Direction.EAST: Direction.WEST,
    Direction.SOUTH_EAST: Direction.NORTH_WEST,
    Direction.SOUTH: Direction.NORTH,
    Direction.SOUTH_WEST: Direction.NORTH_EAST,
    Direction.WEST: Direction.EAST,
    Direction.NORTH_WEST: Direction.SOUTH_EAST,
}

CARDINALS = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)
DIAGONALS = (Direction.NORTH_EAST, Direction.SOUTH_EAST, Direction.SOUTH_WEST, Direction.NORTH_WEST)

_CORNERS = {
    Direction.NORTH: (Direction.NORTH_WEST, Direction.NORTH_EAST),
    Direction.SOUTH: (Direction.SOUTH_WEST, Direction.SOUTH_EAST),
    Direction.EAST: (Direction.NORTH_EAST, Direction.SOUTH_EAST),
    Direction.WEST: (Direction.NORTH_WEST, Direction.SOUTH_WEST),
}

_DIAGONAL_CARDINALS = {
    Direction.NORTH_EAST: (Direction.NORTH, Direction.EAST),
    Direction.SOUTH_EAST: (Direction.SOUTH, Direction.EAST),
    Direction.SOUTH_WEST: (Direction.SOUTH, Direction.WEST),
    Direction.NORTH_WEST: (Direction.NORTH, Direction.WEST),
}


class Orientation(Enum):
    """Facing of directional tiles (walls, doors)"""
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def direction(self) -> Direction:
        return Direction(self.value)

    @classmethod
    def parse(cls, text: str) -> 'Orientation':
        """
        Parse an orientation name, case-insensitively.

        Raises:
            ValueError: If the text is not one of north, east, south, west
        """
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown orientation: {text!r}") from None


@dataclass(eq=False)
class Cell:
    """
    One addressable grid position.

    Compared and hashed by identity; the grid hands out exactly one Cell per
    coordinate.
    """
    x: int
    y: int
    type: str = "blank"
    orientation: Orientation = Orientation.NORTH
    is_selected: bool = False
    is_highlighted: bool = False
    priority: int = 0

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __repr__(self):
        return (f"Cell({self.x}, {self.y}, type={self.type}, "
                f"orientation={self.orientation.value}, priority={self.priority})")


@dataclass(frozen=True)
class CellCoordinates:
    """Inclusive pixel rectangle of a cell's interior (grid lines excluded)"""
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def size(self) -> int:
        return self.x1 - self.x0 + 1


class GridModel:
    """
    Lazy sparse container of Cells with the pixel geometry of the grid.

    Storage is a list of columns that grows on demand, as the map editor
    only materializes cells the user touches.
    """

    def __init__(self, width: int, height: int, cell_size: int, line_width: int):
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.line_width = line_width
        self._columns: List[List[Optional[Cell]]] = []

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """
        Get the cell at (x, y), creating it on first access.

        Returns:
            The Cell, or None when the coordinate lies outside the grid
        """
        if not self.in_bounds(x, y):
            return None

        while len(self._columns) <= x:
            self._columns.append([])
        column = self._columns[x]
        while len(column) <= y:
            column.append(None)

        cell = column[y]
        if cell is None:
            cell = Cell(x, y)
            column[y] = cell
        return cell

    def neighbor(self, cell: Cell, direction: Direction) -> Optional[Cell]:
        dx, dy = direction.delta
        return self.get_cell(cell.x + dx, cell.y + dy)

    def neighbors(self, cell: Cell) -> List[Tuple[Direction, Cell]]:
        """Existing neighbors of a cell, in Direction order"""
        result = []
        for direction in Direction:
            other = self.neighbor(cell, direction)
            if other is not None:
                result.append((direction, other))
        return result

    def cells(self) -> Iterator[Cell]:
        """Every cell of the grid, column by column"""
        for x in range(self.width):
            for y in range(self.height):
                yield self.get_cell(x, y)

    def allocated_count(self) -> int:
        return sum(1 for column in self._columns for cell in column if cell is not None)

    # =========================================================================
    # GEOMETRY
    # =========================================================================

    def surface_size(self) -> Tuple[int, int]:
        """Pixel size of the surface, one grid line more than cells per axis"""
        pixel_width = self.width * self.cell_size + (self.width + 1) * self.line_width
        pixel_height = self.height * self.cell_size + (self.height + 1) * self.line_width
        return pixel_width, pixel_height

    def cell_inner_coordinates(self, x: int, y: int) -> CellCoordinates:
        x0 = (x + 1) * self.line_width + x * self.cell_size
        y0 = (y + 1) * self.line_width + y * self.cell_size
        return CellCoordinates(x0, y0, x0 + self.cell_size - 1, y0 + self.cell_size - 1)

    def cell_position(self, px: int, py: int) -> Optional[Tuple[int, int]]:
        """
        Grid coordinate under a surface pixel.

        Grid lines belong to the cell after them; the very last grid line
        maps back onto the last cell.

        Returns:
            (x, y) cell coordinate, or None for pixels outside the surface
        """
        pixel_width, pixel_height = self.surface_size()
        if not (0 <= px < pixel_width and 0 <= py < pixel_height):
            return None

        stride = self.line_width + self.cell_size
        x = int(px // stride)
        y = int(py // stride)
        if x == self.width:
            x -= 1
        if y == self.height:
            y -= 1
        return x, y
