"""
Edge Compositor - Paints the shared border strips between a cell and its neighbors

Every cell is surrounded by grid lines of width `line_width`. The compositor
paints the strip of grid line on any of a cell's four sides, optionally
running into the corner squares at either end. Corner squares are only ever
painted as the extension of a side strip.

Door gaps are produced with an edge percentage below one half: instead of one
strip, two segments anchored at the ends of the side are painted and the
middle of the side is left untouched.
"""
from typing import Iterable, List, Optional, Tuple
from dataclasses import dataclass, replace
import math

from .grid import CARDINALS, Cell, CellCoordinates, Direction, GridModel
from .surface import Color, PixelSurface, fill_rect


@dataclass(frozen=True)
class EdgeFlags:
    """Which of the 8 border pieces around a cell are set"""
    north: bool = False
    north_east: bool = False
    east: bool = False
    south_east: bool = False
    south: bool = False
    south_west: bool = False
    west: bool = False
    north_west: bool = False

    def get(self, direction: Direction) -> bool:
        return getattr(self, direction.value)

    def with_directions(self, directions: Iterable[Direction], value: bool = True) -> 'EdgeFlags':
        return replace(self, **{d.value: value for d in directions})

    def without(self, directions: Iterable[Direction]) -> 'EdgeFlags':
        return self.with_directions(directions, False)

    def any_cardinal(self) -> bool:
        return any(self.get(d) for d in CARDINALS)

    def set_directions(self) -> List[Direction]:
        return [d for d in Direction if self.get(d)]

    @classmethod
    def from_directions(cls, directions: Iterable[Direction]) -> 'EdgeFlags':
        return cls().with_directions(directions)

    @classmethod
    def all_edges(cls) -> 'EdgeFlags':
        return cls.from_directions(Direction)

    def __repr__(self):
        names = [d.value for d in self.set_directions()]
        return f"EdgeFlags({', '.join(names) or 'none'})"


@dataclass(frozen=True)
class EdgeStroke:
    """
    One paint_edges() call a renderer wants on a single side of a cell.

    Attributes:
        color: Strip colour
        corners: Diagonal corners the strip runs into
        edge_percentage: Fraction of the side painted (below 0.5 leaves a gap)
    """
    color: Color
    corners: Tuple[Direction, ...] = ()
    edge_percentage: float = 1.0

    def flags_for(self, side: Direction) -> EdgeFlags:
        return EdgeFlags.from_directions((side,) + tuple(self.corners))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class EdgeCompositor:
    """Paints border strips onto a PixelSurface using the grid's geometry"""

    def __init__(self, surface: PixelSurface, grid: GridModel):
        self.surface = surface
        self.grid = grid

    def edge_regions(self, coords: CellCoordinates, flags: EdgeFlags,
                     edge_percentage: float = 1.0) -> List[Tuple[int, int, int, int]]:
        """
        Pixel rectangles (x0, y0, x1, y1), inclusive, painted for the given flags.

        Args:
            coords: Interior rectangle of the cell
            flags: Border pieces to paint
            edge_percentage: Fraction of each side to paint

        Returns:
            List of rectangles, one or two per set side
        """
        lw = self.grid.line_width
        regions = []
        if lw <= 0:
            return regions

        for side in CARDINALS:
            if not flags.get(side):
                continue

            start_corner, end_corner = side.corners
            if side in (Direction.NORTH, Direction.SOUTH):
                a0, a1 = coords.x0, coords.x1
            else:
                a0, a1 = coords.y0, coords.y1
            start_ext = lw if flags.get(start_corner) else 0
            end_ext = lw if flags.get(end_corner) else 0

            if edge_percentage < 0.5:
                seg = round_half_up((a1 - a0 + 1) * edge_percentage)
                if seg <= 0:
                    # No strip, so no corners either
                    continue
                spans = [(a0 - start_ext, a0 + seg - 1), (a1 - seg + 1, a1 + end_ext)]
            else:
                spans = [(a0 - start_ext, a1 + end_ext)]

            for s0, s1 in spans:
                if s1 < s0:
                    continue
                regions.append(self._side_rect(side, coords, lw, s0, s1))

        return regions

    @staticmethod
    def _side_rect(side: Direction, coords: CellCoordinates, lw: int,
                   s0: int, s1: int) -> Tuple[int, int, int, int]:
        if side == Direction.NORTH:
            return (s0, coords.y0 - lw, s1, coords.y0 - 1)
        if side == Direction.SOUTH:
            return (s0, coords.y1 + 1, s1, coords.y1 + lw)
        if side == Direction.WEST:
            return (coords.x0 - lw, s0, coords.x0 - 1, s1)
        return (coords.x1 + 1, s0, coords.x1 + lw, s1)

    def paint_edges(self, cell: Cell, coords: Optional[CellCoordinates], flags: EdgeFlags,
                    color: Color, edge_percentage: float = 1.0) -> int:
        """
        Paint the border strips of a cell in one buffer transaction.

        Args:
            cell: Cell whose border is painted
            coords: Interior rectangle of the cell (computed from the cell if None)
            flags: Sides to paint, with the diagonal corners they run into
            color: Strip colour
            edge_percentage: Fraction of each side painted; below 0.5 two end
                segments are painted leaving a centred gap

        Returns:
            Number of pixels written (0 when no side flag is set)
        """
        if not flags.any_cardinal():
            return 0
        if coords is None:
            coords = self.grid.cell_inner_coordinates(cell.x, cell.y)

        regions = self.edge_regions(coords, flags, edge_percentage)
        if not regions:
            return 0

        written = 0
        with self.surface.transaction() as data:
            for x0, y0, x1, y1 in regions:
                written += fill_rect(data, self.surface.width, self.surface.height,
                                     x0, y0, x1, y1, color)
        return written
