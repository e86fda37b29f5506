"""
Renderers - Per-type paint capabilities and the registry dispatching to them

A Renderer paints one kind of tile: the cell body, the border strips it
shares with its neighbors, and the one-level cascade that lets neighbors
refresh their side of those borders.

Shared borders are resolved the same way whichever side repaints them:
first the border is reset to the grid colour, then the edge claims of the
two cells are painted in ascending priority, so the higher priority type
always ends up on top.
"""
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, TYPE_CHECKING
from dataclasses import dataclass, field

from .compositor import EdgeFlags, EdgeStroke
from .grid import CARDINALS, DIAGONALS, Cell, CellCoordinates, Direction
from .logging import log_renderer
from .surface import Color

if TYPE_CHECKING:
    from .engine import MappingEngine


# Type-set entry matching neighbors outside the grid
OFF_GRID = "<off-grid>"

BLANK = "blank"
WALL = "wall"
FILL_WALL = "fillWall"
DOOR = "door"

# Fraction of a side each door post covers
DOOR_EDGE_PERCENTAGE = 0.3


@dataclass(frozen=True)
class PaintContext:
    """
    Options for a single Renderer.draw() call.

    Attributes:
        ignore_cell: Skip painting the cell body
        ignore_neighbors: Do not cascade into neighbors
        ignore_edges: Directions whose border piece must be left untouched
    """
    ignore_cell: bool = False
    ignore_neighbors: bool = False
    ignore_edges: FrozenSet[Direction] = field(default_factory=frozenset)

    def suppressing(self, *directions: Direction) -> 'PaintContext':
        return PaintContext(self.ignore_cell, self.ignore_neighbors,
                            self.ignore_edges | frozenset(directions))


DEFAULT_CONTEXT = PaintContext()


class Renderer:
    """
    Base renderer: paints a plain cell and resolves its borders.

    Subclasses set `priority` and override body_color() and edge_claims().
    """

    priority = 0

    def __init__(self, engine: 'MappingEngine'):
        self.engine = engine
        self.type_tag = BLANK

    # =========================================================================
    # DRAWING
    # =========================================================================

    def draw(self, cell: Cell, coords: Optional[CellCoordinates] = None,
             context: PaintContext = DEFAULT_CONTEXT):
        """
        Paint a cell.

        Args:
            cell: Cell to paint
            coords: Interior rectangle of the cell (computed if None)
            context: Suppression options for this call
        """
        if coords is None:
            coords = self.engine.grid.cell_inner_coordinates(cell.x, cell.y)

        if not context.ignore_cell:
            self.draw_body(cell, coords)

        self.draw_edges(cell, coords, context)

        if not context.ignore_neighbors:
            self.engine.cascade(cell)

    def body_color(self, cell: Cell) -> Color:
        return self.engine.config.blank_color

    def draw_body(self, cell: Cell, coords: CellCoordinates):
        color = self.body_color(cell)
        if cell.is_highlighted or cell.is_selected:
            color = self.engine.config.highlight_color.over(color)
        self.engine.fill_cell(cell, coords, color)

    def draw_edges(self, cell: Cell, coords: CellCoordinates, context: PaintContext):
        """
        Resolve the four borders of a cell against its neighbors.

        Suppressed directions are neither reset nor painted. A suppressed
        side takes the corner squares at both of its ends with it.
        """
        skip = set(context.ignore_edges)
        for direction in context.ignore_edges:
            if direction.is_cardinal:
                skip.update(direction.corners)
        engine = self.engine
        grid = engine.grid

        reset = EdgeFlags.all_edges().without(skip)
        engine.paint_edges(cell, coords, reset, engine.config.grid_color)

        own_claims = self.edge_claims(cell)
        for side in CARDINALS:
            if side in skip:
                continue

            # (priority, order, owner cell, renderer, owner's side)
            layers = [(cell.priority, 0, cell, self, side)]
            neighbor = grid.neighbor(cell, side)
            if neighbor is not None:
                layers.append((neighbor.priority, 1, neighbor,
                               engine.renderer_for(neighbor), side.opposite))
            layers.sort(key=lambda layer: (layer[0], layer[1]))

            for _, _, owner, renderer, owner_side in layers:
                if owner is cell:
                    strokes = own_claims.get(side, ())
                    owner_coords = coords
                else:
                    strokes = renderer.edge_claims(owner).get(owner_side, ())
                    owner_coords = None
                for stroke in strokes:
                    flags = stroke.flags_for(owner_side)
                    if owner is cell:
                        flags = flags.without(skip)
                    engine.paint_edges(owner, owner_coords, flags, stroke.color,
                                       stroke.edge_percentage)

    def edge_claims(self, cell: Cell) -> Dict[Direction, List[EdgeStroke]]:
        """Strokes this type wants on each side of the cell; no entry means a plain grid line"""
        return {}

    # =========================================================================
    # NEIGHBOR QUERIES
    # =========================================================================

    def matches(self, cell: Cell, direction: Direction, compatible_types: Iterable[str]) -> bool:
        """True if the neighbor in `direction` has a type in `compatible_types`"""
        other = self.engine.grid.neighbor(cell, direction)
        if other is None:
            return OFF_GRID in compatible_types
        return other.type in compatible_types

    def neighbor_compare(self, cell: Cell, compatible_types: Iterable[str]) -> EdgeFlags:
        """
        Compare the 8 neighbors of a cell against a set of compatible types.

        A cardinal direction matches when the neighbor exists and its type is
        compatible; off-grid neighbors match only if OFF_GRID is in the set.
        A diagonal matches only when both adjacent cardinals match and the
        diagonal neighbor itself matches.

        Args:
            cell: Cell being painted
            compatible_types: Type tags (and optionally OFF_GRID)

        Returns:
            EdgeFlags with one flag per direction
        """
        compatible_types = frozenset(compatible_types)
        result = {d: self.matches(cell, d, compatible_types) for d in CARDINALS}
        for diagonal in DIAGONALS:
            first, second = diagonal.adjacent_cardinals
            result[diagonal] = (result[first] and result[second]
                                and self.matches(cell, diagonal, compatible_types))
        return EdgeFlags.from_directions(d for d, value in result.items() if value)

    def __repr__(self):
        return f"{type(self).__name__}(type={self.type_tag!r}, priority={self.priority})"


class BlankRenderer(Renderer):
    """Empty floor: white body surrounded by grid lines"""
    priority = 0


class FillWallRenderer(Renderer):
    """Solid rock. Adjacent fillWall cells merge into one block."""

    priority = 2
    compatible_types = frozenset({FILL_WALL, OFF_GRID})

    def body_color(self, cell: Cell) -> Color:
        return self.engine.config.wall_color

    def edge_claims(self, cell: Cell) -> Dict[Direction, List[EdgeStroke]]:
        flags = self.neighbor_compare(cell, self.compatible_types)
        claims = {}
        for side in CARDINALS:
            if flags.get(side):
                corners = tuple(c for c in side.corners if flags.get(c))
                claims[side] = [EdgeStroke(self.engine.config.wall_color, corners)]
        return claims


class WallRenderer(Renderer):
    """
    Thin wall along the side of a cell given by its orientation.

    The wall runs into a corner when the cell next to it along the wall line
    carries a wall of the same orientation.
    """

    priority = 1
    line_types = frozenset({WALL, DOOR, OFF_GRID})

    def wall_corners(self, cell: Cell) -> tuple:
        side = cell.orientation.direction
        corners = []
        for corner in side.corners:
            along = next(d for d in corner.adjacent_cardinals if d != side)
            other = self.engine.grid.neighbor(cell, along)
            if other is None:
                joined = OFF_GRID in self.line_types
            else:
                joined = other.type in self.line_types and other.orientation == cell.orientation
            if joined:
                corners.append(corner)
        return tuple(corners)

    def edge_claims(self, cell: Cell) -> Dict[Direction, List[EdgeStroke]]:
        side = cell.orientation.direction
        return {side: [EdgeStroke(self.engine.config.wall_color, self.wall_corners(cell))]}


class DoorRenderer(WallRenderer):
    """A wall with a doorway gap in the middle"""

    priority = 3

    def edge_claims(self, cell: Cell) -> Dict[Direction, List[EdgeStroke]]:
        side = cell.orientation.direction
        config = self.engine.config
        return {side: [
            EdgeStroke(config.grid_color),
            EdgeStroke(config.wall_color, self.wall_corners(cell), DOOR_EDGE_PERCENTAGE),
        ]}


RendererFactory = Callable[['MappingEngine'], Renderer]


class RendererRegistry:
    """
    Maps type tags to Renderer instances.

    Lookups of unregistered tags fall back to the blank renderer.
    """

    def __init__(self, fallback: Renderer):
        self.fallback = fallback
        self._renderers: Dict[str, Renderer] = {}

    def register(self, type_tag: str, renderer: Renderer):
        renderer.type_tag = type_tag
        if type_tag in self._renderers:
            log_renderer(f"Replacing renderer for '{type_tag}' with {renderer!r}")
        self._renderers[type_tag] = renderer

    def unregister(self, type_tag: str) -> bool:
        return self._renderers.pop(type_tag, None) is not None

    def get(self, type_tag: str) -> Optional[Renderer]:
        return self._renderers.get(type_tag)

    def resolve(self, type_tag: str) -> Renderer:
        return self._renderers.get(type_tag, self.fallback)

    def tags(self) -> List[str]:
        return list(self._renderers.keys())

    def __contains__(self, type_tag: str) -> bool:
        return type_tag in self._renderers

    def __len__(self):
        return len(self._renderers)


BUILTIN_RENDERERS: Dict[str, RendererFactory] = {
    BLANK: BlankRenderer,
    WALL: WallRenderer,
    FILL_WALL: FillWallRenderer,
    DOOR: DoorRenderer,
}
