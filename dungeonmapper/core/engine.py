"""
Mapping Engine - Owns the grid, the pixel surface and the renderer registry

This module coordinates:
- Lazy cell access and grid geometry
- Renderer registration and dispatch by type tag
- Draw sessions deduplicating repaints during a batch
- The one-level neighbor cascade after a cell repaints
- Grid line drawing with the Bresenham rasterizer

Everything runs synchronously inside the UI event that triggered it.
"""
from typing import Callable, Iterator, List, Optional, Set, Tuple, Union
from contextlib import contextmanager

from .compositor import EdgeCompositor, EdgeFlags
from .config import MapperConfig
from .errors import CascadeDepthError, DrawSessionError
from .grid import Cell, CellCoordinates, GridModel, Orientation
from .logging import log_engine
from .rasterizer import draw_line
from .renderers import (
    BLANK, BUILTIN_RENDERERS, BlankRenderer, PaintContext, Renderer,
    RendererFactory, RendererRegistry,
)
from .session import DrawSession
from .surface import Color, PixelSurface, fill_rect

# Cascaded repaints never cascade again
MAX_CASCADE_DEPTH = 1

CASCADE_CONTEXT = PaintContext(ignore_neighbors=True)


class MappingEngine:
    """
    Cell compositing and cascading-redraw engine.

    One instance per map; configuration is fixed at construction.

    Callbacks:
        on_surface_changed: Called after a top-level paint, a closed draw
            session or a full redraw
    """

    def __init__(self, config: Optional[MapperConfig] = None, builtin_renderers: bool = True):
        """
        Initialize the engine.

        Args:
            config: Engine configuration (defaults if None)
            builtin_renderers: Register blank, wall, fillWall and door

        Raises:
            ValueError: If the configuration is invalid
        """
        self.config = (config or MapperConfig()).validate()

        self.grid = GridModel(self.config.width, self.config.height,
                              self.config.cell_size, self.config.grid_line_width)
        pixel_width, pixel_height = self.grid.surface_size()
        self.surface = PixelSurface(pixel_width, pixel_height, self.config.background_color)
        self.compositor = EdgeCompositor(self.surface, self.grid)
        self.session = DrawSession()
        self.registry = RendererRegistry(BlankRenderer(self))

        self.selected_type: str = self.config.selected_type
        self.selected_orientation: Orientation = Orientation.parse(self.config.selected_orientation)

        self.on_surface_changed: Optional[Callable[[], None]] = None

        self._cascade_depth = 0
        self._unknown_types: Set[str] = set()

        if builtin_renderers:
            for type_tag, factory in BUILTIN_RENDERERS.items():
                self.register_renderer(type_tag, factory)

        log_engine(f"Engine created: {self.config.width}x{self.config.height} cells, "
                   f"surface {pixel_width}x{pixel_height}px")

    # =========================================================================
    # RENDERERS
    # =========================================================================

    def register_renderer(self, type_tag: str, factory: RendererFactory) -> Renderer:
        """
        Install the renderer for a type tag.

        Args:
            type_tag: Tile type, e.g. "fillWall"
            factory: Callable building the renderer from this engine
                (a Renderer subclass works)

        Returns:
            The installed renderer
        """
        renderer = factory(self)
        self.registry.register(type_tag, renderer)
        self._unknown_types.discard(type_tag)
        log_engine(f"Registered renderer {renderer!r}")
        return renderer

    def unregister_renderer(self, type_tag: str) -> bool:
        removed = self.registry.unregister(type_tag)
        if removed:
            log_engine(f"Unregistered renderer for '{type_tag}'")
        return removed

    def is_registered(self, type_tag: str) -> bool:
        return type_tag in self.registry

    def renderer_for(self, cell: Cell) -> Renderer:
        """Renderer of a cell's type; unknown types paint as blank"""
        renderer = self.registry.get(cell.type)
        if renderer is None:
            if cell.type not in self._unknown_types:
                self._unknown_types.add(cell.type)
                log_engine(f"No renderer for type '{cell.type}', painting as {BLANK}")
            renderer = self.registry.resolve(BLANK)
        return renderer

    # =========================================================================
    # CELLS AND GEOMETRY
    # =========================================================================

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        return self.grid.get_cell(x, y)

    def surface_size(self) -> Tuple[int, int]:
        return self.grid.surface_size()

    def cell_inner_coordinates(self, cell: Cell) -> CellCoordinates:
        return self.grid.cell_inner_coordinates(cell.x, cell.y)

    def cell_position(self, px: int, py: int) -> Optional[Tuple[int, int]]:
        return self.grid.cell_position(px, py)

    def cell_at_pixel(self, px: int, py: int) -> Optional[Cell]:
        position = self.grid.cell_position(px, py)
        if position is None:
            return None
        return self.grid.get_cell(*position)

    def assign(self, cell: Cell, type_tag: str, orientation: Orientation) -> bool:
        """
        Give a cell a type and orientation, copying the type's priority.

        Returns:
            False (cell untouched) if the type has no renderer
        """
        renderer = self.registry.get(type_tag)
        if renderer is None:
            return False
        cell.type = type_tag
        cell.orientation = orientation
        cell.priority = renderer.priority
        return True

    # =========================================================================
    # SELECTED TYPE / ORIENTATION
    # =========================================================================

    def set_selected_type(self, type_tag: str):
        type_tag = type_tag.strip()
        if not self.is_registered(type_tag):
            log_engine(f"Selected type '{type_tag}' has no renderer; selections will not be applied")
        self.selected_type = type_tag

    def set_selected_orientation(self, orientation: Union[str, Orientation]):
        """
        Raises:
            ValueError: If the orientation name is unknown
        """
        if not isinstance(orientation, Orientation):
            orientation = Orientation.parse(orientation)
        self.selected_orientation = orientation

    def selected_renderer(self) -> Optional[Renderer]:
        return self.registry.get(self.selected_type)

    # =========================================================================
    # DRAW SESSIONS
    # =========================================================================

    def start_draw_session(self):
        """
        Raises:
            DrawSessionError: If a session is already active
        """
        try:
            self.session.begin()
        except DrawSessionError:
            log_engine("start_draw_session() called while a session is active")
            raise

    def end_draw_session(self):
        self.session.end()
        self._notify_changed()

    @contextmanager
    def draw_session(self) -> Iterator[DrawSession]:
        """Pair start_draw_session() and end_draw_session() around a block"""
        self.start_draw_session()
        try:
            yield self.session
        finally:
            self.end_draw_session()

    # =========================================================================
    # PAINTING
    # =========================================================================

    def draw_cell(self, cell: Cell, coords: Optional[CellCoordinates] = None,
                  context: Optional[PaintContext] = None) -> bool:
        """
        Paint a cell with its type's renderer.

        Inside a draw session a cell already painted in the session is skipped.

        Returns:
            True if the cell was painted
        """
        if self.session.contains(cell):
            return False

        renderer = self.renderer_for(cell)
        renderer.draw(cell, coords, context or PaintContext())
        self.session.record(cell)

        if not self.session.active:
            self._notify_changed()
        return True

    def cascade(self, origin: Cell):
        """
        Repaint the existing neighbors of a freshly painted cell.

        Neighbors repaint in ascending priority so the highest priority
        type is painted last. Each repaint leaves the border piece facing
        the origin alone and does not cascade further.

        Raises:
            CascadeDepthError: If called from inside a cascade
        """
        if self._cascade_depth >= MAX_CASCADE_DEPTH:
            raise CascadeDepthError(
                f"Cascade from {origin!r} at depth {self._cascade_depth}; "
                f"cascaded repaints must set ignore_neighbors")

        neighbors = self.grid.neighbors(origin)
        neighbors.sort(key=lambda item: item[1].priority)

        self._cascade_depth += 1
        try:
            for direction, neighbor in neighbors:
                context = CASCADE_CONTEXT.suppressing(direction.opposite)
                self.renderer_for(neighbor).draw(neighbor, None, context)
        finally:
            self._cascade_depth -= 1

    @property
    def cascade_depth(self) -> int:
        return self._cascade_depth

    def paint_edges(self, cell: Cell, coords: Optional[CellCoordinates], flags: EdgeFlags,
                    color: Color, edge_percentage: float = 1.0) -> int:
        return self.compositor.paint_edges(cell, coords, flags, color, edge_percentage)

    def fill_cell(self, cell: Cell, coords: Optional[CellCoordinates], color: Color) -> int:
        """Fill a cell interior in one buffer transaction"""
        if coords is None:
            coords = self.cell_inner_coordinates(cell)
        with self.surface.transaction() as data:
            return fill_rect(data, self.surface.width, self.surface.height,
                             coords.x0, coords.y0, coords.x1, coords.y1, color)

    def draw_grid(self):
        """
        Draw every grid line pixel by pixel with the rasterizer.

        Lines are `grid_line_width` pixels thick, starting at pixel 0 and
        repeating every cell_size + grid_line_width pixels.
        """
        width, height = self.surface.width, self.surface.height
        line_width = self.config.grid_line_width
        stride = self.config.cell_size + line_width
        color = self.config.grid_color

        with self.surface.transaction() as data:
            for x in range(0, width, stride):
                for offset in range(line_width):
                    draw_line(data, width, height, x + offset, 0, x + offset, height - 1, color)
            for y in range(0, height, stride):
                for offset in range(line_width):
                    draw_line(data, width, height, 0, y + offset, width - 1, y + offset, color)

        self._notify_changed()

    def redraw_all(self):
        """
        Clear the surface, draw the grid and repaint every cell in one session.

        Every cell is repainted, so no cascade is needed.
        """
        self.surface.fill(self.config.background_color)
        self.draw_grid()
        context = PaintContext(ignore_neighbors=True)
        with self.draw_session():
            for cell in self.grid.cells():
                self.draw_cell(cell, None, context)
        log_engine("Full redraw complete")

    def draw_cells(self, cells: List[Cell]):
        """Paint a batch of cells inside one draw session"""
        with self.draw_session():
            for cell in cells:
                self.draw_cell(cell)

    def _notify_changed(self):
        if self.on_surface_changed:
            self.on_surface_changed()
