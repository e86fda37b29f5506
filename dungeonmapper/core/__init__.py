"""
Core compositing logic for Dungeon Mapper
"""

from .errors import MapperError, DrawSessionError, CascadeDepthError, SurfaceTransactionError
from .surface import Color, PixelSurface
from .rasterizer import rasterize, draw_line
from .grid import Cell, CellCoordinates, Direction, GridModel, Orientation
from .compositor import EdgeCompositor, EdgeFlags, EdgeStroke
from .renderers import (
    OFF_GRID, PaintContext, Renderer, RendererRegistry,
    BlankRenderer, WallRenderer, FillWallRenderer, DoorRenderer,
)
from .session import DrawSession
from .config import MapperConfig, load_config, save_config
from .engine import MappingEngine
from .selection import SelectionController, SelectionState

__all__ = [
    'MapperError',
    'DrawSessionError',
    'CascadeDepthError',
    'SurfaceTransactionError',
    'Color',
    'PixelSurface',
    'rasterize',
    'draw_line',
    'Cell',
    'CellCoordinates',
    'Direction',
    'GridModel',
    'Orientation',
    'EdgeCompositor',
    'EdgeFlags',
    'EdgeStroke',
    'OFF_GRID',
    'PaintContext',
    'Renderer',
    'RendererRegistry',
    'BlankRenderer',
    'WallRenderer',
    'FillWallRenderer',
    'DoorRenderer',
    'DrawSession',
    'MapperConfig',
    'load_config',
    'save_config',
    'MappingEngine',
    'SelectionController',
    'SelectionState',
]
