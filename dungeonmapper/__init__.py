"""
Dungeon Mapper - A tile-grid map editor with seamless, neighbor-aware tile borders.
"""

from .core.engine import MappingEngine
from .core.config import MapperConfig

__version__ = '1.0.0'
__all__ = [
    'MappingEngine',
    'MapperConfig',
]
