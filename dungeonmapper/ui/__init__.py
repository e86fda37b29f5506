"""
UI components for Dungeon Mapper
"""

# Defer all imports to avoid QWidget creation before QApplication is ready
# These will be imported lazily when needed

__all__ = [
    'MapCanvas',
    'MapControls',
    'MapperWindow',
]
