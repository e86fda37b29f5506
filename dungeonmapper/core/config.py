"""
Mapper configuration - Engine settings and QSettings persistence of editor preferences

Only preferences are stored (grid dimensions, colours, last used type and
orientation). Map contents are never persisted.
"""
from typing import Any, Dict, Optional
from dataclasses import dataclass

from PyQt6 import QtCore

from .grid import Orientation
from .surface import Color


@dataclass
class MapperConfig:
    """
    Engine configuration, fixed for the lifetime of a MappingEngine.

    Attributes:
        width: Grid width in cells
        height: Grid height in cells
        cell_size: Pixel size of a cell interior
        grid_line_width: Pixel width of grid lines
        selected_type: Type tag applied by the next committed selection
        selected_orientation: Orientation applied by the next committed selection
    """
    width: int = 20
    height: int = 20
    cell_size: int = 20
    grid_line_width: int = 1

    background_color: Color = Color(32, 32, 32)
    grid_color: Color = Color(255, 255, 255, 0.5)
    blank_color: Color = Color(255, 255, 255)
    wall_color: Color = Color(64, 64, 64)
    highlight_color: Color = Color(0, 0, 255, 0.5)

    selected_type: str = "blank"
    selected_orientation: str = "north"

    def validate(self) -> 'MapperConfig':
        """
        Check the configuration.

        Raises:
            ValueError: On non-positive grid or cell size, negative line width
                or an unknown orientation
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid size must be positive, got {self.width}x{self.height}")
        if self.cell_size <= 0:
            raise ValueError(f"Cell size must be positive, got {self.cell_size}")
        if self.grid_line_width < 0:
            raise ValueError(f"Grid line width must not be negative, got {self.grid_line_width}")
        Orientation.parse(self.selected_orientation)
        return self


# Settings key -> (group, config attribute)
SETTING_KEYS = {
    'Width': ('Grid', 'width'),
    'Height': ('Grid', 'height'),
    'CellSize': ('Grid', 'cell_size'),
    'GridLineWidth': ('Grid', 'grid_line_width'),
    'BackgroundColor': ('Colors', 'background_color'),
    'GridColor': ('Colors', 'grid_color'),
    'BlankColor': ('Colors', 'blank_color'),
    'WallColor': ('Colors', 'wall_color'),
    'HighlightColor': ('Colors', 'highlight_color'),
    'SelectedType': ('Editor', 'selected_type'),
    'SelectedOrientation': ('Editor', 'selected_orientation'),
}


def _full_key(name: str) -> str:
    group = SETTING_KEYS[name][0] if name in SETTING_KEYS else 'Main'
    return f"{group}/{name}"


def create_settings(path: Optional[str] = None) -> QtCore.QSettings:
    """Settings store: an INI file when a path is given, otherwise the per-user native store"""
    if path is not None:
        return QtCore.QSettings(path, QtCore.QSettings.Format.IniFormat)
    return QtCore.QSettings("DungeonMapper", "DungeonMapper")


def setting(settings: QtCore.QSettings, name: str, default=None):
    """
    Thin wrapper around QSettings that properly handles type conversion
    """
    full_key = _full_key(name)
    if not settings.contains(full_key):
        return default

    value = settings.value(full_key)

    # Handle None/null values
    if value is None or value == 'None' or value == '@Invalid()':
        return default

    if default is None:
        return value

    target_type = type(default)

    # Handle bool specially (QSettings returns strings 'true'/'false' from INI files)
    if target_type is bool:
        if isinstance(value, bool):
            return value
        return value in ('true', 'True', '1', 1)

    try:
        if target_type is Color:
            if isinstance(value, list):
                # INI files split comma separated strings into lists
                value = ','.join(value)
            return value if isinstance(value, Color) else Color.parse(str(value))
        if target_type in (int, float, str):
            return target_type(value)
    except (ValueError, TypeError):
        return default
    return value


def set_setting(settings: QtCore.QSettings, name: str, value: Any):
    """
    Thin wrapper around QSettings that stores values in their group
    """
    assert isinstance(name, str)
    if isinstance(value, Color):
        value = value.to_hex()
    settings.setValue(_full_key(name), value)


def load_config(settings: QtCore.QSettings, base: Optional[MapperConfig] = None) -> MapperConfig:
    """
    Build a MapperConfig from stored preferences.

    Missing or unreadable keys keep the value of `base` (defaults if None).

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    config = base or MapperConfig()
    values: Dict[str, Any] = {}
    for name, (_, attribute) in SETTING_KEYS.items():
        values[attribute] = setting(settings, name, getattr(config, attribute))
    return MapperConfig(**values).validate()


def save_config(settings: QtCore.QSettings, config: MapperConfig):
    """Store every preference of a configuration"""
    for name, (_, attribute) in SETTING_KEYS.items():
        set_setting(settings, name, getattr(config, attribute))
    settings.sync()
