"""
Rasterizer - Bresenham line stepping for grid lines and drag selection
"""
from typing import Callable, List, Optional, Tuple

from .surface import Color, set_pixel


def rasterize(x0: int, y0: int, x1: int, y1: int,
              callback: Optional[Callable[[int, int], None]] = None) -> List[Tuple[int, int]]:
    """
    Bresenham's line algorithm.

    Generates every integer coordinate on the line from (x0, y0) to (x1, y1),
    both endpoints included, in stepping order. The result always has
    max(|dx|, |dy|) + 1 points, a single point when start == end.

    Works the same in pixel coordinates (grid lines) and in grid
    coordinates (cells crossed by a drag selection).

    Args:
        x0: Starting X coordinate
        y0: Starting Y coordinate
        x1: Ending X coordinate
        y1: Ending Y coordinate
        callback: Optional function called with (x, y) for each point as it is emitted

    Returns:
        List of (x, y) tuples along the line
    """
    points = []

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1

    err = (dx if dx > dy else -dy) / 2
    x, y = x0, y0
    while True:
        points.append((x, y))
        if callback is not None:
            callback(x, y)
        if x == x1 and y == y1:
            break
        e2 = err
        if e2 > -dx:
            err -= dy
            x += sx
        if e2 < dy:
            err += dx
            y += sy

    return points


def draw_line(data: bytearray, surface_width: int, surface_height: int,
              x0: int, y0: int, x1: int, y1: int, color: Color) -> int:
    """
    Rasterize a one pixel wide line into a buffer from PixelSurface.get_image_data().

    Points falling outside the surface are skipped.

    Returns:
        Number of pixels written
    """
    written = 0

    def plot(x, y):
        nonlocal written
        if 0 <= x < surface_width and 0 <= y < surface_height:
            set_pixel(data, surface_width, x, y, color)
            written += 1

    rasterize(x0, y0, x1, y1, plot)
    return written
