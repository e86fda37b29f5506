"""
Pixel surface - RGBA pixel buffer shared by every paint operation

The surface only offers coarse access: the whole buffer is read with
get_image_data() and written back with put_image_data(). Painters batch all
their pixel writes between those two calls inside transaction().
"""
from typing import Iterator, NamedTuple, Tuple
from contextlib import contextmanager
import threading

from .errors import SurfaceTransactionError


class Color(NamedTuple):
    """RGBA colour, channels 0-255 and alpha 0.0-1.0"""
    r: int
    g: int
    b: int
    a: float = 1.0

    def to_bytes(self) -> Tuple[int, int, int, int]:
        """Channel values as stored in the buffer"""
        return (self.r, self.g, self.b, int(round(self.a * 255)))

    def over(self, base: 'Color') -> 'Color':
        """
        Source-over blend of this colour on top of an opaque base colour.

        Args:
            base: Colour underneath

        Returns:
            Blended opaque colour
        """
        a = self.a
        return Color(
            int(round(self.r * a + base.r * (1 - a))),
            int(round(self.g * a + base.g * (1 - a))),
            int(round(self.b * a + base.b * (1 - a))),
            1.0,
        )

    @classmethod
    def from_bytes(cls, r: int, g: int, b: int, a: int) -> 'Color':
        return cls(r, g, b, a / 255)

    @classmethod
    def parse(cls, text: str) -> 'Color':
        """
        Parse '#rrggbb', '#rrggbbaa' or 'r,g,b[,a]' (alpha as 0.0-1.0).

        Raises:
            ValueError: If the text is not a colour
        """
        text = text.strip()
        if text.startswith('#'):
            digits = text[1:]
            if len(digits) not in (6, 8):
                raise ValueError(f"Invalid colour: {text!r}")
            channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
            alpha = channels[3] / 255 if len(channels) == 4 else 1.0
            return cls(channels[0], channels[1], channels[2], alpha)

        parts = [p.strip() for p in text.split(',')]
        if len(parts) not in (3, 4):
            raise ValueError(f"Invalid colour: {text!r}")
        alpha = float(parts[3]) if len(parts) == 4 else 1.0
        return cls(int(parts[0]), int(parts[1]), int(parts[2]), alpha)

    def to_hex(self) -> str:
        return '#' + ''.join(f'{channel:02x}' for channel in self.to_bytes())

    def __str__(self) -> str:
        return f"{self.r},{self.g},{self.b},{self.a:g}"


def set_pixel(data: bytearray, surface_width: int, x: int, y: int, color: Color):
    """Write one pixel into a buffer obtained from get_image_data()"""
    n = (y * surface_width + x) * 4
    data[n:n + 4] = bytes(color.to_bytes())


def fill_rect(data: bytearray, surface_width: int, surface_height: int,
              x0: int, y0: int, x1: int, y1: int, color: Color) -> int:
    """
    Fill the inclusive rectangle (x0, y0)-(x1, y1), clipped to the surface.

    Returns:
        Number of pixels written
    """
    x0 = max(0, x0)
    y0 = max(0, y0)
    x1 = min(surface_width - 1, x1)
    y1 = min(surface_height - 1, y1)
    if x1 < x0 or y1 < y0:
        return 0

    row = bytes(color.to_bytes()) * (x1 - x0 + 1)
    for y in range(y0, y1 + 1):
        start = (y * surface_width + x0) * 4
        data[start:start + len(row)] = row
    return (x1 - x0 + 1) * (y1 - y0 + 1)


class PixelSurface:
    """
    In-memory RGBA drawing surface.

    Attributes:
        width, height: Pixel dimensions
        writes: Number of completed put_image_data() calls
    """

    def __init__(self, width: int, height: int, background: Color = Color(0, 0, 0, 0.0)):
        self.width = width
        self.height = height
        self.data = bytearray(bytes(background.to_bytes()) * (width * height))
        self.writes = 0
        self._lock = threading.Lock()

    def get_image_data(self) -> bytearray:
        """Copy of the whole RGBA buffer"""
        return bytearray(self.data)

    def put_image_data(self, data: bytearray):
        """Replace the whole RGBA buffer"""
        if len(data) != len(self.data):
            raise SurfaceTransactionError(
                f"Buffer size {len(data)} does not match surface {self.width}x{self.height}")
        self.data[:] = data
        self.writes += 1

    @contextmanager
    def transaction(self) -> Iterator[bytearray]:
        """
        Read-modify-write transaction over the whole buffer.

        Yields the buffer copy; it is written back when the block exits
        normally. Transactions never interleave.

        Raises:
            SurfaceTransactionError: If another transaction is open
        """
        if not self._lock.acquire(blocking=False):
            raise SurfaceTransactionError("Pixel buffer transaction already in progress")
        try:
            data = self.get_image_data()
            yield data
            self.put_image_data(data)
        finally:
            self._lock.release()

    @property
    def in_transaction(self) -> bool:
        return self._lock.locked()

    def pixel_at(self, x: int, y: int) -> Color:
        n = (y * self.width + x) * 4
        return Color.from_bytes(*self.data[n:n + 4])

    def raw_pixel_at(self, x: int, y: int) -> Tuple[int, int, int, int]:
        n = (y * self.width + x) * 4
        return tuple(self.data[n:n + 4])

    def fill(self, color: Color):
        """Fill the whole surface in one transaction"""
        with self.transaction() as data:
            fill_rect(data, self.width, self.height, 0, 0, self.width - 1, self.height - 1, color)
