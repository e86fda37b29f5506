"""
Mapper errors - Exceptions raised by the compositing engine
"""


class MapperError(Exception):
    """Base class for Dungeon Mapper engine errors"""


class DrawSessionError(MapperError):
    """
    Raised when draw sessions are not paired correctly.

    begin() while a session is open, or end() without one, is a caller bug
    and is never recovered from inside the engine.
    """


class CascadeDepthError(MapperError):
    """Raised when a neighbor cascade is started from inside another cascade"""


class SurfaceTransactionError(MapperError):
    """Raised on overlapping pixel buffer transactions or a mis-sized buffer write"""
