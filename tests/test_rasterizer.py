# tests/test_rasterizer.py

from dungeonmapper.core.rasterizer import draw_line, rasterize
from dungeonmapper.core.surface import Color, PixelSurface


def test_rasterize_steep_line_matches_bresenham():
    assert rasterize(0, 0, 3, 4) == [(0, 0), (1, 1), (1, 2), (2, 3), (3, 4)]


def test_rasterize_shallow_line():
    assert rasterize(0, 0, 3, 2) == [(0, 0), (1, 1), (2, 1), (3, 2)]


def test_rasterize_single_point():
    assert rasterize(4, 7, 4, 7) == [(4, 7)]


def test_rasterize_horizontal_and_vertical():
    assert rasterize(0, 0, 3, 0) == [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert rasterize(2, 3, 2, 0) == [(2, 3), (2, 2), (2, 1), (2, 0)]


def test_rasterize_reversed_direction_steps_backwards():
    points = rasterize(3, 0, 0, 0)
    assert points[0] == (3, 0)
    assert points[-1] == (0, 0)


def test_rasterize_point_count_and_endpoints():
    for x0, y0, x1, y1 in [(0, 0, 10, 3), (5, 5, -2, 9), (1, 8, 1, -4), (-3, -3, 4, 4)]:
        points = rasterize(x0, y0, x1, y1)
        assert len(points) == max(abs(x1 - x0), abs(y1 - y0)) + 1
        assert points[0] == (x0, y0)
        assert points[-1] == (x1, y1)


def test_rasterize_steps_are_adjacent():
    points = rasterize(0, 0, 7, -5)
    for (ax, ay), (bx, by) in zip(points, points[1:]):
        assert max(abs(bx - ax), abs(by - ay)) == 1


def test_rasterize_callback_sees_every_point_in_order():
    seen = []
    points = rasterize(0, 0, 2, 5, lambda x, y: seen.append((x, y)))
    assert seen == points


def test_draw_line_skips_points_outside_surface():
    surface = PixelSurface(4, 4)
    red = Color(255, 0, 0)
    with surface.transaction() as data:
        written = draw_line(data, 4, 4, -2, 1, 5, 1, red)

    assert written == 4
    for x in range(4):
        assert surface.raw_pixel_at(x, 1) == (255, 0, 0, 255)
    assert surface.raw_pixel_at(0, 0) == (0, 0, 0, 0)
