# tests/test_renderers.py

import pytest

from dungeonmapper.core.compositor import EdgeStroke
from dungeonmapper.core.errors import CascadeDepthError
from dungeonmapper.core.grid import CARDINALS, Direction, Orientation
from dungeonmapper.core.renderers import (
    BLANK, DEFAULT_CONTEXT, DOOR, FILL_WALL, WALL, BlankRenderer, PaintContext, Renderer,
)
from dungeonmapper.core.surface import Color

RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)


class GreenRenderer(Renderer):
    priority = 4

    def edge_claims(self, cell):
        return {side: [EdgeStroke(GREEN)] for side in CARDINALS}


class RedRenderer(Renderer):
    priority = 5

    def edge_claims(self, cell):
        return {side: [EdgeStroke(RED)] for side in CARDINALS}


def recording_renderer(priority, drawn):
    class RecordingRenderer(Renderer):
        def draw(self, cell, coords=None, context=DEFAULT_CONTEXT):
            drawn.append((cell, context))
            super().draw(cell, coords, context)

    RecordingRenderer.priority = priority
    return RecordingRenderer


def place(engine, x, y, type_tag, orientation=Orientation.NORTH):
    cell = engine.get_cell(x, y)
    assert engine.assign(cell, type_tag, orientation)
    return cell


def test_builtin_renderers_and_priorities(engine):
    assert sorted(engine.registry.tags()) == sorted([BLANK, WALL, FILL_WALL, DOOR])
    priorities = {tag: engine.registry.get(tag).priority for tag in engine.registry.tags()}
    assert priorities == {BLANK: 0, WALL: 1, FILL_WALL: 2, DOOR: 3}


def test_assign_copies_priority_and_rejects_unknown_types(engine):
    cell = place(engine, 1, 1, DOOR, Orientation.EAST)
    assert cell.priority == 3
    assert cell.orientation is Orientation.EAST

    assert not engine.assign(cell, "lava", Orientation.NORTH)
    assert cell.type == DOOR


def test_unknown_type_paints_as_blank(engine):
    cell = engine.get_cell(1, 1)
    cell.type = "lava"
    engine.draw_cell(cell)
    assert engine.surface.raw_pixel_at(55, 55) == engine.config.blank_color.to_bytes()


def test_registry_replace_and_unregister(engine):
    renderer = engine.register_renderer(WALL, RedRenderer)
    assert engine.registry.get(WALL) is renderer
    assert renderer.type_tag == WALL

    assert engine.unregister_renderer(WALL)
    assert not engine.is_registered(WALL)
    assert not engine.unregister_renderer(WALL)
    assert isinstance(engine.registry.resolve(WALL), BlankRenderer)


def test_ignore_cell_leaves_body_untouched(engine):
    cell = engine.get_cell(1, 1)
    engine.draw_cell(cell, context=PaintContext(ignore_cell=True, ignore_neighbors=True))
    assert engine.surface.raw_pixel_at(55, 55) == engine.config.background_color.to_bytes()


def test_highlighted_cell_is_tinted(engine):
    cell = engine.get_cell(1, 1)
    cell.is_highlighted = True
    engine.draw_cell(cell)
    assert engine.surface.raw_pixel_at(55, 55) == (128, 128, 255, 255)


def test_higher_priority_wins_shared_edge_in_any_order(engine):
    engine.register_renderer("green", GreenRenderer)
    engine.register_renderer("red", RedRenderer)
    red = place(engine, 1, 1, "red")
    green = place(engine, 2, 1, "green")

    # Shared strip between (1, 1) and (2, 1) is x 70..74
    engine.draw_cell(red)
    engine.draw_cell(green)
    assert engine.surface.raw_pixel_at(72, 55) == RED.to_bytes()

    engine.draw_cell(green)
    engine.draw_cell(red)
    assert engine.surface.raw_pixel_at(72, 55) == RED.to_bytes()

    # Sides facing blank cells keep the type's own colour
    assert engine.surface.raw_pixel_at(107, 55) == GREEN.to_bytes()


def test_blank_neighbor_repaint_keeps_wall(engine):
    engine.redraw_all()
    wall = place(engine, 2, 2, WALL, Orientation.NORTH)
    engine.draw_cell(wall)
    wall_bytes = engine.config.wall_color.to_bytes()
    grid_bytes = engine.config.grid_color.to_bytes()

    # North strip of (2, 2) is y 70..74, x 75..104
    assert engine.surface.raw_pixel_at(90, 72) == wall_bytes
    # Lone wall does not run into the corners
    assert engine.surface.raw_pixel_at(72, 72) == grid_bytes
    # Other sides are plain grid lines
    assert engine.surface.raw_pixel_at(90, 107) == grid_bytes

    engine.draw_cell(engine.get_cell(2, 1))
    assert engine.surface.raw_pixel_at(90, 72) == wall_bytes


def test_adjacent_walls_join_across_corner(engine):
    engine.redraw_all()
    cells = [place(engine, 2, 2, WALL), place(engine, 3, 2, WALL)]
    engine.draw_cells(cells)

    assert engine.surface.raw_pixel_at(107, 72) == engine.config.wall_color.to_bytes()

    # Repainting the blank cells above keeps the joint
    engine.draw_cells([engine.get_cell(2, 1), engine.get_cell(3, 1)])
    assert engine.surface.raw_pixel_at(107, 72) == engine.config.wall_color.to_bytes()


def test_door_leaves_gap_in_wall(engine):
    engine.redraw_all()
    door = place(engine, 2, 2, DOOR, Orientation.NORTH)
    engine.draw_cell(door)
    wall_bytes = engine.config.wall_color.to_bytes()
    grid_bytes = engine.config.grid_color.to_bytes()

    # 30px side at 0.3 -> 9px posts at x 75..83 and 96..104
    assert engine.surface.raw_pixel_at(75, 72) == wall_bytes
    assert engine.surface.raw_pixel_at(83, 72) == wall_bytes
    assert engine.surface.raw_pixel_at(84, 72) == grid_bytes
    assert engine.surface.raw_pixel_at(90, 72) == grid_bytes
    assert engine.surface.raw_pixel_at(96, 72) == wall_bytes
    assert engine.surface.raw_pixel_at(104, 72) == wall_bytes


def test_fill_wall_merges_with_fill_wall_neighbors(engine):
    engine.redraw_all()
    cells = [place(engine, 1, 1, FILL_WALL), place(engine, 2, 1, FILL_WALL)]
    engine.draw_cells(cells)
    wall_bytes = engine.config.wall_color.to_bytes()

    assert engine.surface.raw_pixel_at(72, 55) == wall_bytes
    assert engine.surface.raw_pixel_at(55, 37) == engine.config.grid_color.to_bytes()


def test_fill_wall_merges_with_map_edge(engine):
    engine.redraw_all()
    corner = place(engine, 0, 0, FILL_WALL)
    engine.draw_cell(corner)
    wall_bytes = engine.config.wall_color.to_bytes()

    # Off-grid sides and the outer corner take the wall colour
    assert engine.surface.raw_pixel_at(2, 20) == wall_bytes
    assert engine.surface.raw_pixel_at(20, 2) == wall_bytes
    assert engine.surface.raw_pixel_at(2, 2) == wall_bytes
    # The side facing the blank neighbor stays a grid line
    assert engine.surface.raw_pixel_at(37, 20) == engine.config.grid_color.to_bytes()


def test_neighbor_compare_diagonals_need_both_cardinals(engine):
    for x, y in [(1, 1), (2, 1), (1, 2), (2, 2)]:
        place(engine, x, y, FILL_WALL)
    renderer = engine.registry.get(FILL_WALL)

    flags = renderer.neighbor_compare(engine.get_cell(1, 1), {FILL_WALL})
    assert flags.set_directions() == [Direction.EAST, Direction.SOUTH_EAST, Direction.SOUTH]

    # Diagonal match alone is not enough
    engine.assign(engine.get_cell(2, 1), BLANK, Orientation.NORTH)
    flags = renderer.neighbor_compare(engine.get_cell(1, 1), {FILL_WALL})
    assert flags.set_directions() == [Direction.SOUTH]


def test_cascade_repaints_neighbors_in_ascending_priority(engine):
    drawn = []
    engine.register_renderer(BLANK, recording_renderer(0, drawn))
    engine.register_renderer("low", recording_renderer(1, drawn))
    engine.register_renderer("high", recording_renderer(3, drawn))
    place(engine, 2, 1, "high")
    place(engine, 1, 2, "low")

    origin = place(engine, 2, 2, BLANK)
    engine.draw_cell(origin)

    assert drawn[0] == (origin, PaintContext())
    cascaded = drawn[1:]
    assert len(cascaded) == 8
    priorities = [cell.priority for cell, _ in cascaded]
    assert priorities == sorted(priorities)
    assert cascaded[-1][0] is engine.get_cell(2, 1)
    assert cascaded[-2][0] is engine.get_cell(1, 2)

    contexts = {cell.position: context for cell, context in cascaded}
    assert contexts[(2, 1)] == PaintContext(ignore_neighbors=True,
                                            ignore_edges=frozenset({Direction.SOUTH}))
    assert contexts[(1, 2)].ignore_edges == frozenset({Direction.EAST})
    assert contexts[(3, 3)].ignore_edges == frozenset({Direction.NORTH_WEST})
    assert engine.cascade_depth == 0


def test_cascade_from_corner_cell_visits_existing_neighbors_only(engine):
    drawn = []
    engine.register_renderer(BLANK, recording_renderer(0, drawn))
    engine.draw_cell(engine.get_cell(0, 0))
    assert len(drawn) == 1 + 3


def test_cascade_inside_cascade_raises(engine):
    class RogueRenderer(Renderer):
        def draw(self, cell, coords=None, context=DEFAULT_CONTEXT):
            super().draw(cell, coords, PaintContext())

    engine.register_renderer("rogue", RogueRenderer)
    place(engine, 2, 1, "rogue")

    with pytest.raises(CascadeDepthError):
        engine.draw_cell(engine.get_cell(2, 2))
    assert engine.cascade_depth == 0


def test_paint_context_suppressing_adds_directions():
    base = PaintContext(ignore_neighbors=True)
    context = base.suppressing(Direction.SOUTH).suppressing(Direction.EAST)

    assert context.ignore_neighbors
    assert not context.ignore_cell
    assert context.ignore_edges == frozenset({Direction.SOUTH, Direction.EAST})
    assert base.ignore_edges == frozenset()
