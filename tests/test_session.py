# tests/test_session.py

import pytest

from dungeonmapper.core.errors import DrawSessionError
from dungeonmapper.core.grid import Cell
from dungeonmapper.core.session import DrawSession


def test_session_records_cells_only_while_active():
    session = DrawSession()
    cell = Cell(0, 0)

    session.record(cell)
    assert not session.contains(cell)

    session.begin()
    assert not session.contains(cell)
    session.record(cell)
    assert session.contains(cell)
    assert not session.contains(Cell(0, 0))

    session.end()
    assert not session.active
    assert not session.contains(cell)
    assert len(session) == 0


def test_nested_begin_raises_and_keeps_state():
    session = DrawSession()
    cell = Cell(1, 1)
    session.begin()
    session.record(cell)

    with pytest.raises(DrawSessionError):
        session.begin()

    assert session.active
    assert session.contains(cell)


def test_end_without_begin_raises():
    with pytest.raises(DrawSessionError):
        DrawSession().end()


def test_engine_draws_each_cell_once_per_session(engine):
    cell = engine.get_cell(2, 2)

    engine.start_draw_session()
    assert engine.draw_cell(cell)
    writes = engine.surface.writes
    assert not engine.draw_cell(cell)
    assert engine.surface.writes == writes
    engine.end_draw_session()

    assert engine.draw_cell(cell)


def test_engine_draws_every_time_without_session(engine):
    cell = engine.get_cell(0, 0)
    assert engine.draw_cell(cell)
    assert engine.draw_cell(cell)


def test_engine_session_context_notifies_once(engine):
    calls = []
    engine.on_surface_changed = lambda: calls.append(1)

    with engine.draw_session():
        for cell in [engine.get_cell(0, 0), engine.get_cell(1, 0), engine.get_cell(0, 0)]:
            engine.draw_cell(cell)
        assert calls == []

    assert calls == [1]
    assert not engine.session.active


def test_engine_rejects_nested_sessions(engine):
    with engine.draw_session():
        with pytest.raises(DrawSessionError):
            engine.start_draw_session()
        assert engine.session.active


def test_cascade_repaints_are_not_recorded(engine):
    origin = engine.get_cell(2, 2)
    neighbor = engine.get_cell(2, 1)

    with engine.draw_session():
        engine.draw_cell(origin)
        assert engine.session.contains(origin)
        assert not engine.session.contains(neighbor)
        assert engine.draw_cell(neighbor)
