# tests/conftest.py

import pytest

from PyQt6 import QtCore

from dungeonmapper.core.config import MapperConfig
from dungeonmapper.core.engine import MappingEngine


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """Signals and QSettings only need a core application, no display"""
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


@pytest.fixture
def config():
    # 5x5 cells of 30px with 5px grid lines -> 180x180 surface
    return MapperConfig(width=5, height=5, cell_size=30, grid_line_width=5)


@pytest.fixture
def engine(config):
    return MappingEngine(config)
