"""
Dungeon Mapper entry point: python -m dungeonmapper
"""
import argparse
import sys

from PyQt6 import QtWidgets

from dungeonmapper.core.config import create_settings, load_config
from dungeonmapper.core.engine import MappingEngine
from dungeonmapper.core.logging import close_logging, init_logging, log


def parse_args(argv):
    parser = argparse.ArgumentParser(prog="dungeonmapper", description="Tile-grid dungeon map editor")
    parser.add_argument("--width", type=int, help="Grid width in cells")
    parser.add_argument("--height", type=int, help="Grid height in cells")
    parser.add_argument("--cell-size", type=int, help="Cell size in pixels")
    parser.add_argument("--line-width", type=int, help="Grid line width in pixels")
    parser.add_argument("--settings", help="INI file for preferences (default: per-user store)")
    parser.add_argument("--log-dir", help="Directory for dungeonmapper_debug.log")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    if args.log_dir:
        init_logging(args.log_dir)

    app = QtWidgets.QApplication(sys.argv[:1])
    settings = create_settings(args.settings)

    try:
        config = load_config(settings)
        if args.width is not None:
            config.width = args.width
        if args.height is not None:
            config.height = args.height
        if args.cell_size is not None:
            config.cell_size = args.cell_size
        if args.line_width is not None:
            config.grid_line_width = args.line_width
        engine = MappingEngine(config)
    except ValueError as e:
        log(f"Invalid configuration: {e}")
        return 2

    # Imported late so no widget module loads before the QApplication exists
    from dungeonmapper.ui.widget import MapperWindow

    window = MapperWindow(engine, settings)
    window.show()
    try:
        return app.exec()
    finally:
        close_logging()


if __name__ == "__main__":
    sys.exit(main())
