"""
Mapper Logging - File and console logging for Dungeon Mapper debugging
"""
from datetime import datetime
from pathlib import Path

# Log file handle
_log_file = None
_log_enabled = True

LOG_FILE_NAME = "dungeonmapper_debug.log"


def init_logging(log_dir: str = None):
    """Initialize file logging for the mapper"""
    global _log_file

    if log_dir is None:
        # Default to the directory containing the package
        log_dir = Path(__file__).parent.parent.parent

    log_path = Path(log_dir) / LOG_FILE_NAME

    close_logging()
    try:
        # Clear previous log
        _log_file = open(log_path, 'w', encoding='utf-8')
        _log_file.write(f"=== Dungeon Mapper Debug Log - {datetime.now().isoformat()} ===\n\n")
        _log_file.flush()
        print(f"[DungeonMapper] Logging to: {log_path}")
    except OSError as e:
        print(f"[DungeonMapper] Warning: Could not create log file: {e}")
        _log_file = None


def log(message: str, prefix: str = "[DungeonMapper]"):
    """Log a message to both console and file"""
    global _log_file

    full_message = f"{prefix} {message}"

    # Always print to console
    print(full_message)

    # Write to file if available
    if _log_file and _log_enabled:
        try:
            _log_file.write(full_message + "\n")
            _log_file.flush()
        except OSError as e:
            print(f"[DungeonMapper] Warning: Log file write failed, file logging disabled: {e}")
            _log_file = None


def log_engine(message: str):
    """Log a MappingEngine message"""
    log(message, "[MappingEngine]")


def log_renderer(message: str):
    """Log a Renderer message"""
    log(message, "[Renderer]")


def log_selection(message: str):
    """Log a SelectionController message"""
    log(message, "[SelectionController]")


def log_ui(message: str):
    """Log a UI message"""
    log(message, "[MapperUI]")


def close_logging():
    """Close the log file"""
    global _log_file
    if _log_file:
        try:
            _log_file.close()
        except OSError as e:
            print(f"[DungeonMapper] Warning: Could not close log file: {e}")
        _log_file = None


def set_logging_enabled(enabled: bool):
    """Enable or disable file logging"""
    global _log_enabled
    _log_enabled = enabled


def get_log_path() -> str:
    """Path of the open log file, or None when logging only to the console"""
    if _log_file is None:
        return None
    return _log_file.name
