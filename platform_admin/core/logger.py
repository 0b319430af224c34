"""Console and file logging for platform-admin.

Every module logs through a child of the ``platform_admin`` logger. That
package logger owns a single RichHandler for the console; the CLI can add a
file handler next to it with setup_file_logging().
"""
import logging
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()

PACKAGE_LOGGER = "platform_admin"
LOG_FILE = Path.home() / ".platform-admin" / "logs" / "platform-admin.log"
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

_file_handler: Optional[logging.FileHandler] = None


def _package_logger() -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.INFO)
    return package_logger


def _writable_log_path(log_file: Optional[str]) -> Path:
    path = Path(log_file) if log_file else LOG_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        path = Path(tempfile.gettempdir()) / LOG_FILE.name
    return path


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Mirror platform-admin log records into a file.

    Only the first call in a process takes effect.

    Args:
        log_file: Path to log file (defaults to ~/.platform-admin/logs/platform-admin.log).
            Falls back to the system temp directory when its folder can't be created.
        verbose: Enable debug-level logging

    Returns:
        Path of the active log file
    """
    global _file_handler

    package_logger = _package_logger()
    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    level = logging.DEBUG if verbose else logging.INFO
    path = _writable_log_path(log_file)

    _file_handler = logging.FileHandler(path, encoding="utf-8")
    _file_handler.setLevel(level)
    _file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    package_logger.addHandler(_file_handler)
    package_logger.setLevel(level)

    package_logger.info(f"platform-admin logging initialized: {path}")
    return path


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the platform_admin hierarchy.

    Args:
        name: Logger name (typically __name__); names outside the package are nested under it

    Returns:
        Logger whose records reach the package console handler
    """
    _package_logger()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
