"""Logging configuration for groove-locator"""
import copy
import logging
import sys
from pathlib import Path
from typing import Optional

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
SIMPLE_FORMAT = '[%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when its stream is a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',     # Cyan
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt=None, datefmt=None, stream=None):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.stream = stream if stream is not None else sys.stderr

    def format(self, record):
        """Format a copy of the record so other handlers see the plain level name."""
        color = self.LEVEL_COLORS.get(record.levelno)
        isatty = getattr(self.stream, 'isatty', None)
        if color and isatty is not None and isatty():
            record = copy.copy(record)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def log_file_path() -> Path:
    """Return the default debug log location."""
    return Path.home() / '.groove-locator' / 'groove-locator.log'


def _file_handler(log_file: Path) -> Optional[logging.Handler]:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, mode='w')  # Overwrite each run
    except OSError as e:
        print(f"Could not open log file {log_file}: {e}", file=sys.stderr)
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(verbose: bool = False, debug: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages with detailed formatting
        log_file: Write everything to this file; debug mode defaults it to
            ``~/.groove-locator/groove-locator.log``
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    if log_file is None and debug:
        log_file = log_file_path()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file is not None else level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_file is not None:
        file_handler = _file_handler(Path(log_file))
        if file_handler is not None:
            root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    if debug:
        console_handler.setFormatter(ColoredFormatter(DETAILED_FORMAT, DATE_FORMAT, stream=sys.stderr))
    else:
        console_handler.setFormatter(ColoredFormatter(SIMPLE_FORMAT, stream=sys.stderr))
    root_logger.addHandler(console_handler)

    # GitPython logs every Popen call at DEBUG
    logging.getLogger('git').setLevel(logging.DEBUG if debug else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance
    """
    for prefix in ('groove_locator.', 'services.'):
        if name.startswith(prefix):
            name = name[len(prefix):]
    return logging.getLogger(name)
