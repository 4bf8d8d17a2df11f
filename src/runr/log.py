"""
log - Logging setup for runr.

Modules log through logging.getLogger(__name__) under the "runr" hierarchy.
setup_logging() attaches a file handler (/var/log, falling back to the temp
dir) and a console handler that echoes records with coloured markers.
"""

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

from runr.ui import cyan, grey, red, yellow

LOGGER_NAME = "runr"


class ConsoleHandler(logging.Handler):
    """Echo log records to the terminal, one coloured line each."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.levelno >= logging.ERROR:
                print(red(f"  ✗  {message}"), file=sys.stderr)
            elif record.levelno >= logging.WARNING:
                print(yellow(f"  ⚠  {message}"))
            elif record.levelno >= logging.INFO:
                print(f"  {cyan('◇')}  {message}")
            else:
                print(grey(f"  ·  {message}"))
        except Exception:
            self.handleError(record)


def default_log_file() -> Path:
    # Try /var/log first, fall back to the temp dir
    log_dir = Path("/var/log")
    if not log_dir.exists() or not os.access(log_dir, os.W_OK):
        log_dir = Path(tempfile.gettempdir())
    return log_dir / "runr.log"


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None,
                  console: bool = True) -> logging.Logger:
    """Configure the runr logger; safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        ch = ConsoleHandler()
        ch.setLevel(logging.DEBUG if verbose else logging.INFO)
        logger.addHandler(ch)

    try:
        fh = logging.FileHandler(log_file or default_log_file(), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                                          datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(fh)
    except OSError:
        # No writable log location; console output still works
        pass

    return logger
