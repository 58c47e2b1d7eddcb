# storefront/config/logging_config.py

"""Logging for one storefront run.

A launch writes everything from the ``storefront`` logger tree to
``logs/run_<YYYYMMDD_HHMMSS>.log``.  The terminal only gets records at
``Settings.CONSOLE_LOG_LEVEL`` and above (WARNING unless
``STOREFRONT_LOG_LEVEL`` says otherwise), so stderr stays quiet under
the TUI while sync failures the shopper already saw as a notification
are kept in the file with their tracebacks.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from storefront.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL)
    return level if isinstance(level, int) else logging.WARNING


def _current_log_file(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(console_level: int | None = None) -> Path:
    """Attach the per-run file and console handlers to ``storefront``.

    Safe to call more than once: later calls keep the first handlers and
    return the log file they already write to.

    Args:
        console_level: Overrides ``Settings.CONSOLE_LOG_LEVEL`` for stderr.

    Returns:
        The :class:`~pathlib.Path` of this run's log file.
    """
    root_logger = logging.getLogger("storefront")
    root_logger.setLevel(logging.DEBUG)

    current = _current_log_file(root_logger)
    if current is not None:
        return current

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(
        _console_level() if console_level is None else console_level
    )
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info(
        "Logging initialised, log file: %s (console at %s)",
        log_file,
        logging.getLevelName(console_handler.level),
    )
    return log_file
