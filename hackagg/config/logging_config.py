# hackagg/config/logging_config.py

"""Per-run timestamped logging configuration for hackagg.

Each launch (CLI query, health check or API server) writes one log file
in ``logs/`` named after the launch time, e.g.
``logs/run_20261019_153045.log``.  Every ``hackagg.*`` logger
propagates to it, so adapter failures, normalization drops and cache
refreshes end up side by side.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from hackagg.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(console_level: int = logging.WARNING) -> Path:
    """Attach the run's file and stderr handlers to the ``hackagg`` logger.

    Calling it again (tests, server reloads) adds nothing and returns
    the file already in use.

    Returns:
        Path of this run's log file.
    """
    project_logger = logging.getLogger("hackagg")
    project_logger.setLevel(logging.DEBUG)

    for existing in project_logger.handlers:
        if isinstance(existing, logging.FileHandler):
            return Path(existing.baseFilename)

    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Settings.LOGS_DIR / f"run_{stamp}.log"

    project_logger.addHandler(
        _handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _FILE_FORMAT,
        )
    )
    project_logger.addHandler(
        _handler(
            logging.StreamHandler(sys.stderr), console_level, _CONSOLE_FORMAT
        )
    )
    project_logger.info("Logging initialised, log file: %s", log_file)
    return log_file
