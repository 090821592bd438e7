"""Logging setup for the CLI and the TUI."""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str, log_file: Optional[Path] = None) -> None:
    """Configure the ``ftool`` logger.

    The TUI owns the terminal, so it logs to ``log_file``. One-shot commands
    pass ``None`` and log to stderr.
    """
    logger = logging.getLogger("ftool")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
