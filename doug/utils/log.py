"""Logging setup for the command-line interface."""

import logging
from pathlib import Path
from typing import Optional

from platformdirs import user_log_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_file() -> Path:
    """Location of the debug log file."""
    return Path(user_log_dir("doug")) / "doug.log"


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Configure logging for one CLI invocation.

    Warnings always go to stderr. With ``verbose``, debug records go to
    stderr and to a log file as well.
    """
    handlers: list = [logging.StreamHandler()]
    if verbose:
        log_file = log_file or get_log_file()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
