"""Logging configuration for the show engine."""

import logging
import sys
import threading
import time
from pathlib import Path
from typing import Dict, Optional, Union

_last_log_times: Dict[str, float] = {}
_lock = threading.Lock()


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[Path] = None) -> logging.Logger:
    """Setup logging with console and optional file handlers."""

    logger = logging.getLogger("luminary")
    logger.setLevel(level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def log_throttled(
    logger: logging.Logger,
    key: str,
    *,
    interval_s: float,
    level: int,
    msg: str,
    exc: Optional[BaseException] = None,
) -> bool:
    """Log at most once per *interval_s* for a given *key*.

    Returns True if the message was logged.
    """

    now = time.monotonic()
    with _lock:
        last = _last_log_times.get(key)
        if last is not None and (now - last) < interval_s:
            return False
        _last_log_times[key] = now

    if exc is not None:
        logger.log(level, msg, exc_info=exc)
    else:
        logger.log(level, msg)
    return True
