import logging
import os

from rich.logging import RichHandler

from config import LOG_PATH

BASE_LOGGER = "hlclone"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _base_logger():
    logger = logging.getLogger(BASE_LOGGER)
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)
        log_dir = os.path.dirname(LOG_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def get_logger(name=BASE_LOGGER):
    """Return a logger under the hlclone hierarchy; records go to LOG_PATH."""
    base = _base_logger()
    if name == BASE_LOGGER:
        return base
    if not name.startswith(BASE_LOGGER + "."):
        name = f"{BASE_LOGGER}.{name}"
    return logging.getLogger(name)


def enable_console_logging(level=logging.INFO):
    """Mirror hlclone logging to stderr through rich. Safe to call more than once."""
    base = _base_logger()
    for handler in base.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(level)
            return handler
    handler = RichHandler(level=level, show_path=False, markup=False)
    base.addHandler(handler)
    return handler
