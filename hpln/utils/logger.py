import logging
import sys

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name, level=logging.INFO):
    """Return a named logger writing to stderr.

    stdout is reserved for the computed N, so every handler goes to stderr.
    Calling this twice for the same name only updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def set_level(level):
    """Set the level on every logger in the hpln namespace."""
    for name, obj in logging.Logger.manager.loggerDict.items():
        if name == "hpln" or name.startswith("hpln."):
            if isinstance(obj, logging.Logger):
                obj.setLevel(level)
