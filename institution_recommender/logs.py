# institution_recommender/logs.py
import os
import sys

from loguru import logger

from . import config

_LOGGER_CONFIGURED = False


def setup_logging(level=None, log_dir=None, force=False):
    """
    Configure the global loguru logger once.
    - stderr sink at `level`
    - optional daily-rotated file sink under `log_dir`
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return logger

    level = level or config.LOG_LEVEL
    log_dir = log_dir if log_dir is not None else config.LOG_DIR

    logger.remove()
    logger.add(sys.stderr, level=level, format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}")
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            sink=os.path.join(log_dir, "{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="30 days",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            enqueue=True,
        )

    _LOGGER_CONFIGURED = True
    return logger
