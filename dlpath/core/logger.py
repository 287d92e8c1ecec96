"""Logging setup shared by every module."""

import logging
import sys

from dlpath.config import env

_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str) -> logging.Logger:
    """Return a configured logger for ``name``.

    Handlers are attached once per logger; repeated calls with the same name
    return the existing instance untouched.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, env.LOG_LEVEL, logging.INFO))
    logger.propagate = False
    formatter = logging.Formatter(_FORMAT, _DATE_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if env.ENABLE_LOGGING:
        try:
            env.LOG_DIR.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(env.LOG_DIR / "dlpath.log", encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"File logging disabled, cannot write to {env.LOG_DIR}: {e}")

    return logger
