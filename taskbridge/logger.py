# taskbridge/logger.py

import logging
import os

from tqdm import tqdm

from .config import Config


class TqdmLoggingHandler(logging.Handler):
    def __init__(self, level=logging.NOTSET):
        super().__init__(level)

    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg)
            self.flush()
        except Exception:
            self.handleError(record)


class CustomFormatter(logging.Formatter):
    """Custom formatter adding color to the log output"""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    format = (
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s (%(filename)s:%(lineno)d)"
    )

    FORMATS = {
        logging.DEBUG: grey + format + reset,
        logging.INFO: grey + format + reset,
        logging.WARNING: yellow + format + reset,
        logging.ERROR: red + format + reset,
        logging.CRITICAL: bold_red + format + reset,
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


def setup_logger(name, log_file=None, level=logging.INFO):
    """Set up a named logger; calling it again for the same name is a no-op"""

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    c_handler = TqdmLoggingHandler()
    c_handler.setFormatter(CustomFormatter())
    logger.addHandler(c_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        f_handler = logging.FileHandler(log_file)
        f_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(f_handler)

    return logger


def get_logger(name):
    """Child logger of the package logger, e.g. taskbridge.jira"""
    return logging.getLogger(f"taskbridge.{name}")


logger = setup_logger(
    "taskbridge",
    Config.LOG_FILE,
    getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
)
