import logging
import os
from logging.handlers import RotatingFileHandler

from config import LOG_PATH

APP_LOGGER = 'tripvault'


def _default_log_path() -> str:
    logs_dir = os.path.join(os.path.abspath(os.path.dirname(__file__)), '..', 'logs')
    os.makedirs(logs_dir, exist_ok=True)
    return os.path.join(logs_dir, 'api.log')


def setup_api_logger(log_path: str | None = None) -> logging.Logger:
    """Attach a rotating file handler (LOG_PATH or ./logs/api.log) to the app logger.

    Service loggers from get_logger() propagate here, so one handler covers
    API errors, uploads and the vision calls.
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(logging.INFO)

    # called again by tests and reloads
    if logger.handlers:
        return logger

    handler = RotatingFileHandler(log_path or LOG_PATH or _default_log_path(),
                                  maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f'{APP_LOGGER}.{name}')
