import logging
import os
from typing import List

from pythonjsonlogger import jsonlogger

import settings

LOGGING_MESSAGE_FORMAT = "%(asctime)s %(name)-12s %(levelname)s %(message)s"


def _build_handlers() -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    # Tests only log to the console
    if not settings.is_test():
        log_dir = os.path.dirname(settings.LOG_FILE_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(settings.LOG_FILE_PATH))

    formatter = jsonlogger.JsonFormatter(LOGGING_MESSAGE_FORMAT)
    for handler in handlers:
        handler.setLevel(settings.LOG_LEVEL)
        handler.setFormatter(formatter)
    return handlers


class APILogger:
    """Owns the application logger, every module logs through it in JSON"""

    def __init__(self, _logger: logging.Logger):
        self.logger = _logger

    @classmethod
    def start_logger(cls) -> "APILogger":
        _logger = logging.getLogger(settings.APPLICATION_NAME)
        _logger.setLevel(settings.LOG_LEVEL)
        # Re-imports must not stack handlers
        if not _logger.handlers:
            for handler in _build_handlers():
                _logger.addHandler(handler)
        return cls(_logger)

    def get(self) -> logging.Logger:
        return self.logger


api_logger: APILogger = APILogger.start_logger()


def get() -> logging.Logger:
    return api_logger.get()
