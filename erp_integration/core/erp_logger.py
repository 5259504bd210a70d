"""
Dedicated logger for the ERP integration.

Everything the integration reports ends up in its own log file
(settings.log_file) and can be echoed to a console stream at the same time.
"""
import logging
import os
from typing import Optional, TextIO

from erp_integration.core.config import settings

ERP_LOGGER_NAME = "erp_integration"
LOG_FORMAT = "[%(asctime)s] %(name)s.%(levelname)s: %(message)s"


def configure_erp_logging(log_file: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Attach the ERP log file handler to the integration logger.

    Calling it again with the same file is a no-op.

    Args:
        log_file: Path of the log file (defaults to settings.log_file)
        level: Logging level name (defaults to settings.log_level)

    Returns:
        The configured integration logger
    """
    log_file = log_file or settings.log_file
    level = (level or settings.log_level).upper()

    logger = logging.getLogger(ERP_LOGGER_NAME)
    logger.setLevel(level)

    target = os.path.abspath(log_file)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return logger

    directory = os.path.dirname(target)
    if directory:
        os.makedirs(directory, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


class ErpIntegrationLogger:
    """Writes integration messages to the ERP log and, optionally, to a console stream."""

    def __init__(self, logger: Optional[logging.Logger] = None, output: Optional[TextIO] = None):
        self.logger = logger or logging.getLogger(ERP_LOGGER_NAME)
        self.output = output

    def _echo(self, msg: str, output: Optional[TextIO]) -> None:
        stream = output or self.output
        if stream is not None:
            stream.write(msg + "\n")

    def info(self, msg: str, output: Optional[TextIO] = None) -> None:
        self._echo(msg, output)
        self.logger.info(msg)

    def error(self, msg: str, output: Optional[TextIO] = None) -> None:
        self._echo(msg, output)
        self.logger.error(msg)

    def comment(self, msg: str, output: Optional[TextIO] = None) -> None:
        # comments are informational notes, logged at INFO level
        self._echo(msg, output)
        self.logger.info(msg)
