"""
Logging setup: console output plus the append-only error log
"""

import logging
import sys

from .config import Settings

PACKAGE_LOGGER = "ga4cli"
ERROR_LOG_FORMAT = "[%(asctime)s] [%(context)s] %(message)s"

logger = logging.getLogger(__name__)


class _ContextFilter(logging.Filter):
    """Routes log_error records to the error log and keeps them off the console"""

    def __init__(self, with_context: bool):
        super().__init__()
        self.with_context = with_context

    def filter(self, record: logging.LogRecord) -> bool:
        return hasattr(record, "context") == self.with_context


def configure_logging(settings: Settings) -> None:
    """Attach console and error-log handlers to the package logger."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(settings.log_level.upper())
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(_ContextFilter(with_context=False))
    package_logger.addHandler(console)

    settings.ensure_config_dir()
    error_log = logging.FileHandler(settings.error_log_file, encoding="utf-8", delay=True)
    error_log.setLevel(logging.ERROR)
    error_log.terminator = "\n\n"
    error_log.addFilter(_ContextFilter(with_context=True))
    error_log.setFormatter(logging.Formatter(ERROR_LOG_FORMAT))
    package_logger.addHandler(error_log)
    package_logger.propagate = False


def log_error(error: BaseException, context: str = "unknown") -> None:
    """Record a failure with its traceback in the error log."""
    logger.error(
        str(error) or error.__class__.__name__,
        exc_info=(type(error), error, error.__traceback__),
        extra={"context": context}
    )
