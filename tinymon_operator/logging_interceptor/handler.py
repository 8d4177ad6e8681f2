import inspect
import logging
import os
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """Route stdlib logging records (kopf, kubernetes, urllib3) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that issued the logging call so loguru reports the right origin
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = None, fmt: str = None) -> None:
    """Configure loguru as the single log sink.

    Args:
        level: Minimum level, defaults to the LOG_LEVEL env var or INFO
        fmt: "text" or "json", defaults to the LOG_FORMAT env var or text
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    fmt = (fmt or os.getenv("LOG_FORMAT", "text")).lower()

    logger.remove()
    logger.add(sys.stderr, level=level, serialize=(fmt == "json"))

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for noisy in ("urllib3", "kubernetes.client.rest"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(f"Logging configured with level={level} format={fmt}")
