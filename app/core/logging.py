import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_handler: logging.Handler | None = None


def setup_logging(level: str | None = None) -> None:
    """
    Configure the root logger with a single stdout handler.
    Safe to call more than once; modules log through logging.getLogger(__name__).
    """
    global _handler

    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if _handler is not None:
        return

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(_handler)
