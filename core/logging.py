import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure application-wide logging format.

    ``level`` may be a number or a level name in any case (``LOG_LEVEL=debug``).
    """
    if isinstance(level, str):
        level = level.strip().upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "rrule_decoder")
