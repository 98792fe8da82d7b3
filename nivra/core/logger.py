import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the root logger (idempotent)."""
    global _handler
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    return logger
