"""Logging configuration helpers."""

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the app logger and set its level.

    Outbound request logs from httpx are kept at WARNING, since every chat
    message can fan out to several upstream APIs.
    """
    logger = logging.getLogger("fitness_coach")
    logger.setLevel(level.upper())
    logging.getLogger("httpx").setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
