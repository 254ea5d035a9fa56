"""Logging setup for the API process."""

import logging

LOGGER_NAME = "macros_chef"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# httpx logs every supabase and openai request at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the package logger and set its level.

    Calling this again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
