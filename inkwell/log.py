"""Logging setup for Inkwell."""

import logging
import sys

DEVELOPMENT_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(filename)s:%(lineno)d > %(message)s"
PRODUCTION_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

_HANDLER_NAME = "inkwell-console"


def configure_logging(environment: str = "development") -> logging.Logger:
    """Attach a console handler to the ``inkwell`` logger.

    Development logs at DEBUG with the caller location; every other
    environment logs at INFO. Calling it again replaces the handler.
    """
    logger = logging.getLogger("inkwell")
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    development = environment == "development"
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            DEVELOPMENT_FORMAT if development else PRODUCTION_FORMAT,
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if development else logging.INFO)
    return logger
