"""Logging configuration helpers."""

import logging


def configure_logging(level: str = "INFO") -> None:
    """Route ``seminar_tickets`` logs to one stream handler at ``level``.

    Safe to call repeatedly; later calls only adjust the level.
    """
    logger = logging.getLogger("seminar_tickets")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
