"""Opt-in logging setup for scripts using the client.

The library itself only attaches a ``NullHandler`` to the ``stability_client``
logger; call ``configure_logging()`` from an application entry point to see
its output.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send log records to stderr with the standard format.

    Args:
        level: Level for the ``stability_client`` logger (e.g. ``logging.DEBUG``
            or ``"DEBUG"``)
    """
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("stability_client").setLevel(level)
