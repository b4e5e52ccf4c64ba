"""Tests for stability_client.logging_config."""

import logging

from stability_client.logging_config import configure_logging


def test_configure_logging_sets_package_level():
    logger = logging.getLogger("stability_client")
    previous = logger.level
    try:
        configure_logging(logging.DEBUG)
        assert logger.level == logging.DEBUG

        configure_logging("WARNING")
        assert logger.level == logging.WARNING
    finally:
        logger.setLevel(previous)


def test_package_has_null_handler():
    import stability_client  # noqa: F401

    handlers = logging.getLogger("stability_client").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)
