import logging

from coffee_guide.app_logging import configure_logging


def test_configure_logging_idempotent():
    logger = logging.getLogger("coffee_guide")
    logger.handlers.clear()
    try:
        configure_logging()
        first_count = len(logger.handlers)

        configure_logging("debug")
        second_count = len(logger.handlers)

        assert first_count == 1
        assert second_count == 1
        assert logger.level == logging.DEBUG
    finally:
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
