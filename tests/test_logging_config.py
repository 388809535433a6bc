import logging

import pytest

from scaddots.logging_config import PACKAGE_LOGGER, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)


def test_setup_logging_console(package_logger):
    logger = setup_logging(logging.DEBUG)
    assert logger is package_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)


def test_setup_logging_is_reentrant(package_logger):
    setup_logging(logging.INFO)
    setup_logging(logging.WARNING)
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING


def test_setup_logging_file(package_logger, tmp_path):
    log_file = tmp_path / "scaddots.log"
    setup_logging("DEBUG", str(log_file))
    assert len(package_logger.handlers) == 2
    logging.getLogger("scaddots.render").debug("hello from render")
    for handler in package_logger.handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "Logging initialized." in text
    assert "scaddots.render - DEBUG - hello from render" in text
