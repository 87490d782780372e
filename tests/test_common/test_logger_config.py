# tests/test_common/test_logger_config.py

import logging

import pytest
from rich.logging import RichHandler

from src.common.config.settings import settings
from src.common.logger_config import setup_logging


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers = handlers
    root_logger.setLevel(level)


def test_setup_logging_is_idempotent(mocker) -> None:
    mocker.patch.object(settings, "LOG_LEVEL", "debug")
    mocker.patch.object(settings, "LOG_FILE", None)

    setup_logging()
    setup_logging()

    root_logger = logging.getLogger()
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0], RichHandler)
    assert root_logger.level == logging.DEBUG
    assert logging.getLogger("mysql.connector").level == logging.WARNING


def test_setup_logging_mirrors_to_configured_file(mocker, tmp_path) -> None:
    log_path = tmp_path / "inventory.log"
    mocker.patch.object(settings, "LOG_FILE", str(log_path))

    setup_logging()
    logging.getLogger("inventory").warning("Order 7 deleted")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "Order 7 deleted" in log_path.read_text(encoding="utf-8")
