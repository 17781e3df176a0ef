"""Root pytest configuration for all tests."""

import logging

import pytest

# atlassian-python-api logs at ERROR level for expected lookup failures;
# keep test output to real warnings.
logging.getLogger("atlassian").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def restore_app_logger():
    """Undo handlers and level that CLI runs attach to the package logger."""
    app_logger = logging.getLogger("confluence_export")
    handlers = list(app_logger.handlers)
    level = app_logger.level
    yield
    for handler in list(app_logger.handlers):
        if handler not in handlers:
            app_logger.removeHandler(handler)
            handler.close()
    app_logger.setLevel(level)
