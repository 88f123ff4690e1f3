import logging
import logging.handlers

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging() calls made by CLI tests."""
    yield
    structlog.reset_defaults()
    for handler in logging.root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            logging.root.removeHandler(handler)
