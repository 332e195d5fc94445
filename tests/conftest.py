import logging

import pytest


@pytest.fixture(autouse=True)
def quiet_pipeline_logs():
    """Keep INFO lines off stdout so CLI output can be parsed as JSON."""
    logger = logging.getLogger("legalrag")
    previous = logger.level
    logger.setLevel(logging.WARNING)
    yield
    logger.setLevel(previous)
