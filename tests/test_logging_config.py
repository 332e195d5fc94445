import logging

from legalrag.logging_config import get_logger


def test_package_loggers_keep_their_name():
    assert get_logger("legalrag.chunker").name == "legalrag.chunker"
    assert get_logger("legalrag").name == "legalrag"


def test_outside_loggers_are_nested_under_the_package():
    log = get_logger("validator.json_validator")
    assert log.name == "legalrag.validator.json_validator"
    assert get_logger("legalragx").name == "legalrag.legalragx"


def test_nested_loggers_share_the_package_handler():
    root = logging.getLogger("legalrag")
    log = get_logger("service.api")
    assert root.handlers
    assert log.getEffectiveLevel() == root.level
