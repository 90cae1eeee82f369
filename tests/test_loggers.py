import logging

from syncpos.utils.loggers import get_logger


def test_get_logger_configures_once():
    name = "syncpos.test-loggers"
    first = get_logger(name)
    second = get_logger(name)
    assert first is second
    assert first.level == logging.INFO
    assert len(first.handlers) == 1


def test_default_logger_is_package_logger():
    assert get_logger().name == "syncpos"
