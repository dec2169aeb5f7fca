import logging

from taskhub.utils import camel_to_snake
from taskhub.utils.logging import get_correlation_id, get_logger, set_correlation_id, time_call


def test_correlation_id_round_trip():
    token = set_correlation_id("request-42")
    assert token == "request-42"
    assert get_correlation_id() == "request-42"


def test_loggers_live_under_package_root():
    assert get_logger("dal").name == "taskhub.dal"


def test_time_call_logs_duration(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with time_call("unit-test", logger, sql="SELECT 1", threshold_ms=0):
        pass
    records = [record for record in caplog.records if record.name == logger.name]
    assert any("unit-test took" in record.message for record in records)
    assert records[-1].levelno == logging.WARNING
    assert records[-1].sql == "SELECT 1"


def test_fast_calls_log_at_debug(caplog):
    logger = get_logger("tests.logging.fast")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with time_call("quick", logger, threshold_ms=60_000):
        pass
    assert [record.levelno for record in caplog.records if record.name == logger.name] == [logging.DEBUG]


def test_camel_to_snake():
    assert camel_to_snake("Employee") == "employee"
    assert camel_to_snake("TaskAssignment") == "task_assignment"
