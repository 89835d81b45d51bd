"""Unit tests for logging.py

Test coverage includes:

1. JsonFormatter renders records as JSON with extras and exceptions
2. initialize_logging() honors LOG_LEVEL
"""

import sys
import json
import logging

from linkshortener.constants import ENV
from linkshortener.utils.logging import JsonFormatter, initialize_logging


def make_record(msg='Created short URL.', exc_info=None, **extra):
    record = logging.LogRecord('linkshortener.store', logging.INFO, __file__, 1, msg, None, exc_info)
    record.created = 1760529600.0  # 2025-10-15T12:00:00Z
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter
# -------------------------------


def test_json_formatter_base_fields():
    log = json.loads(JsonFormatter().format(make_record()))

    assert log['timestamp'] == '2025-10-15T12:00:00.000Z'
    assert log['level'] == 'INFO'
    assert log['logger'] == 'linkshortener.store'
    assert log['message'] == 'Created short URL.'


def test_json_formatter_includes_extras():
    log = json.loads(JsonFormatter().format(make_record(shortcode='abc123', payload={'clickCount': 3})))

    assert log['shortcode'] == 'abc123'
    assert log['payload'] == {'clickCount': 3}
    assert 'msg' not in log
    assert 'args' not in log


def test_json_formatter_does_not_override_base_fields():
    log = json.loads(JsonFormatter().format(make_record(level='custom')))
    assert log['level'] == 'INFO'


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))
    assert 'RuntimeError: boom' in log['exception']


def test_json_formatter_serializes_unknown_types():
    class Opaque:
        def __str__(self):
            return 'opaque'

    log = json.loads(JsonFormatter().format(make_record(value=Opaque())))
    assert log['value'] == 'opaque'


# -------------------------------
# 2. initialize_logging()
# -------------------------------


def test_initialize_logging_sets_level(monkeypatch):
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    monkeypatch.setenv(ENV.App.LOG_LEVEL, 'debug')

    try:
        initialize_logging()
        assert root.level == logging.DEBUG
        assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)
    finally:
        root.handlers = handlers
        root.setLevel(level)


def test_initialize_logging_explicit_level(monkeypatch):
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    monkeypatch.setenv(ENV.App.LOG_LEVEL, 'debug')

    try:
        initialize_logging(level='warning')
        assert root.level == logging.WARNING
    finally:
        root.handlers = handlers
        root.setLevel(level)
