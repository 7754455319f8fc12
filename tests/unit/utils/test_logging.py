"""Unit tests for logging utilities in logging.py.

Test coverage includes:

1. JsonFormatter output
   - Standard fields, app/env context, `extra` fields, exception rendering.

2. initialize_logging()
   - Honors LOG_LEVEL and installs the JSON formatter on the root logger.
   - Quiets chatty AWS SDK loggers.
"""

import sys
import json
import logging

import pytest

from ttlshortener.constants import ENV
from ttlshortener.utils.logging import JsonFormatter, initialize_logging


def make_record(msg='Created short link.', args=(), exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord('ttlshortener.service', logging.INFO, __file__, 42, msg, args, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# -------------------------------
# 1. JsonFormatter
# -------------------------------


def test_json_formatter_standard_fields():
    log = json.loads(JsonFormatter().format(make_record('Reclaimed %s links.', args=(3,))))

    assert log['level'] == 'INFO'
    assert log['logger'] == 'ttlshortener.service'
    assert log['message'] == 'Reclaimed 3 links.'
    assert log['timestamp'].endswith('Z')
    assert 'msg' not in log
    assert 'args' not in log


def test_json_formatter_includes_app_context(monkeypatch):
    monkeypatch.setenv(ENV.App.APP_NAME, 'ttlshortener')
    monkeypatch.setenv(ENV.App.APP_ENV, 'prod')

    log = json.loads(JsonFormatter().format(make_record()))

    assert log['app'] == 'ttlshortener'
    assert log['env'] == 'prod'


def test_json_formatter_omits_missing_context(monkeypatch):
    monkeypatch.delenv(ENV.App.APP_NAME, raising=False)
    monkeypatch.delenv(ENV.App.APP_ENV, raising=False)

    log = json.loads(JsonFormatter().format(make_record()))

    assert 'app' not in log
    assert 'env' not in log


def test_json_formatter_includes_extra_fields():
    log = json.loads(JsonFormatter().format(make_record(code='go-ab12cd34', event='SHORT_LINK_CREATED')))

    assert log['code'] == 'go-ab12cd34'
    assert log['event'] == 'SHORT_LINK_CREATED'


def test_json_formatter_stringifies_unserializable_extras():
    log = json.loads(JsonFormatter().format(make_record(payload={1, 2})))
    assert isinstance(log['payload'], str)


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError('kaboom')
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'RuntimeError: kaboom' in log['exception']


# -------------------------------
# 2. initialize_logging()
# -------------------------------


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.mark.parametrize('log_level, expected', [('debug', logging.DEBUG), ('WARNING', logging.WARNING)])
def test_initialize_logging(monkeypatch, restore_root_logger, log_level, expected):
    monkeypatch.setenv(ENV.App.LOG_LEVEL, log_level)

    initialize_logging()

    assert restore_root_logger.level == expected
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in restore_root_logger.handlers)


def test_initialize_logging_quiets_sdk_loggers(monkeypatch, restore_root_logger):
    botocore_logger = logging.getLogger('botocore')
    level = botocore_logger.level
    monkeypatch.setenv(ENV.App.LOG_LEVEL, 'DEBUG')

    try:
        initialize_logging()
        assert botocore_logger.level == logging.WARNING
        assert logging.getLogger('ttlshortener.allocator').getEffectiveLevel() == logging.DEBUG
    finally:
        botocore_logger.setLevel(level)
