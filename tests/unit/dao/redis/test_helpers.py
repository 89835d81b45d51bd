"""Unit tests for Redis DAO helpers.

Test coverage includes:
    1. handle_redis_connection_error decorator
       - Ensures the wrapped method executes and returns its result.
       - Ensures Redis connection and timeout errors become DataStoreError.
       - Confirms functools.wraps preserves the original function's metadata.
    2. Record and click codecs
       - Ensures encoded records and clicks decode into equal models.
       - Confirms missing counters and click lists decode as zero clicks.
"""

import json
from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
import redis

from linkshortener.models import ShortURLModel, ClickEventModel
from linkshortener.dao.redis.helpers import handle_redis_connection_error, encode_record, encode_click, decode_click, decode_short_url
from linkshortener.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, error=None):
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {'host': 'localhost', 'port': 6379, 'db': 0}
        self.error = error

    @handle_redis_connection_error
    def ping(self):
        """Ping Redis."""
        if self.error is not None:
            raise self.error
        return 'OK'


# -------------------------------
# 1. handle_redis_connection_error
# -------------------------------


def test_decorator_allows_normal_execution():
    assert DummyDAO().ping() == 'OK'


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('refused'), redis.exceptions.TimeoutError('timeout')])
def test_decorator_transforms_redis_connectivity_errors(error):
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0.") as exc_info:
        DummyDAO(error=error).ping()
    assert exc_info.value.__cause__ is error


def test_decorator_propagates_other_errors():
    with pytest.raises(ValueError):
        DummyDAO(error=ValueError('bad')).ping()


def test_decorator_preserves_metadata():
    assert DummyDAO.ping.__name__ == 'ping'
    assert DummyDAO.ping.__doc__ == 'Ping Redis.'


# -------------------------------
# 2. Record and click codecs
# -------------------------------


def test_encode_record():
    created_at = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
    short_url = ShortURLModel(target='https://example.com/page', shortcode='abc123', created_at=created_at, validity_minutes=45)

    assert json.loads(encode_record(short_url)) == {
        'target': 'https://example.com/page',
        'created_at': '2025-10-15T12:00:00+00:00',
        'validity_minutes': 45,
    }


def test_decode_short_url_with_clicks():
    created_at = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
    short_url = ShortURLModel(target='https://example.com/page', shortcode='abc123', created_at=created_at)
    click = ClickEventModel(timestamp=datetime(2025, 10, 15, 12, 5, tzinfo=UTC), source='curl/8.5', location='DE')

    decoded = decode_short_url('abc123', encode_record(short_url), '1', [encode_click(click)])

    assert decoded.click_count == 1
    assert decoded.clicks == (click,)
    assert decoded.created_at == created_at
    assert decode_click(encode_click(click)) == click


def test_decode_short_url_without_clicks():
    record = json.dumps({'target': 'https://example.com', 'created_at': '2025-10-15T12:00:00+00:00', 'validity_minutes': '30'})

    decoded = decode_short_url('abc123', record, None, [])

    assert decoded.validity_minutes == 30
    assert decoded.click_count == 0
    assert decoded.clicks == ()
