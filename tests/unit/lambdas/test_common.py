"""Unit tests for the shared handler plumbing in lambdas/common.py

Test coverage includes:

1. Process-wide store handle (get_store, set_store, reset_store)
2. ShortURLModel serialization
3. Response builders
"""

import json
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from linkshortener.constants import ENV
from linkshortener.lambdas import common
from linkshortener.models import ShortURLModel, ClickEventModel
from linkshortener.store import MappingStore


@pytest.fixture(autouse=True)
def _isolated_store(monkeypatch, tmp_path):
    monkeypatch.setenv(ENV.App.PROJECT_ROOT, str(tmp_path))
    monkeypatch.delenv(ENV.App.CONFIG_PATH, raising=False)
    monkeypatch.delenv(ENV.App.APP_NAME, raising=False)
    common.set_store(None)
    yield
    common.set_store(None)


# -------------------------------
# 1. Process-wide store handle
# -------------------------------


def test_get_store_builds_once():
    store = common.get_store()
    assert isinstance(store, MappingStore)
    assert common.get_store() is store


def test_set_store(store):
    common.set_store(store)
    assert common.get_store() is store


def test_reset_store_closes_store():
    store = MagicMock(spec=MappingStore)
    common.set_store(store)

    common.reset_store()

    store.close.assert_called_once()
    assert common.get_store() is not store


def test_reset_store_without_store():
    common.reset_store()


def test_get_store_reads_links_config(tmp_path):
    (tmp_path / 'config').mkdir()
    (tmp_path / 'config' / 'local.yml').write_text('links:\n  max_batch_size: 2\n  default_validity_minutes: 45\n')

    store = common.get_store()

    assert store.max_batch_size == 2
    assert store.default_validity_minutes == 45


# -------------------------------
# 2. Serialization
# -------------------------------


def test_serialize_short_url(t0):
    click = ClickEventModel(timestamp=t0 + timedelta(minutes=1), source='curl/8.5', location='DE')
    short_url = ShortURLModel(target='https://example.com', shortcode='promo', created_at=t0, click_count=1, clicks=(click,))
    event = {'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}}

    data = common.serialize_short_url(short_url, event, now=t0 + timedelta(minutes=31), include_clicks=True)

    assert data == {
        'shortcode': 'promo',
        'short_url': 'https://sho.rt/promo',
        'target_url': 'https://example.com',
        'created_at': '2025-10-15T12:00:00.000Z',
        'validity_minutes': 30,
        'expires_at': '2025-10-15T12:30:00.000Z',
        'is_expired': True,
        'click_count': 1,
        'clicks': [{'timestamp': '2025-10-15T12:01:00.000Z', 'source': 'curl/8.5', 'location': 'DE'}],
    }
    assert 'clicks' not in common.serialize_short_url(short_url, event, now=t0)


# -------------------------------
# 3. Response builders
# -------------------------------


def test_response_error():
    response = common.response_404(message='nope', error_code='SHORT_URL_NOT_FOUND')

    assert response['statusCode'] == 404
    assert json.loads(response['body']) == {'message': 'Not Found (nope)', 'errorCode': 'SHORT_URL_NOT_FOUND'}


def test_response_error_without_details():
    assert json.loads(common.response_410()['body']) == {'message': 'Gone'}


def test_response_302():
    response = common.response_302(location='https://example.com')
    assert response['statusCode'] == 302
    assert response['headers'] == {'Location': 'https://example.com'}
