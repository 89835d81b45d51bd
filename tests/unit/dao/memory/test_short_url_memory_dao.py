"""Unit tests for the ShortURLMemoryDAO

Test coverage includes:

1. Insertion behavior
   - Validates inserted short URLs are retrievable.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Confirms duplicate shortcodes raise ShortURLAlreadyExistsError and keep the original.

2. Retrieval behavior
   - Ensures missing shortcodes return None.
   - Confirms snapshots don't change after further clicks.
   - Validates all() ordering by creation time.

3. Click accounting
   - Ensures hit() appends the click and increments the counter.
   - Confirms missing links raise ShortURLNotFoundError.
   - Validates the inclusive expiry boundary and ShortURLExpiredError.

4. Concurrency
   - Concurrent inserts of one shortcode: exactly one winner.
   - Concurrent hits: no lost clicks.
"""

import threading
from datetime import datetime, timedelta, UTC
from concurrent.futures import ThreadPoolExecutor

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from linkshortener.models import ShortURLModel, ClickEventModel
from linkshortener.dao.memory import ShortURLMemoryDAO
from linkshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError, ShortURLExpiredError


T0 = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao():
    return ShortURLMemoryDAO()


@pytest.fixture
def short_url():
    return ShortURLModel(target='https://example.com/page', shortcode='abc123', created_at=T0, validity_minutes=30)


def click_at(timestamp, source='curl/8.5', location='DE'):
    return ClickEventModel(timestamp=timestamp, source=source, location=location)


# -------------------------------
# 1. Insertion behavior
# -------------------------------


def test_insert_short_url(dao, short_url):
    assert dao.insert(short_url) is dao
    assert dao.exists('abc123')
    assert dao.get('abc123') == short_url
    assert len(dao) == 1


def test_insert_short_url_with_invalid_type(dao):
    """Ensure inserting invalid types raises TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.insert('https://example.com/notamodel')


def test_insert_short_url_which_already_exists(dao, short_url):
    dao.insert(short_url)
    duplicate = ShortURLModel(target='https://example.com/other', shortcode='abc123', created_at=T0 + timedelta(minutes=1))

    with pytest.raises(ShortURLAlreadyExistsError, match="Short URL with code 'abc123' already exists."):
        dao.insert(duplicate)

    assert dao.get('abc123').target == 'https://example.com/page'
    assert len(dao) == 1


# -------------------------------
# 2. Retrieval behavior
# -------------------------------


def test_get_missing_short_url(dao):
    assert dao.get('missing') is None
    assert not dao.exists('missing')


def test_get_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(123)


def test_snapshots_are_immutable(dao, short_url):
    dao.insert(short_url)
    before = dao.get('abc123')

    dao.hit('abc123', click_at(T0 + timedelta(minutes=1)))

    assert before.click_count == 0
    assert before.clicks == ()
    assert dao.get('abc123').click_count == 1


def test_all_ordered_by_creation_time(dao):
    dao.insert(ShortURLModel(target='https://example.com/2', shortcode='second', created_at=T0 + timedelta(seconds=2)))
    dao.insert(ShortURLModel(target='https://example.com/1', shortcode='first', created_at=T0 + timedelta(seconds=1)))
    dao.insert(ShortURLModel(target='https://example.com/3', shortcode='third', created_at=T0 + timedelta(seconds=3)))

    assert [short_url.shortcode for short_url in dao.all()] == ['first', 'second', 'third']


def test_all_includes_expired(dao, short_url):
    dao.insert(short_url)
    assert dao.all()[0].is_expired(T0 + timedelta(days=1))
    assert len(dao.all()) == 1


def test_close_keeps_mappings(dao, short_url):
    dao.insert(short_url)
    dao.close()
    assert dao.get('abc123') == short_url
    assert len(dao) == 1


# -------------------------------
# 3. Click accounting
# -------------------------------


def test_hit_appends_click_and_increments_counter(dao, short_url):
    dao.insert(short_url)

    first = dao.hit('abc123', click_at(T0 + timedelta(minutes=1), source='Mozilla/5.0', location='BG'))
    second = dao.hit('abc123', click_at(T0 + timedelta(minutes=2)))

    assert first.click_count == 1
    assert second.click_count == 2
    assert [click.source for click in second.clicks] == ['Mozilla/5.0', 'curl/8.5']
    assert [click.location for click in second.clicks] == ['BG', 'DE']
    assert second.target == 'https://example.com/page'


def test_hit_missing_short_url(dao):
    with pytest.raises(ShortURLNotFoundError, match="Short URL with code 'missing' not found."):
        dao.hit('missing', click_at(T0))


def test_hit_at_expiry_boundary_is_valid(dao, short_url):
    dao.insert(short_url)
    assert dao.hit('abc123', click_at(T0 + timedelta(minutes=30))).click_count == 1


def test_hit_after_expiry(dao, short_url):
    dao.insert(short_url)

    with pytest.raises(ShortURLExpiredError, match="Short URL with code 'abc123' has expired."):
        dao.hit('abc123', click_at(T0 + timedelta(minutes=30, milliseconds=1)))

    # Expired hits leave no trace
    assert dao.get('abc123').click_count == 0
    assert dao.get('abc123').clicks == ()


def test_hit_with_invalid_click_type(dao, short_url):
    dao.insert(short_url)
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.hit('abc123', {'timestamp': T0})


# -------------------------------
# 4. Concurrency
# -------------------------------


def test_concurrent_inserts_same_shortcode(dao):
    workers = 16
    barrier = threading.Barrier(workers)

    def insert(i):
        barrier.wait()
        try:
            dao.insert(ShortURLModel(target=f'https://example.com/{i}', shortcode='race', created_at=T0))
        except ShortURLAlreadyExistsError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(insert, range(workers)))

    assert results.count(True) == 1
    assert len(dao) == 1


def test_concurrent_hits_lose_no_clicks(dao, short_url):
    dao.insert(short_url)
    hits = 500

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda i: dao.hit('abc123', click_at(T0 + timedelta(seconds=i % 60))), range(hits)))

    stored = dao.get('abc123')
    assert stored.click_count == hits
    assert len(stored.clicks) == hits
