"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

This test suite verifies the correctness, consistency, and safety of
Redis key generation supplied by RedisKeySchema.

Test coverage includes:

1. Per-link key generation (record, clicks, click count)
2. Index key generation
3. Custom prefix behavior
4. Invalid prefix types
"""

import pytest

from linkshortener.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Per-link key generation
# -------------------------------


@pytest.mark.parametrize(
    'shortcode, expected_record_key, expected_clicks_key, expected_click_count_key',
    [
        ('abc123', 'links:abc123:record', 'links:abc123:clicks', 'links:abc123:click_count'),
        ('my-link', 'links:my-link:record', 'links:my-link:clicks', 'links:my-link:click_count'),
    ],
)
def test_link_keys(shortcode, expected_record_key, expected_clicks_key, expected_click_count_key):
    """Ensure per-link keys are generated without a prefix by default."""
    keys = RedisKeySchema()
    assert keys.link_record_key(shortcode) == expected_record_key
    assert keys.link_clicks_key(shortcode) == expected_clicks_key
    assert keys.link_click_count_key(shortcode) == expected_click_count_key


# -------------------------------
# 2. Index key generation
# -------------------------------


def test_links_index_key():
    assert RedisKeySchema().links_index_key() == 'links:index'


# -------------------------------
# 3. Custom prefix behavior
# -------------------------------


@pytest.mark.parametrize(
    'prefix, expected_record_key, expected_index_key',
    [
        ('linkshortener:dev', 'linkshortener:dev:links:abc123:record', 'linkshortener:dev:links:index'),
        ('secret', 'secret:links:abc123:record', 'secret:links:index'),
        (None, 'links:abc123:record', 'links:index'),
    ],
)
def test_key_prefixing(prefix, expected_record_key, expected_index_key):
    """Ensure keys are correctly prefixed when a prefix is provided."""
    keys = RedisKeySchema(prefix=prefix)
    assert keys.link_record_key('abc123') == expected_record_key
    assert keys.links_index_key() == expected_index_key


# -------------------------------
# 4. Invalid prefix types
# -------------------------------


@pytest.mark.parametrize('prefix', [123, -1, 45.6, [], {}])
def test_invalid_prefix_type_raises_error(prefix):
    """Ensure invalid prefix types raise a TypeError."""
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)
