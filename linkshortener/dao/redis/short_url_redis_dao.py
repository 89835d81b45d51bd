"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for CRUD-like
operations with ShortURLModel instances. It lets several processes share one
mapping table; it doesn't add any durability guarantees beyond Redis' own.

Responsibilities:
    - Insert short URLs with an atomic insert-if-absent (SET NX);
    - Record clicks atomically (RPUSH + INCR inside MULTI/EXEC);
    - Maintain a creation-ordered index of shortcodes for listing;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from datetime import datetime, UTC
    >>> from linkshortener.models import ShortURLModel, ClickEventModel
    >>> from linkshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc123",
    ...     created_at=datetime.now(UTC),
    ... )
    >>> dao.insert(short_url)
    <ShortURLRedisDAO>

    >>> dao.get("abc123").target
    'https://example.com/page'

    >>> click = ClickEventModel(timestamp=datetime.now(UTC), source='curl/8.5', location='DE')
    >>> dao.hit("abc123", click).click_count
    1
"""

from beartype import beartype

from linkshortener.models import ShortURLModel, ClickEventModel
from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import (
    handle_redis_connection_error,
    encode_record,
    encode_click,
    decode_short_url,
)
from linkshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError, ShortURLExpiredError


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLRedisDAO:
            Insert a short URL mapping if the shortcode is unused.
            Raises ShortURLAlreadyExistsError when a URL with the same shortcode exists.
            Raises DataStoreError on connectivity issues with Redis.

        get(shortcode: str, **kwargs) -> ShortURLModel | None:
            Retrieve a short URL mapping with its clicks by shortcode.
            Raises DataStoreError on connectivity issues with Redis.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether the shortcode is taken.

        hit(shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
            Append a click event and increment the click counter in one transaction.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises ShortURLExpiredError when the mapping expired before the click.
            Raises DataStoreError on connectivity issues with Redis.

        all(**kwargs) -> list[ShortURLModel]:
            Snapshot all mappings ordered by creation time.
    """

    def __repr__(self) -> str:
        return '<ShortURLRedisDAO>'

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL mapping into Redis

        The record is written with SET NX, so the existence check and the
        insertion are a single Redis command. The index entry is added in
        the same transaction (ZADD NX is a no-op for an existing shortcode).

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        record_key = self.keys.link_record_key(short_url.shortcode)
        index_key = self.keys.links_index_key()

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(record_key, encode_record(short_url), nx=True)
            pipe.zadd(index_key, {short_url.shortcode: short_url.created_at.timestamp()}, nx=True)
            created, _ = pipe.execute()

        if not created:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        """Retrieve a stored short URL mapping by shortcode

        Fetches the record, its click counter and its click events using a
        single Redis transaction, so the counter always matches the events.

        Example:
            >>> dao.get('abc123')
            ShortURLModel(target='https://example.com', shortcode='abc123', ...)
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(self.keys.link_record_key(shortcode))
            pipe.get(self.keys.link_click_count_key(shortcode))
            pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            record, click_count, clicks = pipe.execute()

        if record is None:
            return None
        return decode_short_url(shortcode, record, click_count, clicks)

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_record_key(shortcode)))

    @handle_redis_connection_error
    @beartype
    def hit(self, shortcode: str, click: ClickEventModel, **kwargs) -> ShortURLModel:
        """Record a click on a short URL

        NOTE: the record itself is immutable once inserted and never deleted,
              so reading it before the transaction can't race with a writer.
              Only the click log and counter change, and they change together.

        Args:
            shortcode (str):
                The short code of the ShortURLModel being resolved.
            click (ClickEventModel):
                Click event to append.
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: snapshot including the new click.

        Raises:
            ShortURLNotFoundError:
                If no short URL with the given short code exists.
            ShortURLExpiredError:
                If the short URL expired before the click.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        record = self.redis.get(self.keys.link_record_key(shortcode))
        if record is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        short_url = decode_short_url(shortcode, record, None, [])
        if short_url.is_expired(click.timestamp):
            raise ShortURLExpiredError(f"Short URL with code '{shortcode}' has expired.")

        clicks_key = self.keys.link_clicks_key(shortcode)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.rpush(clicks_key, encode_click(click))
            pipe.incr(self.keys.link_click_count_key(shortcode))
            pipe.lrange(clicks_key, 0, -1)
            _, click_count, clicks = pipe.execute()

        return decode_short_url(shortcode, record, click_count, clicks)

    @handle_redis_connection_error
    def all(self, **kwargs) -> list[ShortURLModel]:
        shortcodes = self.redis.zrange(self.keys.links_index_key(), 0, -1)
        if not shortcodes:
            return []

        with self.redis.pipeline(transaction=True) as pipe:
            for shortcode in shortcodes:
                pipe.get(self.keys.link_record_key(shortcode))
                pipe.get(self.keys.link_click_count_key(shortcode))
                pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            results = pipe.execute()

        short_urls = []
        for i, shortcode in enumerate(shortcodes):
            record, click_count, clicks = results[3 * i : 3 * i + 3]
            if record is not None:
                short_urls.append(decode_short_url(shortcode, record, click_count, clicks))
        return short_urls
