import json
import functools
from datetime import datetime
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from linkshortener.models import ShortURLModel, ClickEventModel
from linkshortener.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_connection_error(method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def exists(self, shortcode):
        ...     return self.redis.exists(self.keys.link_record_key(shortcode))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            info = self.redis.connection_pool.connection_kwargs
            redis_host = info.get('host')
            redis_port = info.get('port')
            redis_db = info.get('db')
            raise DataStoreError(f"Can't connect to Redis at {redis_host}:{redis_port}/{redis_db}.") from e

    return wrapper


def encode_record(short_url: ShortURLModel) -> str:
    return json.dumps(
        {
            'target': short_url.target,
            'created_at': short_url.created_at.isoformat(),
            'validity_minutes': short_url.validity_minutes,
        }
    )


def encode_click(click: ClickEventModel) -> str:
    return json.dumps(
        {
            'timestamp': click.timestamp.isoformat(),
            'source': click.source,
            'location': click.location,
        }
    )


def decode_click(raw: str | bytes) -> ClickEventModel:
    data = json.loads(raw)
    return ClickEventModel(
        timestamp=datetime.fromisoformat(data['timestamp']),
        source=data['source'],
        location=data['location'],
    )


def decode_short_url(shortcode: str, record: str | bytes, click_count: str | int | None, clicks: list) -> ShortURLModel:
    """Assemble a ShortURLModel snapshot from its Redis keys

    Args:
        shortcode (str): shortcode of the mapping
        record (str | bytes): JSON document stored under the record key
        click_count (str | int | None): counter value, None if never clicked
        clicks (list): raw JSON click events from the clicks list

    Returns:
        ShortURLModel: decoded snapshot
    """
    data = json.loads(record)
    return ShortURLModel(
        target=data['target'],
        shortcode=shortcode,
        created_at=datetime.fromisoformat(data['created_at']),
        validity_minutes=int(data['validity_minutes']),
        click_count=int(click_count or 0),
        clicks=tuple(decode_click(raw) for raw in clicks or ()),
    )
