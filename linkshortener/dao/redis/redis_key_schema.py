import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing short URL mappings.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkshortener:prod" or "linkshortener:dev".

    Layout:
        <prefix>:links:<shortcode>:record       STRING  JSON {target, created_at, validity_minutes}
        <prefix>:links:<shortcode>:clicks       LIST    JSON click events, append-only
        <prefix>:links:<shortcode>:click_count  STRING  integer counter
        <prefix>:links:index                    ZSET    shortcodes scored by creation timestamp
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_record_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:record'

    @prefix_key
    def link_clicks_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:clicks'

    @prefix_key
    def link_click_count_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:click_count'

    @prefix_key
    def links_index_key(self) -> str:
        return 'links:index'
