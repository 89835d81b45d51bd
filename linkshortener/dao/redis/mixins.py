"""Redis client plumbing shared by Redis-backed DAOs

RedisClientMixin builds (or adopts) a `redis.Redis` client, namespaces keys
through RedisKeySchema and PINGs the server once on construction, so a
misconfigured backend fails when the store is built and not on the first
request.

Example:
    >>> class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    ...     pass
    ...
    >>> dao = ShortURLRedisDAO(redis_host='redis.internal', prefix='linkshortener:prod')
    >>> dao.redis_address
    'redis.internal:6379/0'
"""

import redis

from linkshortener.dao.redis.redis_key_schema import RedisKeySchema
from linkshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Attach a Redis client and a key schema to a DAO

    Args:
        redis_host (str):
            Hostname of the Redis server. Defaults to 'localhost'.
        redis_port (int | str):
            Redis server port. Defaults to 6379.
        redis_db (int | str):
            Redis database index. Defaults to 0.
        redis_username (str | None):
            ACL username, if the server requires one.
        redis_password (str | None):
            Password, if the server requires one.
        redis_socket_timeout (float | None):
            Seconds before a command times out. None waits indefinitely.
        redis_client (redis.Redis | None):
            Pre-built client. Connection arguments are ignored when given.
        prefix (str | None):
            Namespace prefix for all Redis keys, e.g. 'linkshortener:prod'.

    Raises:
        DataStoreError:
            If the server doesn't answer PING.
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_socket_timeout: float | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                decode_responses=True,  # shortcodes are used to build keys, records are JSON text
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    @property
    def redis_address(self) -> str:
        info = self.redis.connection_pool.connection_kwargs
        return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: True if Redis answered, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError: if Redis is unreachable and raise_error=True.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if raise_error:
                raise DataStoreError(f"Can't connect to Redis at {self.redis_address}. Check the provided configuration parameters.") from e
            return False
        return True

    def close(self) -> None:
        self.redis.close()
