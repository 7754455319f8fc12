"""Shared Redis client setup for Redis-backed DAOs.

RedisClientMixin either adopts a ready client or builds one from flat
`redis_*` keyword arguments (the shape produced by `short_link_dao_from_config`),
then verifies the server answers before the DAO is handed out. Every socket
operation of a built client is bounded by `redis_socket_timeout`, so a stalled
server surfaces as DataStoreError instead of hanging the Lambda.

Example:
    >>> class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    ...     pass
    ...
    >>> dao = ShortLinkRedisDAO(redis_host='redis', redis_socket_timeout=0.5, prefix='ttlshortener:dev')
    >>> dao.keys.link_key('go-ab12cd34')
    'ttlshortener:dev:links:go-ab12cd34'
"""

import redis

from ttlshortener.constants import Defaults
from ttlshortener.dao.redis.redis_key_schema import RedisKeySchema
from ttlshortener.dao.redis.helpers import redis_location
from ttlshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Give a DAO a healthy Redis client and a namespaced key schema.

    Attributes:
        redis (redis.Redis):
            Client used for every command issued by the DAO.
        keys (RedisKeySchema):
            Key builder bound to the DAO's prefix.
    """

    def __init__(
        self,
        redis_host: str | None = 'localhost',
        redis_port: int | None = 6379,
        redis_db: int | None = 0,
        redis_decode_responses: bool | None = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_socket_timeout: float | None = Defaults.STORAGE_TIMEOUT_SECONDS,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """Adopt or build the Redis client, then healthcheck it.

        Args:
            redis_host, redis_port, redis_db, redis_username, redis_password:
                Connection parameters, ignored when `redis_client` is given.
            redis_decode_responses (bool | None):
                Return str instead of bytes. The DAOs rely on this being True.
            redis_socket_timeout (float | None):
                Seconds allowed for connecting and for each command; None waits forever.
            redis_client (redis.Redis | None):
                Pre-initialized client (tests inject mocks here).
            prefix (str | None):
                Namespace for all keys, e.g. 'ttlshortener:prod'.

        Raises:
            DataStoreError:
                If Redis doesn't answer the initial PING.
        """
        if redis_client is None:
            timeout = None if redis_socket_timeout is None else float(redis_socket_timeout)
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self) -> None:
        """PING Redis; raise DataStoreError if it can't be reached."""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(
                f"Can't connect to Redis at {redis_location(self.redis)}. Check the provided configuration parameters."
            ) from e
