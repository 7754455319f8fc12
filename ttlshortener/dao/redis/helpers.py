import functools
from datetime import datetime, timedelta, UTC
from typing import Any
from collections.abc import Callable

import redis

from ttlshortener.dao.exceptions import DataStoreError


__all__ = []

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def redis_location(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle storage errors

    Connection failures, socket timeouts and any other Redis-level error are
    re-raised as DataStoreError so callers never see redis-py exceptions.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on Redis failures.

    Example:
        >>> @handle_redis_connection_error
        ... def resolve(self, code, now):
        ...     return self.redis.hmget(...)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e
        except redis.exceptions.TimeoutError as e:
            raise DataStoreError(f'Timed out waiting for Redis at {redis_location(self.redis)}.') from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis at {redis_location(self.redis)} failed: {e}') from e

    return wrapper


def to_epoch_ms(moment: datetime) -> int:
    """Convert a timezone-aware datetime into integer epoch milliseconds (floored)."""
    return (moment - EPOCH) // timedelta(milliseconds=1)
