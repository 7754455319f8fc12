"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO.

Storage layout (all keys namespaced by RedisKeySchema):
    <prefix>:links:<code>           HASH  url, created_at, expires_at (epoch ms)
    <prefix>:expiry_index           ZSET  member <code>, score expires_at (epoch ms)

Every link hash also carries a PEXPIREAT equal to its expiry, so Redis evicts
it on its own. The expiry index only exists to let reclaim() find leftovers in
bounded batches.

Responsibilities:
    - Atomically insert a link unless a live link occupies its code;
    - Resolve codes to target URLs while enforcing expiry;
    - Reclaim expired links in batches without blocking other commands;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    ShortLinkRedisDAO:
        DAO for storing and resolving ShortLinkModel in a Redis datastore.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> from ttlshortener.models import ShortLinkModel
    >>> from ttlshortener.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix="app:dev")

    >>> now = datetime.now(UTC)
    >>> short_link = ShortLinkModel(
    ...     code='go-ab12cd34',
    ...     target='https://example.com/page',
    ...     created_at=now,
    ...     expires_at=now + timedelta(minutes=30),
    ... )
    >>> dao.insert(short_link)
    <ShortLinkRedisDAO>

    >>> dao.resolve('go-ab12cd34', now=now)
    'https://example.com/page'
"""

import logging
from datetime import datetime

from beartype import beartype

from ttlshortener.models import ShortLinkModel
from ttlshortener.constants import Defaults
from ttlshortener.dao.base import ShortLinkBaseDAO
from ttlshortener.dao.redis.mixins import RedisClientMixin
from ttlshortener.dao.redis.helpers import handle_redis_connection_error, to_epoch_ms
from ttlshortener.dao.exceptions import ShortLinkConflictError, ShortLinkNotFoundError


logger = logging.getLogger(__name__)


# KEYS[1] = link hash, KEYS[2] = expiry index
# ARGV[1] = code, ARGV[2] = url, ARGV[3] = created_at (ms, also "now"), ARGV[4] = expires_at (ms)
INSERT_IF_ABSENT_OR_EXPIRED = """
local occupant_expires_at = redis.call('HGET', KEYS[1], 'expires_at')
if occupant_expires_at and tonumber(occupant_expires_at) > tonumber(ARGV[3]) then
    return 0
end
redis.call('DEL', KEYS[1])
redis.call('HSET', KEYS[1], 'url', ARGV[2], 'created_at', ARGV[3], 'expires_at', ARGV[4])
redis.call('PEXPIREAT', KEYS[1], ARGV[4])
redis.call('ZADD', KEYS[2], ARGV[4], ARGV[1])
return 1
"""

# KEYS[1] = link hash, KEYS[2] = expiry index
# ARGV[1] = code, ARGV[2] = now (ms)
DELETE_IF_EXPIRED = """
local expires_at = redis.call('HGET', KEYS[1], 'expires_at')
if expires_at and tonumber(expires_at) > tonumber(ARGV[2]) then
    return 0
end
redis.call('DEL', KEYS[1])
redis.call('ZREM', KEYS[2], ARGV[1])
return 1
"""


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short link mappings

    This class implements the ShortLinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkRedisDAO:
            Insert a link unless a live link holds the same code.
            Raises ShortLinkConflictError when a live link with the same code exists.
            Raises DataStoreError on connectivity issues with Redis.

        resolve(code: str, now: datetime, **kwargs) -> str:
            Return the target URL of a live link.
            Raises ShortLinkNotFoundError when the code doesn't exist or has expired.
            Raises DataStoreError on connectivity issues with Redis.

        reclaim(now: datetime, batch_size: int, **kwargs) -> int:
            Delete expired links in batches.
            Raises DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._insert_script = self.redis.register_script(INSERT_IF_ABSENT_OR_EXPIRED)
        self._delete_expired_script = self.redis.register_script(DELETE_IF_EXPIRED)

    @handle_redis_connection_error
    @beartype
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkRedisDAO':
        """Insert a short link into Redis unless a live link occupies its code

        NOTE: The liveness check and the write run inside one Lua script,
              which Redis executes atomically. A separate EXISTS followed by
              SET would let two concurrent creators both see an empty slot:

              (lambda 1): EXISTS <app>:links:<code>  => 0
              (lambda 2): EXISTS <app>:links:<code>  => 0
              (lambda 1): HSET <app>:links:<code> url <url 1> ...
              (lambda 2): HSET <app>:links:<code> url <url 2> ...
                          => lambda 1's link silently points to <url 2>

        NOTE: Liveness is judged against `short_link.created_at` rather than
              the Redis server clock, so an occupant that has logically expired
              but not yet been evicted is overwritten.

        Args:
            short_link (ShortLinkModel):
                ShortLinkModel instance representing the new mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkRedisDAO: self (for method chaining)

        Raises:
            ShortLinkConflictError:
                If a live short link with the same code already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        # fmt: off
        inserted = self._insert_script(
            keys=[self.keys.link_key(short_link.code), self.keys.expiry_index_key()],
            args=[short_link.code,
                  short_link.target,
                  to_epoch_ms(short_link.created_at),
                  to_epoch_ms(short_link.expires_at)],
        )
        # fmt: on
        if not inserted:
            raise ShortLinkConflictError(f"Short link with code '{short_link.code}' is still live.")
        return self

    @handle_redis_connection_error
    @beartype
    def resolve(self, code: str, now: datetime, **kwargs) -> str:
        """Resolve a code to the target URL of its live link

        Both fields are read with a single HMGET, so a concurrent insert is
        observed either entirely or not at all.

        Args:
            code (str):
                The code identifying the short link.
            now (datetime):
                Instant at which liveness is evaluated.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            str:
                The target URL.

        Raises:
            ShortLinkNotFoundError:
                If the link does not exist in Redis or has expired.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.resolve('go-ab12cd34', now=datetime.now(UTC))
            'https://example.com'
        """
        target, expires_at = self.redis.hmget(self.keys.link_key(code), ['url', 'expires_at'])

        if target is None or expires_at is None or to_epoch_ms(now) >= int(expires_at):
            raise ShortLinkNotFoundError.for_code(code)

        return target

    @handle_redis_connection_error
    @beartype
    def reclaim(self, now: datetime, batch_size: int = Defaults.RECLAIM_BATCH_SIZE, **kwargs) -> int:
        """Delete expired links (and their index entries) in batches

        Each batch reads up to `batch_size` expired codes from the expiry index
        and deletes them in one pipelined round trip. Every deletion re-checks
        the expiry inside a Lua script: a code that was re-used by a new live
        link between the index read and the delete is left untouched (its index
        score has already moved past `now`).

        Args:
            now (datetime):
                Links with expires_at <= now are removed.
            batch_size (int):
                Maximum number of codes processed per round trip.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            int:
                Number of expired entries removed.

        Raises:
            ValueError:
                If batch_size is not positive.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        if batch_size <= 0:
            raise ValueError(f'Batch size must be a positive integer (given value: {batch_size}).')

        now_ms = to_epoch_ms(now)
        expiry_index_key = self.keys.expiry_index_key()
        removed = 0

        while True:
            codes = self.redis.zrangebyscore(expiry_index_key, '-inf', now_ms, start=0, num=batch_size)
            if not codes:
                break

            with self.redis.pipeline(transaction=False) as pipe:
                for code in codes:
                    self._delete_expired_script(
                        keys=[self.keys.link_key(code), expiry_index_key],
                        args=[code, now_ms],
                        client=pipe,
                    )
                results = pipe.execute()

            removed += sum(int(result) for result in results)
            logger.debug('Reclaimed batch of expired short links.', extra={'batchSize': len(codes), 'removed': removed})

            if len(codes) < batch_size:
                break

        return removed
