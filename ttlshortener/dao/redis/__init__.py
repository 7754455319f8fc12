from ttlshortener.dao.redis.redis_key_schema import RedisKeySchema
from ttlshortener.dao.redis.short_link_redis_dao import ShortLinkRedisDAO
from ttlshortener.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'ShortLinkRedisDAO',
    'RedisClientMixin',
]
