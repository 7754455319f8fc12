import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']


def namespaced(build_key: Callable[..., str]) -> Callable[..., str]:
    """Prepend the schema's prefix (if any) to the key produced by `build_key`."""

    @functools.wraps(build_key)
    def wrapper(schema: 'RedisKeySchema', *args, **kwargs) -> str:
        key = build_key(schema, *args, **kwargs)
        return key if schema.prefix is None else f'{schema.prefix}:{key}'

    return wrapper


class RedisKeySchema:
    """Key names for the short link records and their expiry index.

        <prefix>:links:<code>     hash {url, created_at, expires_at} (epoch ms)
        <prefix>:expiry_index     sorted set, code -> expires_at (epoch ms)

    The index lives outside `links:` so that no code can name it.
    Use one prefix per app and environment (see `app_prefix()`) so that
    several deployments can share a Redis database.
    """

    def __init__(self, prefix: str | None = None):
        if not (prefix is None or isinstance(prefix, str)):
            raise TypeError(f'Key prefix must be a string or None (given type: {type(prefix).__name__}).')
        self.prefix = prefix

    @namespaced
    def link_key(self, code: str) -> str:
        return f'links:{code}'

    @namespaced
    def expiry_index_key(self) -> str:
        return 'expiry_index'
