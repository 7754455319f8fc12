from ttlshortener.types import LambdaConfiguration
from ttlshortener.dao.base import ShortLinkBaseDAO
from ttlshortener.dao.redis import ShortLinkRedisDAO
from ttlshortener.dao.memory import ShortLinkMemoryDAO
from ttlshortener.exceptions import BadConfigurationError


def short_link_dao_from_config(app_config: LambdaConfiguration, prefix: str | None = None) -> ShortLinkBaseDAO:
    """Build the short link DAO for the backend named in a loaded configuration.

    Args:
        app_config (LambdaConfiguration):
            Output of `load_config()`, e.g. {'redis': {'host': ..., 'port': ...}, 'allocator': {...}}.
        prefix (str | None):
            Namespace prefix for Redis keys (see `app_prefix()`).

    Returns:
        ShortLinkBaseDAO: a connected DAO.

    Raises:
        BadConfigurationError:
            If the configuration names no supported backend.
        DataStoreError:
            If the backend cannot be reached.

    Example:
        >>> dao = short_link_dao_from_config({'redis': {'host': 'redis', 'port': 6379, 'db': 0}}, prefix='app:dev')
        >>> type(dao).__name__
        'ShortLinkRedisDAO'
    """
    if 'redis' in app_config:
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        return ShortLinkRedisDAO(**redis_config, prefix=prefix)
    if 'memory' in app_config:
        return ShortLinkMemoryDAO(**app_config['memory'])

    backends = sorted(key for key in app_config if key != 'allocator')
    raise BadConfigurationError(f'No supported short link backend configured (given backends: {backends}).')
