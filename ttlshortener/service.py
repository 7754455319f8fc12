"""Create/resolve boundary consumed by the request handlers.

ShortLinkService validates inputs, computes expiry, delegates code allocation
to CodeAllocator and lookups to the data store, and renders results as plain
dictionaries:

    create(url, lifetime_minutes, seed) -> {'code': 'go-ab12cd34', 'expiresAt': '2025-10-15T12:30:00.000Z'}
    resolve(code)                       -> {'url': 'https://example.com'}

Errors propagate as exceptions:
    InvalidInputError, AllocationExhaustedError, AllocationCancelledError,
    ShortLinkNotFoundError, DataStoreError.
"""

import logging
import threading
from datetime import datetime, timedelta
from collections.abc import Callable

from ttlshortener.allocator import CodeAllocator
from ttlshortener.types import LambdaConfiguration
from ttlshortener.constants import Defaults
from ttlshortener.dao.base import ShortLinkBaseDAO
from ttlshortener.dao.factory import short_link_dao_from_config
from ttlshortener.dao.exceptions import ShortLinkNotFoundError
from ttlshortener.exceptions import InvalidInputError
from ttlshortener.utils.helpers import utc_now, isoformat_utc
from ttlshortener.utils.validators import is_safe_code, validate_lifetime_minutes, validate_seed, validate_target_url


logger = logging.getLogger(__name__)


class ShortLinkService:
    """Short link operations on top of an injected data store.

    The same DAO instance is shared with the allocator, so the store handle is
    opened once and passed down explicitly.

    Example:
        >>> from ttlshortener.dao.memory import ShortLinkMemoryDAO
        >>> service = ShortLinkService(ShortLinkMemoryDAO())
        >>> created = service.create('https://example.com', 30, 'go-')
        >>> service.resolve(created['code'])
        {'url': 'https://example.com'}
    """

    def __init__(
        self,
        dao: ShortLinkBaseDAO,
        allocator: CodeAllocator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.dao = dao
        self.allocator = allocator if allocator is not None else CodeAllocator(dao)
        self.clock = clock

    @classmethod
    def from_config(cls, app_config: LambdaConfiguration, prefix: str | None = None) -> 'ShortLinkService':
        """Build a service (and its single DAO) from the output of `load_config()`."""
        dao = short_link_dao_from_config(app_config, prefix=prefix)
        allocator_config = app_config.get('allocator') or {}
        allocator = CodeAllocator(
            dao,
            max_attempts=allocator_config.get('max_attempts', Defaults.MAX_ALLOCATION_ATTEMPTS),
            suffix_length=allocator_config.get('suffix_length', Defaults.SUFFIX_LENGTH),
        )
        return cls(dao, allocator=allocator)

    def create(
        self,
        url: str,
        lifetime_minutes: float,
        seed: str,
        cancel_event: threading.Event | None = None,
    ) -> dict[str, str]:
        """Create a short link which resolves for `lifetime_minutes` minutes.

        Raises:
            InvalidInputError: on a malformed url, lifetime or seed.
            AllocationExhaustedError: if every candidate code was taken.
            AllocationCancelledError: if cancel_event was set mid-allocation.
            DataStoreError: if the data store failed.
        """
        target = validate_target_url(url)
        minutes = validate_lifetime_minutes(lifetime_minutes)
        seed = validate_seed(seed)

        created_at = self.clock()
        try:
            expires_at = created_at + timedelta(minutes=minutes)
        except OverflowError as e:
            raise InvalidInputError(f'Lifetime of {lifetime_minutes} minutes is out of range.') from e

        short_link = self.allocator.allocate(seed, target, created_at, expires_at, cancel_event=cancel_event)
        logger.info(
            'Created short link.',
            extra={'code': short_link.code, 'expiresAt': isoformat_utc(short_link.expires_at)},
        )
        return {'code': short_link.code, 'expiresAt': isoformat_utc(short_link.expires_at)}

    def resolve(self, code: str) -> dict[str, str]:
        """Resolve a code to its target URL.

        Codes that could never have been issued are reported exactly like
        missing or expired ones, without touching the store.

        Raises:
            ShortLinkNotFoundError: if the code is unknown or expired.
            DataStoreError: if the data store failed.
        """
        if not is_safe_code(code):
            raise ShortLinkNotFoundError.for_code(str(code))

        return {'url': self.dao.resolve(code, now=self.clock())}

    def reclaim(self, batch_size: int = Defaults.RECLAIM_BATCH_SIZE) -> int:
        """Remove expired links from the store. Returns the number removed."""
        removed = self.dao.reclaim(now=self.clock(), batch_size=batch_size)
        logger.info('Reclaimed expired short links.', extra={'removed': removed})
        return removed
