"""In-process implementation of ShortLinkBaseDAO

Keeps links in a dictionary guarded by a single lock. Suitable for local
runs and tests, where the process lifetime is the storage lifetime.

Lock acquisition is bounded by `lock_timeout`; running out of time surfaces
as DataStoreError, the same way a Redis socket timeout does.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from beartype import beartype

from ttlshortener.models import ShortLinkModel
from ttlshortener.constants import Defaults
from ttlshortener.dao.base import ShortLinkBaseDAO
from ttlshortener.dao.exceptions import DataStoreError, ShortLinkConflictError, ShortLinkNotFoundError


logger = logging.getLogger(__name__)


class ShortLinkMemoryDAO(ShortLinkBaseDAO):
    """Thread-safe, dictionary-backed short link store.

    Example:
        >>> dao = ShortLinkMemoryDAO()
        >>> dao.insert(short_link)
        <ShortLinkMemoryDAO>
        >>> dao.resolve(short_link.code, now=short_link.created_at)
        'https://example.com'
    """

    def __init__(self, lock_timeout: float = Defaults.STORAGE_TIMEOUT_SECONDS):
        if lock_timeout <= 0:
            raise ValueError(f'Lock timeout must be positive (given value: {lock_timeout}).')

        self.lock_timeout = float(lock_timeout)
        self._links: dict[str, ShortLinkModel] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._locked():
            return len(self._links)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise DataStoreError(f'Timed out after {self.lock_timeout}s waiting for the in-memory link store.')
        try:
            yield
        finally:
            self._lock.release()

    @beartype
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkMemoryDAO':
        with self._locked():
            occupant = self._links.get(short_link.code)
            if occupant is not None and occupant.is_live(short_link.created_at):
                raise ShortLinkConflictError(f"Short link with code '{short_link.code}' is still live.")
            self._links[short_link.code] = short_link
        return self

    @beartype
    def resolve(self, code: str, now: datetime, **kwargs) -> str:
        with self._locked():
            short_link = self._links.get(code)

        if short_link is None or not short_link.is_live(now):
            raise ShortLinkNotFoundError.for_code(code)
        return short_link.target

    @beartype
    def reclaim(self, now: datetime, batch_size: int = Defaults.RECLAIM_BATCH_SIZE, **kwargs) -> int:
        """Delete expired links, taking the lock once per batch.

        The lock is held only to copy the current codes and then for one
        batch at a time. Expiry is checked under the lock, so a code that
        was re-used by a live link since the copy is kept.
        """
        if batch_size <= 0:
            raise ValueError(f'Batch size must be a positive integer (given value: {batch_size}).')

        with self._locked():
            codes = list(self._links)

        removed = 0
        for start in range(0, len(codes), batch_size):
            with self._locked():
                for code in codes[start : start + batch_size]:
                    short_link = self._links.get(code)
                    if short_link is not None and not short_link.is_live(now):
                        del self._links[code]
                        removed += 1

        logger.debug('Reclaimed expired short links from memory.', extra={'removed': removed})
        return removed
