"""Collision-free code allocation

The allocator turns a caller-supplied seed into a unique code by appending a
random suffix and offering the candidate to the data store's atomic
insert-if-absent-and-live primitive. A conflicting candidate is discarded and
a fresh suffix drawn, up to a fixed number of attempts.

The allocator holds no locks of its own; uniqueness rests entirely on the
store rejecting an insert while a live link occupies the code.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> from ttlshortener.dao.memory import ShortLinkMemoryDAO
    >>> allocator = CodeAllocator(ShortLinkMemoryDAO())
    >>> now = datetime.now(UTC)
    >>> link = allocator.allocate('go-', 'https://example.com', now, now + timedelta(minutes=30))
    >>> link.code
    'go-Xk29aPq0'
"""

import logging
import threading
from datetime import datetime
from collections.abc import Callable

from ttlshortener.constants import Defaults
from ttlshortener.models import ShortLinkModel
from ttlshortener.dao.base import ShortLinkBaseDAO
from ttlshortener.dao.exceptions import ShortLinkConflictError
from ttlshortener.exceptions import AllocationCancelledError, AllocationExhaustedError, BadConfigurationError
from ttlshortener.utils.shortener import generate_suffix


logger = logging.getLogger(__name__)


class CodeAllocator:
    """Allocate codes of the form `<seed><random suffix>` against a short link store.

    Attributes:
        dao (ShortLinkBaseDAO):
            Store providing the atomic insert-if-absent-and-live primitive.
        max_attempts (int):
            Number of candidates tried before giving up.
        suffix_length (int):
            Length of the random suffix appended to the seed.
    """

    def __init__(
        self,
        dao: ShortLinkBaseDAO,
        max_attempts: int = Defaults.MAX_ALLOCATION_ATTEMPTS,
        suffix_length: int = Defaults.SUFFIX_LENGTH,
        suffix_factory: Callable[[int], str] = generate_suffix,
    ):
        for name, value in (('max_attempts', max_attempts), ('suffix_length', suffix_length)):
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise BadConfigurationError(f'Allocator {name} must be a positive integer (given value: {value!r}).')

        self.dao = dao
        self.max_attempts = max_attempts
        self.suffix_length = suffix_length
        self._suffix_factory = suffix_factory

    def allocate(
        self,
        seed: str,
        target: str,
        created_at: datetime,
        expires_at: datetime,
        cancel_event: threading.Event | None = None,
    ) -> ShortLinkModel:
        """Store a new short link under a fresh `<seed><suffix>` code.

        Args:
            seed (str):
                Pre-validated prefix for the code. Not re-validated here.
            target (str):
                Pre-validated target URL.
            created_at (datetime):
                Creation instant; liveness of any occupant is judged at this instant.
            expires_at (datetime):
                Expiry instant of the new link.
            cancel_event (threading.Event | None):
                When set, no further store operations are issued and
                AllocationCancelledError is raised.

        Returns:
            ShortLinkModel: the stored link.

        Raises:
            AllocationExhaustedError:
                If all `max_attempts` candidates were occupied by live links.
            AllocationCancelledError:
                If cancel_event was set before the link was stored.
            DataStoreError:
                If the store failed. Not retried.
        """
        for attempt in range(1, self.max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                logger.info('Code allocation cancelled by caller.', extra={'seed': seed, 'attempt': attempt})
                raise AllocationCancelledError(f"Allocation for seed '{seed}' cancelled after {attempt - 1} attempt(s).")

            candidate = ShortLinkModel(
                code=f'{seed}{self._suffix_factory(self.suffix_length)}',
                target=target,
                created_at=created_at,
                expires_at=expires_at,
            )

            try:
                self.dao.insert(candidate)
            except ShortLinkConflictError:
                logger.debug('Code candidate collided with a live link.', extra={'code': candidate.code, 'attempt': attempt})
                continue

            logger.debug('Allocated short link code.', extra={'code': candidate.code, 'attempt': attempt})
            return candidate

        logger.warning('Code allocation exhausted all attempts.', extra={'seed': seed, 'maxAttempts': self.max_attempts})
        raise AllocationExhaustedError(f"Could not allocate a free code for seed '{seed}' after {self.max_attempts} attempts.")
