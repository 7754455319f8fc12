"""Abstract base class for ShortLink data access objects (DAOs).

This class establishes a consistent contract for all ShortLink DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-process memory).

Responsibilities:
    - Provide an atomic insert-if-absent-and-live primitive for ShortLinkModel objects.
    - Resolve codes to target URLs while enforcing link expiry.
    - Optionally reclaim storage held by expired links.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from datetime import datetime, timedelta, UTC
        >>> from ttlshortener.models import ShortLinkModel
        >>> from ttlshortener.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...)

        >>> now = datetime.now(UTC)
        >>> short_link = ShortLinkModel(
        ...     code='go-a1b2c3d4',
        ...     target='https://example.com/blog/article-123',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> dao.insert(short_link)

        >>> dao.resolve('go-a1b2c3d4', now=now + timedelta(minutes=10))
        'https://example.com/blog/article-123'

        >>> dao.resolve('go-a1b2c3d4', now=now + timedelta(minutes=31))
        Traceback (most recent call last):
            ...
        ttlshortener.dao.exceptions.ShortLinkNotFoundError: Short link with code 'go-a1b2c3d4' not found.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from ttlshortener.models import ShortLinkModel
from ttlshortener.constants import Defaults


class ShortLinkBaseDAO(ABC):
    """Interface for ShortLink data access objects (DAOs).

    Methods:
        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkBaseDAO:
            Atomically insert a link unless a live link occupies its code.
            Raises ShortLinkConflictError if a live link holds the code.
            Raises DataStoreError on connection, timeout or write failure.

        resolve(code: str, now: datetime, **kwargs) -> str:
            Return the target URL of the live link stored under code.
            Raises ShortLinkNotFoundError if the code is missing or expired.
            Raises DataStoreError on connection, timeout or read failure.

        reclaim(now: datetime, batch_size: int, **kwargs) -> int:
            Delete links which expired at or before now.
            Raises DataStoreError on connection, timeout or write failure.

    Subclassing:
        Datastore-specific implementations (e.g., ShortLinkRedisDAO or
        ShortLinkMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Expiry is logical. Implementations may keep expired records around,
          but resolve() and insert() must behave as if they were gone.
        - reclaim() is a space optimization. Correctness never depends on it.
    """

    @abstractmethod
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkBaseDAO':
        """Insert a new ShortLinkModel unless a live link already holds its code.

        Liveness of the current occupant is judged at `short_link.created_at`.
        An expired occupant is overwritten. The check and the write form a
        single atomic operation.

        Args:
            short_link (ShortLinkModel):
                The ShortLinkModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkBaseDAO: self (for method chaining)

        Raises:
            ShortLinkConflictError:
                If a live link with the same code exists. State is unchanged.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def resolve(self, code: str, now: datetime, **kwargs) -> str:
        """Resolve a code to its target URL.

        Args:
            code (str):
                The code of the short link to be resolved.

            now (datetime):
                Instant at which liveness is evaluated.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            str: The target URL of the live link.

        Raises:
            ShortLinkNotFoundError:
                If no link exists under code, or if `now >= expires_at`.
                Both cases produce the same error message.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def reclaim(self, now: datetime, batch_size: int = Defaults.RECLAIM_BATCH_SIZE, **kwargs) -> int:
        """Remove links whose expiry is at or before now.

        Args:
            now (datetime):
                Instant used as the expiry cut-off.

            batch_size (int):
                Maximum number of records handled per storage round trip.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The number of records removed.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
