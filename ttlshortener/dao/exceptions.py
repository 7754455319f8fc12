"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortLinkNotFoundError:
        Raised when a code is unknown or its link has expired. The two cases
        are deliberately reported the same way.

    ShortLinkConflictError:
        Raised when inserting under a code that a live link still occupies.
        Consumed by the code allocator; never surfaced to callers.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from ttlshortener.dao.exceptions import ShortLinkNotFoundError
    >>> raise ShortLinkNotFoundError.for_code('go-ab12cd34')
    Traceback (most recent call last):
        ...
    ttlshortener.dao.exceptions.ShortLinkNotFoundError: Short link with code 'go-ab12cd34' not found.
"""

from ttlshortener.exceptions import TTLShortenerError


class DAOError(TTLShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortLinkNotFoundError(DAOError):
    """Raised when a short link is missing or expired."""

    error_code = 'dao:short_link_not_found_error'

    @classmethod
    def for_code(cls, code: str) -> 'ShortLinkNotFoundError':
        return cls(f"Short link with code '{code}' not found.")


class ShortLinkConflictError(DAOError):
    """Raised when a live short link already occupies the requested code."""

    error_code = 'dao:short_link_conflict_error'


class DataStoreError(DAOError):
    """Raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'dao:data_store_error'
