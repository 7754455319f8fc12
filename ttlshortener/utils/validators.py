"""Defensive validation of create/resolve inputs.

The request layer is expected to validate user input first; these checks
make sure malformed values never reach the allocator or the data store.
"""

import math
import re
from numbers import Real
from urllib.parse import urlparse

from ttlshortener.constants import Defaults, SAFE_CODE_PATTERN
from ttlshortener.exceptions import InvalidInputError


SAFE_CODE = re.compile(SAFE_CODE_PATTERN)


def is_safe_code(value: object) -> bool:
    """Return True if value only uses letters, digits, '-' and '_'."""
    return isinstance(value, str) and SAFE_CODE.fullmatch(value) is not None


def validate_target_url(url: object) -> str:
    """Ensure url is an absolute http(s) URL with a host.

    Raises:
        InvalidInputError: If url is empty, too long, relative, or uses another scheme.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidInputError('Target URL must be a non-empty string.')
    if len(url) > Defaults.URL_MAX_LENGTH:
        raise InvalidInputError(f'Target URL must be at most {Defaults.URL_MAX_LENGTH} characters long.')
    if url != url.strip() or any(character.isspace() for character in url):
        raise InvalidInputError('Target URL must not contain whitespace.')

    try:
        components = urlparse(url)
    except ValueError as e:
        raise InvalidInputError(f'Target URL is malformed: {e}') from e
    if components.scheme not in {'http', 'https'}:
        raise InvalidInputError(f"Target URL must use http or https (given scheme: '{components.scheme}').")
    if not components.hostname:
        raise InvalidInputError('Target URL must include a host.')
    return url


def validate_lifetime_minutes(lifetime_minutes: object) -> float:
    """Ensure the requested lifetime is a positive, finite number of minutes.

    Raises:
        InvalidInputError: If the lifetime is not a real number, is a bool, NaN, infinite, or <= 0.
    """
    if isinstance(lifetime_minutes, bool) or not isinstance(lifetime_minutes, Real):
        raise InvalidInputError(f'Lifetime must be a number of minutes (given type: {type(lifetime_minutes).__name__}).')
    if not math.isfinite(lifetime_minutes) or lifetime_minutes <= 0:
        raise InvalidInputError(f'Lifetime must be a positive, finite number of minutes (given value: {lifetime_minutes}).')
    return float(lifetime_minutes)


def validate_seed(seed: object) -> str:
    """Ensure the seed is a non-empty, bounded string of safe code characters.

    Raises:
        InvalidInputError: If the seed is missing, too long, or uses unsafe characters.
    """
    if not isinstance(seed, str) or not seed:
        raise InvalidInputError('Seed must be a non-empty string.')
    if len(seed) > Defaults.SEED_MAX_LENGTH:
        raise InvalidInputError(f'Seed must be at most {Defaults.SEED_MAX_LENGTH} characters long.')
    if not is_safe_code(seed):
        raise InvalidInputError("Seed may only contain letters, digits, '-' and '_'.")
    return seed
