"""Random code suffix generation

Codes are composed as `<seed><suffix>`. The suffix is drawn from a
cryptographically secure source so that suffixes can't be predicted from
previously issued codes.

Functions:
    generate_suffix(length=8):
        Draw a random Base62 token of the given length.

Example:
    >>> from ttlshortener.utils import generate_suffix
    >>> generate_suffix()
    'q7FemOj2'
"""

import secrets

from ttlshortener.constants import CODE_ALPHABET, Defaults


def generate_suffix(length: int = Defaults.SUFFIX_LENGTH) -> str:
    """Draw a random Base62 suffix.

    Args:
        length (int, optional):
            Number of characters. Defaults to 8 (~2.18e14 combinations).

    Returns:
        str: A random alphanumeric token of exactly `length` characters.

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is not positive.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Suffix length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Suffix length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))
