from dataclasses import dataclass
from datetime import datetime, timedelta

from ttlshortener.exceptions import InvalidInputError


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a time-bounded short link mapping.

    A link is live while `now < expires_at`. Records are immutable; an expired
    link is simply ignored by lookups and may be overwritten by a new link
    under the same code.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> link = ShortLinkModel(
        ...     code='go-ab12cd34',
        ...     target='https://example.com',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> link.is_live(now + timedelta(minutes=10))
        True
        >>> link.is_live(now + timedelta(minutes=31))
        False
    """

    # fmt: off
    code: str               # Unique short identifier among live links
    target: str             # Original long URL
    created_at: datetime    # Insertion instant (timezone-aware)
    expires_at: datetime    # Instant from which the link no longer resolves
    # fmt: on

    def __post_init__(self) -> None:
        if self.created_at.tzinfo is None or self.expires_at.tzinfo is None:
            raise InvalidInputError(f"Short link '{self.code}' needs timezone-aware timestamps.")
        if self.expires_at <= self.created_at:
            raise InvalidInputError(
                f"Short link '{self.code}' must expire after it is created "
                f'(created_at={self.created_at.isoformat()}, expires_at={self.expires_at.isoformat()}).'
            )

    @property
    def lifetime(self) -> timedelta:
        return self.expires_at - self.created_at

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at
