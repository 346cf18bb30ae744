"""Access credential model."""

from dataclasses import dataclass
from datetime import datetime, timedelta

# Safety margin before expiry during which a token is no longer handed out
REFRESH_BUFFER = timedelta(minutes=5)

# Validity assumed when the token's expiry claim cannot be read
DEFAULT_VALIDITY = timedelta(hours=1)


@dataclass(frozen=True)
class Credential:
    """Bearer token and the instant it expires (timezone-aware, UTC)."""

    token: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        """True while `now + REFRESH_BUFFER` is still before expiry."""
        return now + REFRESH_BUFFER < self.expires_at
