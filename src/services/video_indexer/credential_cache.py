"""Access token cache for the video indexing service."""

import asyncio
import base64
import json
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from models.credential import DEFAULT_VALIDITY, Credential
from services.errors import AuthFailure, UpstreamFailure

logger = logging.getLogger(__name__)

TokenFetcher = Callable[[], Awaitable[str]]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_token_expiry(token: str) -> Optional[datetime]:
    """Read the `exp` claim from a JWT payload without verifying it.

    Args:
        token: Bearer token in `header.payload.signature` form

    Returns:
        Expiry as an aware UTC datetime, or None if the token has no readable
        expiry claim
    """
    parts = token.split(".")
    if len(parts) < 2:
        return None
    payload = parts[1]
    payload += "=" * (-len(payload) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload.encode("ascii")))
        exp = claims["exp"]
        return datetime.fromtimestamp(float(exp), tz=timezone.utc)
    except (ValueError, TypeError, KeyError, OverflowError, OSError) as e:
        logger.warning(f"Could not parse token expiration: {e}")
        return None


class CredentialCache:
    """Holds at most one live credential and refreshes it lazily.

    A held credential is reused until it is within five minutes of expiry.
    Refreshes are serialized: callers that queue behind an in-flight refresh
    get its result instead of issuing their own authentication request.
    Reads of a still-valid credential do not take the lock.
    """

    def __init__(self, fetch_token: TokenFetcher, clock: Clock = utc_now):
        """Initialize the cache.

        Args:
            fetch_token: Coroutine function performing the authentication call
                and returning the raw token
            clock: Returns the current aware UTC time (injectable for tests)
        """
        self._fetch_token = fetch_token
        self._clock = clock
        self._credential: Optional[Credential] = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    def is_valid(self) -> bool:
        return self._credential is not None and self._credential.is_valid(self._clock())

    def invalidate(self) -> None:
        """Drop the held credential so the next caller re-authenticates."""
        self._credential = None

    async def acquire(self, force_refresh: bool = False) -> Credential:
        """Return a usable credential, authenticating only when needed.

        Args:
            force_refresh: Refresh even if the held credential is still valid

        Returns:
            The current credential

        Raises:
            AuthFailure: If authentication fails or returns an unusable token
        """
        credential = self._credential
        if not force_refresh and credential is not None and credential.is_valid(self._clock()):
            return credential

        generation = self._generation
        async with self._lock:
            # Someone else refreshed while we were waiting
            if self._generation != generation and self._credential is not None:
                if force_refresh or self._credential.is_valid(self._clock()):
                    return self._credential
            return await self._refresh()

    async def _refresh(self) -> Credential:
        try:
            token = await self._fetch_token()
        except AuthFailure:
            raise
        except UpstreamFailure as e:
            logger.error(f"Error acquiring access token: {e}")
            raise AuthFailure(str(e)) from e
        except Exception as e:
            logger.error(f"Error acquiring access token: {e}")
            raise AuthFailure(f"Failed to get access token: {e}") from e

        if not isinstance(token, str) or not token.strip():
            raise AuthFailure("Access token response did not contain a token")
        token = token.strip()

        acquired_at = self._clock()
        expires_at = parse_token_expiry(token) or acquired_at + DEFAULT_VALIDITY

        self._credential = Credential(token=token, expires_at=expires_at)
        self._generation += 1
        logger.info(f"Successfully retrieved access token, expires: {expires_at.isoformat()}")
        return self._credential
