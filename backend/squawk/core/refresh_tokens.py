"""Refresh tokens: opaque 256-bit hex strings persisted with an expiry.

The manager owns the policy (entropy, lifetime, lookup rules); the store owns
the persistence. Lookups return a user only while the token is unrevoked and
unexpired, and that filter is part of the same query.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone

from squawk.core.errors import EntropyError, RefreshTokenNotFound
from squawk.storage.interfaces import AbstractUserStore, RefreshTokenRecord, UserRecord

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32
DEFAULT_REFRESH_LIFETIME = timedelta(days=60)


def make_refresh_token() -> str:
    """32 random bytes as 64 hex characters."""
    try:
        return secrets.token_hex(REFRESH_TOKEN_BYTES)
    except (OSError, NotImplementedError) as e:
        raise EntropyError("system random source failed") from e


class RefreshTokenManager:
    def __init__(self, store: AbstractUserStore, lifetime: timedelta = DEFAULT_REFRESH_LIFETIME) -> None:
        self._store = store
        self.lifetime = lifetime

    async def issue(self, user_id: uuid.UUID, now: datetime | None = None) -> RefreshTokenRecord:
        """Mint a token for ``user_id`` and persist it. Each call writes a new row."""
        now = now or datetime.now(timezone.utc)
        record = RefreshTokenRecord(
            token=make_refresh_token(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            expires_at=now + self.lifetime,
            revoked_at=None,
        )
        await self._store.create_refresh_token(record)
        return record

    async def resolve_user(self, token: str, now: datetime | None = None) -> UserRecord:
        """Return the owner of a usable token; unknown, expired and revoked all raise RefreshTokenNotFound."""
        user = await self._store.get_user_by_valid_refresh_token(token, now or datetime.now(timezone.utc))
        if user is None:
            raise RefreshTokenNotFound()
        return user

    async def revoke(self, token: str, now: datetime | None = None) -> None:
        """Mark ``token`` revoked. Revoking twice keeps the first revoked_at."""
        found = await self._store.revoke_refresh_token(token, now or datetime.now(timezone.utc))
        if not found:
            raise RefreshTokenNotFound()
        logger.debug("Refresh token revoked")
