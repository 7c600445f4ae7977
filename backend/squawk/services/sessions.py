"""Login, refresh and revoke flows built from the credential primitives.

Every authentication failure surfaces as AuthenticationDenied with a reason
meant for logs; the caller decides the single public message per flow.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from starlette.concurrency import run_in_threadpool

from squawk.core.bearer import HeaderProblem, get_bearer_token
from squawk.core.errors import (
    AuthenticationDenied,
    MalformedCredential,
    PasswordMismatchError,
    RefreshTokenNotFound,
    TokenValidationError,
)
from squawk.core.passwords import PasswordHasher
from squawk.core.refresh_tokens import RefreshTokenManager
from squawk.core.tokens import AccessTokenCodec
from squawk.storage.interfaces import AbstractUserStore, UserRecord

logger = logging.getLogger(__name__)


@dataclass
class IssuedAccessToken:
    token: str
    expires_in: int  # seconds


@dataclass
class LoginResult:
    access: IssuedAccessToken
    refresh_token: str
    user: UserRecord


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _bearer_or_raise(headers: Mapping[str, str]) -> str:
    result = get_bearer_token(headers)
    if isinstance(result, HeaderProblem):
        raise MalformedCredential(result.kind.value)
    return result.value


class SessionService:
    def __init__(
        self,
        store: AbstractUserStore,
        hasher: PasswordHasher,
        codec: AccessTokenCodec,
        refresh_manager: RefreshTokenManager,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._codec = codec
        self._refresh = refresh_manager

    async def _hash(self, password: str) -> str:
        return await run_in_threadpool(self._hasher.hash, password)

    def _issue_access(self, user_id: uuid.UUID, ttl: timedelta) -> IssuedAccessToken:
        return IssuedAccessToken(token=self._codec.issue(user_id, ttl), expires_in=int(ttl.total_seconds()))

    async def register(self, email: str, password: str) -> UserRecord:
        hashed = await self._hash(password)
        user = await self._store.create_user(normalize_email(email), hashed)
        logger.info("Registered user %s", user.id)
        return user

    async def update_credentials(self, user_id: uuid.UUID, email: str, password: str) -> UserRecord:
        hashed = await self._hash(password)
        return await self._store.update_user(user_id, normalize_email(email), hashed)

    async def login(self, email: str, password: str, expires_in_seconds: int | None = None) -> LoginResult:
        """Check the password and issue an access token plus a stored refresh token.

        Lifetimes above the codec's ceiling (one hour) are ignored, not rejected.
        """
        user = await self._store.get_user_by_email(normalize_email(email))
        if user is None:
            await run_in_threadpool(self._hasher.verify_dummy, password)
            raise AuthenticationDenied("unknown_user")
        try:
            await run_in_threadpool(self._hasher.verify, password, user.hashed_password)
        except PasswordMismatchError as e:
            raise AuthenticationDenied("wrong_password") from e

        access = self._issue_access(user.id, self._codec.clamp_ttl(expires_in_seconds))
        refresh = await self._refresh.issue(user.id)
        logger.info("Login for user %s", user.id)
        return LoginResult(access=access, refresh_token=refresh.token, user=user)

    async def refresh(self, headers: Mapping[str, str]) -> tuple[UserRecord, IssuedAccessToken]:
        """Exchange a refresh token for a new one-hour access token.

        The refresh token itself is left untouched and stays usable.
        """
        token = _bearer_or_raise(headers)
        try:
            user = await self._refresh.resolve_user(token)
        except RefreshTokenNotFound as e:
            raise AuthenticationDenied("refresh_not_found") from e
        return user, self._issue_access(user.id, self._codec.max_ttl)

    async def revoke(self, headers: Mapping[str, str]) -> None:
        token = _bearer_or_raise(headers)
        try:
            await self._refresh.revoke(token)
        except RefreshTokenNotFound as e:
            raise AuthenticationDenied("refresh_not_found") from e

    def authenticate(self, headers: Mapping[str, str]) -> uuid.UUID:
        """User id from a Bearer access token."""
        token = _bearer_or_raise(headers)
        try:
            return self._codec.validate(token)
        except TokenValidationError as e:
            raise AuthenticationDenied(e.kind.value) from e
