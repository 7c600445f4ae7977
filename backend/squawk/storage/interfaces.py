# squawk/storage/interfaces.py
from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserRecord:
    id: uuid.UUID
    email: str
    hashed_password: str
    is_premium: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class RefreshTokenRecord:
    token: str
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    expires_at: datetime
    revoked_at: datetime | None = None


class AbstractUserStore(ABC):
    """
    Abstract base class for the user and refresh token record store.

    Every write is its own transaction and is visible to lookups as soon as
    the call returns.
    """

    @abstractmethod
    async def create_user(self, email: str, hashed_password: str) -> UserRecord:
        """Insert a user. Raises EmailAlreadyRegistered on a duplicate email."""

    @abstractmethod
    async def update_user(self, user_id: uuid.UUID, email: str, hashed_password: str) -> UserRecord:
        """Replace email and password hash. Raises UserNotFound or EmailAlreadyRegistered."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> UserRecord | None:
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: uuid.UUID) -> UserRecord | None:
        pass

    @abstractmethod
    async def upgrade_user_to_premium(self, user_id: uuid.UUID) -> UserRecord | None:
        """Set is_premium; returns None when the user does not exist."""

    @abstractmethod
    async def create_refresh_token(self, record: RefreshTokenRecord) -> None:
        pass

    @abstractmethod
    async def get_user_by_valid_refresh_token(self, token: str, now: datetime) -> UserRecord | None:
        """Owner of ``token`` if it is not revoked and expires after ``now``, in one lookup."""

    @abstractmethod
    async def revoke_refresh_token(self, token: str, now: datetime) -> bool:
        """Set revoked_at/updated_at on an unrevoked token. False only when the token is unknown."""

    @abstractmethod
    async def delete_refresh_tokens(self) -> None:
        """Maintenance reset: remove every refresh token."""

    @abstractmethod
    async def delete_users(self) -> None:
        """Maintenance reset: remove every user (and their tokens)."""
